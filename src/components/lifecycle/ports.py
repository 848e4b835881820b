"""Lifecycle component port definitions - protocols for dependencies."""

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol
from uuid import UUID

from src.domain.entities import ContentItem, ContentStatus


class ContentRepoPort(Protocol):
    """Protocol for content repository operations."""

    def get_by_id(self, item_id: UUID) -> ContentItem | None:
        """Retrieve a content item by ID."""
        ...

    def commit_group(
        self,
        upserts: Sequence[ContentItem],
        deletes: Sequence[ContentItem] = (),
    ) -> list[ContentItem]:
        """Write items atomically with optimistic version checks."""
        ...


class CacheInvalidationPort(Protocol):
    """Protocol for the public page-cache hook (fire-and-forget)."""

    def invalidate(self, item: ContentItem, previous_status: ContentStatus) -> None:
        """Notify that the public pages rendering item are stale."""
        ...


class ClockPort(Protocol):
    """Protocol for time operations."""

    def now(self) -> datetime:
        """Return current UTC time."""
        ...
