"""
Ordering component - Port interfaces.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol
from uuid import UUID

from src.domain.entities import ContentItem


class OrderingRepoPort(Protocol):
    """Repository interface for sibling group reads and atomic batch writes."""

    def get_by_id(self, item_id: UUID) -> ContentItem | None:
        """Get item by ID."""
        ...

    def list_group(self, collection: str, group_id: UUID | None) -> list[ContentItem]:
        """List every sibling in a group (any status, unsorted)."""
        ...

    def commit_group(
        self,
        upserts: Sequence[ContentItem],
        deletes: Sequence[ContentItem] = (),
    ) -> list[ContentItem]:
        """
        Apply all writes in one transaction or none of them.

        Each item's version must match the stored version; raises
        ConcurrencyConflictError otherwise.
        """
        ...


class ClockPort(Protocol):
    def now(self) -> datetime:
        """Return current UTC time."""
        ...
