"""
Content component port interfaces.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol
from uuid import UUID

from src.components.lifecycle.ports import CacheInvalidationPort, ClockPort
from src.domain.entities import ContentItem


class ContentRepoPort(Protocol):
    """
    Content repository interface.

    Reads return frozen snapshots. commit_group is the only write path.
    """

    def get_by_id(self, item_id: UUID) -> ContentItem | None:
        """Get content by ID."""
        ...

    def get_by_slug(self, collection: str, slug: str) -> ContentItem | None:
        """Get content by collection and slug."""
        ...

    def list_group(self, collection: str, group_id: UUID | None) -> list[ContentItem]:
        """List every sibling of a group."""
        ...

    def list_collection(self, collection: str) -> list[ContentItem]:
        """List every item of a collection."""
        ...

    def list_slugs(self, collection: str) -> set[str]:
        """Slugs currently used in a collection."""
        ...

    def commit_group(
        self,
        upserts: Sequence[ContentItem],
        deletes: Sequence[ContentItem] = (),
    ) -> list[ContentItem]:
        """
        Apply all writes in one transaction or none of them.

        Raises ConcurrencyConflictError on a version mismatch and
        SlugConflictError when the unique slug index rejects a row.
        """
        ...


__all__ = ["CacheInvalidationPort", "ClockPort", "ContentRepoPort"]
