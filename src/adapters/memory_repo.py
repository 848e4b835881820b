"""In-memory content repository adapter.

Implements the content repository port for tests and single-process use.
A commit is applied to a copy of the store and swapped in only when every
check passes, so readers never observe a half-applied batch.
"""

import threading
from collections.abc import Sequence
from uuid import UUID

from src.domain.entities import ContentItem
from src.domain.errors import ConcurrencyConflictError, SlugConflictError


class InMemoryContentRepo:
    """In-memory content storage - suitable for single-process deployments."""

    def __init__(self) -> None:
        self._items: dict[UUID, ContentItem] = {}
        self._lock = threading.Lock()

    def get_by_id(self, item_id: UUID) -> ContentItem | None:
        return self._items.get(item_id)

    def list_group(self, collection: str, group_id: UUID | None) -> list[ContentItem]:
        return [
            i for i in self._items.values()
            if i.collection == collection and i.group_id == group_id
        ]

    def list_collection(self, collection: str) -> list[ContentItem]:
        return [i for i in self._items.values() if i.collection == collection]

    def list_slugs(self, collection: str) -> set[str]:
        return {i.slug for i in self._items.values() if i.collection == collection}

    def get_by_slug(self, collection: str, slug: str) -> ContentItem | None:
        return next(
            (i for i in self._items.values() if i.collection == collection and i.slug == slug),
            None,
        )

    def commit_group(
        self,
        upserts: Sequence[ContentItem],
        deletes: Sequence[ContentItem] = (),
    ) -> list[ContentItem]:
        with self._lock:
            staged = dict(self._items)

            for item in deletes:
                stored = staged.get(item.id)
                if stored is None or stored.version != item.version:
                    raise ConcurrencyConflictError(item.id)
                del staged[item.id]

            saved: list[ContentItem] = []
            for item in upserts:
                stored = staged.get(item.id)
                current_version = stored.version if stored else 0
                if current_version != item.version:
                    raise ConcurrencyConflictError(item.id)
                new = item.model_copy(update={"version": item.version + 1})
                staged[item.id] = new
                saved.append(new)

            for item in saved:
                for other in staged.values():
                    if other.id == item.id or other.collection != item.collection:
                        continue
                    if other.slug == item.slug:
                        raise SlugConflictError(item.slug, item.collection)
                    if (
                        other.group_id == item.group_id
                        and other.display_order == item.display_order
                    ):
                        raise ConcurrencyConflictError(item.id)

            # Groups that gained or lost rows must still be numbered 0..n-1
            changed = {i.group_key for i in deletes}
            changed |= {i.group_key for i in upserts if i.version == 0}
            for key in changed:
                orders = sorted(i.display_order for i in staged.values() if i.group_key == key)
                if orders != list(range(len(orders))):
                    raise ConcurrencyConflictError(f"{key[0]}/{key[1]}")

            self._items = staged
            return saved

    def add(self, item: ContentItem) -> None:
        """Store an item as-is, bypassing checks (fixtures and legacy imports)."""
        with self._lock:
            self._items[item.id] = item

    def clear(self) -> None:
        """Clear all items - useful for testing."""
        with self._lock:
            self._items.clear()
