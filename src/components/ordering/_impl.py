"""
Ordering index planning - Functional Core.

Every function takes a snapshot of one sibling group and returns a change
plan: {item_id: new_display_order}, listing only rows whose order changes.
Plans always leave the group with orders exactly 0..n-1, so applying any
plan also heals duplicates or gaps left by legacy data or races.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Sequence
from datetime import datetime
from uuid import UUID

from src.domain.entities import ContentItem, Direction
from src.domain.errors import ItemNotFoundError, OrderMismatchError

from .ports import ClockPort, OrderingRepoPort

logger = logging.getLogger(__name__)

OrderPlan = dict[UUID, int]


def sort_siblings(items: Sequence[ContentItem]) -> list[ContentItem]:
    """Render order. Equal display_order falls back to creation time, then id."""
    return sorted(items, key=lambda i: (i.display_order, i.created_at, str(i.id)))


def is_contiguous(items: Sequence[ContentItem]) -> bool:
    return sorted(i.display_order for i in items) == list(range(len(items)))


def next_order(items: Sequence[ContentItem]) -> int:
    return len(items)


def _plan_for(sequence: Sequence[ContentItem]) -> OrderPlan:
    return {item.id: pos for pos, item in enumerate(sequence) if item.display_order != pos}


def renumber(items: Sequence[ContentItem]) -> OrderPlan:
    """Assign 0..n-1 in tie-break order. Empty when the group is healthy."""
    return _plan_for(sort_siblings(items))


def _index_of(sequence: Sequence[ContentItem], item_id: UUID) -> int:
    for pos, item in enumerate(sequence):
        if item.id == item_id:
            return pos
    raise ItemNotFoundError(item_id)


def plan_remove(items: Sequence[ContentItem], item_id: UUID) -> OrderPlan:
    """
    Renumber siblings after removing item_id.

    On a healthy group this decrements every order above the removed one.
    """
    ordered = sort_siblings(items)
    pos = _index_of(ordered, item_id)
    del ordered[pos]
    return _plan_for(ordered)


def plan_move(items: Sequence[ContentItem], item_id: UUID, direction: Direction) -> OrderPlan:
    """
    Swap item_id with its neighbour in the given direction.

    First-up and last-down are no-ops (empty plan) unless the group needs
    healing. On a healthy group the plan touches exactly the two rows.
    """
    if direction not in ("up", "down"):
        raise ValueError(f"Unknown direction: {direction}")

    ordered = sort_siblings(items)
    pos = _index_of(ordered, item_id)
    other = pos - 1 if direction == "up" else pos + 1
    if 0 <= other < len(ordered):
        ordered[pos], ordered[other] = ordered[other], ordered[pos]
    return _plan_for(ordered)


def check_permutation(items: Sequence[ContentItem], ordered_ids: Sequence[UUID]) -> None:
    """Raise OrderMismatchError unless ordered_ids is a permutation of the group."""
    current = {item.id for item in items}
    counts = Counter(ordered_ids)
    duplicated = [str(i) for i, n in counts.items() if n > 1]
    missing = [str(i) for i in current if i not in counts]
    unexpected = [str(i) for i in counts if i not in current]
    if duplicated or missing or unexpected:
        raise OrderMismatchError(missing=missing, unexpected=unexpected, duplicated=duplicated)


def plan_reorder(items: Sequence[ContentItem], ordered_ids: Sequence[UUID]) -> OrderPlan:
    """Assign orders by position in ordered_ids (must be a full permutation)."""
    check_permutation(items, ordered_ids)
    by_id = {item.id: item for item in items}
    return _plan_for([by_id[i] for i in ordered_ids])


def apply_plan(items: Sequence[ContentItem], plan: OrderPlan) -> list[ContentItem]:
    """Return the group as it would look after the plan, in render order."""
    updated = [
        item.model_copy(update={"display_order": plan[item.id]}) if item.id in plan else item
        for item in items
    ]
    return sort_siblings(updated)


def plan_updates(
    items: Sequence[ContentItem],
    plan: OrderPlan,
    now: datetime,
) -> list[ContentItem]:
    """Turn a plan into the item snapshots to write (changed rows only)."""
    return [
        item.model_copy(update={"display_order": plan[item.id], "updated_at": now})
        for item in items
        if item.id in plan
    ]


# --- Ordering Service ---


class OrderingService:
    """
    Ordering index manager.

    Reads one sibling group, plans the new orders, and commits the plan as
    a single batch. The repository rejects the batch if any row changed
    since it was read.
    """

    def __init__(self, repo: OrderingRepoPort, clock: ClockPort) -> None:
        self._repo = repo
        self._clock = clock

    def list_ordered(self, collection: str, group_id: UUID | None) -> list[ContentItem]:
        """Group siblings in render order."""
        return sort_siblings(self._repo.list_group(collection, group_id))

    def append(self, collection: str, group_id: UUID | None) -> int:
        """Next free trailing index for a new sibling."""
        return next_order(self._repo.list_group(collection, group_id))

    def get(self, item_id: UUID) -> ContentItem:
        item = self._repo.get_by_id(item_id)
        if item is None:
            raise ItemNotFoundError(item_id)
        return item

    def remove(self, item_id: UUID) -> ContentItem:
        """Delete an item and close the gap in one batch. Returns the deleted item."""
        item = self.get(item_id)
        siblings = self._repo.list_group(item.collection, item.group_id)
        plan = plan_remove(siblings, item_id)
        remaining = [s for s in siblings if s.id != item_id]

        self._repo.commit_group(
            upserts=plan_updates(remaining, plan, self._clock.now()),
            deletes=[item],
        )
        logger.info(
            "Removed %s from %s/%s (renumbered %d)",
            item_id,
            item.collection,
            item.group_id,
            len(plan),
        )
        return item

    def move_adjacent(self, item_id: UUID, direction: Direction) -> list[ContentItem]:
        """Swap an item with its neighbour. Returns the group in render order."""
        item = self.get(item_id)
        siblings = self._repo.list_group(item.collection, item.group_id)
        plan = plan_move(siblings, item_id, direction)
        if not plan:
            return sort_siblings(siblings)

        if len(plan) > 2:
            logger.warning(
                "Healing %s/%s while moving %s (%d rows)",
                item.collection,
                item.group_id,
                item_id,
                len(plan),
            )
        self._repo.commit_group(upserts=plan_updates(siblings, plan, self._clock.now()))
        logger.info("Moved %s %s", item_id, direction)
        return self.list_ordered(item.collection, item.group_id)

    def reorder_all(
        self,
        collection: str,
        group_id: UUID | None,
        ordered_ids: Sequence[UUID],
    ) -> list[ContentItem]:
        """Apply an explicit full ordering. Returns the group in render order."""
        siblings = self._repo.list_group(collection, group_id)
        plan = plan_reorder(siblings, ordered_ids)
        if plan:
            self._repo.commit_group(upserts=plan_updates(siblings, plan, self._clock.now()))
            logger.info("Reordered %s/%s (%d rows)", collection, group_id, len(plan))
        return self.list_ordered(collection, group_id)

    def heal(self, collection: str, group_id: UUID | None) -> int:
        """Renumber a damaged group. Returns the number of rows changed."""
        siblings = self._repo.list_group(collection, group_id)
        plan = renumber(siblings)
        if plan:
            self._repo.commit_group(upserts=plan_updates(siblings, plan, self._clock.now()))
            logger.warning("Healed %s/%s (%d rows)", collection, group_id, len(plan))
        return len(plan)
