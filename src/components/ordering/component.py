"""
Ordering component - Display order management for sibling groups.

Shell Layer - converts domain errors into output models.
"""

from __future__ import annotations

from uuid import UUID

from src.domain.entities import ContentItem
from src.domain.errors import ContentEngineError

from ._impl import OrderingService
from .models import (
    HealGroupInput,
    MoveItemInput,
    OrderingError,
    OrderingOutput,
    RemoveItemInput,
    ReorderGroupInput,
)


def _orders(items: list[ContentItem]) -> dict[UUID, int]:
    return {i.id: i.display_order for i in items}


def _error_output(exc: ContentEngineError) -> OrderingOutput:
    return OrderingOutput(
        items=[],
        changed=0,
        errors=[OrderingError(code=exc.code, message=exc.message, field=exc.field)],
        success=False,
    )


def run_move(input_data: MoveItemInput, service: OrderingService) -> OrderingOutput:
    """Move an item one slot up or down."""
    try:
        item = service.get(input_data.item_id)
        before = _orders(service.list_ordered(item.collection, item.group_id))
        items = service.move_adjacent(input_data.item_id, input_data.direction)
    except ContentEngineError as e:
        return _error_output(e)

    changed = sum(1 for i in items if before.get(i.id) != i.display_order)
    return OrderingOutput(items=items, changed=changed, errors=[], success=True)


def run_reorder(input_data: ReorderGroupInput, service: OrderingService) -> OrderingOutput:
    """Replace a group's ordering with an explicit list of ids."""
    try:
        before = _orders(service.list_ordered(input_data.collection, input_data.group_id))
        items = service.reorder_all(
            input_data.collection, input_data.group_id, input_data.ordered_ids
        )
    except ContentEngineError as e:
        return _error_output(e)

    changed = sum(1 for i in items if before.get(i.id) != i.display_order)
    return OrderingOutput(items=items, changed=changed, errors=[], success=True)


def run_remove(input_data: RemoveItemInput, service: OrderingService) -> OrderingOutput:
    """Delete an item and renumber its siblings."""
    try:
        removed = service.remove(input_data.item_id)
    except ContentEngineError as e:
        return _error_output(e)

    items = service.list_ordered(removed.collection, removed.group_id)
    return OrderingOutput(items=items, changed=1, errors=[], success=True)


def run_heal(input_data: HealGroupInput, service: OrderingService) -> OrderingOutput:
    """Renumber a group that has gaps or duplicates."""
    try:
        changed = service.heal(input_data.collection, input_data.group_id)
    except ContentEngineError as e:
        return _error_output(e)

    items = service.list_ordered(input_data.collection, input_data.group_id)
    return OrderingOutput(items=items, changed=changed, errors=[], success=True)
