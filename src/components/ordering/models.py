"""
Ordering component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from uuid import UUID

from src.domain.entities import ContentItem, Direction

# --- Validation Errors ---


@dataclass(frozen=True)
class OrderingError:
    """Ordering operation error."""

    code: str
    message: str
    field: str | None = None


# --- Input Models ---


@dataclass(frozen=True)
class MoveItemInput:
    """Input for moving an item one slot up or down."""

    item_id: UUID
    direction: Direction


@dataclass(frozen=True)
class ReorderGroupInput:
    """Input for replacing a group's full ordering."""

    collection: str
    group_id: UUID | None
    ordered_ids: list[UUID] = field(default_factory=list)


@dataclass(frozen=True)
class RemoveItemInput:
    """Input for deleting an item and closing the gap."""

    item_id: UUID


@dataclass(frozen=True)
class HealGroupInput:
    """Input for renumbering a damaged group."""

    collection: str
    group_id: UUID | None = None


# --- Output Models ---


@dataclass(frozen=True)
class OrderingOutput:
    """Output from ordering operations."""

    items: list[ContentItem]
    changed: int
    errors: list[OrderingError]
    success: bool
