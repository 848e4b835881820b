"""Lifecycle component models - frozen dataclass inputs and outputs."""

from dataclasses import dataclass
from uuid import UUID

from src.domain.entities import ContentItem, ContentStatus


@dataclass(frozen=True)
class LifecycleError:
    """Validation error details for lifecycle operations."""

    code: str
    message: str
    field: str | None = None


@dataclass(frozen=True)
class TransitionInput:
    """Input for moving an item to an explicit status."""

    item_id: UUID
    to_status: ContentStatus


@dataclass(frozen=True)
class PublishInput:
    """Input for publishing an item."""

    item_id: UUID


@dataclass(frozen=True)
class UnpublishInput:
    """Input for returning an item to draft."""

    item_id: UUID


@dataclass(frozen=True)
class ArchiveInput:
    """Input for archiving an item."""

    item_id: UUID


@dataclass(frozen=True)
class TransitionOutput:
    """Output for every lifecycle operation."""

    item: ContentItem | None
    previous_status: ContentStatus | None
    changed: bool
    errors: list[LifecycleError]
    success: bool
