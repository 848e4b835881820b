"""
Content component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from src.domain.entities import ContentItem, ContentStatus, Direction

# --- Validation Error ---


@dataclass(frozen=True)
class ContentValidationError:
    """Content validation error."""

    code: str
    message: str
    field: str | None = None
    suggestion: str | None = None


# --- Input Models ---


@dataclass(frozen=True)
class CreateContentInput:
    """Input for creating a new draft."""

    collection: str
    title: str
    body: str = ""
    group_id: UUID | None = None
    slug: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class UpdateContentInput:
    """Input for updating content fields (title, body, slug, metadata)."""

    content_id: UUID
    updates: dict[str, Any]


@dataclass(frozen=True)
class GetContentInput:
    """Input for retrieving content."""

    content_id: UUID | None = None
    collection: str | None = None
    slug: str | None = None
    published_only: bool = False


@dataclass(frozen=True)
class ListContentInput:
    """Input for listing a sibling group."""

    collection: str
    group_id: UUID | None = None
    status: ContentStatus | None = None
    ordered_by_display_order: bool = True


@dataclass(frozen=True)
class TransitionContentInput:
    """Input for content state transitions."""

    content_id: UUID
    to_status: ContentStatus


@dataclass(frozen=True)
class MoveContentInput:
    """Input for moving content one slot within its group."""

    content_id: UUID
    direction: Direction


@dataclass(frozen=True)
class ReorderContentInput:
    """Input for replacing a group's order."""

    collection: str
    group_id: UUID | None
    ordered_ids: list[UUID]


@dataclass(frozen=True)
class DeleteContentInput:
    """Input for deleting content."""

    content_id: UUID


# --- Output Models ---


@dataclass(frozen=True)
class ContentOutput:
    """Output for single content retrieval or mutation."""

    content: ContentItem | None
    errors: list[ContentValidationError]
    success: bool


@dataclass(frozen=True)
class ContentListOutput:
    """Output for listing content."""

    items: list[ContentItem]
    total: int
    errors: list[ContentValidationError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class ContentOperationOutput:
    """Output for operations with no content payload (move, delete)."""

    errors: list[ContentValidationError]
    success: bool
