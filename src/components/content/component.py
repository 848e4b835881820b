"""
Content component - Content publishing and ordering per collection.

Wraps ContentService operations for admin and public handlers:
create, update, transition, move, reorder, delete, list, get.

Shell Layer - converts domain errors into output models.
"""

from __future__ import annotations

from src.domain.errors import ContentEngineError, SlugConflictError

from ._impl import ContentService
from .models import (
    ContentListOutput,
    ContentOperationOutput,
    ContentOutput,
    ContentValidationError,
    CreateContentInput,
    DeleteContentInput,
    GetContentInput,
    ListContentInput,
    MoveContentInput,
    ReorderContentInput,
    TransitionContentInput,
    UpdateContentInput,
)


def to_validation_error(exc: ContentEngineError) -> ContentValidationError:
    """Convert a domain error into the component's error model."""
    return ContentValidationError(
        code=getattr(exc, "reason", exc.code),
        message=exc.message,
        field=exc.field,
        suggestion=exc.suggestion if isinstance(exc, SlugConflictError) else None,
    )


def _failed(exc: ContentEngineError) -> ContentOutput:
    return ContentOutput(content=None, errors=[to_validation_error(exc)], success=False)


def run_create(input_data: CreateContentInput, service: ContentService) -> ContentOutput:
    """Create a new draft at the end of its group."""
    try:
        item = service.create_draft(
            collection=input_data.collection,
            title=input_data.title,
            body=input_data.body,
            group_id=input_data.group_id,
            slug=input_data.slug,
            metadata=input_data.metadata,
        )
    except ContentEngineError as e:
        return _failed(e)
    return ContentOutput(content=item, errors=[], success=True)


def run_update(input_data: UpdateContentInput, service: ContentService) -> ContentOutput:
    """Update content fields."""
    try:
        item = service.update_content(input_data.content_id, input_data.updates)
    except ContentEngineError as e:
        return _failed(e)
    return ContentOutput(content=item, errors=[], success=True)


def run_get(input_data: GetContentInput, service: ContentService) -> ContentOutput:
    """Get content by id, or a published item by collection and slug."""
    try:
        if input_data.content_id is not None:
            item = service.get_item(input_data.content_id)
            if input_data.published_only and item.status != "published":
                return ContentOutput(
                    content=None,
                    errors=[
                        ContentValidationError(
                            code="not_found", message="Content not found", field="id"
                        )
                    ],
                    success=False,
                )
        elif input_data.collection and input_data.slug:
            item = service.get_published_by_slug(input_data.collection, input_data.slug)
        else:
            return ContentOutput(
                content=None,
                errors=[
                    ContentValidationError(
                        code="missing_identifier",
                        message="Either content_id or collection and slug are required",
                    )
                ],
                success=False,
            )
    except ContentEngineError as e:
        return _failed(e)
    return ContentOutput(content=item, errors=[], success=True)


def run_list(input_data: ListContentInput, service: ContentService) -> ContentListOutput:
    """List one sibling group."""
    try:
        items = service.list_by_group(
            input_data.collection,
            input_data.group_id,
            ordered_by_display_order=input_data.ordered_by_display_order,
            status=input_data.status,
        )
    except ContentEngineError as e:
        return ContentListOutput(items=[], total=0, errors=[to_validation_error(e)], success=False)
    return ContentListOutput(items=items, total=len(items))


def run_list_published(input_data: ListContentInput, service: ContentService) -> ContentListOutput:
    """Public listing of published items."""
    try:
        items = service.list_published(input_data.collection, input_data.group_id)
    except ContentEngineError as e:
        return ContentListOutput(items=[], total=0, errors=[to_validation_error(e)], success=False)
    return ContentListOutput(items=items, total=len(items))


def run_transition(input_data: TransitionContentInput, service: ContentService) -> ContentOutput:
    """Move content to another lifecycle status."""
    try:
        item = service.transition_status(input_data.content_id, input_data.to_status)
    except ContentEngineError as e:
        return _failed(e)
    return ContentOutput(content=item, errors=[], success=True)


def run_move(input_data: MoveContentInput, service: ContentService) -> ContentOperationOutput:
    """Move content one slot up or down in its group."""
    try:
        service.move_item(input_data.content_id, input_data.direction)
    except ContentEngineError as e:
        return ContentOperationOutput(errors=[to_validation_error(e)], success=False)
    return ContentOperationOutput(errors=[], success=True)


def run_reorder(input_data: ReorderContentInput, service: ContentService) -> ContentListOutput:
    """Apply an explicit full ordering to a group."""
    try:
        items = service.reorder_group(
            input_data.collection, input_data.group_id, input_data.ordered_ids
        )
    except ContentEngineError as e:
        return ContentListOutput(items=[], total=0, errors=[to_validation_error(e)], success=False)
    return ContentListOutput(items=items, total=len(items))


def run_delete(input_data: DeleteContentInput, service: ContentService) -> ContentOperationOutput:
    """Delete content and renumber its siblings."""
    try:
        service.delete_item(input_data.content_id)
    except ContentEngineError as e:
        return ContentOperationOutput(errors=[to_validation_error(e)], success=False)
    return ContentOperationOutput(errors=[], success=True)
