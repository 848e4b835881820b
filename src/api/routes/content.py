"""
Admin content routes.

One set of routes serves every collection configured in rules.yaml.
Authentication is handled in front of this API.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response

from src.api.deps import get_content_service
from src.api.errors import http_error
from src.api.schemas import (
    ContentCreateRequest,
    ContentItemResponse,
    ContentListResponse,
    ContentMoveRequest,
    ContentReorderRequest,
    ContentStatus,
    ContentTransitionRequest,
    ContentUpdateRequest,
)
from src.components.content import (
    ContentService,
    CreateContentInput,
    DeleteContentInput,
    GetContentInput,
    ListContentInput,
    MoveContentInput,
    ReorderContentInput,
    TransitionContentInput,
    UpdateContentInput,
    run_create,
    run_delete,
    run_get,
    run_list,
    run_move,
    run_reorder,
    run_transition,
    run_update,
)
from src.domain.entities import ContentItem

router = APIRouter()


def _response(item: ContentItem | None) -> ContentItemResponse:
    return ContentItemResponse.model_validate(item)


def _check_collection(item: ContentItem | None, collection: str) -> None:
    """Items are addressed under their own collection only."""
    if item is not None and item.collection != collection:
        raise HTTPException(
            status_code=404,
            detail={"code": "not_found", "message": "Content not found"},
        )


def _get_in_collection(service: ContentService, collection: str, item_id: UUID) -> ContentItem:
    result = run_get(GetContentInput(content_id=item_id), service)
    if not result.success or result.content is None:
        raise http_error(result.errors)
    _check_collection(result.content, collection)
    return result.content


@router.get("/{collection}", response_model=ContentListResponse)
def list_content(
    collection: str,
    group_id: UUID | None = None,
    status: ContentStatus | None = None,
    service: ContentService = Depends(get_content_service),
) -> ContentListResponse:
    """List one sibling group in display order."""
    result = run_list(
        ListContentInput(collection=collection, group_id=group_id, status=status), service
    )
    if not result.success:
        raise http_error(result.errors)
    return ContentListResponse(items=[_response(i) for i in result.items], total=result.total)


@router.post("/{collection}", response_model=ContentItemResponse, status_code=201)
def create_content(
    collection: str,
    req: ContentCreateRequest,
    service: ContentService = Depends(get_content_service),
) -> ContentItemResponse:
    """Create a new draft at the end of its group."""
    inp = CreateContentInput(
        collection=collection,
        title=req.title,
        body=req.body,
        group_id=req.group_id,
        slug=req.slug,
        metadata=req.metadata,
    )
    result = run_create(inp, service)
    if not result.success:
        raise http_error(result.errors)
    return _response(result.content)


@router.put("/{collection}/order", response_model=ContentListResponse)
def reorder_content(
    collection: str,
    req: ContentReorderRequest,
    service: ContentService = Depends(get_content_service),
) -> ContentListResponse:
    """Replace a group's order (drag-and-drop or manual order fields)."""
    inp = ReorderContentInput(
        collection=collection, group_id=req.group_id, ordered_ids=req.ordered_ids
    )
    result = run_reorder(inp, service)
    if not result.success:
        raise http_error(result.errors)
    return ContentListResponse(items=[_response(i) for i in result.items], total=result.total)


@router.get("/{collection}/{item_id}", response_model=ContentItemResponse)
def get_content(
    collection: str,
    item_id: UUID,
    service: ContentService = Depends(get_content_service),
) -> ContentItemResponse:
    """Get a specific content item."""
    return _response(_get_in_collection(service, collection, item_id))


@router.patch("/{collection}/{item_id}", response_model=ContentItemResponse)
def update_content(
    collection: str,
    item_id: UUID,
    req: ContentUpdateRequest,
    service: ContentService = Depends(get_content_service),
) -> ContentItemResponse:
    """Update title, body, slug or metadata."""
    _get_in_collection(service, collection, item_id)

    updates = req.model_dump(exclude_unset=True)
    result = run_update(UpdateContentInput(content_id=item_id, updates=updates), service)
    if not result.success:
        raise http_error(result.errors)
    return _response(result.content)


@router.post("/{collection}/{item_id}/transition", response_model=ContentItemResponse)
def transition_content(
    collection: str,
    item_id: UUID,
    req: ContentTransitionRequest,
    service: ContentService = Depends(get_content_service),
) -> ContentItemResponse:
    """Transition content status."""
    _get_in_collection(service, collection, item_id)

    inp = TransitionContentInput(content_id=item_id, to_status=req.status)
    result = run_transition(inp, service)
    if not result.success:
        raise http_error(result.errors)
    return _response(result.content)


@router.post("/{collection}/{item_id}/move", status_code=204)
def move_content(
    collection: str,
    item_id: UUID,
    req: ContentMoveRequest,
    service: ContentService = Depends(get_content_service),
) -> Response:
    """Move content one slot up or down."""
    _get_in_collection(service, collection, item_id)

    result = run_move(MoveContentInput(content_id=item_id, direction=req.direction), service)
    if not result.success:
        raise http_error(result.errors)
    return Response(status_code=204)


@router.delete("/{collection}/{item_id}", status_code=204)
def delete_content(
    collection: str,
    item_id: UUID,
    service: ContentService = Depends(get_content_service),
) -> Response:
    """Delete a content item and close the gap in its group."""
    _get_in_collection(service, collection, item_id)

    result = run_delete(DeleteContentInput(content_id=item_id), service)
    if not result.success:
        raise http_error(result.errors)
    return Response(status_code=204)
