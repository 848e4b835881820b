"""
Public content routes - published items only.
"""

from uuid import UUID

from fastapi import APIRouter, Depends

from src.api.deps import get_content_service
from src.api.errors import http_error
from src.api.schemas import (
    ContentItemResponse,
    ContentListResponse,
    GroupCount,
    GroupCountsResponse,
)
from src.components.content import (
    ContentService,
    GetContentInput,
    ListContentInput,
    run_get,
    run_list_published,
)

router = APIRouter()


@router.get("/counts/{collection}", response_model=GroupCountsResponse)
def published_counts(
    collection: str,
    service: ContentService = Depends(get_content_service),
) -> GroupCountsResponse:
    """Published item count per group (e.g. events per category)."""
    counts = service.count_published_by_group(collection)
    groups = [
        GroupCount(group_id=group_id, count=count)
        for group_id, count in sorted(counts.items(), key=lambda kv: str(kv[0]))
    ]
    return GroupCountsResponse(collection=collection, groups=groups)


@router.get("/{collection}", response_model=ContentListResponse)
def list_published(
    collection: str,
    group_id: UUID | None = None,
    service: ContentService = Depends(get_content_service),
) -> ContentListResponse:
    """Published items; a group in display order, or a whole collection newest first."""
    result = run_list_published(ListContentInput(collection=collection, group_id=group_id), service)
    if not result.success:
        raise http_error(result.errors)
    return ContentListResponse(
        items=[ContentItemResponse.model_validate(i) for i in result.items],
        total=result.total,
    )


@router.get("/{collection}/{slug}", response_model=ContentItemResponse)
def get_published(
    collection: str,
    slug: str,
    service: ContentService = Depends(get_content_service),
) -> ContentItemResponse:
    """Public detail page lookup by slug."""
    result = run_get(GetContentInput(collection=collection, slug=slug), service)
    if not result.success:
        raise http_error(result.errors)
    return ContentItemResponse.model_validate(result.content)
