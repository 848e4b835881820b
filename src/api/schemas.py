from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

# --- Shared Enums/Types ---
ContentStatus = Literal["draft", "published", "archived"]
Direction = Literal["up", "down"]


# --- Content Items ---
class ContentCreateRequest(BaseModel):
    title: str
    body: str = ""
    group_id: UUID | None = None
    slug: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class ContentUpdateRequest(BaseModel):
    title: str | None = None
    body: str | None = None
    slug: str | None = None
    metadata: dict[str, Any] | None = None


class ContentTransitionRequest(BaseModel):
    status: ContentStatus


class ContentMoveRequest(BaseModel):
    direction: Direction


class ContentReorderRequest(BaseModel):
    group_id: UUID | None = None
    ordered_ids: list[UUID]


class ContentItemResponse(BaseModel):
    id: UUID
    collection: str
    group_id: UUID | None = None
    title: str
    body: str
    slug: str
    slug_is_manual: bool
    display_order: int
    is_active: bool
    status: ContentStatus
    published_at: datetime | None = None
    archived_at: datetime | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    version: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ContentListResponse(BaseModel):
    items: list[ContentItemResponse]
    total: int


class GroupCount(BaseModel):
    group_id: UUID | None
    count: int


class GroupCountsResponse(BaseModel):
    collection: str
    groups: list[GroupCount]


# --- Errors ---
class ErrorDetail(BaseModel):
    code: str
    message: str
    field: str | None = None
    suggestion: str | None = None
