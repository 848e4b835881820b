from datetime import UTC, datetime
from typing import Any, Literal
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

# --- Enums / Literals ---
ContentStatus = Literal["draft", "published", "archived"]
Direction = Literal["up", "down"]


def utcnow() -> datetime:
    return datetime.now(UTC)


# --- Content ---

class ContentItem(BaseModel):
    """
    Immutable snapshot of a content record.

    Status is never stored; see src.domain.state.derive_status.
    """

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    collection: str
    group_id: UUID | None = None

    title: str
    body: str = ""
    slug: str
    slug_is_manual: bool = False

    display_order: int = 0

    is_active: bool = False
    published_at: datetime | None = None
    archived_at: datetime | None = None

    metadata: dict[str, Any] = Field(default_factory=dict)

    version: int = 0
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def status(self) -> ContentStatus:
        from src.domain.state import derive_status

        return derive_status(self.is_active, self.published_at, self.archived_at)

    @property
    def group_key(self) -> tuple[str, UUID | None]:
        return (self.collection, self.group_id)
