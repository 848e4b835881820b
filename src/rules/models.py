from uuid import UUID

from pydantic import BaseModel, Field

from src.domain.entities import ContentStatus
from src.domain.errors import UnknownCollectionError
from src.domain.state import DEFAULT_TRANSITIONS


class ProjectRules(BaseModel):
    slug: str = "site-content-engine"
    rules_version: str = "1.0"

class SlugRules(BaseModel):
    pattern: str = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"
    max_length: int = 120
    max_retries: int = Field(default=3, ge=0)

class LifecycleRules(BaseModel):
    transitions: dict[ContentStatus, list[ContentStatus]] = Field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_TRANSITIONS.items()}
    )

class CollectionRules(BaseModel):
    grouped: bool = False
    publish_requires: list[str] = Field(default_factory=lambda: ["title", "body"])
    public_path: str | None = None

    def public_url(self, slug: str, group_id: UUID | None = None) -> str | None:
        if not self.public_path:
            return None
        return self.public_path.format(slug=slug, group_id=group_id or "")


def _default_collections() -> dict[str, CollectionRules]:
    return {
        "blog_posts": CollectionRules(grouped=True, public_path="/blog/{slug}"),
        "events": CollectionRules(grouped=True, public_path="/whats-on/{slug}"),
        "blog_categories": CollectionRules(publish_requires=["title"], public_path="/blog"),
        "event_categories": CollectionRules(publish_requires=["title"], public_path="/whats-on"),
        "faq_items": CollectionRules(grouped=True, public_path="/faq"),
        "instagram_posts": CollectionRules(publish_requires=["title", "post_url"], public_path="/"),
        "stats": CollectionRules(publish_requires=["title", "value"], public_path="/"),
        "blog_tags": CollectionRules(publish_requires=["title"], public_path="/blog"),
        "cities": CollectionRules(public_path="/cities/{slug}"),
    }


class Rules(BaseModel):
    project: ProjectRules = Field(default_factory=ProjectRules)
    slug: SlugRules = Field(default_factory=SlugRules)
    lifecycle: LifecycleRules = Field(default_factory=LifecycleRules)
    collections: dict[str, CollectionRules] = Field(default_factory=_default_collections)

    def collection(self, name: str) -> CollectionRules:
        """Look up collection rules; unknown names are rejected."""
        try:
            return self.collections[name]
        except KeyError:
            raise UnknownCollectionError(name) from None
