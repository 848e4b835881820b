from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

from src.domain.entities import ContentItem, ContentStatus
from src.domain.errors import ValidationError

STATUSES: tuple[ContentStatus, ...] = ("draft", "published", "archived")

DEFAULT_TRANSITIONS: dict[ContentStatus, list[ContentStatus]] = {
    "draft": ["published", "archived"],
    "published": ["draft", "archived"],
    "archived": ["draft", "published"],
}

DEFAULT_PUBLISH_REQUIRES: tuple[str, ...] = ("title", "body")


def derive_status(
    is_active: bool,
    published_at: datetime | None,
    archived_at: datetime | None = None,
) -> ContentStatus:
    """
    The single source of truth for lifecycle status.

    archived_at distinguishes "archived" from "unpublished back to draft",
    which share (is_active=False, published_at=T).
    """
    if archived_at is not None:
        return "archived"
    if is_active and published_at is not None:
        return "published"
    return "draft"


def derive_legacy_status(is_active: bool, published_at: datetime | None) -> ContentStatus:
    """Two-flag mapping used by rows written before archived_at existed."""
    if is_active and published_at is not None:
        return "published"
    if published_at is not None:
        return "archived"
    return "draft"


def can_transition(
    current: ContentStatus,
    new: ContentStatus,
    transitions: Mapping[ContentStatus, Iterable[ContentStatus]] | None = None,
) -> bool:
    """
    Determine if a state transition is allowed based on the rules.
    """
    if current == new:
        return True
    table = transitions if transitions is not None else DEFAULT_TRANSITIONS
    return new in table.get(current, [])


def missing_publish_fields(
    item: ContentItem,
    required: Iterable[str] = DEFAULT_PUBLISH_REQUIRES,
) -> list[str]:
    """Fields that must be non-empty before an item may be published."""
    missing = []
    for name in required:
        value = getattr(item, name, None)
        if value is None:
            value = item.metadata.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(name)
    return missing


def transition(
    item: ContentItem,
    new_status: ContentStatus,
    now: datetime,
    transitions: Mapping[ContentStatus, Iterable[ContentStatus]] | None = None,
    publish_requires: Iterable[str] = DEFAULT_PUBLISH_REQUIRES,
) -> ContentItem:
    """
    Return a NEW ContentItem with the flags for new_status.

    Transition to the current status returns the same item untouched.
    Raises ValidationError if the transition is not allowed or the item is
    not complete enough to publish.
    """
    current = item.status
    if current == new_status:
        return item

    if new_status not in STATUSES:
        raise ValidationError(
            f"Unknown status '{new_status}'", field="status", reason="status_unknown"
        )

    if not can_transition(current, new_status, transitions):
        raise ValidationError(
            f"Cannot transition from '{current}' to '{new_status}'",
            field="status",
            reason="transition_not_allowed",
        )

    updates: dict[str, Any] = {"updated_at": now}

    if new_status == "published":
        missing = missing_publish_fields(item, publish_requires)
        if missing:
            raise ValidationError(
                f"Cannot publish: {', '.join(missing)} required",
                field=missing[0],
                reason="publish_incomplete",
            )
        # published_at is set once and kept as history
        if item.published_at is None:
            updates["published_at"] = now
        updates["is_active"] = True
        updates["archived_at"] = None

    elif new_status == "archived":
        updates["is_active"] = False
        updates["archived_at"] = now

    elif new_status == "draft":
        updates["is_active"] = False
        updates["archived_at"] = None

    return item.model_copy(update=updates)
