"""
Legacy row import - Functional Core.

Older rows carry only is_active and published_at. Status is mapped with
derive_legacy_status, slugs are kept when valid and free, and each group's
display_order is renumbered to 0..n-1 in tie-break order.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from src.components.ordering import apply_plan, renumber
from src.components.slugs import generate_slug, is_valid_slug
from src.domain.entities import ContentItem
from src.domain.state import derive_legacy_status

# Keys read into ContentItem fields; anything else lands in metadata
LEGACY_FIELDS = frozenset(
    {
        "id",
        "title",
        "body",
        "slug",
        "group_id",
        "display_order",
        "is_active",
        "published_at",
        "created_at",
        "updated_at",
    }
)


_FLAG_STRINGS = {"true": True, "1": True, "false": False, "0": False, "": False}


def _parse_dt(value: Any) -> datetime | None:
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def _parse_uuid(value: Any) -> UUID | None:
    if value in (None, ""):
        return None
    return value if isinstance(value, UUID) else UUID(str(value))


def _parse_flag(value: Any) -> bool:
    if value is None or isinstance(value, bool):
        return bool(value)
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str) and value.strip().lower() in _FLAG_STRINGS:
        return _FLAG_STRINGS[value.strip().lower()]
    raise ValueError(f"Unrecognized is_active value: {value!r}")


def legacy_item(
    collection: str,
    record: Mapping[str, Any],
    taken: set[str],
    now: datetime,
    max_length: int | None = None,
) -> ContentItem:
    """
    Map one legacy record to a new ContentItem (version 0).

    Adds the chosen slug to taken. Raises ValueError on unusable records.
    """
    title = str(record.get("title") or "").strip()
    if not title:
        raise ValueError(f"Legacy record without title: {dict(record)!r}")

    slug = record.get("slug")
    too_long = max_length is not None and len(str(slug)) > max_length
    if too_long or not (isinstance(slug, str) and is_valid_slug(slug) and slug not in taken):
        slug = generate_slug(title, taken, max_length=max_length)
    taken.add(slug)

    is_active = _parse_flag(record.get("is_active"))
    published_at = _parse_dt(record.get("published_at"))
    status = derive_legacy_status(is_active, published_at)
    created_at = _parse_dt(record.get("created_at")) or now

    return ContentItem(
        id=_parse_uuid(record.get("id")) or uuid4(),
        collection=collection,
        group_id=_parse_uuid(record.get("group_id")),
        title=title,
        body=str(record.get("body") or ""),
        slug=slug,
        slug_is_manual=False,
        display_order=int(record.get("display_order") or 0),
        is_active=status == "published",
        published_at=published_at,
        archived_at=(_parse_dt(record.get("updated_at")) or now) if status == "archived" else None,
        metadata={k: v for k, v in record.items() if k not in LEGACY_FIELDS},
        version=0,
        created_at=created_at,
        updated_at=_parse_dt(record.get("updated_at")) or created_at,
    )


def legacy_groups(
    collection: str,
    records: Iterable[Mapping[str, Any]],
    existing_slugs: set[str],
    now: datetime,
    max_length: int | None = None,
) -> dict[UUID | None, list[ContentItem]]:
    """Map legacy records and renumber each group. Returns items per group, in render order."""
    taken = set(existing_slugs)
    groups: dict[UUID | None, list[ContentItem]] = defaultdict(list)
    for record in records:
        item = legacy_item(collection, record, taken, now, max_length)
        groups[item.group_id].append(item)

    return {group_id: apply_plan(items, renumber(items)) for group_id, items in groups.items()}
