"""
ContentService - per-collection content operations.

Composes slug generation, the lifecycle state machine and the ordering
index manager behind the operations admin handlers call. Every mutation is
one commit_group call, so the repository applies it atomically.

Functional Core - raises domain errors; component.py converts them.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Sequence
from typing import Any
from uuid import UUID, uuid4

from src.components.lifecycle import LifecycleComponent
from src.components.ordering import (
    OrderingService,
    next_order,
    plan_updates,
    renumber,
    sort_siblings,
)
from src.components.slugs import check_manual_slug, generate_slug, next_free_slug, normalize_title
from src.domain.entities import ContentItem, ContentStatus, Direction
from src.domain.errors import (
    InvalidTitleError,
    ItemNotFoundError,
    SlugConflictError,
    ValidationError,
)
from src.rules.models import CollectionRules, Rules

from .ports import CacheInvalidationPort, ClockPort, ContentRepoPort

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset({"title", "body", "slug", "metadata"})


class ContentService:
    """
    Content service.

    One instance serves every configured collection.
    """

    def __init__(
        self,
        repo: ContentRepoPort,
        clock: ClockPort,
        rules: Rules | None = None,
        invalidator: CacheInvalidationPort | None = None,
    ) -> None:
        self._repo = repo
        self._clock = clock
        self._rules = rules or Rules()
        self._invalidator = invalidator
        self._ordering = OrderingService(repo, clock)
        self._lifecycle = LifecycleComponent(
            content_repo=repo,
            clock=clock,
            invalidator=invalidator,
            transitions=self._rules.lifecycle.transitions,
            publish_requires={
                name: c.publish_requires for name, c in self._rules.collections.items()
            },
        )

    # --- Reads ---

    def get_item(self, item_id: UUID) -> ContentItem:
        item = self._repo.get_by_id(item_id)
        if item is None:
            raise ItemNotFoundError(item_id)
        return item

    def list_by_group(
        self,
        collection: str,
        group_id: UUID | None = None,
        ordered_by_display_order: bool = True,
        status: ContentStatus | None = None,
    ) -> list[ContentItem]:
        """List one sibling group, in render order by default."""
        self._collection(collection)
        items = self._repo.list_group(collection, group_id)
        if ordered_by_display_order:
            items = sort_siblings(items)
        else:
            items = sorted(items, key=lambda i: (i.created_at, str(i.id)))
        if status is not None:
            items = [i for i in items if i.status == status]
        return items

    def list_published(self, collection: str, group_id: UUID | None = None) -> list[ContentItem]:
        """
        Public listing.

        A grouped collection without a group_id lists every published item,
        newest first, the way the blog and events index pages do.
        """
        config = self._collection(collection)
        if config.grouped and group_id is None:
            items = [i for i in self._repo.list_collection(collection) if i.status == "published"]
            return sorted(
                items,
                key=lambda i: (i.published_at or i.created_at, str(i.id)),
                reverse=True,
            )
        return self.list_by_group(collection, group_id, status="published")

    def get_published_by_slug(self, collection: str, slug: str) -> ContentItem:
        self._collection(collection)
        item = self._repo.get_by_slug(collection, slug)
        if item is None or item.status != "published":
            raise ItemNotFoundError(f"{collection}/{slug}")
        return item

    def count_published_by_group(self, collection: str) -> dict[UUID | None, int]:
        """Published items per group, e.g. posts per category."""
        self._collection(collection)
        counts = Counter(
            i.group_id for i in self._repo.list_collection(collection) if i.status == "published"
        )
        return dict(counts)

    # --- Mutations ---

    def create_draft(
        self,
        collection: str,
        title: str,
        body: str = "",
        group_id: UUID | None = None,
        slug: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> ContentItem:
        """
        Create a draft at the end of its group.

        Without a slug one is generated from the title and suffixed on
        collision; a manual slug that collides is rejected instead.
        """
        config = self._collection(collection)
        if group_id is not None and not config.grouped:
            raise ValidationError(
                f"{collection} items do not belong to groups",
                field="group_id",
                reason="group_not_allowed",
            )
        title = self._clean_title(title)
        manual = slug is not None
        item_id = uuid4()

        for attempt in range(self._rules.slug.max_retries + 1):
            existing = self._repo.list_slugs(collection)
            new_slug = self._pick_slug(collection, title, slug, existing)

            now = self._clock.now()
            siblings = self._repo.list_group(collection, group_id)
            heal = renumber(siblings)
            item = ContentItem(
                id=item_id,
                collection=collection,
                group_id=group_id,
                title=title,
                body=body or "",
                slug=new_slug,
                slug_is_manual=manual,
                display_order=next_order(siblings),
                metadata=dict(metadata or {}),
                version=0,
                created_at=now,
                updated_at=now,
            )
            try:
                saved = self._repo.commit_group(upserts=[*plan_updates(siblings, heal, now), item])
            except SlugConflictError:
                if manual or attempt == self._rules.slug.max_retries:
                    raise self._conflict(collection, new_slug) from None
                logger.warning("Slug race on %s/%s, retrying", collection, new_slug)
                continue

            if heal:
                logger.warning("Healed %s/%s on create (%d rows)", collection, group_id, len(heal))
            logger.info("Created %s %s (%s)", collection, item.id, new_slug)
            return saved[-1]

        raise self._conflict(collection, title)  # pragma: no cover

    def update_content(self, item_id: UUID, fields: dict[str, Any]) -> ContentItem:
        """
        Update title, body, slug or metadata.

        Status flags are not editable here; use transition_status. The slug
        of an item that has ever been published is locked. An auto slug
        follows title edits while the item is unpublished.
        """
        forbidden = sorted(set(fields) - EDITABLE_FIELDS)
        if forbidden:
            raise ValidationError(
                f"Field(s) not editable: {', '.join(forbidden)}",
                field=forbidden[0],
                reason="field_not_editable",
            )

        for attempt in range(self._rules.slug.max_retries + 1):
            item = self.get_item(item_id)
            updates = self._content_updates(item, fields)
            if not updates:
                return item

            updates["updated_at"] = self._clock.now()
            updated = item.model_copy(update=updates)
            try:
                [saved] = self._repo.commit_group(upserts=[updated])
            except SlugConflictError:
                if updated.slug_is_manual or attempt == self._rules.slug.max_retries:
                    raise self._conflict(item.collection, updated.slug) from None
                logger.warning("Slug race on %s/%s, retrying", item.collection, updated.slug)
                continue

            logger.info("Updated %s %s (%s)", item.collection, item.id, ", ".join(sorted(fields)))
            return saved

        raise self._conflict(item.collection, item.slug)  # pragma: no cover

    def transition_status(self, item_id: UUID, target_status: ContentStatus) -> ContentItem:
        return self._lifecycle.transition_status(item_id, target_status)

    def move_item(self, item_id: UUID, direction: Direction) -> None:
        self._ordering.move_adjacent(item_id, direction)

    def reorder_group(
        self,
        collection: str,
        group_id: UUID | None,
        ordered_ids: Sequence[UUID],
    ) -> list[ContentItem]:
        self._collection(collection)
        return self._ordering.reorder_all(collection, group_id, ordered_ids)

    def delete_item(self, item_id: UUID) -> None:
        removed = self._ordering.remove(item_id)
        if removed.status == "published" and self._invalidator is not None:
            try:
                self._invalidator.invalidate(removed, removed.status)
            except Exception:
                logger.exception("Cache invalidation failed for %s", removed.id)

    # --- Helpers ---

    def _collection(self, name: str) -> CollectionRules:
        return self._rules.collection(name)

    def _clean_title(self, title: str) -> str:
        title = (title or "").strip()
        if not normalize_title(title):
            raise InvalidTitleError(title)
        return title

    def _pick_slug(
        self,
        collection: str,
        title: str,
        manual_slug: str | None,
        existing: set[str],
    ) -> str:
        if manual_slug is not None:
            return check_manual_slug(
                manual_slug,
                existing,
                collection,
                pattern=self._rules.slug.pattern,
                max_length=self._rules.slug.max_length,
            )
        return generate_slug(title, existing, max_length=self._rules.slug.max_length)

    def _content_updates(self, item: ContentItem, fields: dict[str, Any]) -> dict[str, Any]:
        updates: dict[str, Any] = {}

        title = item.title
        if "title" in fields:
            title = self._clean_title(fields["title"])
            if title != item.title:
                updates["title"] = title

        if "body" in fields and (fields["body"] or "") != item.body:
            updates["body"] = fields["body"] or ""

        if "metadata" in fields and (fields["metadata"] or {}) != item.metadata:
            updates["metadata"] = dict(fields["metadata"] or {})

        requested = fields.get("slug")
        locked = item.published_at is not None

        if requested is not None and requested != item.slug:
            if locked:
                raise ValidationError(
                    "Slug cannot change once the item has been published",
                    field="slug",
                    reason="slug_locked",
                )
            existing = self._repo.list_slugs(item.collection) - {item.slug}
            updates["slug"] = self._pick_slug(item.collection, title, requested, existing)
            updates["slug_is_manual"] = True
        elif locked:
            pass
        elif ("slug" in fields and requested is None) or (
            not item.slug_is_manual and "title" in updates
        ):
            # Automatic slug follows the title while unpublished
            existing = self._repo.list_slugs(item.collection) - {item.slug}
            new_slug = generate_slug(title, existing, max_length=self._rules.slug.max_length)
            if new_slug != item.slug:
                updates["slug"] = new_slug
            if item.slug_is_manual:
                updates["slug_is_manual"] = False

        return updates

    def _conflict(self, collection: str, slug: str) -> SlugConflictError:
        taken = self._repo.list_slugs(collection)
        return SlugConflictError(slug, collection, suggestion=next_free_slug(slug, taken))
