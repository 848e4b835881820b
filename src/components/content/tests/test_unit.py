"""
Content component unit tests.

Tests for the run_* entry points: error conversion and output shapes.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import uuid4

import pytest

from src.adapters.clock import FixedClock
from src.adapters.memory_repo import InMemoryContentRepo
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
    legacy_groups,
    run_create,
    run_delete,
    run_get,
    run_list,
    run_list_published,
    run_move,
    run_reorder,
    run_transition,
    run_update,
)
from src.domain.entities import ContentItem
from src.rules.models import Rules

# --- Fixtures ---


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2024, 6, 15, 12, 0, 0, tzinfo=UTC))


@pytest.fixture
def service(clock: FixedClock) -> ContentService:
    return ContentService(InMemoryContentRepo(), clock, Rules())


def create(service: ContentService, title: str, **kwargs: Any) -> ContentItem:
    result = run_create(CreateContentInput(collection="faq_items", title=title, **kwargs), service)
    assert result.success is True, result.errors
    assert result.content is not None
    return result.content


# --- Create / Update ---


class TestRunCreate:
    """Test draft creation through the shell."""

    def test_creates_draft_at_end(self, service: ContentService) -> None:
        first = create(service, "Opening hours", body="9 to 5")
        second = create(service, "Parking", body="Free")

        assert first.status == "draft"
        assert (first.display_order, second.display_order) == (0, 1)
        assert first.version == 1

    def test_unknown_collection(self, service: ContentService) -> None:
        result = run_create(CreateContentInput(collection="pages", title="About"), service)
        assert result.success is False
        assert result.content is None
        assert result.errors[0].code == "unknown_collection"

    def test_empty_title(self, service: ContentService) -> None:
        result = run_create(CreateContentInput(collection="faq_items", title="?!"), service)
        assert result.success is False
        assert result.errors[0].code == "title_invalid"
        assert result.errors[0].field == "title"

    def test_manual_slug_conflict_carries_suggestion(self, service: ContentService) -> None:
        create(service, "Parking", slug="parking")
        result = run_create(
            CreateContentInput(collection="faq_items", title="Car parks", slug="parking"), service
        )
        assert result.success is False
        assert result.errors[0].code == "slug_conflict"
        assert result.errors[0].suggestion == "parking-2"

    def test_group_on_ungrouped_collection(self, service: ContentService) -> None:
        result = run_create(
            CreateContentInput(collection="stats", title="Visitors", group_id=uuid4()), service
        )
        assert result.success is False
        assert result.errors[0].code == "group_not_allowed"


class TestRunUpdate:
    """Test field updates through the shell."""

    def test_status_fields_not_editable(self, service: ContentService) -> None:
        item = create(service, "Parking", body="Free")
        result = run_update(
            UpdateContentInput(content_id=item.id, updates={"is_active": True}), service
        )
        assert result.success is False
        assert result.errors[0].code == "field_not_editable"
        assert result.errors[0].field == "is_active"

    def test_body_update(self, service: ContentService) -> None:
        item = create(service, "Parking", body="Free")
        result = run_update(
            UpdateContentInput(content_id=item.id, updates={"body": "Free after 6pm"}), service
        )
        assert result.success is True
        assert result.content is not None
        assert result.content.body == "Free after 6pm"
        assert result.content.version == item.version + 1


# --- Reads ---


class TestRunGetAndList:
    """Test reads through the shell."""

    def test_get_by_id(self, service: ContentService) -> None:
        item = create(service, "Parking", body="Free")
        result = run_get(GetContentInput(content_id=item.id), service)
        assert result.success is True
        assert result.content == item

    def test_get_published_only_hides_drafts(self, service: ContentService) -> None:
        item = create(service, "Parking", body="Free")
        result = run_get(GetContentInput(content_id=item.id, published_only=True), service)
        assert result.success is False
        assert result.errors[0].code == "not_found"

    def test_get_by_slug_requires_published(self, service: ContentService) -> None:
        item = create(service, "Parking", body="Free")
        inp = GetContentInput(collection="faq_items", slug="parking")

        assert run_get(inp, service).success is False
        run_transition(TransitionContentInput(content_id=item.id, to_status="published"), service)
        result = run_get(inp, service)
        assert result.success is True
        assert result.content is not None
        assert result.content.id == item.id

    def test_get_without_identifier(self, service: ContentService) -> None:
        result = run_get(GetContentInput(), service)
        assert result.success is False
        assert result.errors[0].code == "missing_identifier"

    def test_list_filters_by_status(self, service: ContentService) -> None:
        a = create(service, "Opening hours", body="9 to 5")
        create(service, "Parking", body="Free")
        run_transition(TransitionContentInput(content_id=a.id, to_status="published"), service)

        everything = run_list(ListContentInput(collection="faq_items"), service)
        published = run_list(
            ListContentInput(collection="faq_items", status="published"), service
        )
        assert everything.total == 2
        assert [i.id for i in published.items] == [a.id]

    def test_list_unknown_collection(self, service: ContentService) -> None:
        result = run_list(ListContentInput(collection="pages"), service)
        assert result.success is False
        assert result.items == []

    def test_list_published_newest_first_across_groups(
        self, service: ContentService, clock: FixedClock
    ) -> None:
        news, guides = uuid4(), uuid4()
        older = run_create(
            CreateContentInput(collection="blog_posts", title="Older", body="x", group_id=news),
            service,
        ).content
        newer = run_create(
            CreateContentInput(collection="blog_posts", title="Newer", body="x", group_id=guides),
            service,
        ).content
        assert older is not None and newer is not None

        run_transition(TransitionContentInput(content_id=older.id, to_status="published"), service)
        clock.advance(timedelta(hours=1))
        run_transition(TransitionContentInput(content_id=newer.id, to_status="published"), service)

        result = run_list_published(ListContentInput(collection="blog_posts"), service)
        assert [i.id for i in result.items] == [newer.id, older.id]


# --- Ordering ---


class TestRunOrdering:
    """Test move, reorder and delete through the shell."""

    def test_move_and_reorder(self, service: ContentService) -> None:
        a = create(service, "A", body="x")
        b = create(service, "B", body="x")

        assert run_move(MoveContentInput(content_id=b.id, direction="up"), service).success
        listed = run_list(ListContentInput(collection="faq_items"), service)
        assert [i.id for i in listed.items] == [b.id, a.id]

        result = run_reorder(
            ReorderContentInput(collection="faq_items", group_id=None, ordered_ids=[a.id, b.id]),
            service,
        )
        assert result.success is True
        assert [(i.id, i.display_order) for i in result.items] == [(a.id, 0), (b.id, 1)]

    def test_reorder_mismatch(self, service: ContentService) -> None:
        a = create(service, "A", body="x")
        create(service, "B", body="x")
        result = run_reorder(
            ReorderContentInput(collection="faq_items", group_id=None, ordered_ids=[a.id]),
            service,
        )
        assert result.success is False
        assert result.errors[0].code == "order_mismatch"

    def test_delete_missing(self, service: ContentService) -> None:
        result = run_delete(DeleteContentInput(content_id=uuid4()), service)
        assert result.success is False
        assert result.errors[0].code == "not_found"

    def test_transition_not_found(self, service: ContentService) -> None:
        result = run_transition(
            TransitionContentInput(content_id=uuid4(), to_status="published"), service
        )
        assert result.success is False
        assert result.errors[0].code == "not_found"


# --- Legacy Import ---


class TestLegacyGroups:
    """Test mapping of legacy two-flag rows."""

    def test_maps_status_and_renumbers(self, clock: FixedClock) -> None:
        group = uuid4()
        records = [
            {"title": "Live", "is_active": True, "published_at": "2023-01-01T00:00:00+00:00",
             "display_order": 0, "group_id": str(group)},
            {"title": "Retired", "is_active": False, "published_at": "2022-01-01T00:00:00Z",
             "display_order": 0, "group_id": str(group), "created_at": "2021-01-01T00:00:00Z"},
            {"title": "Never shown", "is_active": True, "published_at": None,
             "display_order": 7, "group_id": str(group)},
        ]

        groups = legacy_groups("faq_items", records, set(), clock.now())
        items = {i.title: i for i in groups[group]}

        assert items["Live"].status == "published"
        assert items["Retired"].status == "archived"
        assert items["Never shown"].status == "draft"
        assert items["Never shown"].is_active is False
        assert sorted(i.display_order for i in groups[group]) == [0, 1, 2]
        # Older row wins the duplicate order 0
        assert items["Retired"].display_order == 0

    def test_keeps_valid_free_slug_and_extra_fields(self, clock: FixedClock) -> None:
        records = [
            {"title": "Exhibitors", "slug": "exhibitors", "value": "1,200+", "display_order": 0},
            {"title": "Exhibitors", "slug": "exhibitors", "display_order": 1},
            {"title": "Visitors", "slug": "Not A Slug", "display_order": 2},
        ]

        [items] = legacy_groups("stats", records, {"visitors"}, clock.now()).values()

        assert [i.slug for i in items] == ["exhibitors", "exhibitors-2", "visitors-2"]
        assert items[0].metadata == {"value": "1,200+"}
        assert all(i.version == 0 for i in items)

    def test_record_without_title_rejected(self, clock: FixedClock) -> None:
        with pytest.raises(ValueError):
            legacy_groups("stats", [{"slug": "orphan"}], set(), clock.now())

    def test_string_flags_parsed(self, clock: FixedClock) -> None:
        published = "2023-01-01T00:00:00+00:00"
        records = [
            {"title": "Hidden", "is_active": "false", "published_at": published,
             "display_order": 0},
            {"title": "Shown", "is_active": "true", "published_at": published,
             "display_order": 1},
            {"title": "Numeric", "is_active": 0, "published_at": published, "display_order": 2},
        ]

        [items] = legacy_groups("stats", records, set(), clock.now()).values()
        statuses = {i.title: i.status for i in items}

        assert statuses == {"Hidden": "archived", "Shown": "published", "Numeric": "archived"}

    def test_unrecognized_flag_rejected(self, clock: FixedClock) -> None:
        with pytest.raises(ValueError, match="is_active"):
            legacy_groups("stats", [{"title": "Odd", "is_active": "maybe"}], set(), clock.now())
