import json
import sys
from uuid import uuid4

import pytest

from src.adapters.sqlite.repos import SQLiteContentRepo
from src.app_shell import cli


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    path = tmp_path / "data"
    monkeypatch.setenv("CMS_DATA_DIR", str(path))
    return path


def run_cli(monkeypatch, *args):
    monkeypatch.setattr(sys, "argv", ["content-engine", *args])
    cli.main()


def test_migrate(data_dir, monkeypatch, capsys):
    run_cli(monkeypatch, "migrate")
    assert "Applied 1 migration(s)." in capsys.readouterr().out

    run_cli(monkeypatch, "migrate")
    assert "Applied 0 migration(s)." in capsys.readouterr().out


def test_import_legacy_then_list(data_dir, tmp_path, monkeypatch, capsys):
    run_cli(monkeypatch, "migrate")
    legacy = tmp_path / "stats.json"
    legacy.write_text(
        json.dumps(
            [
                {"title": "Exhibitors", "value": "1,200+", "is_active": True,
                 "published_at": "2024-03-01T10:00:00+00:00", "display_order": 0},
                {"title": "Visitors", "value": "40k", "is_active": False,
                 "published_at": "2023-03-01T10:00:00+00:00", "display_order": 0,
                 "created_at": "2023-01-01T00:00:00+00:00"},
                {"title": "Countries", "value": "60", "display_order": 4},
            ]
        )
    )

    run_cli(monkeypatch, "import-legacy", "stats", str(legacy))
    assert "Imported 3 item(s) into stats." in capsys.readouterr().out

    repo = SQLiteContentRepo(str(data_dir / "content.db"))
    items = {i.slug: i for i in repo.list_group("stats", None)}
    assert items["exhibitors"].status == "published"
    assert items["visitors"].status == "archived"
    assert items["countries"].status == "draft"
    assert items["exhibitors"].metadata == {"value": "1,200+"}
    assert sorted(i.display_order for i in items.values()) == [0, 1, 2]

    run_cli(monkeypatch, "list", "stats")
    out = capsys.readouterr().out
    assert "visitors" in out
    assert "3 item(s)." in out


def test_import_appends_after_existing_rows(data_dir, tmp_path, monkeypatch, capsys):
    run_cli(monkeypatch, "migrate")
    legacy = tmp_path / "faq.json"
    legacy.write_text(json.dumps([{"title": "Parking"}]))

    run_cli(monkeypatch, "import-legacy", "faq_items", str(legacy))
    run_cli(monkeypatch, "import-legacy", "faq_items", str(legacy))

    repo = SQLiteContentRepo(str(data_dir / "content.db"))
    rows = sorted(repo.list_group("faq_items", None), key=lambda i: i.display_order)
    assert [(i.slug, i.display_order) for i in rows] == [("parking", 0), ("parking-2", 1)]


def test_heal_reports_clean_groups(data_dir, tmp_path, monkeypatch, capsys):
    run_cli(monkeypatch, "migrate")
    group = str(uuid4())
    legacy = tmp_path / "posts.json"
    legacy.write_text(json.dumps([{"title": "A", "group_id": group}, {"title": "B"}]))
    run_cli(monkeypatch, "import-legacy", "blog_posts", str(legacy))
    capsys.readouterr()

    run_cli(monkeypatch, "heal", "blog_posts")
    assert "Renumbered 0 row(s) across 2 group(s)." in capsys.readouterr().out


def test_unknown_collection_exits(data_dir, monkeypatch):
    run_cli(monkeypatch, "migrate")
    with pytest.raises(SystemExit) as exc:
        run_cli(monkeypatch, "list", "pages")
    assert exc.value.code == 1


def test_missing_legacy_file_exits(data_dir, tmp_path, monkeypatch):
    run_cli(monkeypatch, "migrate")
    with pytest.raises(SystemExit):
        run_cli(monkeypatch, "import-legacy", "stats", str(tmp_path / "missing.json"))


def test_migrate_down(data_dir, monkeypatch, capsys):
    run_cli(monkeypatch, "migrate")
    run_cli(monkeypatch, "migrate", "--down")
    assert "Rolled back 001_content_items.sql." in capsys.readouterr().out

    run_cli(monkeypatch, "migrate", "--down")
    assert "Nothing to roll back." in capsys.readouterr().out


def test_failed_import_persists_nothing(data_dir, tmp_path, monkeypatch):
    run_cli(monkeypatch, "migrate")
    shared_id = str(uuid4())
    legacy = tmp_path / "posts.json"
    legacy.write_text(
        json.dumps(
            [
                {"id": shared_id, "title": "First", "group_id": str(uuid4())},
                # Same id in a second group: its insert fails after the first group's
                {"id": shared_id, "title": "Second", "group_id": str(uuid4())},
            ]
        )
    )

    with pytest.raises(SystemExit) as exc:
        run_cli(monkeypatch, "import-legacy", "blog_posts", str(legacy))
    assert exc.value.code == 1

    repo = SQLiteContentRepo(str(data_dir / "content.db"))
    assert repo.list_collection("blog_posts") == []
