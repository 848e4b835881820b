import sqlite3

import pytest

from src.adapters.sqlite.migrator import SQLiteMigrator, split_sections


@pytest.fixture
def temp_db_path(tmp_path):
    return str(tmp_path / "test_db.sqlite")

@pytest.fixture
def migrations_dir():
    # Real migrations, so the SQL itself is exercised
    return "migrations"

def test_migrator_creates_migration_table(temp_db_path, migrations_dir):
    migrator = SQLiteMigrator(temp_db_path, migrations_dir)
    migrator.run_migrations()

    conn = sqlite3.connect(temp_db_path)
    cursor = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' AND name='_migrations'"
    )
    assert cursor.fetchone() is not None
    conn.close()

def test_migrator_applies_content_items(temp_db_path, migrations_dir):
    migrator = SQLiteMigrator(temp_db_path, migrations_dir)
    applied = migrator.run_migrations()

    assert "001_content_items.sql" in applied

    conn = sqlite3.connect(temp_db_path)
    cursor = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' AND name='content_items'"
    )
    assert cursor.fetchone() is not None

    # Slug uniqueness is enforced per collection
    cursor = conn.execute(
        "SELECT name FROM sqlite_master "
        "WHERE type='index' AND name='ux_content_items_collection_slug'"
    )
    assert cursor.fetchone() is not None
    conn.close()

def test_migrator_is_idempotent(temp_db_path, migrations_dir):
    migrator = SQLiteMigrator(temp_db_path, migrations_dir)

    # Run twice
    migrator.run_migrations()
    assert migrator.run_migrations() == []
    assert migrator.pending() == []

    conn = sqlite3.connect(temp_db_path)
    cursor = conn.execute(
        "SELECT count(*) FROM _migrations WHERE filename='001_content_items.sql'"
    )
    assert cursor.fetchone()[0] == 1
    conn.close()

def test_pending_lists_unapplied(temp_db_path, migrations_dir):
    migrator = SQLiteMigrator(temp_db_path, migrations_dir)
    assert migrator.pending() == ["001_content_items.sql"]

def test_failed_migration_is_not_recorded(temp_db_path, tmp_path):
    bad_dir = tmp_path / "bad_migrations"
    bad_dir.mkdir()
    (bad_dir / "001_broken.sql").write_text("-- Up\nCREATE TABLE oops (;\n")

    migrator = SQLiteMigrator(temp_db_path, str(bad_dir))
    with pytest.raises(RuntimeError, match="001_broken.sql"):
        migrator.run_migrations()

    assert migrator.pending() == ["001_broken.sql"]

def test_rollback_last_runs_down_section(temp_db_path, migrations_dir):
    migrator = SQLiteMigrator(temp_db_path, migrations_dir)
    migrator.run_migrations()

    assert migrator.rollback_last() == "001_content_items.sql"
    assert migrator.pending() == ["001_content_items.sql"]

    conn = sqlite3.connect(temp_db_path)
    cursor = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' AND name='content_items'"
    )
    assert cursor.fetchone() is None
    conn.close()

    # Nothing left to roll back
    assert migrator.rollback_last() is None

def test_split_sections():
    up, down = split_sections("-- Up\nCREATE TABLE t (x);\n-- Down\nDROP TABLE t;\n")
    assert up == "CREATE TABLE t (x);"
    assert down == "DROP TABLE t;"

    up, down = split_sections("CREATE TABLE t (x);")
    assert up == "CREATE TABLE t (x);"
    assert down == ""
