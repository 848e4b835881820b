import os
from datetime import UTC, datetime
from pathlib import Path

import pytest

from src.adapters.cache_hooks import LoggingCacheInvalidator
from src.adapters.clock import FixedClock
from src.adapters.memory_repo import InMemoryContentRepo
from src.adapters.sqlite.migrator import SQLiteMigrator
from src.adapters.sqlite.repos import SQLiteContentRepo
from src.components.content import ContentService
from src.rules.loader import load_rules
from src.rules.models import Rules


@pytest.fixture
def test_data_dir(tmp_path):
    return str(tmp_path)


@pytest.fixture
def rules() -> Rules:
    # Load REAL rules from project root (tests run from project root)
    rules_path = Path("rules.yaml").resolve()
    if not rules_path.exists():
        raise FileNotFoundError(f"Rules not found at {rules_path}")
    return load_rules(rules_path)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2025, 1, 1, 9, 0, 0, tzinfo=UTC))


@pytest.fixture
def invalidator(rules: Rules) -> LoggingCacheInvalidator:
    return LoggingCacheInvalidator(rules)


@pytest.fixture
def db_path(test_data_dir) -> str:
    """Temporary SQLite DB with the real migrations applied."""
    path = os.path.join(test_data_dir, "content.db")
    SQLiteMigrator(path, "migrations").run_migrations()
    return path


@pytest.fixture
def sqlite_repo(db_path) -> SQLiteContentRepo:
    return SQLiteContentRepo(db_path)


@pytest.fixture
def memory_repo() -> InMemoryContentRepo:
    return InMemoryContentRepo()


@pytest.fixture(params=["memory", "sqlite"])
def repo(request):
    """Both repository adapters; service tests run against each."""
    if request.param == "memory":
        return request.getfixturevalue("memory_repo")
    return request.getfixturevalue("sqlite_repo")


@pytest.fixture
def service(repo, clock, rules, invalidator) -> ContentService:
    return ContentService(repo=repo, clock=clock, rules=rules, invalidator=invalidator)
