import os
from functools import lru_cache
from pathlib import Path

from fastapi import Depends

from src.adapters.cache_hooks import LoggingCacheInvalidator
from src.adapters.clock import SystemClock
from src.adapters.sqlite.repos import SQLiteContentRepo
from src.components.content import ContentService
from src.rules.loader import load_rules
from src.rules.models import Rules


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.data_dir = Path(os.environ.get("CMS_DATA_DIR", "./data"))
        self.db_path = str(self.data_dir / "content.db")
        self.migrations_dir = str(self.base_dir / "migrations")
        self.rules_path = Path(os.environ.get("CMS_RULES_PATH", str(self.base_dir / "rules.yaml")))
        self.cors_origins = [
            origin.strip()
            for origin in os.environ.get(
                "CMS_CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000"
            ).split(",")
            if origin.strip()
        ]


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def _load_rules_cached(path: Path) -> Rules:
    return load_rules(path)


def get_rules(settings: Settings = Depends(get_settings)) -> Rules:
    return _load_rules_cached(settings.rules_path)


# --- Repos / Adapters ---
def get_content_repo(settings: Settings = Depends(get_settings)) -> SQLiteContentRepo:
    return SQLiteContentRepo(settings.db_path)


def get_clock() -> SystemClock:
    return SystemClock()


def get_invalidator(rules: Rules = Depends(get_rules)) -> LoggingCacheInvalidator:
    return LoggingCacheInvalidator(rules)


# --- Services ---
def get_content_service(
    repo: SQLiteContentRepo = Depends(get_content_repo),
    clock: SystemClock = Depends(get_clock),
    rules: Rules = Depends(get_rules),
    invalidator: LoggingCacheInvalidator = Depends(get_invalidator),
) -> ContentService:
    return ContentService(repo=repo, clock=clock, rules=rules, invalidator=invalidator)
