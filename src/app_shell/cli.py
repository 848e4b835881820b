import argparse
import json
import logging
import sys
from pathlib import Path
from uuid import UUID

from src.adapters.clock import SystemClock
from src.adapters.sqlite.migrator import SQLiteMigrator
from src.adapters.sqlite.repos import SQLiteContentRepo
from src.api.deps import Settings
from src.components.content import ContentService, legacy_groups
from src.components.ordering import OrderingService, next_order, plan_updates, renumber
from src.domain.entities import ContentItem
from src.domain.errors import ContentEngineError
from src.rules.loader import load_rules
from src.rules.models import Rules

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("cli")


def get_rules(settings: Settings) -> Rules:
    if not settings.rules_path.exists():
        logger.error(f"Rules file {settings.rules_path} not found.")
        sys.exit(1)
    return load_rules(settings.rules_path)


def get_repo(settings: Settings) -> SQLiteContentRepo:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    return SQLiteContentRepo(settings.db_path)


def _group_arg(value: str | None) -> UUID | None:
    return UUID(value) if value else None


def handle_migrate(settings: Settings, args: argparse.Namespace) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    migrator = SQLiteMigrator(settings.db_path, settings.migrations_dir)
    if args.down:
        rolled_back = migrator.rollback_last()
        print(f"Rolled back {rolled_back}." if rolled_back else "Nothing to roll back.")
        return
    applied = migrator.run_migrations()
    print(f"Applied {len(applied)} migration(s).")


def handle_list(settings: Settings, args: argparse.Namespace) -> None:
    service = ContentService(get_repo(settings), SystemClock(), get_rules(settings))
    items = service.list_by_group(args.collection, _group_arg(args.group))
    for item in items:
        print(f"{item.display_order:>4}  {item.status:<9}  {item.slug}  ({item.id})")
    print(f"{len(items)} item(s).")


def handle_heal(settings: Settings, args: argparse.Namespace) -> None:
    rules = get_rules(settings)
    rules.collection(args.collection)
    repo = get_repo(settings)
    ordering = OrderingService(repo, SystemClock())

    if args.group is not None:
        groups = [_group_arg(args.group)]
    else:
        groups = repo.list_groups(args.collection)

    total = 0
    for group_id in groups:
        total += ordering.heal(args.collection, group_id)
    print(f"Renumbered {total} row(s) across {len(groups)} group(s).")


def handle_import_legacy(settings: Settings, args: argparse.Namespace) -> None:
    rules = get_rules(settings)
    rules.collection(args.collection)
    source = Path(args.file)
    if not source.exists():
        logger.error(f"File {source} not found.")
        sys.exit(1)

    records = json.loads(source.read_text())
    if not isinstance(records, list):
        logger.error("Legacy file must contain a JSON list of records.")
        sys.exit(1)

    repo = get_repo(settings)
    now = SystemClock().now()
    groups = legacy_groups(
        args.collection,
        records,
        repo.list_slugs(args.collection),
        now,
        max_length=rules.slug.max_length,
    )

    # Every group commits in one batch
    upserts: list[ContentItem] = []
    for group_id, items in groups.items():
        existing = repo.list_group(args.collection, group_id)
        upserts += plan_updates(existing, renumber(existing), now)
        # Imported rows go after anything already in the group
        offset = next_order(existing)
        upserts += [i.model_copy(update={"display_order": i.display_order + offset}) for i in items]
        logger.info(f"Staged {len(items)} item(s) for {args.collection}/{group_id}")

    repo.commit_group(upserts=upserts)
    imported = sum(len(items) for items in groups.values())
    print(f"Imported {imported} item(s) into {args.collection}.")


def main() -> None:
    parser = argparse.ArgumentParser(description="Site Content Engine CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # migrate
    migrate_parser = subparsers.add_parser("migrate", help="Apply pending database migrations")
    migrate_parser.add_argument(
        "--down", action="store_true", help="Roll back the newest applied migration"
    )

    # list
    list_parser = subparsers.add_parser("list", help="List a group in display order")
    list_parser.add_argument("collection", help="Collection name (e.g. blog_posts)")
    list_parser.add_argument("--group", help="Group id (category) for grouped collections")

    # heal
    heal_parser = subparsers.add_parser("heal", help="Renumber groups with gaps or duplicates")
    heal_parser.add_argument("collection", help="Collection name")
    heal_parser.add_argument("--group", help="Only heal this group id")

    # import-legacy
    import_parser = subparsers.add_parser(
        "import-legacy", help="Import rows that only carry is_active/published_at"
    )
    import_parser.add_argument("collection", help="Collection name")
    import_parser.add_argument("file", help="Path to a JSON list of legacy records")

    args = parser.parse_args()
    settings = Settings()

    try:
        if args.command == "migrate":
            handle_migrate(settings, args)
        elif args.command == "list":
            handle_list(settings, args)
        elif args.command == "heal":
            handle_heal(settings, args)
        elif args.command == "import-legacy":
            handle_import_legacy(settings, args)
    except ContentEngineError as e:
        logger.error(f"{e.code}: {e.message}")
        sys.exit(1)


if __name__ == "__main__":
    main()
