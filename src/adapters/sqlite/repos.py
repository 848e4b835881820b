import json
import logging
import sqlite3
from collections.abc import Sequence
from datetime import datetime
from typing import Any
from uuid import UUID

from src.domain.entities import ContentItem
from src.domain.errors import ConcurrencyConflictError, SlugConflictError

logger = logging.getLogger(__name__)


# Helper to convert sqlite rows to dicts
def dict_factory(cursor: sqlite3.Cursor, row: Any) -> dict[str, Any]:
    d = {}
    for idx, col in enumerate(cursor.description):
        d[col[0]] = row[idx]
    return d


def parse_dt(s: str | None) -> datetime | None:
    return datetime.fromisoformat(s) if s else None


def _fmt_dt(dt: datetime | None) -> str | None:
    return dt.isoformat() if dt else None


def _row_to_item(row: dict[str, Any]) -> ContentItem:
    return ContentItem(
        id=UUID(row["id"]),
        collection=row["collection"],
        group_id=UUID(row["group_id"]) if row["group_id"] else None,
        title=row["title"],
        body=row["body"] or "",
        slug=row["slug"],
        slug_is_manual=bool(row["slug_is_manual"]),
        display_order=row["display_order"],
        is_active=bool(row["is_active"]),
        published_at=parse_dt(row["published_at"]),
        archived_at=parse_dt(row["archived_at"]),
        metadata=json.loads(row["metadata_json"] or "{}"),
        version=row["version"],
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )


class SQLiteContentRepo:
    """
    Content repository on SQLite.

    Writes go through commit_group, which holds the database write lock
    (BEGIN IMMEDIATE) for the whole batch and checks every row's version.
    """

    def __init__(self, db_path: str, busy_timeout: float = 5.0):
        self.db_path = db_path
        self.busy_timeout = busy_timeout

    def _get_conn(self) -> sqlite3.Connection:
        # Autocommit mode; transactions are opened explicitly
        conn = sqlite3.connect(self.db_path, timeout=self.busy_timeout, isolation_level=None)
        conn.row_factory = dict_factory
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn

    # --- Reads ---

    def _select(self, where: str, params: Sequence[Any]) -> list[ContentItem]:
        conn = self._get_conn()
        try:
            rows = conn.execute(f"SELECT * FROM content_items WHERE {where}", params).fetchall()
            return [_row_to_item(row) for row in rows]
        finally:
            conn.close()

    def get_by_id(self, item_id: UUID) -> ContentItem | None:
        items = self._select("id = ?", (str(item_id),))
        return items[0] if items else None

    def get_by_slug(self, collection: str, slug: str) -> ContentItem | None:
        items = self._select("collection = ? AND slug = ?", (collection, slug))
        return items[0] if items else None

    def list_group(self, collection: str, group_id: UUID | None) -> list[ContentItem]:
        return self._select(
            "collection = ? AND group_id IS ? ORDER BY display_order, created_at",
            (collection, str(group_id) if group_id else None),
        )

    def list_collection(self, collection: str) -> list[ContentItem]:
        return self._select("collection = ? ORDER BY created_at", (collection,))

    def list_slugs(self, collection: str) -> set[str]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                "SELECT slug FROM content_items WHERE collection = ?", (collection,)
            ).fetchall()
            return {row["slug"] for row in rows}
        finally:
            conn.close()

    def list_groups(self, collection: str) -> list[UUID | None]:
        """Distinct group ids used in a collection."""
        conn = self._get_conn()
        try:
            rows = conn.execute(
                "SELECT DISTINCT group_id FROM content_items WHERE collection = ?",
                (collection,),
            ).fetchall()
            return [UUID(row["group_id"]) if row["group_id"] else None for row in rows]
        finally:
            conn.close()

    # --- Writes ---

    def commit_group(
        self,
        upserts: Sequence[ContentItem],
        deletes: Sequence[ContentItem] = (),
    ) -> list[ContentItem]:
        conn = self._get_conn()
        try:
            try:
                conn.execute("BEGIN IMMEDIATE")
            except sqlite3.OperationalError as e:
                if "locked" in str(e) or "busy" in str(e):
                    raise ConcurrencyConflictError() from e
                raise

            for item in deletes:
                cur = conn.execute(
                    "DELETE FROM content_items WHERE id = ? AND version = ?",
                    (str(item.id), item.version),
                )
                if cur.rowcount != 1:
                    raise ConcurrencyConflictError(item.id)

            saved = []
            for item in upserts:
                new = item.model_copy(update={"version": item.version + 1})
                try:
                    if item.version == 0:
                        self._insert(conn, new)
                    else:
                        self._update(conn, new, expected_version=item.version)
                except sqlite3.IntegrityError as e:
                    raise self._integrity_error(e, item) from e
                saved.append(new)

            self._check_orders(conn, saved)
            self._check_contiguous(conn, [*deletes, *(i for i in upserts if i.version == 0)])
            conn.execute("COMMIT")
            return saved
        except Exception:
            if conn.in_transaction:
                conn.execute("ROLLBACK")
            raise
        finally:
            conn.close()

    def _insert(self, conn: sqlite3.Connection, item: ContentItem) -> None:
        conn.execute(
            """
            INSERT INTO content_items (
                id, collection, group_id, title, body, slug, slug_is_manual,
                display_order, is_active, published_at, archived_at,
                metadata_json, version, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                str(item.id),
                item.collection,
                str(item.group_id) if item.group_id else None,
                item.title,
                item.body,
                item.slug,
                int(item.slug_is_manual),
                item.display_order,
                int(item.is_active),
                _fmt_dt(item.published_at),
                _fmt_dt(item.archived_at),
                json.dumps(item.metadata),
                item.version,
                _fmt_dt(item.created_at),
                _fmt_dt(item.updated_at),
            ),
        )

    def _update(self, conn: sqlite3.Connection, item: ContentItem, expected_version: int) -> None:
        cur = conn.execute(
            """
            UPDATE content_items SET
                group_id = ?,
                title = ?,
                body = ?,
                slug = ?,
                slug_is_manual = ?,
                display_order = ?,
                is_active = ?,
                published_at = ?,
                archived_at = ?,
                metadata_json = ?,
                version = ?,
                updated_at = ?
            WHERE id = ? AND version = ?
            """,
            (
                str(item.group_id) if item.group_id else None,
                item.title,
                item.body,
                item.slug,
                int(item.slug_is_manual),
                item.display_order,
                int(item.is_active),
                _fmt_dt(item.published_at),
                _fmt_dt(item.archived_at),
                json.dumps(item.metadata),
                item.version,
                _fmt_dt(item.updated_at),
                str(item.id),
                expected_version,
            ),
        )
        if cur.rowcount != 1:
            raise ConcurrencyConflictError(item.id)

    def _check_orders(self, conn: sqlite3.Connection, written: Sequence[ContentItem]) -> None:
        """Reject the batch if a written row now shares its display_order."""
        for item in written:
            row = conn.execute(
                """
                SELECT COUNT(*) AS cnt FROM content_items
                WHERE collection = ? AND group_id IS ? AND display_order = ?
                """,
                (
                    item.collection,
                    str(item.group_id) if item.group_id else None,
                    item.display_order,
                ),
            ).fetchone()
            if row["cnt"] > 1:
                logger.warning(
                    "Order collision at %s/%s[%d]",
                    item.collection,
                    item.group_id,
                    item.display_order,
                )
                raise ConcurrencyConflictError(item.id)

    def _check_contiguous(self, conn: sqlite3.Connection, changed: Sequence[ContentItem]) -> None:
        """Groups that gained or lost rows must still be numbered 0..n-1."""
        for collection, group_id in {i.group_key for i in changed}:
            row = conn.execute(
                """
                SELECT COUNT(*) AS cnt,
                       COUNT(DISTINCT display_order) AS distinct_orders,
                       MIN(display_order) AS low,
                       MAX(display_order) AS high
                FROM content_items
                WHERE collection = ? AND group_id IS ?
                """,
                (collection, str(group_id) if group_id else None),
            ).fetchone()
            n = row["cnt"]
            if n and (row["distinct_orders"], row["low"], row["high"]) != (n, 0, n - 1):
                logger.warning("Order gap in %s/%s after batch", collection, group_id)
                raise ConcurrencyConflictError(f"{collection}/{group_id}")

    def _integrity_error(self, exc: sqlite3.IntegrityError, item: ContentItem) -> Exception:
        if "slug" in str(exc):
            return SlugConflictError(item.slug, item.collection)
        return ConcurrencyConflictError(item.id)
