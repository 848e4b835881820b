import logging
import os
import sqlite3
from contextlib import closing

logger = logging.getLogger(__name__)

UP_MARKER = "-- Up"
DOWN_MARKER = "-- Down"


def split_sections(script: str) -> tuple[str, str]:
    """Split a migration file into its Up and Down SQL."""
    up, _, down = script.partition(DOWN_MARKER)
    return up.replace(UP_MARKER, "", 1).strip(), down.strip()


class SQLiteMigrator:
    """
    Applies numbered *.sql files from migrations_dir in name order.

    Applied files are recorded in _migrations. A file's optional Down
    section is used by rollback_last().
    """

    def __init__(self, db_path: str, migrations_dir: str):
        self.db_path = db_path
        self.migrations_dir = migrations_dir

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS _migrations (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                filename TEXT UNIQUE NOT NULL,
                applied_at DATETIME DEFAULT CURRENT_TIMESTAMP
            )
            """
        )
        return conn

    def _files(self) -> list[str]:
        return sorted(name for name in os.listdir(self.migrations_dir) if name.endswith(".sql"))

    def _sections(self, filename: str) -> tuple[str, str]:
        with open(os.path.join(self.migrations_dir, filename)) as f:
            return split_sections(f.read())

    def applied(self) -> list[str]:
        """Applied migration filenames, oldest first."""
        with closing(self._connect()) as conn:
            rows = conn.execute("SELECT filename FROM _migrations ORDER BY id").fetchall()
        return [row[0] for row in rows]

    def pending(self) -> list[str]:
        """Migration files not yet applied, in order."""
        done = set(self.applied())
        return [name for name in self._files() if name not in done]

    def run_migrations(self) -> list[str]:
        """Apply all pending migrations. Returns the filenames applied."""
        applied_now: list[str] = []
        with closing(self._connect()) as conn:
            for filename in self.pending():
                logger.info("Applying migration: %s", filename)
                up, _ = self._sections(filename)
                self._execute(conn, filename, up, "INSERT INTO _migrations (filename) VALUES (?)")
                applied_now.append(filename)

        logger.info("Migrations up to date (%d new).", len(applied_now))
        return applied_now

    def rollback_last(self) -> str | None:
        """Run the Down section of the newest applied migration."""
        history = self.applied()
        if not history:
            return None
        filename = history[-1]
        _, down = self._sections(filename)
        if not down:
            raise RuntimeError(f"Migration {filename} has no {DOWN_MARKER} section")

        logger.warning("Rolling back migration: %s", filename)
        with closing(self._connect()) as conn:
            self._execute(conn, filename, down, "DELETE FROM _migrations WHERE filename = ?")
        return filename

    def _execute(
        self, conn: sqlite3.Connection, filename: str, script: str, bookkeeping: str
    ) -> None:
        try:
            conn.executescript(script)
            conn.execute(bookkeeping, (filename,))
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise RuntimeError(f"Migration {filename} failed: {e}") from e
