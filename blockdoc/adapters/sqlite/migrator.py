import logging
import sqlite3
from contextlib import closing
from pathlib import Path

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).parent / "migrations"

LEDGER_DDL = """
CREATE TABLE IF NOT EXISTS _migrations (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    filename TEXT UNIQUE NOT NULL,
    applied_at DATETIME DEFAULT CURRENT_TIMESTAMP
);
"""


def up_script(path: Path) -> str:
    """The part of a migration file before its `-- Down` marker."""
    text = path.read_text(encoding="utf-8")
    up, _, _ = text.partition("-- Down")
    return up


class SQLiteMigrator:
    """Applies numbered `.sql` files in name order, once each."""

    def __init__(self, db_path: str, migrations_dir: Path = MIGRATIONS_DIR):
        self.db_path = db_path
        self.migrations_dir = migrations_dir

    def pending(self, conn: sqlite3.Connection) -> list[Path]:
        conn.execute(LEDGER_DDL)
        done = {name for (name,) in conn.execute("SELECT filename FROM _migrations")}
        return [p for p in sorted(self.migrations_dir.glob("*.sql")) if p.name not in done]

    def run_migrations(self) -> list[str]:
        """Apply all pending migrations; returns the filenames applied."""
        applied: list[str] = []
        with closing(sqlite3.connect(self.db_path)) as conn:
            for path in self.pending(conn):
                logger.info("Applying migration %s to %s", path.name, self.db_path)
                try:
                    conn.executescript(up_script(path))
                    conn.execute("INSERT INTO _migrations (filename) VALUES (?)", (path.name,))
                    conn.commit()
                except sqlite3.Error as e:
                    conn.rollback()
                    raise RuntimeError(f"Migration {path.name} failed: {e}") from e
                applied.append(path.name)
        return applied
