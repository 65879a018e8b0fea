import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import Any
from urllib.parse import quote

from blockdoc.adapters.clock import SystemClock
from blockdoc.adapters.sqlite.migrator import SQLiteMigrator
from blockdoc.components.editor.ports import ClockPort


def dict_factory(cursor: sqlite3.Cursor, row: Any) -> dict[str, Any]:
    return {col[0]: value for col, value in zip(cursor.description, row)}


def draft_prefix(user_id: str) -> str:
    """Key prefix shared by every draft of one user."""
    return f"draft/{quote(user_id, safe='')}/"


def draft_key(user_id: str, section_id: str) -> str:
    """
    Store key for one user's draft of one section.

    Both ids are percent-encoded, so neither can contain the `/` separator
    and distinct pairs never share a key.
    """
    return draft_prefix(user_id) + quote(section_id, safe="")


class SQLiteDraftStore:
    """DocumentStorePort over a `drafts` table. One connection per call."""

    def __init__(self, db_path: str, clock: ClockPort | None = None):
        self.db_path = db_path
        self.clock = clock or SystemClock()

    @contextmanager
    def _conn(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = dict_factory
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def ensure_schema(self) -> None:
        SQLiteMigrator(self.db_path).run_migrations()

    def _field(self, key: str, column: str) -> Any:
        with self._conn() as conn:
            row = conn.execute(f"SELECT {column} FROM drafts WHERE key = ?", (key,)).fetchone()
        return row[column] if row else None

    def load(self, key: str) -> str | None:
        return self._field(key, "content")

    def updated_at(self, key: str) -> datetime | None:
        stamp = self._field(key, "updated_at")
        return datetime.fromisoformat(stamp) if stamp else None

    def save(self, key: str, text: str) -> None:
        with self._conn() as conn:
            conn.execute(
                """
                INSERT INTO drafts (key, content, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    content = excluded.content,
                    updated_at = excluded.updated_at
                """,
                (key, text, self.clock.now_utc().isoformat()),
            )

    def delete(self, key: str) -> None:
        with self._conn() as conn:
            conn.execute("DELETE FROM drafts WHERE key = ?", (key,))

    def keys(self, prefix: str = "") -> list[str]:
        """Stored keys starting with prefix, in key order."""
        pattern = prefix.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_") + "%"
        with self._conn() as conn:
            rows = conn.execute(
                "SELECT key FROM drafts WHERE key LIKE ? ESCAPE '\\' ORDER BY key", (pattern,)
            ).fetchall()
        return [row["key"] for row in rows]
