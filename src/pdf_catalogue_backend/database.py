"""
SQLite database for the PDF catalogue.

This module provides the persistence layer for catalogue entries. The store
owns identity and publication time: ids come from the table's autoincrement
key and ``published_at`` is stamped at insertion.
"""

import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from .models import LINK_FIELDS
from .utils import ensure_directory

logger = logging.getLogger(__name__)

# Default database path
DEFAULT_DB_PATH = Path("data/catalogue.db")

INSERT_COLUMNS = ("title", "category", *LINK_FIELDS, "image_url", "published_at")


def _serialize_datetime(dt: datetime) -> str:
    """Serialize datetime to a fixed-width ISO string so text order is time order."""
    return dt.isoformat(timespec="microseconds")


def _deserialize_datetime(s: str) -> Optional[datetime]:
    """Deserialize ISO format string to datetime."""
    if not s:
        return None
    return datetime.fromisoformat(s)


class PdfDatabase:
    """
    SQLite database for catalogue entries.

    Each operation opens its own connection, so one instance can be shared
    by concurrent requests.
    """

    def __init__(self, db_path: Path = DEFAULT_DB_PATH):
        self.db_path = Path(db_path)
        ensure_directory(self.db_path.parent)
        self._init_db()

    @contextmanager
    def _get_connection(self):
        """Get a database connection with proper settings."""
        conn = sqlite3.connect(str(self.db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL")
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_db(self) -> None:
        """Initialize database schema."""
        with self._get_connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS pdfs (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    title TEXT NOT NULL,
                    category TEXT NOT NULL,
                    drive_link TEXT,
                    maketou_link TEXT,
                    youtube_link TEXT,
                    tiktok_link TEXT,
                    facebook_link TEXT,
                    image_url TEXT NOT NULL,
                    published_at TEXT NOT NULL
                )
            """)

            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_pdfs_published_at
                ON pdfs(published_at DESC)
            """)

    def list_entries(self) -> List[Dict[str, Any]]:
        """
        List every entry, newest first.

        Entries published in the same instant are ordered by id, so later
        inserts still come first.

        Returns:
            List of entry dictionaries
        """
        with self._get_connection() as conn:
            rows = conn.execute(
                "SELECT * FROM pdfs ORDER BY published_at DESC, id DESC"
            ).fetchall()

            return [self._row_to_dict(row) for row in rows]

    def create_entry(self, fields: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Insert a new entry and return the stored row.

        Args:
            fields: Caller-supplied columns (title, category, image_url and
                optional links). Missing links are stored as NULL; any id or
                published_at in the mapping is ignored.

        Returns:
            The created entry including its assigned id and published_at

        Raises:
            sqlite3.Error: On constraint violations or other store failures
        """
        values = [
            fields.get("title"),
            fields.get("category"),
            *(fields.get(name) or None for name in LINK_FIELDS),
            fields.get("image_url"),
            _serialize_datetime(datetime.now(timezone.utc)),
        ]
        placeholders = ", ".join("?" for _ in INSERT_COLUMNS)

        with self._get_connection() as conn:
            cursor = conn.execute(
                f"INSERT INTO pdfs ({', '.join(INSERT_COLUMNS)}) VALUES ({placeholders})",
                values,
            )
            row = conn.execute(
                "SELECT * FROM pdfs WHERE id = ?", (cursor.lastrowid,)
            ).fetchone()

        entry = self._row_to_dict(row)
        logger.info(f"Created catalogue entry {entry['id']}: {entry['title']!r}")
        return entry

    def delete_entry(self, entry_id: int) -> bool:
        """
        Delete an entry.

        Args:
            entry_id: The entry id

        Returns:
            True if a row was deleted, False if none matched
        """
        with self._get_connection() as conn:
            cursor = conn.execute("DELETE FROM pdfs WHERE id = ?", (entry_id,))
            deleted = cursor.rowcount > 0

        if deleted:
            logger.info(f"Deleted catalogue entry {entry_id}")
        return deleted

    def _row_to_dict(self, row: sqlite3.Row) -> Dict[str, Any]:
        """Convert a database row to an entry dictionary."""
        entry = {key: row[key] for key in row.keys()}
        entry["published_at"] = _deserialize_datetime(row["published_at"])
        return entry
