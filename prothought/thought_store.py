"""
Thought store using SQLite.

Owns two tables:
- ``thoughts``: one row per journal entry (id, timestamp, text)
- ``markers``: hashtags captured from each thought at creation time

A thought and its markers are written in a single transaction. Markers are
never rewritten, so amending a thought's text leaves its tags queryable.
"""

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from .errors import StorageError
from .markers import extract_hashtags
from .types import Thought, local_now

logger = logging.getLogger(__name__)


class ThoughtStore:
    """
    SQLite-backed store for thoughts and their markers.

    All queries are parameterized. Any ``sqlite3.Error``, or an ``OSError``
    reaching the database file, surfaces as ``StorageError`` with the
    original exception chained.
    """

    def __init__(self, store_path: Path):
        """
        Args:
            store_path: Path to SQLite database file
        """
        self._db_path = Path(store_path)
        self._conn: Optional[sqlite3.Connection] = None
        with self._storage_errors("open database"):
            self._init_db()

    @contextmanager
    def _storage_errors(self, action: str) -> Iterator[None]:
        try:
            yield
        except (sqlite3.Error, OSError) as e:
            raise StorageError(f"Could not {action} ({self._db_path}): {e}") from e

    def _init_db(self) -> None:
        """Initialize the SQLite database."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(self._db_path))
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA foreign_keys = ON")

        self._conn.execute("""
            CREATE TABLE IF NOT EXISTS thoughts (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                timestamp TEXT NOT NULL,
                text TEXT NOT NULL
            )
        """)

        self._conn.execute("""
            CREATE TABLE IF NOT EXISTS markers (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                thought_id INTEGER NOT NULL,
                marker TEXT NOT NULL,
                FOREIGN KEY (thought_id) REFERENCES thoughts(id) ON DELETE CASCADE
            )
        """)

        self._conn.execute("""
            CREATE INDEX IF NOT EXISTS idx_markers_thought_id
            ON markers(thought_id)
        """)

        self._conn.execute("""
            CREATE INDEX IF NOT EXISTS idx_markers_marker
            ON markers(marker)
        """)

        # Range queries and latest-thought lookup
        self._conn.execute("""
            CREATE INDEX IF NOT EXISTS idx_thoughts_timestamp
            ON thoughts(timestamp, id)
        """)

        self._conn.commit()

    def _now(self) -> str:
        """Current timestamp, local time."""
        return local_now()

    # -------------------------------------------------------------------------
    # Write Operations
    # -------------------------------------------------------------------------

    def append(self, text: str) -> Thought:
        """
        Save a new thought along with its hashtags.

        The thought row and every marker row are committed together or
        not at all.

        Args:
            text: Thought text as entered

        Returns:
            The stored Thought

        Raises:
            ValueError: If text is empty
            StorageError: If the write fails (nothing is persisted)
        """
        if not text or not text.strip():
            raise ValueError("Thought text must not be empty")

        ts = self._now()
        tags = extract_hashtags(text)

        with self._storage_errors("save thought"):
            with self._conn:
                cursor = self._conn.execute(
                    "INSERT INTO thoughts (timestamp, text) VALUES (?, ?)",
                    (ts, text),
                )
                thought_id = cursor.lastrowid
                self._conn.executemany(
                    "INSERT INTO markers (thought_id, marker) VALUES (?, ?)",
                    [(thought_id, tag) for tag in tags],
                )

        logger.debug("Appended thought %d at %s (%d markers)", thought_id, ts, len(tags))
        return Thought(id=thought_id, timestamp=ts, text=text, markers=tags)

    def amend(self, id: int, text: str) -> bool:
        """
        Overwrite the text of an existing thought.

        Markers are left untouched.

        Returns:
            True if the thought was found and updated, False otherwise
        """
        with self._storage_errors("update thought"):
            with self._conn:
                cursor = self._conn.execute(
                    "UPDATE thoughts SET text = ? WHERE id = ?",
                    (text, id),
                )
        return cursor.rowcount > 0

    # -------------------------------------------------------------------------
    # Read Operations
    # -------------------------------------------------------------------------

    def get(self, id: int) -> Optional[Thought]:
        """Get a thought by ID."""
        with self._storage_errors("read thought"):
            row = self._conn.execute("""
                SELECT id, timestamp, text
                FROM thoughts
                WHERE id = ?
            """, (id,)).fetchone()
            if row is None:
                return None
            return self._with_markers([row])[0]

    def latest(self) -> Optional[Thought]:
        """
        The most recent thought, or None if the store is empty.

        Thoughts saved within the same second are ordered by id.
        """
        with self._storage_errors("read latest thought"):
            row = self._conn.execute("""
                SELECT id, timestamp, text
                FROM thoughts
                ORDER BY timestamp DESC, id DESC
                LIMIT 1
            """).fetchone()
            if row is None:
                return None
            return self._with_markers([row])[0]

    def query_range(
        self,
        start: str,
        end: str,
        marker: Optional[str] = None,
    ) -> list[Thought]:
        """
        Thoughts with start <= timestamp <= end, oldest first.

        Args:
            start: Inclusive lower bound (YYYY-MM-DDTHH:MM:SS)
            end: Inclusive upper bound (YYYY-MM-DDTHH:MM:SS)
            marker: Lowercase tag; only thoughts carrying it are returned

        Returns:
            List of Thoughts, each at most once
        """
        with self._storage_errors("query thoughts"):
            if marker:
                cursor = self._conn.execute("""
                    SELECT t.id, t.timestamp, t.text
                    FROM thoughts t
                    WHERE t.timestamp BETWEEN ? AND ?
                      AND EXISTS (
                          SELECT 1 FROM markers m
                          WHERE m.thought_id = t.id AND m.marker = ?
                      )
                    ORDER BY t.timestamp ASC, t.id ASC
                """, (start, end, marker))
            else:
                cursor = self._conn.execute("""
                    SELECT id, timestamp, text
                    FROM thoughts
                    WHERE timestamp BETWEEN ? AND ?
                    ORDER BY timestamp ASC, id ASC
                """, (start, end))
            return self._with_markers(cursor.fetchall())

    def count(self) -> int:
        """Count all thoughts."""
        with self._storage_errors("count thoughts"):
            return self._conn.execute("SELECT COUNT(*) FROM thoughts").fetchone()[0]

    def _with_markers(self, rows: list) -> list[Thought]:
        """Build Thoughts from rows, loading their markers in one query."""
        if not rows:
            return []

        ids = [row["id"] for row in rows]
        placeholders = ",".join("?" * len(ids))
        cursor = self._conn.execute(f"""
            SELECT thought_id, marker
            FROM markers
            WHERE thought_id IN ({placeholders})
            ORDER BY id
        """, ids)

        markers: dict[int, list[str]] = {}
        for row in cursor:
            markers.setdefault(row["thought_id"], []).append(row["marker"])

        return [
            Thought(
                id=row["id"],
                timestamp=row["timestamp"],
                text=row["text"],
                markers=markers.get(row["id"], []),
            )
            for row in rows
        ]

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    @property
    def path(self) -> Path:
        return self._db_path

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def __del__(self):
        self.close()
