"""SQLite-backed position store."""

import json
import sqlite3
import time
from typing import Optional

from doc_locator.core import ReadingPosition
from doc_locator.io.position_store import PositionStore


class SqlitePositionStore(PositionStore):
    """Persists one snapshot per book as a JSON record.

    Operations fail fast: database errors surface as RuntimeError.
    A corrupt stored record is reported the same way instead of being
    silently ignored.
    """

    def __init__(self, connection: sqlite3.Connection) -> None:
        """Initialize store with database connection.

        Args:
            connection: SQLite connection with schema created.

        Raises:
            RuntimeError: If connection is None.
        """
        if connection is None:
            raise RuntimeError("Database connection required")
        self.connection = connection
        self.connection.row_factory = sqlite3.Row

    def save(self, book_id: str, position: ReadingPosition) -> None:
        snapshot = json.dumps(position.to_record())
        try:
            cur = self.connection.cursor()
            cur.execute(
                """
                INSERT INTO reading_positions (book_id, chapter_id, snapshot, updated_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(book_id) DO UPDATE SET
                    chapter_id = excluded.chapter_id,
                    snapshot = excluded.snapshot,
                    updated_at = excluded.updated_at
                """,
                (book_id, position.chapter_id, snapshot, int(time.time())),
            )
            self.connection.commit()
        except sqlite3.Error as e:
            raise RuntimeError(f"Failed to save reading position: {e}") from e

    def load(self, book_id: str) -> Optional[ReadingPosition]:
        try:
            cur = self.connection.cursor()
            cur.execute(
                "SELECT snapshot FROM reading_positions WHERE book_id = ?",
                (book_id,),
            )
            row = cur.fetchone()
        except sqlite3.Error as e:
            raise RuntimeError(f"Failed to load reading position: {e}") from e

        if row is None:
            return None
        try:
            return ReadingPosition.from_record(json.loads(row["snapshot"]))
        except (ValueError, KeyError, TypeError) as e:
            raise RuntimeError(
                f"Corrupt reading position for book {book_id}: {e}"
            ) from e

    def clear(self, book_id: str) -> None:
        try:
            cur = self.connection.cursor()
            cur.execute("DELETE FROM reading_positions WHERE book_id = ?", (book_id,))
            self.connection.commit()
        except sqlite3.Error as e:
            raise RuntimeError(f"Failed to clear reading position: {e}") from e

    def list_books(self) -> list[str]:
        try:
            cur = self.connection.cursor()
            cur.execute("SELECT book_id FROM reading_positions ORDER BY updated_at DESC")
            return [row["book_id"] for row in cur.fetchall()]
        except sqlite3.Error as e:
            raise RuntimeError(f"Failed to list reading positions: {e}") from e
