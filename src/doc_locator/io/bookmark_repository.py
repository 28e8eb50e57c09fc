"""Data access layer for bookmark persistence."""

import json
import sqlite3
import time
from typing import List, Optional, Sequence

from doc_locator.core import Bookmark, Location


class BookmarkRepository:
    """Manages persistence of bookmarks in the database.

    This repository follows the failing-fast philosophy: lookups of a missing
    bookmark and database failures raise RuntimeError rather than returning None.
    """

    def __init__(self, connection: sqlite3.Connection) -> None:
        """Initialize repository with database connection.

        Args:
            connection: SQLite connection with schema created.

        Raises:
            RuntimeError: If connection is None.
        """
        if connection is None:
            raise RuntimeError("Database connection required")
        self.connection = connection
        self.connection.row_factory = sqlite3.Row

    def add_bookmark(
        self,
        book_id: str,
        location: Location,
        title: str,
        description: Optional[str] = None,
        tags: Sequence[str] = (),
    ) -> Bookmark:
        """Store a new bookmark for a book.

        Args:
            book_id: Identifier of the book.
            location: Address of the bookmarked node.
            title: Display title.
            description: Optional note.
            tags: Optional user tags.

        Returns:
            Bookmark: The created bookmark with its database id.

        Raises:
            RuntimeError: If database write fails.
        """
        now = int(time.time())
        try:
            cur = self.connection.cursor()
            cur.execute(
                """
                INSERT INTO bookmarks (
                    book_id, chapter_id, location, title, description, tags, created
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    book_id,
                    location.chapter_id,
                    json.dumps(location.to_dict()),
                    title,
                    description,
                    json.dumps(list(tags)),
                    now,
                ),
            )
            self.connection.commit()
            bookmark_id = cur.lastrowid
        except sqlite3.Error as e:
            raise RuntimeError(f"Failed to add bookmark: {e}") from e

        return self.get_bookmark(bookmark_id)

    def get_bookmark(self, bookmark_id: int) -> Bookmark:
        """Retrieve a bookmark by id.

        Raises:
            RuntimeError: If the bookmark does not exist or the query fails.
        """
        try:
            cur = self.connection.cursor()
            cur.execute(
                """
                SELECT id, book_id, chapter_id, location, title, description, tags, created
                FROM bookmarks
                WHERE id = ?
                """,
                (bookmark_id,),
            )
            row = cur.fetchone()
        except sqlite3.Error as e:
            raise RuntimeError(f"Failed to retrieve bookmark: {e}") from e

        if row is None:
            raise RuntimeError(f"Bookmark not found: {bookmark_id}")
        return self._row_to_bookmark(row)

    def list_bookmarks(self, book_id: str) -> List[Bookmark]:
        """Bookmarks of a book, oldest first.

        Returns:
            List[Bookmark]: Empty if the book has no bookmarks.
        """
        try:
            cur = self.connection.cursor()
            cur.execute(
                """
                SELECT id, book_id, chapter_id, location, title, description, tags, created
                FROM bookmarks
                WHERE book_id = ?
                ORDER BY created ASC, id ASC
                """,
                (book_id,),
            )
            rows = cur.fetchall()
        except sqlite3.Error as e:
            raise RuntimeError(f"Failed to list bookmarks: {e}") from e
        return [self._row_to_bookmark(row) for row in rows]

    def update_title(self, bookmark_id: int, title: str) -> Bookmark:
        """Rename a bookmark.

        Raises:
            RuntimeError: If the bookmark does not exist or the write fails.
        """
        try:
            cur = self.connection.cursor()
            cur.execute(
                "UPDATE bookmarks SET title = ? WHERE id = ?",
                (title, bookmark_id),
            )
            self.connection.commit()
            updated = cur.rowcount
        except sqlite3.Error as e:
            raise RuntimeError(f"Failed to rename bookmark: {e}") from e

        if updated == 0:
            raise RuntimeError(f"Bookmark not found: {bookmark_id}")
        return self.get_bookmark(bookmark_id)

    def delete_bookmark(self, bookmark_id: int) -> None:
        """Remove a bookmark.

        Raises:
            RuntimeError: If the bookmark does not exist or the write fails.
        """
        try:
            cur = self.connection.cursor()
            cur.execute("DELETE FROM bookmarks WHERE id = ?", (bookmark_id,))
            self.connection.commit()
            deleted = cur.rowcount
        except sqlite3.Error as e:
            raise RuntimeError(f"Failed to delete bookmark: {e}") from e

        if deleted == 0:
            raise RuntimeError(f"Bookmark not found: {bookmark_id}")

    @staticmethod
    def _row_to_bookmark(row: sqlite3.Row) -> Bookmark:
        return Bookmark(
            id=row["id"],
            book_id=row["book_id"],
            location=Location.from_dict(json.loads(row["location"])),
            chapter_id=row["chapter_id"],
            title=row["title"],
            created=row["created"],
            description=row["description"],
            tags=tuple(json.loads(row["tags"])),
        )
