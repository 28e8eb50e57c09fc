"""In-memory position store for testing and session-level tracking."""

from typing import Optional

from doc_locator.core import ReadingPosition
from doc_locator.io.position_store import PositionStore


class InMemoryPositionStore(PositionStore):
    """
    Simple in-memory store implementation.

    Used for testing and for hosts that persist elsewhere. No persistence.
    """

    def __init__(self):
        self._store: dict[str, ReadingPosition] = {}

    def save(self, book_id: str, position: ReadingPosition) -> None:
        """Store or overwrite the snapshot for a book."""
        self._store[book_id] = position

    def load(self, book_id: str) -> Optional[ReadingPosition]:
        """Retrieve the snapshot if it exists."""
        return self._store.get(book_id)

    def clear(self, book_id: str) -> None:
        """Delete the snapshot for a book."""
        self._store.pop(book_id, None)

    def list_books(self) -> list[str]:
        """List book ids with a snapshot."""
        return list(self._store.keys())
