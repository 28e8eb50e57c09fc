"""Position Store abstraction - plugin interface for saved reading positions."""

from abc import ABC, abstractmethod
from typing import Optional

from doc_locator.core import ReadingPosition


class PositionStore(ABC):
    """
    Abstract interface for persisting reading position snapshots.

    Implementations (InMemoryPositionStore, SqlitePositionStore) own the storage
    medium. The tracker only decides when and what to persist.
    """

    @abstractmethod
    def save(self, book_id: str, position: ReadingPosition) -> None:
        """
        Store the latest snapshot for a book, replacing any previous one.

        Args:
            book_id: Identifier of the book the position belongs to.
            position: Snapshot to persist.
        """
        pass

    @abstractmethod
    def load(self, book_id: str) -> Optional[ReadingPosition]:
        """
        Retrieve the saved snapshot for a book.

        Returns:
            ReadingPosition if one was saved, else None.
        """
        pass

    @abstractmethod
    def clear(self, book_id: str) -> None:
        """Remove the saved snapshot for a book."""
        pass

    @abstractmethod
    def list_books(self) -> list[str]:
        """
        List book ids that have a saved snapshot.

        Useful for diagnostics and testing.
        """
        pass
