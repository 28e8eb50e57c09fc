"""Domain entity for a saved bookmark."""

from dataclasses import dataclass, field
from typing import Optional, Tuple

from .location import Location


@dataclass(frozen=True)
class Bookmark:
    """A user bookmark pointing at a Location inside a book.

    Attributes:
        id: Unique identifier in the database.
        book_id: Identifier of the book the bookmark belongs to.
        location: Address of the bookmarked node.
        chapter_id: Chapter containing the bookmark.
        title: Display title (editable by the user).
        created: Unix timestamp when the bookmark was created.
        description: Optional free-form note.
        tags: User tags, in insertion order.
    """

    id: int
    book_id: str
    location: Location
    chapter_id: str
    title: str
    created: int
    description: Optional[str] = None
    tags: Tuple[str, ...] = field(default_factory=tuple)
