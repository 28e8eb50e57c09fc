"""Reading position snapshots and the change events emitted while tracking."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from .location import Location


class ChangeType(str, Enum):
    SCROLL = "scroll"
    SELECTION = "selection"
    CHAPTER = "chapter"
    PAGE = "page"


@dataclass(frozen=True)
class ReadingPosition:
    """Where the reader is at a given moment.

    Attributes:
        location: Address of the node the reader is looking at.
        chapter_id: Chapter the location belongs to.
        chapter_progress: Fraction [0, 1] of the chapter scrolled past.
        book_progress: Fraction [0, 1] of the whole book.
        timestamp: Unix time in milliseconds when the snapshot was taken.
        viewport_offset: Scroll offset of the container in pixels.
        page_number: 0-indexed page estimate.
        total_pages: Page count estimate for the chapter.
    """

    location: Location
    chapter_id: str
    chapter_progress: float
    book_progress: float
    timestamp: int
    viewport_offset: Optional[float] = None
    page_number: Optional[int] = None
    total_pages: Optional[int] = None

    def to_record(self) -> Dict[str, Any]:
        """Persisted snapshot record (JSON-compatible)."""
        record: Dict[str, Any] = {
            "cfi": self.location.to_dict(),
            "chapterId": self.chapter_id,
            "chapterProgress": self.chapter_progress,
            "bookProgress": self.book_progress,
            "timestamp": self.timestamp,
        }
        if self.viewport_offset is not None:
            record["viewportOffset"] = self.viewport_offset
        if self.page_number is not None:
            record["pageNumber"] = self.page_number
        if self.total_pages is not None:
            record["totalPages"] = self.total_pages
        return record

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> ReadingPosition:
        return cls(
            location=Location.from_dict(record["cfi"]),
            chapter_id=record["chapterId"],
            chapter_progress=float(record.get("chapterProgress", 0.0)),
            book_progress=float(record.get("bookProgress", 0.0)),
            timestamp=int(record.get("timestamp", 0)),
            viewport_offset=record.get("viewportOffset"),
            page_number=record.get("pageNumber"),
            total_pages=record.get("totalPages"),
        )


@dataclass(frozen=True)
class PositionDelta:
    scroll: Optional[float] = None
    progress: Optional[float] = None


@dataclass(frozen=True)
class PositionChangeEvent:
    """Emitted to subscribers whenever the tracked position changes. Never persisted."""

    current: ReadingPosition
    change_type: ChangeType
    previous: Optional[ReadingPosition] = None
    delta: Optional[PositionDelta] = None
