"""Location value objects - the canonical address of a point or range in a chapter."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Sequence, Tuple


class SegmentKind(str, Enum):
    """Kind of step taken when descending a chapter tree."""

    ELEMENT = "element"
    TEXT = "text"
    OFFSET = "offset"


@dataclass(frozen=True)
class PathSegment:
    """One step of a Location path.

    Attributes:
        kind: Which sibling list the index counts (element children or text children).
            Offset segments are trailing modifiers and are skipped during descent.
        index: 0-based ordinal among siblings of the same kind.
        tag_name: Debug metadata, never used for resolution.
        element_id: Debug metadata, never used for resolution.
        element_class: Debug metadata, never used for resolution.
    """

    kind: SegmentKind
    index: int
    tag_name: Optional[str] = field(default=None, compare=False)
    element_id: Optional[str] = field(default=None, compare=False)
    element_class: Optional[str] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if self.index < 0:
            raise ValueError(f"Path segment index must be >= 0, got {self.index}")

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.kind.value, "index": self.index}
        if self.tag_name is not None:
            data["tagName"] = self.tag_name
        if self.element_id is not None:
            data["elementId"] = self.element_id
        if self.element_class is not None:
            data["elementClass"] = self.element_class
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> PathSegment:
        return cls(
            kind=SegmentKind(data["type"]),
            index=int(data["index"]),
            tag_name=data.get("tagName"),
            element_id=data.get("elementId"),
            element_class=data.get("elementClass"),
        )


@dataclass(frozen=True)
class Location:
    """Address of a node (and optionally a character offset) inside one chapter.

    Two Locations are equal when they address the same place: chapter id, path kinds
    and indices, and text offset. Debug metadata and the content hash do not take
    part in equality.
    """

    chapter_id: str
    path: Tuple[PathSegment, ...] = ()
    text_offset: Optional[int] = None
    content_hash: Optional[str] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        # Accept any sequence but store a tuple so the value stays hashable.
        if not isinstance(self.path, tuple):
            object.__setattr__(self, "path", tuple(self.path))
        if self.text_offset is not None and self.text_offset < 0:
            raise ValueError(f"Text offset must be >= 0, got {self.text_offset}")

    @property
    def is_resolvable(self) -> bool:
        """True when the path has at least one descending step."""
        return any(segment.kind != SegmentKind.OFFSET for segment in self.path)

    @property
    def targets_text(self) -> bool:
        """True when the last segment addresses a text node."""
        return bool(self.path) and self.path[-1].kind == SegmentKind.TEXT

    def with_content_hash(self, content_hash: Optional[str]) -> Location:
        return Location(
            chapter_id=self.chapter_id,
            path=self.path,
            text_offset=self.text_offset,
            content_hash=content_hash,
        )

    def to_dict(self) -> Dict[str, Any]:
        """JSON object form, used by persisted snapshots and bookmarks."""
        data: Dict[str, Any] = {
            "chapterId": self.chapter_id,
            "path": [segment.to_dict() for segment in self.path],
        }
        if self.text_offset is not None:
            data["textOffset"] = self.text_offset
        if self.content_hash is not None:
            data["hash"] = self.content_hash
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Location:
        text_offset = data.get("textOffset")
        return cls(
            chapter_id=data["chapterId"],
            path=tuple(PathSegment.from_dict(item) for item in data.get("path", [])),
            text_offset=int(text_offset) if text_offset is not None else None,
            content_hash=data.get("hash"),
        )


@dataclass(frozen=True)
class RangeLocation:
    """A selection expressed as two Locations plus derived text information.

    ``start`` must precede or equal ``end`` in document order. This is not checked;
    callers pass an already ordered range.
    """

    start: Location
    end: Location
    chapter_id: str
    selected_text: str = ""
    context_before: str = ""
    context_after: str = ""
    word_count: int = 0
    char_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "startCFI": self.start.to_dict(),
            "endCFI": self.end.to_dict(),
            "chapterId": self.chapter_id,
            "selectedText": self.selected_text,
            "contextBefore": self.context_before,
            "contextAfter": self.context_after,
            "wordCount": self.word_count,
            "charCount": self.char_count,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> RangeLocation:
        return cls(
            start=Location.from_dict(data["startCFI"]),
            end=Location.from_dict(data["endCFI"]),
            chapter_id=data["chapterId"],
            selected_text=data.get("selectedText", ""),
            context_before=data.get("contextBefore", ""),
            context_after=data.get("contextAfter", ""),
            word_count=data.get("wordCount", 0),
            char_count=data.get("charCount", 0),
        )


def element_path(indices: Sequence[int]) -> Tuple[PathSegment, ...]:
    """Build a path of element steps from plain indices."""
    return tuple(PathSegment(SegmentKind.ELEMENT, index) for index in indices)
