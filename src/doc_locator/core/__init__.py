"""Domain layer - Pure value objects and collaborator interfaces for location addressing."""

from .bookmark import Bookmark
from .exceptions import (
    DriftWarning,
    InvalidRangeError,
    LocatorError,
    NodeOutsideChapterError,
    NoTargetError,
    ParseError,
)
from .location import Location, PathSegment, RangeLocation, SegmentKind, element_path
from .memory_tree import ElementNode, MemoryDocumentTree, TextNode, element
from .reading_position import ChangeType, PositionChangeEvent, PositionDelta, ReadingPosition
from .tracker_config import TrackerConfig
from .tree import DocumentTree, Node, NodeKind, TextRange
from .viewport import Align, GeometryProvider, Rect, ScrollController, ViewportMetrics

__all__ = [
    "Align",
    "Bookmark",
    "ChangeType",
    "DocumentTree",
    "DriftWarning",
    "ElementNode",
    "GeometryProvider",
    "InvalidRangeError",
    "Location",
    "LocatorError",
    "MemoryDocumentTree",
    "Node",
    "NodeKind",
    "NodeOutsideChapterError",
    "NoTargetError",
    "ParseError",
    "PathSegment",
    "PositionChangeEvent",
    "PositionDelta",
    "RangeLocation",
    "ReadingPosition",
    "Rect",
    "ScrollController",
    "SegmentKind",
    "TextNode",
    "TextRange",
    "TrackerConfig",
    "ViewportMetrics",
    "element",
    "element_path",
]
