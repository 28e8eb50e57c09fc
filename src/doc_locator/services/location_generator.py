"""Location Generator - turns live tree positions into Locations."""

from dataclasses import dataclass
from typing import Iterator, List, Optional

from doc_locator.core import (
    DocumentTree,
    GeometryProvider,
    InvalidRangeError,
    Location,
    Node,
    NodeKind,
    NodeOutsideChapterError,
    NoTargetError,
    PathSegment,
    RangeLocation,
    SegmentKind,
    TextRange,
)
from doc_locator.services.content_fingerprint import DEFAULT_FINGERPRINT_LENGTH, compute_fingerprint


# Nodes a reading position may anchor to when there is no explicit cursor.
ADDRESSABLE_BLOCK_TAGS = frozenset(
    {
        "p", "div", "section", "article", "aside", "blockquote", "pre", "figure",
        "h1", "h2", "h3", "h4", "h5", "h6", "li", "dt", "dd", "tr", "table", "hr",
    }
)


@dataclass(frozen=True)
class GenerationOptions:
    """
    Knobs for Location generation.

    Attributes:
        include_element_id: Record element ids as debug metadata on path segments.
        include_class: Record class attributes as debug metadata on path segments.
        include_fingerprint: Attach a content hash of the target node's text.
        fingerprint_length: Number of leading characters the hash covers.
        context_length: Size of the context windows derived for a selection.
        scroll_tolerance: Pixels above/below a scroll offset a block top may lie.
    """

    include_element_id: bool = False
    include_class: bool = False
    include_fingerprint: bool = False
    fingerprint_length: int = DEFAULT_FINGERPRINT_LENGTH
    context_length: int = 50
    scroll_tolerance: float = 50.0


def iter_block_nodes(tree: DocumentTree, root: Node) -> Iterator[Node]:
    """Yield addressable block elements below ``root`` in document order."""
    for node in tree.iter_descendants(root):
        if tree.is_text(node):
            continue
        if tree.tag_name(node) in ADDRESSABLE_BLOCK_TAGS:
            yield node


def count_words(text: str) -> int:
    return len(text.split())


class LocationGenerator:
    """Builds Locations against one document tree.

    Each path step records the node's index among siblings of the same kind:
    element steps count element children only, text steps count text children
    only, so interleaved text never shifts element indices.
    """

    def __init__(
        self,
        tree: DocumentTree,
        geometry: Optional[GeometryProvider] = None,
        options: Optional[GenerationOptions] = None,
    ) -> None:
        if tree is None:
            raise ValueError("DocumentTree must not be None")
        self.tree = tree
        self.geometry = geometry
        self.options = options or GenerationOptions()

    def from_node(
        self,
        node: Node,
        chapter_id: str,
        include_fingerprint: Optional[bool] = None,
    ) -> Location:
        """
        Address ``node`` relative to the root of ``chapter_id``.

        The chapter root itself has an empty path, which does not resolve.

        Raises:
            NodeOutsideChapterError: If the chapter is not loaded or ``node`` is not below it.
        """
        path = self._build_path(node, chapter_id)
        location = Location(chapter_id=chapter_id, path=path)
        if self._fingerprint_enabled(include_fingerprint):
            location = location.with_content_hash(self._fingerprint(self.tree.text_of(node)))
        return location

    def from_text_position(
        self,
        text_node: Node,
        offset: int,
        chapter_id: str,
        include_fingerprint: Optional[bool] = None,
    ) -> Location:
        """
        Address a character offset inside a text node.

        The path is the parent element's path followed by a text step; the offset
        is stored as ``text_offset``.

        Raises:
            ValueError: If ``text_node`` is not a text node.
            NodeOutsideChapterError: If the text node is not inside the chapter.
        """
        if not self.tree.is_text(text_node):
            raise ValueError("Text position requires a text node")

        path = self._build_path(text_node, chapter_id)
        location = Location(chapter_id=chapter_id, path=path, text_offset=offset)
        if self._fingerprint_enabled(include_fingerprint):
            location = location.with_content_hash(self._fingerprint(self.tree.data(text_node)))
        return location

    def from_range(
        self,
        text_range: TextRange,
        chapter_id: str,
        include_fingerprint: Optional[bool] = None,
    ) -> RangeLocation:
        """
        Address a selection.

        Context windows are clipped at the endpoint's own text node; they never
        reach into neighbouring nodes.

        Raises:
            InvalidRangeError: If either endpoint is not inside a text node.
        """
        if not (self.tree.is_text(text_range.start_node) and self.tree.is_text(text_range.end_node)):
            raise InvalidRangeError("Range must start and end in text nodes")

        start = self.from_text_position(
            text_range.start_node, text_range.start_offset, chapter_id, include_fingerprint
        )
        end = self.from_text_position(
            text_range.end_node, text_range.end_offset, chapter_id, include_fingerprint
        )

        selected_text = self.selected_text(text_range, chapter_id)
        context_length = self.options.context_length
        start_data = self.tree.data(text_range.start_node)
        end_data = self.tree.data(text_range.end_node)

        return RangeLocation(
            start=start,
            end=end,
            chapter_id=chapter_id,
            selected_text=selected_text,
            context_before=start_data[max(0, text_range.start_offset - context_length):text_range.start_offset],
            context_after=end_data[text_range.end_offset:text_range.end_offset + context_length],
            word_count=count_words(selected_text),
            char_count=len(selected_text),
        )

    def from_scroll_offset(
        self,
        scroll_top: float,
        chapter_id: str,
        geometry: Optional[GeometryProvider] = None,
    ) -> Location:
        """
        Address the first block node whose top lies within the scroll tolerance.

        Raises:
            ValueError: If no geometry provider is available.
            NoTargetError: If no block node starts near ``scroll_top``.
        """
        geometry = geometry or self.geometry
        if geometry is None:
            raise ValueError("GeometryProvider is required to locate a scroll offset")

        root = self.tree.chapter_root(chapter_id)
        if root is None:
            raise NoTargetError(f"Chapter '{chapter_id}' is not loaded")

        tolerance = self.options.scroll_tolerance
        for node in iter_block_nodes(self.tree, root):
            rect = geometry.rect_of(node)
            if rect is None:
                continue
            if scroll_top - tolerance <= rect.top <= scroll_top + tolerance:
                return self.from_node(node, chapter_id)

        raise NoTargetError(f"No element found at scroll position {scroll_top}")

    def selected_text(self, text_range: TextRange, chapter_id: str) -> str:
        """Concatenated text between the range endpoints, in document order."""
        start_node, end_node = text_range.start_node, text_range.end_node
        if start_node == end_node:
            return self.tree.data(start_node)[text_range.start_offset:text_range.end_offset]

        root = self.tree.chapter_root(chapter_id)
        if root is None:
            return ""

        parts: List[str] = []
        inside = False
        for text_node in self.tree.iter_text_nodes(root):
            data = self.tree.data(text_node)
            if text_node == start_node:
                parts.append(data[text_range.start_offset:])
                inside = True
            elif text_node == end_node:
                if inside:
                    parts.append(data[:text_range.end_offset])
                break
            elif inside:
                parts.append(data)
        return "".join(parts)

    def _build_path(self, node: Node, chapter_id: str) -> tuple:
        root = self.tree.chapter_root(chapter_id)
        if root is None:
            raise NodeOutsideChapterError(f"Chapter '{chapter_id}' is not loaded")

        segments: List[PathSegment] = []
        current = node
        while current != root:
            parent = self.tree.parent(current)
            if parent is None:
                raise NodeOutsideChapterError(f"Node is not inside chapter '{chapter_id}'")
            kind = self.tree.kind_of(current)
            siblings = self.tree.children(parent, kind)
            index = next(i for i, sibling in enumerate(siblings) if sibling == current)
            segments.append(self._segment(current, kind, index))
            current = parent

        segments.reverse()
        return tuple(segments)

    def _segment(self, node: Node, kind: NodeKind, index: int) -> PathSegment:
        if kind == NodeKind.TEXT:
            return PathSegment(SegmentKind.TEXT, index)

        element_id = self.tree.attribute(node, "id") if self.options.include_element_id else None
        element_class = self.tree.attribute(node, "class") if self.options.include_class else None
        return PathSegment(
            SegmentKind.ELEMENT,
            index,
            tag_name=self.tree.tag_name(node),
            element_id=element_id,
            element_class=element_class,
        )

    def _fingerprint_enabled(self, include_fingerprint: Optional[bool]) -> bool:
        if include_fingerprint is None:
            return self.options.include_fingerprint
        return include_fingerprint

    def _fingerprint(self, text: str) -> str:
        return compute_fingerprint(text, self.options.fingerprint_length)
