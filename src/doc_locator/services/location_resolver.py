"""Location Resolver - the inverse of the generator: Locations back to tree nodes."""

from dataclasses import dataclass
from typing import Optional

from doc_locator.core import DocumentTree, Location, Node, NodeKind, RangeLocation, SegmentKind, TextRange

_KIND_FOR_SEGMENT = {
    SegmentKind.ELEMENT: NodeKind.ELEMENT,
    SegmentKind.TEXT: NodeKind.TEXT,
}


@dataclass(frozen=True)
class ResolvedPoint:
    """A node plus the (clamped) character offset a Location points at."""

    node: Node
    offset: Optional[int] = None


class LocationResolver:
    """Walks a document tree along a Location path.

    A stale address is an expected condition: every method returns None rather
    than raising when the path no longer fits the tree.
    """

    def resolve(self, location: Location, tree: DocumentTree) -> Optional[Node]:
        """Return the node a Location addresses, or None if it cannot be reached."""
        if not location.is_resolvable:
            return None

        current = tree.chapter_root(location.chapter_id)
        if current is None:
            return None

        for segment in location.path:
            if segment.kind == SegmentKind.OFFSET:
                continue
            if tree.is_text(current):
                return None
            siblings = tree.children(current, _KIND_FOR_SEGMENT[segment.kind])
            if segment.index >= len(siblings):
                return None
            current = siblings[segment.index]

        return current

    def resolve_point(self, location: Location, tree: DocumentTree) -> Optional[ResolvedPoint]:
        """
        Resolve a Location to a node and offset.

        The offset is clamped to ``[0, len(text)]``: minor edits may have shortened
        the text since the Location was created, and that is not a failure.
        """
        node = self.resolve(location, tree)
        if node is None:
            return None

        if location.text_offset is None:
            return ResolvedPoint(node=node)

        length = len(tree.text_of(node))
        return ResolvedPoint(node=node, offset=max(0, min(location.text_offset, length)))

    def resolve_range(self, range_location: RangeLocation, tree: DocumentTree) -> Optional[TextRange]:
        """Resolve both ends of a selection. Inverted ranges are returned as given."""
        start = self.resolve_point(range_location.start, tree)
        end = self.resolve_point(range_location.end, tree)
        if start is None or end is None:
            return None

        return TextRange(
            start_node=start.node,
            start_offset=start.offset or 0,
            end_node=end.node,
            end_offset=end.offset or 0,
        )

    def get_text_content(
        self,
        location: Location,
        tree: DocumentTree,
        context_length: int = 100,
    ) -> Optional[str]:
        """
        Text around a Location.

        With a text offset this is ``text[offset - context_length : offset + context_length]``
        (clipped to the node); without one it is the node's full text.
        """
        point = self.resolve_point(location, tree)
        if point is None:
            return None

        full_text = tree.text_of(point.node)
        if point.offset is None:
            return full_text

        start = max(0, point.offset - context_length)
        end = min(len(full_text), point.offset + context_length)
        return full_text[start:end]
