"""Document tree capability consumed by the addressing services.

Any tree representation (an lxml parse tree, an in-memory tree, a bridge to a
browser DOM) can be addressed once it implements :class:`DocumentTree`. The
addressing logic never touches a concrete node type.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, List, Optional, Sequence

Node = Any


class NodeKind(str, Enum):
    ELEMENT = "element"
    TEXT = "text"


@dataclass(frozen=True)
class TextRange:
    """A selection between two (node, offset) points, start first."""

    start_node: Node
    start_offset: int
    end_node: Node
    end_offset: int

    @property
    def is_collapsed(self) -> bool:
        return self.start_node == self.end_node and self.start_offset == self.end_offset


class DocumentTree(ABC):
    """Read-only view over a rendered document made of chapters."""

    @abstractmethod
    def chapter_root(self, chapter_id: str) -> Optional[Node]:
        """Return the root node for a chapter, or None if the chapter is not loaded."""

    @abstractmethod
    def child_nodes(self, node: Node) -> Sequence[Node]:
        """Return element and text children of ``node`` in document order."""

    @abstractmethod
    def parent(self, node: Node) -> Optional[Node]:
        """Return the parent of ``node`` or None at the top of the tree."""

    @abstractmethod
    def kind_of(self, node: Node) -> NodeKind:
        """Return whether ``node`` is an element or a text node."""

    @abstractmethod
    def data(self, text_node: Node) -> str:
        """Return the character data of a text node."""

    @abstractmethod
    def tag_name(self, node: Node) -> Optional[str]:
        """Return the lowercase local tag name of an element (None for text nodes)."""

    def attribute(self, node: Node, name: str) -> Optional[str]:
        """Return an attribute value of an element, if the tree exposes attributes."""
        return None

    def chapter_ids(self) -> List[str]:
        """Return the chapter ids currently loaded, when known."""
        return []

    def children(self, node: Node, kind: NodeKind) -> List[Node]:
        """Children of ``node`` restricted to one kind, in document order."""
        return [child for child in self.child_nodes(node) if self.kind_of(child) == kind]

    def is_text(self, node: Node) -> bool:
        return self.kind_of(node) == NodeKind.TEXT

    def iter_descendants(self, node: Node) -> Iterator[Node]:
        """Depth-first, document-order iteration over the descendants of ``node``."""
        stack = list(reversed(self.child_nodes(node)))
        while stack:
            current = stack.pop()
            yield current
            if not self.is_text(current):
                stack.extend(reversed(self.child_nodes(current)))

    def iter_text_nodes(self, node: Node) -> Iterator[Node]:
        if self.is_text(node):
            yield node
            return
        for descendant in self.iter_descendants(node):
            if self.is_text(descendant):
                yield descendant

    def text_of(self, node: Node) -> str:
        """Text content of a node (concatenated descendant text for elements)."""
        if self.is_text(node):
            return self.data(node)
        return "".join(self.data(text_node) for text_node in self.iter_text_nodes(node))

    def contains(self, ancestor: Node, node: Node) -> bool:
        """True when ``node`` is ``ancestor`` or lies below it."""
        current: Optional[Node] = node
        while current is not None:
            if current == ancestor:
                return True
            current = self.parent(current)
        return False
