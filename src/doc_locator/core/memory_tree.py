"""In-memory document tree - plain Python nodes implementing the tree capability."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Union

from .tree import DocumentTree, Node, NodeKind


@dataclass(eq=False)
class TextNode:
    """A run of character data. Compared by identity, like DOM text nodes."""

    data: str
    parent: Optional["ElementNode"] = field(default=None, repr=False)


@dataclass(eq=False)
class ElementNode:
    """An element with ordered element/text children.

    Plain strings passed as children are wrapped in :class:`TextNode`.
    """

    tag: str
    children: List[Union["ElementNode", TextNode]] = field(default_factory=list)
    attributes: Dict[str, str] = field(default_factory=dict)
    parent: Optional["ElementNode"] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self.children = [self._adopt(child) for child in self.children]

    def append(self, child: Union["ElementNode", TextNode, str]) -> Union["ElementNode", TextNode]:
        adopted = self._adopt(child)
        self.children.append(adopted)
        return adopted

    def remove(self, child: Union["ElementNode", TextNode]) -> None:
        self.children.remove(child)
        child.parent = None

    def _adopt(self, child: Union["ElementNode", TextNode, str]) -> Union["ElementNode", TextNode]:
        node = TextNode(child) if isinstance(child, str) else child
        node.parent = self
        return node


def element(tag: str, *children: Union[ElementNode, TextNode, str], **attributes: str) -> ElementNode:
    """Shorthand constructor: ``element("p", "Hello ", element("em", "world"), id="p1")``.

    ``class_`` is accepted for the reserved ``class`` attribute.
    """
    attrs = {name.rstrip("_"): value for name, value in attributes.items()}
    return ElementNode(tag=tag, children=list(children), attributes=attrs)


class MemoryDocumentTree(DocumentTree):
    """Document made of in-memory chapters keyed by chapter id."""

    def __init__(self, chapters: Optional[Dict[str, ElementNode]] = None) -> None:
        self._chapters: Dict[str, ElementNode] = dict(chapters or {})

    def add_chapter(self, chapter_id: str, root: ElementNode) -> None:
        self._chapters[chapter_id] = root

    def remove_chapter(self, chapter_id: str) -> None:
        self._chapters.pop(chapter_id, None)

    def chapter_ids(self) -> List[str]:
        return list(self._chapters)

    def chapter_root(self, chapter_id: str) -> Optional[Node]:
        return self._chapters.get(chapter_id)

    def child_nodes(self, node: Node) -> Sequence[Node]:
        if isinstance(node, TextNode):
            return []
        return node.children

    def parent(self, node: Node) -> Optional[Node]:
        return node.parent

    def kind_of(self, node: Node) -> NodeKind:
        return NodeKind.TEXT if isinstance(node, TextNode) else NodeKind.ELEMENT

    def data(self, text_node: Node) -> str:
        return text_node.data

    def tag_name(self, node: Node) -> Optional[str]:
        if isinstance(node, TextNode):
            return None
        return node.tag.lower()

    def attribute(self, node: Node, name: str) -> Optional[str]:
        if isinstance(node, TextNode):
            return None
        return node.attributes.get(name)

    def all_nodes(self, chapter_id: str) -> Iterable[Node]:
        root = self.chapter_root(chapter_id)
        if root is None:
            return []
        return list(self.iter_descendants(root))
