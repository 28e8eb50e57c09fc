"""DocumentTree adapter over lxml parse trees of chapter HTML."""

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Union

from lxml import etree  # pyright: ignore[reportAttributeAccessIssue]

from doc_locator.core import DocumentTree, Node, NodeKind


@dataclass(frozen=True)
class LxmlTextNode:
    """A text run of an lxml element.

    lxml stores character data on elements rather than as nodes: ``text`` is the
    run before the first child, ``tail`` the run after the element's end tag.
    This wrapper turns either slot into a sibling-countable node.
    """

    owner: etree._Element
    slot: str  # "text" or "tail"


class LxmlDocumentTree(DocumentTree):
    """Exposes parsed chapter HTML through the DocumentTree capability.

    Comments and processing instructions are not nodes of the addressable tree,
    but any tail text that follows them is kept.
    """

    def __init__(self, chapters: Optional[Mapping[str, etree._Element]] = None) -> None:
        self._chapters: Dict[str, etree._Element] = dict(chapters or {})

    @classmethod
    def from_html(cls, chapter_id: str, html: Union[str, bytes]) -> "LxmlDocumentTree":
        return cls.from_html_chapters({chapter_id: html})

    @classmethod
    def from_html_chapters(cls, chapters: Mapping[str, Union[str, bytes]]) -> "LxmlDocumentTree":
        """Parse each chapter and use its <body> as the chapter root."""
        return cls({chapter_id: parse_chapter_body(html) for chapter_id, html in chapters.items()})

    def add_chapter(self, chapter_id: str, root: etree._Element) -> None:
        self._chapters[chapter_id] = root

    def remove_chapter(self, chapter_id: str) -> None:
        self._chapters.pop(chapter_id, None)

    def chapter_ids(self) -> List[str]:
        return list(self._chapters.keys())

    def chapter_root(self, chapter_id: str) -> Optional[Node]:
        return self._chapters.get(chapter_id)

    def child_nodes(self, node: Node) -> Sequence[Node]:
        if isinstance(node, LxmlTextNode):
            return []
        nodes: List[Node] = []
        if node.text:
            nodes.append(LxmlTextNode(node, "text"))
        for child in node:
            if isinstance(child.tag, str):
                nodes.append(child)
            if child.tail:
                nodes.append(LxmlTextNode(child, "tail"))
        return nodes

    def parent(self, node: Node) -> Optional[Node]:
        if isinstance(node, LxmlTextNode):
            return node.owner if node.slot == "text" else node.owner.getparent()
        return node.getparent()

    def kind_of(self, node: Node) -> NodeKind:
        return NodeKind.TEXT if isinstance(node, LxmlTextNode) else NodeKind.ELEMENT

    def data(self, text_node: Node) -> str:
        return getattr(text_node.owner, text_node.slot) or ""

    def tag_name(self, node: Node) -> Optional[str]:
        if isinstance(node, LxmlTextNode):
            return None
        return etree.QName(node).localname.lower()

    def attribute(self, node: Node, name: str) -> Optional[str]:
        if isinstance(node, LxmlTextNode):
            return None
        return node.get(name)


def parse_chapter_body(html: Union[str, bytes]) -> etree._Element:
    """Parse chapter markup and return its <body> element (or the document root)."""
    parser = etree.HTMLParser()
    root = etree.fromstring(html, parser)
    if root is None:
        raise ValueError("Chapter markup is empty")
    bodies = root.xpath("//*[local-name()='body']")
    return bodies[0] if bodies else root
