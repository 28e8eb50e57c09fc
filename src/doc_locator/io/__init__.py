"""IO layer - persistence and document tree adapters."""

from doc_locator.io.bookmark_repository import BookmarkRepository
from doc_locator.io.database_manager import DatabaseManager
from doc_locator.io.in_memory_position_store import InMemoryPositionStore
from doc_locator.io.lxml_tree import LxmlDocumentTree, LxmlTextNode, parse_chapter_body
from doc_locator.io.position_store import PositionStore
from doc_locator.io.sqlite_position_store import SqlitePositionStore

__all__ = [
    "BookmarkRepository",
    "DatabaseManager",
    "InMemoryPositionStore",
    "LxmlDocumentTree",
    "LxmlTextNode",
    "PositionStore",
    "SqlitePositionStore",
    "parse_chapter_body",
]
