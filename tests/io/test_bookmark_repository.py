#!/usr/bin/env python3
"""
Tests for BookmarkRepository - validates bookmark persistence.
"""

import sqlite3

import pytest

from doc_locator.core import Location, PathSegment, SegmentKind, element_path
from doc_locator.io import BookmarkRepository, DatabaseManager


@pytest.fixture
def db_manager():
    """Create an in-memory database for testing."""
    manager = DatabaseManager(":memory:")
    manager.ensure_schema()
    yield manager
    manager.close()


@pytest.fixture
def bookmark_repo(db_manager):
    return BookmarkRepository(db_manager.connection)


@pytest.fixture
def location():
    return Location(
        "chapter-1",
        (PathSegment(SegmentKind.ELEMENT, 1), PathSegment(SegmentKind.TEXT, 0)),
        text_offset=6,
        content_hash="abc",
    )


def test_requires_connection():
    with pytest.raises(RuntimeError, match="Database connection required"):
        BookmarkRepository(None)


def test_add_bookmark(bookmark_repo, location):
    bookmark = bookmark_repo.add_bookmark(
        "book-1", location, "Start of chapter", description="Opening line", tags=["intro", "reread"]
    )

    assert bookmark.id is not None
    assert bookmark.book_id == "book-1"
    assert bookmark.chapter_id == "chapter-1"
    assert bookmark.location == location
    assert bookmark.location.content_hash == "abc"
    assert bookmark.title == "Start of chapter"
    assert bookmark.description == "Opening line"
    assert bookmark.tags == ("intro", "reread")
    assert bookmark.created > 0


def test_get_bookmark_missing_raises(bookmark_repo):
    with pytest.raises(RuntimeError, match="Bookmark not found"):
        bookmark_repo.get_bookmark(999)


def test_list_bookmarks_per_book(bookmark_repo, location):
    first = bookmark_repo.add_bookmark("book-1", location, "First")
    second = bookmark_repo.add_bookmark("book-1", Location("chapter-2", element_path([0])), "Second")
    bookmark_repo.add_bookmark("book-2", location, "Other book")

    listed = bookmark_repo.list_bookmarks("book-1")
    assert [bookmark.id for bookmark in listed] == [first.id, second.id]
    assert listed[1].chapter_id == "chapter-2"
    assert bookmark_repo.list_bookmarks("book-3") == []


def test_update_title(bookmark_repo, location):
    bookmark = bookmark_repo.add_bookmark("book-1", location, "Old")
    renamed = bookmark_repo.update_title(bookmark.id, "New")
    assert renamed.title == "New"
    assert renamed.location == location


def test_update_title_missing_raises(bookmark_repo):
    with pytest.raises(RuntimeError, match="Bookmark not found"):
        bookmark_repo.update_title(42, "Nope")


def test_delete_bookmark(bookmark_repo, location):
    bookmark = bookmark_repo.add_bookmark("book-1", location, "Gone soon")
    bookmark_repo.delete_bookmark(bookmark.id)
    assert bookmark_repo.list_bookmarks("book-1") == []
    with pytest.raises(RuntimeError, match="Bookmark not found"):
        bookmark_repo.delete_bookmark(bookmark.id)


def test_database_errors_are_wrapped(location):
    connection = sqlite3.connect(":memory:")
    repo = BookmarkRepository(connection)
    with pytest.raises(RuntimeError, match="Failed to add bookmark") as excinfo:
        repo.add_bookmark("book-1", location, "No schema")
    assert isinstance(excinfo.value.__cause__, sqlite3.Error)
    connection.close()
