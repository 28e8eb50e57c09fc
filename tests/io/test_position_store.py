"""Tests for the in-memory and SQLite position stores."""

import sqlite3

import pytest

from doc_locator.core import Location, PathSegment, ReadingPosition, SegmentKind, element_path
from doc_locator.io import DatabaseManager, InMemoryPositionStore, PositionStore, SqlitePositionStore


def make_position(offset=0.0, chapter_id="chapter-1"):
    return ReadingPosition(
        location=Location(
            chapter_id,
            (PathSegment(SegmentKind.ELEMENT, 1, tag_name="p"), PathSegment(SegmentKind.TEXT, 0)),
            text_offset=3,
            content_hash="2p",
        ),
        chapter_id=chapter_id,
        chapter_progress=0.4,
        book_progress=0.2,
        timestamp=1700000000000,
        viewport_offset=offset,
        page_number=1,
        total_pages=5,
    )


@pytest.fixture
def database():
    manager = DatabaseManager(":memory:")
    manager.ensure_schema()
    yield manager
    manager.close()


@pytest.fixture(params=["memory", "sqlite"])
def store(request, database):
    if request.param == "memory":
        return InMemoryPositionStore()
    return SqlitePositionStore(database.connection)


def test_store_implements_interface(store):
    assert isinstance(store, PositionStore)


def test_load_missing_book_returns_none(store):
    assert store.load("unknown") is None


def test_save_then_load(store):
    position = make_position(640.0)
    store.save("book-1", position)

    loaded = store.load("book-1")
    assert loaded == position
    assert loaded.location.content_hash == "2p"
    assert loaded.location.path[0].tag_name == "p"


def test_save_overwrites_previous_snapshot(store):
    store.save("book-1", make_position(100.0))
    store.save("book-1", make_position(900.0, chapter_id="chapter-2"))

    loaded = store.load("book-1")
    assert loaded.viewport_offset == 900.0
    assert loaded.chapter_id == "chapter-2"
    assert store.list_books() == ["book-1"]


def test_books_are_isolated(store):
    store.save("book-1", make_position(100.0))
    store.save("book-2", make_position(200.0))
    assert store.load("book-1").viewport_offset == 100.0
    assert sorted(store.list_books()) == ["book-1", "book-2"]


def test_clear(store):
    store.save("book-1", make_position())
    store.clear("book-1")
    assert store.load("book-1") is None
    store.clear("book-1")


class TestSqlitePositionStore:
    def test_requires_connection(self):
        with pytest.raises(RuntimeError, match="Database connection required"):
            SqlitePositionStore(None)

    def test_snapshot_is_stored_as_json_record(self, database):
        store = SqlitePositionStore(database.connection)
        store.save("book-1", make_position(10.0))
        cur = database.connection.cursor()
        cur.execute("SELECT chapter_id, snapshot FROM reading_positions WHERE book_id = 'book-1'")
        row = cur.fetchone()
        assert row["chapter_id"] == "chapter-1"
        assert '"chapterId": "chapter-1"' in row["snapshot"]
        assert '"cfi"' in row["snapshot"]

    def test_corrupt_snapshot_raises(self, database):
        database.connection.execute(
            "INSERT INTO reading_positions (book_id, chapter_id, snapshot, updated_at) VALUES (?, ?, ?, ?)",
            ("book-1", "chapter-1", "{not json", 0),
        )
        store = SqlitePositionStore(database.connection)
        with pytest.raises(RuntimeError, match="Corrupt reading position"):
            store.load("book-1")

    def test_database_errors_are_wrapped(self):
        connection = sqlite3.connect(":memory:")
        store = SqlitePositionStore(connection)
        with pytest.raises(RuntimeError, match="Failed to save reading position") as excinfo:
            store.save("book-1", make_position())
        assert isinstance(excinfo.value.__cause__, sqlite3.Error)
        connection.close()


def test_element_only_location_survives_sqlite(database):
    store = SqlitePositionStore(database.connection)
    position = ReadingPosition(
        location=Location("chapter-1", element_path([3, 0])),
        chapter_id="chapter-1",
        chapter_progress=0.0,
        book_progress=0.0,
        timestamp=1,
    )
    store.save("book-1", position)
    loaded = store.load("book-1")
    assert loaded == position
    assert loaded.viewport_offset is None
