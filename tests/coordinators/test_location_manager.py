#!/usr/bin/env python3
"""
Tests for LocationManager and the composition root that wires it.
"""

from unittest.mock import MagicMock

import pytest

from doc_locator import bootstrap
from doc_locator.coordinators import LocationManager, PAGINATED_STRATEGY
from doc_locator.core import Align, ChangeType, TextRange, TrackerConfig
from doc_locator.io import BookmarkRepository, DatabaseManager, InMemoryPositionStore, SqlitePositionStore
from doc_locator.services import SettingsManager


@pytest.fixture
def database():
    manager = DatabaseManager(":memory:")
    manager.ensure_schema()
    yield manager
    manager.close()


@pytest.fixture
def location_manager(qt_app, tree, geometry, scroll_controller, database):
    manager = LocationManager(
        tree=tree,
        geometry=geometry,
        scroll_controller=scroll_controller,
        store=InMemoryPositionStore(),
        book_id="book-1",
        chapter_id="chapter-1",
        config=TrackerConfig(auto_save=False, track_selection=True),
        bookmarks=BookmarkRepository(database.connection),
    )
    yield manager
    manager.destroy()


def test_requires_tree(qt_app, geometry, scroll_controller):
    with pytest.raises(ValueError, match="DocumentTree must not be None"):
        LocationManager(None, geometry, scroll_controller, InMemoryPositionStore(), "book-1", "chapter-1")


def test_create_and_navigate(location_manager, scroll_controller, chapter_one):
    em = chapter_one.children[2].children[1]
    location = location_manager.create_from_node(em)
    raw = location_manager.to_string(location)
    assert raw == "doc:/chapter-1/2/0"

    assert location_manager.parse(raw) == location
    assert location_manager.validate(location)
    assert location_manager.resolve(location) is em
    assert location_manager.navigate_to(raw, Align.CENTER) is True
    assert scroll_controller.calls == [(em, Align.CENTER)]


def test_text_position_and_context(location_manager, chapter_one):
    text = chapter_one.children[1].children[0]
    location = location_manager.create_from_text_position(text, 6)
    assert location_manager.to_string(location) == "doc:/chapter-1/1!/0:6"
    assert location_manager.get_text_content(location, context_length=5) == "ello world"


def test_selection_round_trip(location_manager, chapter_one):
    p2 = chapter_one.children[2]
    original = TextRange(p2.children[0], 0, p2.children[2], 5)
    selection = location_manager.create_from_selection(original)
    assert selection.selected_text == "Second para tail"
    assert location_manager.resolve_range(selection) == original


def test_scroll_position_location(location_manager):
    assert location_manager.to_string(location_manager.create_from_scroll_position(680)) == "doc:/chapter-1/2"


def test_tracking_lifecycle(location_manager, geometry):
    events = []
    dispose = location_manager.subscribe(events.append)
    assert location_manager.get_current_position() is None

    location_manager.initialize()
    assert location_manager.get_current_position() is not None

    geometry.scroll_top = 700
    location_manager.handle_scroll()
    location_manager.tracker.commit_pending()
    dispose()

    assert [event.change_type for event in events] == [ChangeType.SCROLL]
    assert location_manager.get_current_location().path[0].index == 2


def test_save_and_restore_position(location_manager, geometry, scroll_controller, chapter_one):
    location_manager.initialize()
    geometry.scroll_top = 700
    saved = location_manager.save_position()
    assert saved.viewport_offset == 700

    geometry.scroll_top = 0
    assert location_manager.restore_position() is True
    assert scroll_controller.calls[-1] == (chapter_one.children[2], Align.START)


def test_listener_registration(location_manager):
    listener = MagicMock()
    location_manager.on_position_change(listener)
    location_manager.initialize()
    location_manager.save_position()
    location_manager.off_position_change(listener)
    location_manager.save_position()
    listener.assert_called_once()


def test_selection_events_are_forwarded(location_manager, chapter_one):
    location_manager.initialize()
    text = chapter_one.children[1].children[0]
    selection = location_manager.handle_selection_changed(TextRange(text, 0, text, 5))
    assert selection.selected_text == "Hello"


def test_set_chapter(location_manager):
    location_manager.initialize()
    location_manager.set_chapter("chapter-2")
    assert location_manager.chapter_id == "chapter-2"


class TestBookmarks:
    def test_bookmark_current_position_and_open(self, location_manager, geometry, scroll_controller, chapter_one):
        geometry.scroll_top = 700
        bookmark = location_manager.bookmark_current_position("Second paragraph", tags=["quote"])

        assert bookmark.book_id == "book-1"
        assert bookmark.chapter_id == "chapter-1"
        assert bookmark.tags == ("quote",)
        assert [item.id for item in location_manager.list_bookmarks()] == [bookmark.id]

        assert location_manager.open_bookmark(bookmark.id) is True
        assert scroll_controller.calls == [(chapter_one.children[2], Align.START)]

    def test_bookmark_without_visible_node(self, location_manager, geometry):
        geometry.rects.clear()
        assert location_manager.bookmark_current_position("Nothing here") is None
        assert location_manager.list_bookmarks() == []

    def test_open_bookmark_after_content_removed(self, location_manager, geometry, chapter_one):
        geometry.scroll_top = 1280
        bookmark = location_manager.bookmark_current_position("Nested")
        chapter_one.remove(chapter_one.children[3])
        assert location_manager.open_bookmark(bookmark.id) is False

    def test_bookmarks_require_repository(self, qt_app, tree, geometry, scroll_controller):
        manager = LocationManager(tree, geometry, scroll_controller, InMemoryPositionStore(), "book-1", "chapter-1")
        with pytest.raises(RuntimeError, match="Bookmark repository not configured"):
            manager.list_bookmarks()
        manager.destroy()


class TestCreateLocationManager:
    def test_wires_sqlite_persistence_from_settings(
        self, qt_app, tree, geometry, scroll_controller, tmp_path, monkeypatch
    ):
        monkeypatch.setattr(bootstrap, "configure_logging", MagicMock())
        monkeypatch.setenv("DOC_LOCATOR_DB_PATH", str(tmp_path / "positions.db"))
        monkeypatch.setenv("DOC_LOCATOR_AUTO_SAVE", "false")
        monkeypatch.setenv("DOC_LOCATOR_ENV", "test")

        manager = bootstrap.create_location_manager(
            tree,
            geometry,
            scroll_controller,
            book_id="book-1",
            chapter_id="chapter-1",
            mode="paginated",
            settings=SettingsManager(project_root=tmp_path),
        )

        bootstrap.configure_logging.assert_called_once_with("test")
        assert manager.config.auto_save is False
        assert manager.tracker.strategy is PAGINATED_STRATEGY
        assert isinstance(manager.tracker._store, SqlitePositionStore)

        manager.initialize()
        manager.save_position()
        assert manager.tracker.get_saved_position().chapter_id == "chapter-1"
        assert manager.bookmark_current_position("First page") is not None

        manager.destroy()
        assert manager.database is None
        assert (tmp_path / "positions.db").exists()
