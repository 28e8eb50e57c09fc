"""Composition root for hosts that embed location tracking."""

from pathlib import Path
from typing import Optional, Sequence

from doc_locator.coordinators import LocationManager, create_position_strategy
from doc_locator.core import DocumentTree, GeometryProvider, ScrollController
from doc_locator.io import BookmarkRepository, DatabaseManager, SqlitePositionStore
from doc_locator.services import SettingsManager, configure_logging


def create_location_manager(
    tree: DocumentTree,
    geometry: GeometryProvider,
    scroll_controller: ScrollController,
    book_id: str,
    chapter_id: str,
    chapter_order: Optional[Sequence[str]] = None,
    mode: str = "scrolling",
    settings: Optional[SettingsManager] = None,
    project_root: Optional[Path] = None,
) -> LocationManager:
    """
    Wire settings, logging, persistence and tracking for one open document.

    This is the only place that knows how to instantiate and connect the
    persistence layer with the coordinators. The returned manager owns
    the database connection and closes it on ``destroy()``.
    """
    # 1. Configuration and logging
    settings = settings or SettingsManager(project_root)
    configure_logging(settings.get_environment())

    # 2. Persistence
    database = DatabaseManager(settings.get_database_path())
    database.ensure_schema()
    store = SqlitePositionStore(database.connection)
    bookmarks = BookmarkRepository(database.connection)

    # 3. Coordinator (dependency injection)
    manager = LocationManager(
        tree=tree,
        geometry=geometry,
        scroll_controller=scroll_controller,
        store=store,
        book_id=book_id,
        chapter_id=chapter_id,
        config=settings.get_tracker_config(),
        strategy=create_position_strategy(mode),
        chapter_order=chapter_order,
        bookmarks=bookmarks,
        database=database,
    )
    return manager
