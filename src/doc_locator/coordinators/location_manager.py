"""Location Manager - single entry point for addressing one open document."""

from typing import Callable, List, Optional, Sequence, Union

import structlog
from PySide6.QtCore import QObject, Slot

from doc_locator.core import (
    Align,
    Bookmark,
    DocumentTree,
    GeometryProvider,
    Location,
    Node,
    PositionChangeEvent,
    RangeLocation,
    ReadingPosition,
    ScrollController,
    TextRange,
    TrackerConfig,
)
from doc_locator.coordinators.position_strategies import PositionStrategy
from doc_locator.coordinators.position_tracker import PositionTracker
from doc_locator.io import BookmarkRepository, DatabaseManager, PositionStore
from doc_locator.services import (
    GenerationOptions,
    LocationGenerator,
    LocationResolver,
    LocationValidator,
    location_codec,
)

logger = structlog.get_logger(__name__)


class LocationManager(QObject):
    """
    Binds one document tree, one chapter and one tracker.

    Hosts talk to this object instead of wiring the generator, resolver,
    validator and tracker themselves. Bookmarks are optional and need a
    BookmarkRepository.
    """

    def __init__(
        self,
        tree: DocumentTree,
        geometry: GeometryProvider,
        scroll_controller: ScrollController,
        store: PositionStore,
        book_id: str,
        chapter_id: str,
        config: Optional[TrackerConfig] = None,
        strategy: Optional[PositionStrategy] = None,
        chapter_order: Optional[Sequence[str]] = None,
        options: Optional[GenerationOptions] = None,
        bookmarks: Optional[BookmarkRepository] = None,
        database: Optional[DatabaseManager] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)

        if tree is None:
            raise ValueError("DocumentTree must not be None")

        self.tree = tree
        self.config = config or TrackerConfig()
        self.generator = LocationGenerator(tree, geometry, options)
        self.resolver = LocationResolver()
        self.validator = LocationValidator(
            self.resolver,
            strict=self.config.strict_validation,
            fingerprint_length=self.generator.options.fingerprint_length,
        )
        self.bookmarks = bookmarks
        self.database = database
        self.tracker = PositionTracker(
            tree=tree,
            geometry=geometry,
            scroll_controller=scroll_controller,
            store=store,
            book_id=book_id,
            chapter_id=chapter_id,
            config=self.config,
            strategy=strategy,
            chapter_order=chapter_order,
            generator=self.generator,
            resolver=self.resolver,
            validator=self.validator,
            parent=self,
        )

    @property
    def book_id(self) -> str:
        return self.tracker.book_id

    @property
    def chapter_id(self) -> str:
        return self.tracker.chapter_id

    def initialize(self) -> None:
        """Start position tracking."""
        self.tracker.start()

    def destroy(self) -> None:
        """Stop tracking and close the owned database, if any."""
        self.tracker.destroy()
        if self.database is not None:
            self.database.close()
            self.database = None

    @Slot()
    def handle_scroll(self) -> None:
        self.tracker.handle_scroll()

    @Slot(object)
    def handle_selection_changed(self, text_range: Optional[TextRange]) -> Optional[RangeLocation]:
        return self.tracker.handle_selection_changed(text_range)

    def set_chapter(self, chapter_id: str) -> None:
        self.tracker.set_chapter(chapter_id)

    def get_current_location(self) -> Optional[Location]:
        return self.tracker.get_current_location()

    def get_current_position(self) -> Optional[ReadingPosition]:
        """The latest derived position, or None before tracking starts."""
        return self.tracker.current_position

    def navigate_to(self, location: Union[Location, str], align: Align = Align.START) -> bool:
        """Scroll to a Location or its string form. Malformed strings raise ParseError."""
        return self.tracker.restore_position(location, align)

    def create_from_node(self, node: Node) -> Location:
        return self.generator.from_node(
            node, self.chapter_id, include_fingerprint=self.config.fingerprint_positions
        )

    def create_from_text_position(self, text_node: Node, offset: int) -> Location:
        return self.generator.from_text_position(
            text_node, offset, self.chapter_id, include_fingerprint=self.config.fingerprint_positions
        )

    def create_from_selection(self, text_range: TextRange) -> RangeLocation:
        return self.generator.from_range(
            text_range, self.chapter_id, include_fingerprint=self.config.fingerprint_positions
        )

    def create_from_scroll_position(self, scroll_top: float) -> Location:
        return self.generator.from_scroll_offset(scroll_top, self.chapter_id)

    def parse(self, raw: str) -> Location:
        return location_codec.parse(raw)

    def to_string(self, location: Location) -> str:
        return location_codec.serialize(location)

    def validate(self, location: Location, strict: Optional[bool] = None) -> bool:
        return self.validator.validate(location, self.tree, strict)

    def resolve(self, location: Location) -> Optional[Node]:
        return self.resolver.resolve(location, self.tree)

    def resolve_range(self, range_location: RangeLocation) -> Optional[TextRange]:
        return self.resolver.resolve_range(range_location, self.tree)

    def get_text_content(self, location: Location, context_length: int = 100) -> Optional[str]:
        return self.resolver.get_text_content(location, self.tree, context_length)

    def save_position(self) -> Optional[ReadingPosition]:
        return self.tracker.save_position(force=True)

    def restore_position(self, align: Align = Align.START) -> bool:
        """Restore the snapshot persisted for this book."""
        return self.tracker.restore_saved_position(align)

    def on_position_change(self, listener: Callable[[PositionChangeEvent], None]) -> None:
        self.tracker.on_position_change(listener)

    def off_position_change(self, listener: Callable[[PositionChangeEvent], None]) -> None:
        self.tracker.off_position_change(listener)

    def subscribe(self, listener: Callable[[PositionChangeEvent], None]) -> Callable[[], None]:
        return self.tracker.subscribe(listener)

    def bookmark_current_position(
        self,
        title: str,
        description: Optional[str] = None,
        tags: Sequence[str] = (),
    ) -> Optional[Bookmark]:
        """Bookmark the node currently in view.

        Returns:
            The stored bookmark, or None when no node is in view.

        Raises:
            RuntimeError: If no BookmarkRepository was provided or the write fails.
        """
        repository = self._require_bookmarks()
        location = self.get_current_location()
        if location is None:
            logger.info("bookmark_skipped_no_location", book_id=self.book_id, chapter_id=self.chapter_id)
            return None
        return repository.add_bookmark(self.book_id, location, title, description, tags)

    def list_bookmarks(self) -> List[Bookmark]:
        return self._require_bookmarks().list_bookmarks(self.book_id)

    def open_bookmark(self, bookmark_id: int, align: Align = Align.START) -> bool:
        """Scroll to a stored bookmark; False if it no longer resolves."""
        bookmark = self._require_bookmarks().get_bookmark(bookmark_id)
        return self.navigate_to(bookmark.location, align)

    def _require_bookmarks(self) -> BookmarkRepository:
        if self.bookmarks is None:
            raise RuntimeError("Bookmark repository not configured")
        return self.bookmarks
