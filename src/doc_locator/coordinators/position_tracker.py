"""Position Tracker - derives, debounces and persists the reader's position."""

import dataclasses
import time
from enum import Enum
from typing import Callable, List, Optional, Sequence, Union

import structlog
from PySide6.QtCore import QObject, QTimer, Signal, Slot

from doc_locator.core import (
    Align,
    ChangeType,
    DocumentTree,
    GeometryProvider,
    InvalidRangeError,
    Location,
    NodeOutsideChapterError,
    PositionChangeEvent,
    PositionDelta,
    RangeLocation,
    ReadingPosition,
    ScrollController,
    TextRange,
    TrackerConfig,
)
from doc_locator.coordinators.position_strategies import (
    SCROLLING_STRATEGY,
    PositionStrategy,
    chapter_progress,
)
from doc_locator.io import PositionStore
from doc_locator.services import (
    LocationGenerator,
    LocationResolver,
    LocationValidator,
    location_codec,
)

logger = structlog.get_logger(__name__)

PositionListener = Callable[[PositionChangeEvent], None]


class TrackerState(str, Enum):
    IDLE = "idle"
    OBSERVING = "observing"
    DEBOUNCING = "debouncing"
    COMMITTED = "committed"


def _now_ms() -> int:
    return int(time.time() * 1000)


class PositionTracker(QObject):
    """
    Tracks the reading position of one open document.

    Scroll notifications are debounced on a single-shot QTimer; when the
    viewport settles the current position is derived through the active
    position strategy and persisted if it moved far enough. An optional
    repeating timer saves periodically. Listeners receive
    PositionChangeEvent objects both through the explicit observer list and
    through the ``position_changed`` Qt signal.
    """

    # Emitted with a PositionChangeEvent after every position change
    position_changed = Signal(object)

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
        generator: Optional[LocationGenerator] = None,
        resolver: Optional[LocationResolver] = None,
        validator: Optional[LocationValidator] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)

        if tree is None:
            raise ValueError("DocumentTree must not be None")
        if geometry is None:
            raise ValueError("GeometryProvider must not be None")
        if scroll_controller is None:
            raise ValueError("ScrollController must not be None")
        if store is None:
            raise ValueError("PositionStore must not be None")
        if not book_id:
            raise ValueError("book_id must not be empty")
        if not chapter_id:
            raise ValueError("chapter_id must not be empty")

        self._tree = tree
        self._geometry = geometry
        self._scroll_controller = scroll_controller
        self._store = store
        self._book_id = book_id
        self._chapter_id = chapter_id
        self._config = config or TrackerConfig()
        self._strategy = strategy or SCROLLING_STRATEGY
        self._chapter_order: List[str] = list(chapter_order or [])
        self._generator = generator or LocationGenerator(tree, geometry)
        self._resolver = resolver or LocationResolver()
        self._validator = validator or LocationValidator(
            self._resolver, strict=self._config.strict_validation
        )

        self._state = TrackerState.IDLE
        self._current: Optional[ReadingPosition] = None
        self._last_saved: Optional[ReadingPosition] = None
        self._saved_in_cycle = False
        self._listeners: List[PositionListener] = []

        self._debounce_timer = QTimer(self)
        self._debounce_timer.setSingleShot(True)
        self._debounce_timer.setInterval(self._config.debounce_ms)
        self._debounce_timer.timeout.connect(self._on_debounce_timeout)

        self._autosave_timer = QTimer(self)
        self._autosave_timer.setInterval(self._config.save_interval_ms)
        self._autosave_timer.timeout.connect(self._on_autosave_timeout)

    @property
    def state(self) -> TrackerState:
        return self._state

    @property
    def book_id(self) -> str:
        return self._book_id

    @property
    def chapter_id(self) -> str:
        return self._chapter_id

    @property
    def config(self) -> TrackerConfig:
        return self._config

    @property
    def strategy(self) -> PositionStrategy:
        return self._strategy

    @property
    def current_position(self) -> Optional[ReadingPosition]:
        return self._current

    @property
    def last_saved_position(self) -> Optional[ReadingPosition]:
        return self._last_saved

    @property
    def is_tracking(self) -> bool:
        return self._state != TrackerState.IDLE

    def start(self) -> None:
        """Begin tracking; the position at this moment becomes the last-saved baseline."""
        if self.is_tracking:
            return

        self._state = TrackerState.OBSERVING
        self._saved_in_cycle = False
        position = self.get_scroll_position()
        self._last_saved = position

        if self._config.auto_save:
            self._autosave_timer.start()

        logger.debug(
            "position_tracking_started",
            book_id=self._book_id,
            chapter_id=self._chapter_id,
            strategy=self._strategy.name,
        )

    def stop(self) -> None:
        """Stop tracking. Pending debounced work is dropped, not flushed."""
        self._debounce_timer.stop()
        self._autosave_timer.stop()
        self._state = TrackerState.IDLE
        self._current = None
        self._last_saved = None
        self._saved_in_cycle = False
        logger.debug("position_tracking_stopped", book_id=self._book_id)

    def destroy(self) -> None:
        """Stop tracking and detach every listener."""
        self.stop()
        self._listeners.clear()

    @Slot()
    def handle_scroll(self) -> None:
        """Restart the debounce window after a scroll notification."""
        if not self.is_tracking or not self._config.track_scroll:
            return
        self._state = TrackerState.DEBOUNCING
        self._saved_in_cycle = False
        self._debounce_timer.start()

    @Slot()
    def _on_debounce_timeout(self) -> None:
        self._commit_scroll()

    @Slot()
    def _on_autosave_timeout(self) -> None:
        if not self.is_tracking:
            return
        position = self.get_scroll_position()
        if self._is_unchanged(self._last_saved, position):
            return
        self._persist(position, ChangeType.SCROLL)

    def commit_pending(self) -> bool:
        """Flush a pending debounce immediately.

        Returns:
            True if a debounce window was pending and has been committed.
        """
        if not self._debounce_timer.isActive():
            return False
        self._debounce_timer.stop()
        self._commit_scroll()
        return True

    def _commit_scroll(self) -> None:
        if not self.is_tracking:
            return
        position = self.get_scroll_position()
        self._state = TrackerState.COMMITTED

        if not self._has_significant_change(self._last_saved, position):
            return

        change_type = ChangeType.SCROLL
        if (
            self._strategy.paginated
            and self._last_saved is not None
            and self._last_saved.page_number != position.page_number
        ):
            change_type = ChangeType.PAGE
        self._persist(position, change_type)

    @Slot(object)
    def handle_selection_changed(self, text_range: Optional[TextRange]) -> Optional[RangeLocation]:
        """Report a non-empty selection as a selection change.

        Returns:
            RangeLocation for the selection, or None when selections are not
            tracked, the selection is empty or it cannot be addressed.
        """
        if not self.is_tracking or not self._config.track_selection:
            return None
        if text_range is None or text_range.is_collapsed:
            return None

        try:
            range_location = self._generator.from_range(
                text_range,
                self._chapter_id,
                include_fingerprint=self._config.fingerprint_positions,
            )
        except (InvalidRangeError, NodeOutsideChapterError) as e:
            logger.debug("selection_not_addressable", chapter_id=self._chapter_id, reason=str(e))
            return None

        previous = self._current
        position = dataclasses.replace(self.get_scroll_position(), location=range_location.start)
        self._current = position
        self._emit(
            PositionChangeEvent(
                current=position,
                change_type=ChangeType.SELECTION,
                previous=previous,
                delta=self._delta(previous, position),
            )
        )
        return range_location

    def set_chapter(self, chapter_id: str) -> None:
        """Switch the tracked chapter and record the new position."""
        if not chapter_id:
            raise ValueError("chapter_id must not be empty")
        if chapter_id == self._chapter_id:
            return

        self._debounce_timer.stop()
        self._chapter_id = chapter_id
        self._saved_in_cycle = False
        logger.debug("chapter_changed", book_id=self._book_id, chapter_id=chapter_id)

        if not self.is_tracking:
            return
        self._state = TrackerState.OBSERVING
        self._persist(self.get_scroll_position(), ChangeType.CHAPTER)

    def get_current_location(self) -> Optional[Location]:
        """Location of the node that best represents the viewport, if any."""
        root = self._tree.chapter_root(self._chapter_id)
        if root is None:
            return None
        node = self._strategy.locate_current_position(self._tree, root, self._geometry)
        if node is None:
            return None
        try:
            return self._generator.from_node(
                node,
                self._chapter_id,
                include_fingerprint=self._config.fingerprint_positions,
            )
        except NodeOutsideChapterError as e:
            logger.debug("current_node_outside_chapter", chapter_id=self._chapter_id, reason=str(e))
            return None

    def get_scroll_position(self) -> ReadingPosition:
        """Snapshot the viewport into a ReadingPosition and make it current."""
        metrics = self._geometry.metrics()
        location = self.get_current_location() or Location(chapter_id=self._chapter_id)
        progress = chapter_progress(metrics)
        page_number, total_pages = self._strategy.page_info(metrics)

        position = ReadingPosition(
            location=location,
            chapter_id=self._chapter_id,
            chapter_progress=progress,
            book_progress=self._book_progress(progress),
            timestamp=_now_ms(),
            viewport_offset=metrics.scroll_top,
            page_number=page_number,
            total_pages=total_pages,
        )
        self._current = position
        return position

    def _book_progress(self, progress: float) -> float:
        if self._chapter_id not in self._chapter_order:
            return progress
        index = self._chapter_order.index(self._chapter_id)
        return (index + progress) / len(self._chapter_order)

    def save_position(self, force: bool = False) -> Optional[ReadingPosition]:
        """Persist the current position for the book.

        Calling it again in the same debounce cycle without moving is a no-op
        unless ``force``.

        Returns:
            The saved snapshot (or the one already saved in this cycle).
        """
        position = self.get_scroll_position()
        if not force and self._saved_in_cycle and self._is_unchanged(self._last_saved, position):
            return self._last_saved
        return self._persist(position, ChangeType.SCROLL)

    def _persist(self, position: ReadingPosition, change_type: ChangeType) -> ReadingPosition:
        previous = self._last_saved
        self._store.save(self._book_id, position)
        self._last_saved = position
        self._saved_in_cycle = True
        logger.debug(
            "position_saved",
            book_id=self._book_id,
            chapter_id=position.chapter_id,
            change_type=change_type.value,
            viewport_offset=position.viewport_offset,
        )
        self._emit(
            PositionChangeEvent(
                current=position,
                change_type=change_type,
                previous=previous,
                delta=self._delta(previous, position),
            )
        )
        return position

    def restore_position(self, location: Union[Location, str], align: Align = Align.START) -> bool:
        """Scroll to a stored location.

        Strings are parsed first; a malformed string raises ParseError. A location
        that fails validation returns False and leaves the scroll position untouched.
        While tracking, the current position is refreshed after the scroll.
        """
        if isinstance(location, str):
            location = location_codec.parse(location)

        result = self._validator.check(location, self._tree)
        if not result.valid:
            logger.info(
                "position_restore_rejected",
                book_id=self._book_id,
                chapter_id=location.chapter_id,
                resolved=result.resolved,
                drifted=result.drifted,
            )
            return False

        node = self._resolver.resolve(location, self._tree)
        if node is None:
            return False
        target = self._tree.parent(node) if self._tree.is_text(node) else node

        self._scroll_controller.scroll_to(target, align)
        self._saved_in_cycle = False
        if location.chapter_id != self._chapter_id:
            self.set_chapter(location.chapter_id)
        elif self.is_tracking:
            self.get_scroll_position()
        logger.debug("position_restored", book_id=self._book_id, chapter_id=location.chapter_id)
        return True

    def get_saved_position(self, book_id: Optional[str] = None) -> Optional[ReadingPosition]:
        return self._store.load(book_id or self._book_id)

    def clear_saved_position(self, book_id: Optional[str] = None) -> None:
        self._store.clear(book_id or self._book_id)

    def restore_saved_position(self, align: Align = Align.START) -> bool:
        """Restore the snapshot persisted for this book, if any."""
        saved = self.get_saved_position()
        if saved is None:
            return False
        return self.restore_position(saved.location, align)

    def on_position_change(self, listener: PositionListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def off_position_change(self, listener: PositionListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def subscribe(self, listener: PositionListener) -> Callable[[], None]:
        """Register ``listener`` and return a function that unregisters it."""
        self.on_position_change(listener)

        def dispose() -> None:
            self.off_position_change(listener)

        return dispose

    def _emit(self, event: PositionChangeEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception(
                    "position_listener_failed",
                    book_id=self._book_id,
                    change_type=event.change_type.value,
                )
        self.position_changed.emit(event)

    def _has_significant_change(
        self,
        previous: Optional[ReadingPosition],
        position: ReadingPosition,
    ) -> bool:
        if previous is None or previous.viewport_offset is None or position.viewport_offset is None:
            return True
        return abs(position.viewport_offset - previous.viewport_offset) > self._config.position_threshold

    @staticmethod
    def _is_unchanged(previous: Optional[ReadingPosition], position: ReadingPosition) -> bool:
        return (
            previous is not None
            and previous.chapter_id == position.chapter_id
            and previous.viewport_offset == position.viewport_offset
            and previous.location == position.location
        )

    @staticmethod
    def _delta(
        previous: Optional[ReadingPosition],
        position: ReadingPosition,
    ) -> Optional[PositionDelta]:
        if previous is None:
            return None
        scroll = None
        if previous.viewport_offset is not None and position.viewport_offset is not None:
            scroll = position.viewport_offset - previous.viewport_offset
        return PositionDelta(
            scroll=scroll,
            progress=position.chapter_progress - previous.chapter_progress,
        )
