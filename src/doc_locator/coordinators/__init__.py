"""Coordinators - stateful orchestration of tracking and navigation."""

from doc_locator.coordinators.location_manager import LocationManager
from doc_locator.coordinators.position_strategies import (
    PAGINATED_STRATEGY,
    SCROLLING_STRATEGY,
    PaginatedStrategy,
    PositionStrategy,
    ScrollingStrategy,
    VisibilityScorer,
    create_position_strategy,
)
from doc_locator.coordinators.position_tracker import PositionTracker, TrackerState

__all__ = [
    "LocationManager",
    "PAGINATED_STRATEGY",
    "PaginatedStrategy",
    "PositionStrategy",
    "PositionTracker",
    "SCROLLING_STRATEGY",
    "ScrollingStrategy",
    "TrackerState",
    "VisibilityScorer",
    "create_position_strategy",
]
