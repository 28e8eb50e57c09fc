"""
Doc Locator - stable addressing of positions inside rendered documents.

This package provides:
- Location paths that survive re-rendering, with a compact string form
- Resolution and content-drift validation of stored locations
- Debounced reading position tracking with persistence and bookmarks
"""

__version__ = "0.1.0"

# Make key components available at package level
from doc_locator.core import Location, ReadingPosition, TextRange
from doc_locator.coordinators import LocationManager, PositionTracker
from doc_locator.services import LocationGenerator, LocationResolver, LocationValidator, parse, serialize

__all__ = [
    "Location",
    "LocationGenerator",
    "LocationManager",
    "LocationResolver",
    "LocationValidator",
    "PositionTracker",
    "ReadingPosition",
    "TextRange",
    "parse",
    "serialize",
]
