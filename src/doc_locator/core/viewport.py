"""Geometry and scrolling collaborators exposed by the renderer.

All vertical coordinates are content coordinates: pixels from the top of the
scrollable chapter content, so a node is on screen when its rect intersects
``[scroll_top, scroll_top + client_height)``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .tree import Node


class Align(str, Enum):
    START = "start"
    CENTER = "center"
    END = "end"


@dataclass(frozen=True)
class Rect:
    top: float
    height: float
    left: float = 0.0
    width: float = 0.0

    @property
    def bottom(self) -> float:
        return self.top + self.height


@dataclass(frozen=True)
class ViewportMetrics:
    """Scroll state of the reading container."""

    scroll_top: float
    client_height: float
    scroll_height: float

    @property
    def scroll_bottom(self) -> float:
        return self.scroll_top + self.client_height

    @property
    def center(self) -> float:
        return self.scroll_top + self.client_height / 2

    @property
    def max_scroll(self) -> float:
        return max(self.scroll_height - self.client_height, 0.0)


class GeometryProvider(ABC):
    """Reports where nodes were laid out and how the container is scrolled."""

    @abstractmethod
    def rect_of(self, node: Node) -> Optional[Rect]:
        """Bounding rect of ``node`` in content coordinates, None if not laid out."""

    @abstractmethod
    def metrics(self) -> ViewportMetrics:
        """Current scroll metrics of the container."""


class ScrollController(ABC):
    """Sink that scrolls the container so a node becomes visible."""

    @abstractmethod
    def scroll_to(self, node: Node, align: Align = Align.START) -> None:
        """Scroll the container to ``node`` using the alignment hint."""
