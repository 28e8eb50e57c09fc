"""Position strategy objects deciding which node represents the current reading position."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Optional, Tuple

from doc_locator.core import DocumentTree, GeometryProvider, Node, Rect, ViewportMetrics
from doc_locator.services import iter_block_nodes


class VisibilityScorer:
    """Scores how well a laid-out block represents the viewport.

    ``score = visibility_weight * visible_fraction + centrality_weight * centrality``,
    where ``visible_fraction`` is the share of the block's height on screen and
    ``centrality`` is ``1 - distance(visible part center, viewport center) / viewport height``.
    """

    def __init__(self, visibility_weight: float = 0.7, centrality_weight: float = 0.3) -> None:
        self.visibility_weight = visibility_weight
        self.centrality_weight = centrality_weight

    def score(self, rect: Rect, metrics: ViewportMetrics) -> Optional[float]:
        """Return the score, or None when nothing of the block is visible."""
        if rect.height <= 0 or metrics.client_height <= 0:
            return None
        top = max(rect.top, metrics.scroll_top)
        bottom = min(rect.bottom, metrics.scroll_bottom)
        visible = bottom - top
        if visible <= 0:
            return None

        visibility = visible / rect.height
        distance = abs((top + visible / 2) - metrics.center)
        centrality = 1 - distance / metrics.client_height
        return self.visibility_weight * visibility + self.centrality_weight * centrality


def _estimate_total_pages(metrics: ViewportMetrics) -> int:
    if metrics.client_height <= 0:
        return 1
    return max(1, math.ceil(metrics.scroll_height / metrics.client_height))


def chapter_progress(metrics: ViewportMetrics) -> float:
    """Fraction of the chapter scrolled past, clamped to [0, 1]."""
    if metrics.max_scroll <= 0:
        return 0.0
    return min(max(metrics.scroll_top / metrics.max_scroll, 0.0), 1.0)


class PositionStrategy(ABC):
    """State interface for reading layouts (continuous scrolling vs pages)."""

    name: str
    paginated: bool = False

    @abstractmethod
    def locate_current_position(
        self,
        tree: DocumentTree,
        root: Node,
        geometry: GeometryProvider,
    ) -> Optional[Node]:
        """Return the block node that best represents what the reader sees."""

    @abstractmethod
    def page_info(self, metrics: ViewportMetrics) -> Tuple[int, int]:
        """Return ``(page_number, total_pages)``; page numbers are 0-indexed."""


class ScrollingStrategy(PositionStrategy):
    name = "scrolling"

    def __init__(self, scorer: Optional[VisibilityScorer] = None) -> None:
        self.scorer = scorer or VisibilityScorer()

    def locate_current_position(
        self,
        tree: DocumentTree,
        root: Node,
        geometry: GeometryProvider,
    ) -> Optional[Node]:
        metrics = geometry.metrics()
        best_node: Optional[Node] = None
        best_score = 0.0

        for node in iter_block_nodes(tree, root):
            rect = geometry.rect_of(node)
            if rect is None:
                continue
            score = self.scorer.score(rect, metrics)
            # Ties keep the earlier node in document order
            if score is not None and score > best_score:
                best_score = score
                best_node = node
        return best_node

    def page_info(self, metrics: ViewportMetrics) -> Tuple[int, int]:
        total_pages = _estimate_total_pages(metrics)
        page_number = math.floor(chapter_progress(metrics) * total_pages)
        return min(page_number, total_pages - 1), total_pages


class PaginatedStrategy(PositionStrategy):
    """Each page is one viewport height; the position is the first block on the page."""

    name = "paginated"
    paginated = True

    def locate_current_position(
        self,
        tree: DocumentTree,
        root: Node,
        geometry: GeometryProvider,
    ) -> Optional[Node]:
        metrics = geometry.metrics()
        page_number, _ = self.page_info(metrics)
        page_top = page_number * metrics.client_height
        page_bottom = page_top + metrics.client_height

        for node in iter_block_nodes(tree, root):
            rect = geometry.rect_of(node)
            if rect is None or rect.height <= 0:
                continue
            if rect.top < page_bottom and rect.bottom > page_top:
                return node
        return None

    def page_info(self, metrics: ViewportMetrics) -> Tuple[int, int]:
        total_pages = _estimate_total_pages(metrics)
        if metrics.client_height <= 0:
            return 0, total_pages
        page_number = math.floor(metrics.scroll_top / metrics.client_height)
        return min(max(page_number, 0), total_pages - 1), total_pages


SCROLLING_STRATEGY = ScrollingStrategy()
PAGINATED_STRATEGY = PaginatedStrategy()


def create_position_strategy(mode: str) -> PositionStrategy:
    """Return the shared strategy for a layout mode name."""
    if mode == SCROLLING_STRATEGY.name:
        return SCROLLING_STRATEGY
    if mode == PAGINATED_STRATEGY.name:
        return PAGINATED_STRATEGY
    raise ValueError(f"Unknown position strategy: {mode}")
