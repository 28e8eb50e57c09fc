"""Shared fixtures: a small chapter tree plus fake renderer collaborators."""

import pytest
from PySide6.QtCore import QCoreApplication

from doc_locator.core import (
    Align,
    GeometryProvider,
    MemoryDocumentTree,
    Rect,
    ScrollController,
    ViewportMetrics,
    element,
)


class FakeGeometry(GeometryProvider):
    """Geometry provider with hand-placed block rects and a movable viewport."""

    def __init__(self, client_height=600.0, scroll_height=3000.0):
        self.rects = {}
        self.scroll_top = 0.0
        self.client_height = client_height
        self.scroll_height = scroll_height

    def place(self, node, top, height):
        self.rects[node] = Rect(top=top, height=height)

    def rect_of(self, node):
        return self.rects.get(node)

    def metrics(self):
        return ViewportMetrics(self.scroll_top, self.client_height, self.scroll_height)


class RecordingScrollController(ScrollController):
    def __init__(self):
        self.calls = []

    def scroll_to(self, node, align=Align.START):
        self.calls.append((node, align))


@pytest.fixture(scope="session")
def qt_app():
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    return app


@pytest.fixture
def chapter_one():
    """
    body
      h1#title      "Chapter One"
      p#p1.lead     "Hello world"
      p             "Second " <em>"para"</em> " tail"
      div
        p           "Nested one"
        p           "Nested two"
    """
    return element(
        "body",
        element("h1", "Chapter One", id="title"),
        element("p", "Hello world", id="p1", class_="lead"),
        element("p", "Second ", element("em", "para"), " tail"),
        element(
            "div",
            element("p", "Nested one"),
            element("p", "Nested two"),
        ),
    )


@pytest.fixture
def chapter_two():
    return element("body", element("p", "Another chapter"))


@pytest.fixture
def tree(chapter_one, chapter_two):
    return MemoryDocumentTree({"chapter-1": chapter_one, "chapter-2": chapter_two})


@pytest.fixture
def geometry(chapter_one, chapter_two):
    """Vertical layout of chapter one in a 600px viewport over 3000px of content."""
    h1, p1, p2, div = chapter_one.children
    nested_one, nested_two = div.children

    layout = FakeGeometry()
    layout.place(h1, 0, 80)
    layout.place(p1, 80, 600)
    layout.place(p2, 680, 600)
    layout.place(div, 1280, 1200)
    layout.place(nested_one, 1280, 600)
    layout.place(nested_two, 1880, 600)
    layout.place(chapter_two.children[0], 0, 100)
    return layout


@pytest.fixture
def scroll_controller():
    return RecordingScrollController()
