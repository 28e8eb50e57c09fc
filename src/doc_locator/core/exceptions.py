"""Exception taxonomy for location addressing.

Syntax-level problems are raised. Tree-level problems (a stale address, drifted
content) are reported through ``None``/``False`` results so that a failed restore
never ends a reading session.
"""


class LocatorError(Exception):
    """Base class for all addressing errors."""


class ParseError(LocatorError):
    """Raised when a location string does not match the canonical grammar."""

    def __init__(self, raw: str, reason: str) -> None:
        self.raw = raw
        self.reason = reason
        super().__init__(f"Invalid location '{raw}': {reason}")


class InvalidRangeError(LocatorError):
    """Raised when a selection range does not start and end inside text nodes."""


class NoTargetError(LocatorError):
    """Raised when no addressable node exists at a requested scroll offset."""


class NodeOutsideChapterError(LocatorError):
    """Raised when a node cannot be reached from the chapter root it is addressed against."""


class DriftWarning(UserWarning):
    """Content at a resolved address no longer matches the stored fingerprint."""

    def __init__(self, chapter_id: str, expected: str, actual: str) -> None:
        self.chapter_id = chapter_id
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Content hash mismatch in chapter '{chapter_id}': "
            f"expected {expected}, found {actual}"
        )
