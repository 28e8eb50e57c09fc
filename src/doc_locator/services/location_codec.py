"""Canonical string codec for Locations.

Grammar::

    doc:/<chapterId><path>[:<textOffset>]

    <path>   element step  /<index>
             text step     !/<index>
             offset step   :<index>    (trailing modifier, not a descent step)

Example: ``doc:/chapter-3/0/2!/1:15`` addresses chapter "chapter-3", first element
child, then its third element child, then that element's second text child, at
character 15.

The chapter id is percent-encoded so that ids containing ``/``, ``!`` or ``:``
(e.g. archive paths like ``OEBPS/ch1.xhtml``) survive the round trip. Both
functions are pure: parsing never touches a tree, so it cannot fail because of
content drift.
"""

import re
from typing import List, Optional
from urllib.parse import quote, unquote

from doc_locator.core import Location, ParseError, PathSegment, SegmentKind

PREFIX = "doc:/"
# Strings written by earlier readers used the "book:/" scheme with the same grammar.
ACCEPTED_PREFIXES = (PREFIX, "book:/")

_CHAPTER_RE = re.compile(r"[^/!:]*")
_TOKEN_RE = re.compile(r"(!/|/|:)([^/!:]*)")
_INDEX_RE = re.compile(r"[0-9]+")

_SIGILS = {
    SegmentKind.ELEMENT: "/",
    SegmentKind.TEXT: "!/",
    SegmentKind.OFFSET: ":",
}
_KINDS_BY_SIGIL = {sigil: kind for kind, sigil in _SIGILS.items()}


def serialize(location: Location) -> str:
    """Render a Location as its canonical string. Debug metadata and hash are dropped."""
    parts = [PREFIX, quote(location.chapter_id, safe="")]
    for segment in location.path:
        parts.append(f"{_SIGILS[segment.kind]}{segment.index}")
    if location.text_offset is not None:
        parts.append(f":{location.text_offset}")
    return "".join(parts)


def parse(raw: str) -> Location:
    """Parse a canonical location string.

    Raises:
        ParseError: If the prefix is missing, the chapter id is empty, or a path
            segment has an unknown sigil or a non-numeric index.
    """
    body = _strip_prefix(raw)

    chapter_match = _CHAPTER_RE.match(body)
    encoded_chapter = chapter_match.group(0) if chapter_match else ""
    chapter_id = unquote(encoded_chapter)
    if not chapter_id:
        raise ParseError(raw, "missing chapter id")

    tokens = _tokenize(raw, body, len(encoded_chapter))

    text_offset: Optional[int] = None
    if tokens and tokens[-1][0] == SegmentKind.OFFSET:
        text_offset = tokens.pop()[1]

    path = tuple(PathSegment(kind, index) for kind, index in tokens)
    return Location(chapter_id=chapter_id, path=path, text_offset=text_offset)


def is_location_string(raw: str) -> bool:
    """True when ``raw`` parses as a Location."""
    try:
        parse(raw)
    except ParseError:
        return False
    return True


def _strip_prefix(raw: str) -> str:
    for prefix in ACCEPTED_PREFIXES:
        if raw.startswith(prefix):
            return raw[len(prefix):]
    raise ParseError(raw, f"expected '{PREFIX}' prefix")


def _tokenize(raw: str, body: str, position: int) -> List[tuple]:
    tokens = []
    while position < len(body):
        match = _TOKEN_RE.match(body, position)
        if match is None:
            raise ParseError(raw, f"unknown sigil at '{body[position:]}'")
        sigil, index_text = match.groups()
        if not _INDEX_RE.fullmatch(index_text):
            raise ParseError(raw, f"non-numeric index '{index_text}' after '{sigil}'")
        tokens.append((_KINDS_BY_SIGIL[sigil], int(index_text)))
        position = match.end()
    return tokens
