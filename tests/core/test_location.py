"""Tests for the Location value objects and snapshot records."""

import pytest

from doc_locator.core import (
    ChangeType,
    Location,
    PathSegment,
    RangeLocation,
    ReadingPosition,
    SegmentKind,
    element_path,
)


class TestPathSegment:
    def test_negative_index_is_rejected(self):
        with pytest.raises(ValueError):
            PathSegment(SegmentKind.ELEMENT, -1)

    def test_debug_metadata_does_not_affect_equality(self):
        plain = PathSegment(SegmentKind.ELEMENT, 2)
        annotated = PathSegment(SegmentKind.ELEMENT, 2, tag_name="p", element_id="p1", element_class="lead")
        assert plain == annotated
        assert hash(plain) == hash(annotated)

    def test_kind_takes_part_in_equality(self):
        assert PathSegment(SegmentKind.ELEMENT, 0) != PathSegment(SegmentKind.TEXT, 0)

    def test_dict_form_uses_camel_case_keys(self):
        segment = PathSegment(SegmentKind.ELEMENT, 1, tag_name="p", element_id="p1")
        assert segment.to_dict() == {"type": "element", "index": 1, "tagName": "p", "elementId": "p1"}
        assert PathSegment.from_dict(segment.to_dict()).tag_name == "p"


class TestLocation:
    def test_list_path_is_stored_as_tuple(self):
        location = Location("chapter-1", [PathSegment(SegmentKind.ELEMENT, 0)])
        assert isinstance(location.path, tuple)
        assert hash(location) == hash(Location("chapter-1", element_path([0])))

    def test_negative_text_offset_is_rejected(self):
        with pytest.raises(ValueError):
            Location("chapter-1", element_path([0]), text_offset=-3)

    def test_content_hash_is_not_part_of_equality(self):
        location = Location("chapter-1", element_path([1]))
        assert location == location.with_content_hash("abc")
        assert location.with_content_hash("abc").content_hash == "abc"

    def test_text_offset_is_part_of_equality(self):
        path = (PathSegment(SegmentKind.ELEMENT, 1), PathSegment(SegmentKind.TEXT, 0))
        assert Location("chapter-1", path, 6) != Location("chapter-1", path, 7)

    def test_empty_path_is_not_resolvable(self):
        assert not Location("chapter-1").is_resolvable
        assert not Location("chapter-1", (PathSegment(SegmentKind.OFFSET, 3),)).is_resolvable
        assert Location("chapter-1", element_path([0])).is_resolvable

    def test_targets_text(self):
        text_path = (PathSegment(SegmentKind.ELEMENT, 1), PathSegment(SegmentKind.TEXT, 0))
        assert Location("chapter-1", text_path).targets_text
        assert not Location("chapter-1", element_path([1])).targets_text

    def test_dict_round_trip_keeps_hash(self):
        location = Location("chapter-1", element_path([3, 1]), text_offset=4, content_hash="-1x2")
        data = location.to_dict()
        assert data["chapterId"] == "chapter-1"
        assert data["textOffset"] == 4
        assert data["hash"] == "-1x2"
        restored = Location.from_dict(data)
        assert restored == location
        assert restored.content_hash == "-1x2"


def test_range_location_dict_form():
    start = Location("chapter-1", element_path([1]), text_offset=0)
    end = Location("chapter-1", element_path([1]), text_offset=5)
    selection = RangeLocation(
        start=start,
        end=end,
        chapter_id="chapter-1",
        selected_text="Hello",
        context_after=" world",
        word_count=1,
        char_count=5,
    )
    data = selection.to_dict()
    assert set(data) == {
        "startCFI", "endCFI", "chapterId", "selectedText",
        "contextBefore", "contextAfter", "wordCount", "charCount",
    }
    assert RangeLocation.from_dict(data) == selection


class TestReadingPosition:
    def test_record_omits_unset_optional_fields(self):
        position = ReadingPosition(
            location=Location("chapter-1", element_path([1])),
            chapter_id="chapter-1",
            chapter_progress=0.25,
            book_progress=0.125,
            timestamp=1700000000000,
        )
        record = position.to_record()
        assert set(record) == {"cfi", "chapterId", "chapterProgress", "bookProgress", "timestamp"}

    def test_record_round_trip(self):
        position = ReadingPosition(
            location=Location("chapter-1", element_path([2, 0]), content_hash="2p"),
            chapter_id="chapter-1",
            chapter_progress=0.5,
            book_progress=0.25,
            timestamp=1700000000000,
            viewport_offset=1200.0,
            page_number=2,
            total_pages=5,
        )
        restored = ReadingPosition.from_record(position.to_record())
        assert restored == position
        assert restored.location.content_hash == "2p"


def test_change_type_values():
    assert [change.value for change in ChangeType] == ["scroll", "selection", "chapter", "page"]
