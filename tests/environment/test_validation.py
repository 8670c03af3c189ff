"""Tests for the connectivity validator."""

from __future__ import annotations

import pytest

from floorplan.environment.layout import Corridor, CorridorKind
from floorplan.environment.validation import (
    IssueCode,
    ValidationIssue,
    ValidationReport,
    validate,
)
from tests.helpers import make_corridor, make_layout, make_room


def _three_rooms():
    return [
        make_room(0, 1, 1, 5, 5),
        make_room(1, 12, 1, 5, 5),
        make_room(2, 24, 1, 5, 5),
    ]


class TestValidate:
    def test_rejects_non_layouts(self) -> None:
        with pytest.raises(TypeError):
            validate(None)  # type: ignore[arg-type]
        with pytest.raises(TypeError):
            validate({"rooms": []})  # type: ignore[arg-type]

    def test_connected_chain_is_valid(self) -> None:
        a, b, c = _three_rooms()
        layout = make_layout(
            [a, b, c], [make_corridor(0, a, b), make_corridor(1, b, c)]
        )
        report = validate(layout)
        assert report.is_valid
        assert not report.has_warnings
        assert report.reachable_room_ids == [0, 1, 2]
        assert report.unconnected_room_ids == []
        assert report.is_fully_connected

    def test_no_rooms(self) -> None:
        report = validate(make_layout([], entry_room_id=None))
        assert [issue.code for issue in report.errors] == [IssueCode.NO_ROOMS]

    def test_unreachable_room(self) -> None:
        a, b, c = _three_rooms()
        report = validate(make_layout([a, b, c], [make_corridor(0, a, b)]))
        assert report.unconnected_room_ids == [2]
        assert IssueCode.UNREACHABLE_ROOM in report.codes()
        assert not report.is_valid

    def test_isolated_entry_room_is_itself_unconnected(self) -> None:
        a, b, c = _three_rooms()
        report = validate(make_layout([a, b, c], [make_corridor(0, b, c)]))
        assert report.unconnected_room_ids == [0, 1, 2]
        assert report.reachable_room_ids == []

    def test_single_room_is_valid_with_warning(self) -> None:
        report = validate(make_layout([make_room(0, 1, 1, 5, 5)]))
        assert report.is_valid
        assert report.unconnected_room_ids == []
        assert IssueCode.SINGLE_ROOM in report.codes()

    def test_entry_defaults_to_lowest_room(self) -> None:
        a, b, c = _three_rooms()
        layout = make_layout(
            [a, b, c], [make_corridor(0, a, b)], entry_room_id=None
        )
        report = validate(layout)
        assert report.entry_room_id == 0

    def test_unknown_entry_room(self) -> None:
        a, b, _ = _three_rooms()
        layout = make_layout([a, b], [make_corridor(0, a, b)], entry_room_id=9)
        report = validate(layout)
        assert IssueCode.UNKNOWN_ENTRY_ROOM in report.codes()

    def test_overlapping_rooms(self) -> None:
        rooms = [make_room(0, 1, 1, 5, 5), make_room(1, 4, 4, 5, 5)]
        report = validate(make_layout(rooms, [make_corridor(0, *rooms)]))
        assert IssueCode.OVERLAPPING_ROOMS in report.codes()

    def test_room_out_of_bounds(self) -> None:
        rooms = [make_room(0, 1, 1, 5, 5), make_room(1, 38, 1, 5, 5)]
        report = validate(make_layout(rooms, [make_corridor(0, *rooms)]))
        out = [i for i in report.errors if i.code is IssueCode.ROOM_OUT_OF_BOUNDS]
        assert [i.room_id for i in out] == [1]
        assert IssueCode.CORRIDOR_OUT_OF_BOUNDS in report.codes()

    def test_non_positive_room_area(self) -> None:
        rooms = [make_room(0, 1, 1, 5, 5), make_room(1, 10, 1, 0, 4)]
        report = validate(make_layout(rooms))
        assert IssueCode.INVALID_ROOM_AREA in report.codes()

    def test_corridor_width_below_minimum(self) -> None:
        a, b, _ = _three_rooms()
        report = validate(make_layout([a, b], [make_corridor(0, a, b, width=0)]))
        assert IssueCode.CORRIDOR_TOO_NARROW in report.codes()

        report = validate(
            make_layout([a, b], [make_corridor(0, a, b, width=1)]), min_corridor_width=2
        )
        assert IssueCode.CORRIDOR_TOO_NARROW in report.codes()

    def test_non_standard_width_is_a_warning(self) -> None:
        a, b, _ = _three_rooms()
        layout = make_layout([a, b], [make_corridor(0, a, b, width=4)])
        report = validate(layout, expected_widths={1, 2})
        assert report.is_valid
        assert IssueCode.NON_STANDARD_WIDTH in report.codes()
        assert IssueCode.NON_STANDARD_WIDTH not in validate(layout).codes()

    def test_unknown_corridor_endpoint(self) -> None:
        a, b, _ = _three_rooms()
        ghost = Corridor(
            id=1,
            room_a=0,
            room_b=7,
            path=((3, 3), (3, 4)),
            width=1,
            kind=CorridorKind.SECONDARY,
        )
        report = validate(make_layout([a, b], [make_corridor(0, a, b), ghost]))
        bad = [
            i for i in report.errors if i.code is IssueCode.UNKNOWN_CORRIDOR_ENDPOINT
        ]
        assert [(i.room_id, i.corridor_id) for i in bad] == [(7, 1)]
        assert report.unconnected_room_ids == []

    def test_empty_corridor_path(self) -> None:
        a, b, _ = _three_rooms()
        report = validate(make_layout([a, b], [make_corridor(0, a, b, path=())]))
        assert IssueCode.EMPTY_CORRIDOR_PATH in report.codes()

    def test_gappy_path_is_a_warning(self) -> None:
        a, b, _ = _three_rooms()
        corridor = make_corridor(0, a, b, path=[(3, 3), (5, 3), (14, 3)])
        report = validate(make_layout([a, b], [corridor]))
        assert report.is_valid
        assert IssueCode.NON_CONTIGUOUS_PATH in report.codes()

    def test_narrow_room_warning(self) -> None:
        rooms = [make_room(0, 1, 1, 5, 5), make_room(1, 12, 1, 2, 6)]
        report = validate(make_layout(rooms, [make_corridor(0, *rooms)]))
        narrow = [i for i in report.warnings if i.code is IssueCode.NARROW_ROOM]
        assert [i.room_id for i in narrow] == [1]


class TestValidationReport:
    def test_merge(self) -> None:
        first = ValidationReport(entry_room_id=0, reachable_room_ids=[0, 1])
        first.error(IssueCode.UNREACHABLE_ROOM, "Room 2 unreachable", room_id=2)
        first.unconnected_room_ids = [2]
        second = ValidationReport()
        second.warn(IssueCode.NARROW_ROOM, "Room 1 is narrow", room_id=1)

        merged = first.merge(second)

        assert len(merged.errors) == 1
        assert len(merged.warnings) == 1
        assert merged.entry_room_id == 0
        assert merged.unconnected_room_ids == [2]
        assert len(first.warnings) == 0

    def test_summary_lists_issues(self) -> None:
        report = ValidationReport()
        report.error(IssueCode.NO_ROOMS, "Layout has no rooms")
        report.warn(IssueCode.SINGLE_ROOM, "Layout has a single room")
        text = report.summary()
        assert text.startswith("Layout invalid: 1 errors, 1 warnings")
        assert "error: Layout has no rooms" in text
        assert "warning: Layout has a single room" in text

    def test_issue_str(self) -> None:
        issue = ValidationIssue(IssueCode.NO_ROOMS, "nothing here")
        assert str(issue) == "nothing here"
