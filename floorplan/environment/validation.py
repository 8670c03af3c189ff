"""Structural and connectivity checks for a finished layout.

`validate` never raises for a bad layout; every problem becomes an issue
in the returned ValidationReport. Errors mean the layout breaks a
guarantee (overlap, unreachable room, ...). Warnings flag things that are
legal but probably unintended.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Collection
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from floorplan import config
from floorplan.environment.layout import MapLayout
from floorplan.util.coordinates import Rect, is_valid_world_tile_pos
from floorplan.util.pathfinding import is_contiguous

if TYPE_CHECKING:
    from floorplan.types import CorridorId, RoomId

logger = logging.getLogger(__name__)


class IssueCode(Enum):
    # Errors
    NO_ROOMS = "no_rooms"
    INVALID_ROOM_AREA = "invalid_room_area"
    ROOM_OUT_OF_BOUNDS = "room_out_of_bounds"
    OVERLAPPING_ROOMS = "overlapping_rooms"
    CORRIDOR_TOO_NARROW = "corridor_too_narrow"
    UNKNOWN_CORRIDOR_ENDPOINT = "unknown_corridor_endpoint"
    EMPTY_CORRIDOR_PATH = "empty_corridor_path"
    CORRIDOR_OUT_OF_BOUNDS = "corridor_out_of_bounds"
    UNKNOWN_ENTRY_ROOM = "unknown_entry_room"
    UNREACHABLE_ROOM = "unreachable_room"
    # Warnings
    NON_CONTIGUOUS_PATH = "non_contiguous_path"
    NON_STANDARD_WIDTH = "non_standard_width"
    NARROW_ROOM = "narrow_room"
    SINGLE_ROOM = "single_room"


@dataclass(frozen=True)
class ValidationIssue:
    code: IssueCode
    message: str
    room_id: RoomId | None = None
    corridor_id: CorridorId | None = None

    def __str__(self) -> str:
        return self.message


@dataclass
class ValidationReport:
    """Errors, warnings and reachability for one layout.

    Attributes:
        errors: Issues that break a layout guarantee.
        warnings: Legal but suspicious findings.
        entry_room_id: Room reachability was measured from.
        reachable_room_ids: Rooms reachable from the entry room, sorted.
        unconnected_room_ids: Rooms not reachable from the entry room, sorted.
    """

    errors: list[ValidationIssue] = field(default_factory=list)
    warnings: list[ValidationIssue] = field(default_factory=list)
    entry_room_id: RoomId | None = None
    reachable_room_ids: list[RoomId] = field(default_factory=list)
    unconnected_room_ids: list[RoomId] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    @property
    def is_fully_connected(self) -> bool:
        return not self.unconnected_room_ids

    def error(self, code: IssueCode, message: str, **ids: int | None) -> None:
        self.errors.append(ValidationIssue(code, message, **ids))

    def warn(self, code: IssueCode, message: str, **ids: int | None) -> None:
        self.warnings.append(ValidationIssue(code, message, **ids))

    def codes(self) -> set[IssueCode]:
        return {issue.code for issue in (*self.errors, *self.warnings)}

    def merge(self, other: ValidationReport) -> ValidationReport:
        """Combine two reports. Reachability is taken from ``self`` when set."""
        return ValidationReport(
            errors=[*self.errors, *other.errors],
            warnings=[*self.warnings, *other.warnings],
            entry_room_id=(
                self.entry_room_id
                if self.entry_room_id is not None
                else other.entry_room_id
            ),
            reachable_room_ids=sorted(
                set(self.reachable_room_ids) | set(other.reachable_room_ids)
            ),
            unconnected_room_ids=sorted(
                set(self.unconnected_room_ids) | set(other.unconnected_room_ids)
            ),
        )

    def summary(self) -> str:
        status = "valid" if self.is_valid else "invalid"
        lines = [
            f"Layout {status}: {len(self.errors)} errors, "
            f"{len(self.warnings)} warnings, "
            f"{len(self.unconnected_room_ids)} unconnected rooms"
        ]
        lines.extend(f"  error: {issue}" for issue in self.errors)
        lines.extend(f"  warning: {issue}" for issue in self.warnings)
        return "\n".join(lines)


def validate(
    layout: MapLayout,
    *,
    min_corridor_width: int = config.MIN_CORRIDOR_WIDTH,
    expected_widths: Collection[int] | None = None,
) -> ValidationReport:
    """
    Check a layout's rooms, corridors and connectivity.

    Args:
        layout: The layout to check.
        min_corridor_width: Corridors narrower than this are errors.
        expected_widths: Corridor widths considered standard. Any other
            width produces a warning. None disables the check.

    Returns:
        A report listing every problem found.

    Raises:
        TypeError: If ``layout`` is not a MapLayout.
    """
    if not isinstance(layout, MapLayout):
        raise TypeError(f"Expected a MapLayout, got {type(layout).__name__}")

    report = ValidationReport()
    _check_rooms(layout, report)
    _check_corridors(layout, report, min_corridor_width, expected_widths)
    _check_connectivity(layout, report)

    if report.is_valid:
        logger.debug(report.summary())
    else:
        logger.debug(f"Layout failed validation:\n{report.summary()}")
    return report


def _check_rooms(layout: MapLayout, report: ValidationReport) -> None:
    rooms = layout.rooms
    if not rooms:
        report.error(IssueCode.NO_ROOMS, "Layout has no rooms")
        return
    if len(rooms) == 1:
        report.warn(
            IssueCode.SINGLE_ROOM, "Layout has a single room", room_id=rooms[0].id
        )

    for room in rooms:
        rect = room.rect
        if rect.width <= 0 or rect.height <= 0:
            report.error(
                IssueCode.INVALID_ROOM_AREA,
                f"Room {room.id} has non-positive size {rect.width}x{rect.height}",
                room_id=room.id,
            )
            continue
        if not Rect(0, 0, layout.width, layout.height).contains_rect(rect):
            report.error(
                IssueCode.ROOM_OUT_OF_BOUNDS,
                f"Room {room.id} {rect} lies outside the "
                f"{layout.width}x{layout.height} bounds",
                room_id=room.id,
            )
        if min(rect.width, rect.height) < config.NARROW_ROOM_WARNING_SIZE:
            report.warn(
                IssueCode.NARROW_ROOM,
                f"Room {room.id} is only {rect.width}x{rect.height}",
                room_id=room.id,
            )

    for i, room in enumerate(rooms):
        for other in rooms[i + 1 :]:
            if room.rect.intersects(other.rect):
                report.error(
                    IssueCode.OVERLAPPING_ROOMS,
                    f"Rooms {room.id} and {other.id} overlap",
                    room_id=room.id,
                )


def _check_corridors(
    layout: MapLayout,
    report: ValidationReport,
    min_width: int,
    expected_widths: Collection[int] | None,
) -> None:
    room_ids = {room.id for room in layout.rooms}
    for corridor in layout.corridors:
        cid = corridor.id
        if corridor.width < min_width:
            report.error(
                IssueCode.CORRIDOR_TOO_NARROW,
                f"Corridor {cid} has width {corridor.width}, minimum is {min_width}",
                corridor_id=cid,
            )
        elif expected_widths is not None and corridor.width not in expected_widths:
            report.warn(
                IssueCode.NON_STANDARD_WIDTH,
                f"Corridor {cid} has non-standard width {corridor.width}",
                corridor_id=cid,
            )

        for end in corridor.endpoints:
            if end not in room_ids:
                report.error(
                    IssueCode.UNKNOWN_CORRIDOR_ENDPOINT,
                    f"Corridor {cid} references unknown room {end}",
                    room_id=end,
                    corridor_id=cid,
                )

        if not corridor.path:
            report.error(
                IssueCode.EMPTY_CORRIDOR_PATH,
                f"Corridor {cid} has no path",
                corridor_id=cid,
            )
            continue
        outside = [
            pos
            for pos in corridor.path
            if not is_valid_world_tile_pos(pos, layout.width, layout.height)
        ]
        if outside:
            report.error(
                IssueCode.CORRIDOR_OUT_OF_BOUNDS,
                f"Corridor {cid} leaves the map at {outside[0]}",
                corridor_id=cid,
            )
        if not is_contiguous(corridor.path):
            report.warn(
                IssueCode.NON_CONTIGUOUS_PATH,
                f"Corridor {cid} path has gaps",
                corridor_id=cid,
            )


def _check_connectivity(layout: MapLayout, report: ValidationReport) -> None:
    """Breadth-first search over the corridor graph from the entry room."""
    if not layout.rooms:
        return

    adjacency = layout.adjacency()
    room_ids = {room.id for room in layout.rooms}
    entry = layout.entry_room_id
    if entry is None:
        entry = min(room_ids)
    elif entry not in room_ids:
        report.error(
            IssueCode.UNKNOWN_ENTRY_ROOM,
            f"Entry room {entry} does not exist",
            room_id=entry,
        )
        return
    report.entry_room_id = entry

    seen = {entry}
    queue = deque([entry])
    while queue:
        current = queue.popleft()
        for neighbor in adjacency[current]:
            if neighbor not in seen:
                seen.add(neighbor)
                queue.append(neighbor)

    unreachable = sorted(room_ids - seen)
    # A lone entry room cannot reach anything, so it is cut off too.
    if unreachable and not adjacency[entry]:
        unreachable = sorted(room_ids)
        seen = set()

    report.reachable_room_ids = sorted(seen & room_ids)
    report.unconnected_room_ids = unreachable
    for room_id in unreachable:
        report.error(
            IssueCode.UNREACHABLE_ROOM,
            f"Room {room_id} is not reachable from entry room {entry}",
            room_id=room_id,
        )
