from __future__ import annotations

from collections.abc import Sequence

from floorplan.environment.grid import Grid
from floorplan.environment.layout import (
    Corridor,
    CorridorKind,
    MapLayout,
    Room,
    RoomClassification,
)
from floorplan.types import WorldTilePos
from floorplan.util.coordinates import Rect


def make_room(room_id: int, x: int, y: int, w: int, h: int, depth: int = 1) -> Room:
    """A room with a plain rectangle and no partition behind it."""
    return Room(
        id=room_id,
        rect=Rect(x, y, w, h),
        depth=depth,
        partition_index=-1,
        classification=RoomClassification.OFFICE,
    )


def l_path(start: WorldTilePos, end: WorldTilePos) -> list[WorldTilePos]:
    """Contiguous path: along x first, then along y."""
    (x0, y0), (x1, y1) = start, end
    step_x = 1 if x1 >= x0 else -1
    step_y = 1 if y1 >= y0 else -1
    path = [(x, y0) for x in range(x0, x1 + step_x, step_x)]
    path.extend((x1, y) for y in range(y0 + step_y, y1 + step_y, step_y))
    return path


def make_corridor(
    corridor_id: int,
    room_a: Room,
    room_b: Room,
    *,
    width: int = 1,
    kind: CorridorKind = CorridorKind.SECONDARY,
    path: Sequence[WorldTilePos] | None = None,
) -> Corridor:
    if path is None:
        path = l_path(room_a.center, room_b.center)
    return Corridor(
        id=corridor_id,
        room_a=room_a.id,
        room_b=room_b.id,
        path=tuple(path),
        width=width,
        kind=kind,
    )


def make_layout(
    rooms: Sequence[Room],
    corridors: Sequence[Corridor] = (),
    *,
    width: int = 40,
    height: int = 30,
    entry_room_id: int | None = 0,
) -> MapLayout:
    grid = Grid(width, height)
    grid.paint_rooms(rooms)
    return MapLayout(
        rooms=tuple(rooms),
        corridors=tuple(corridors),
        width=width,
        height=height,
        seed=0,
        grid=grid,
        entry_room_id=entry_room_id,
    )


def sealed_room_grid() -> Grid:
    """Two 5x5 rooms, each completely enclosed by walls."""
    return Grid.from_text(
        [
            "#######  #######",
            "#.....#  #.....#",
            "#.....#  #.....#",
            "#.....#  #.....#",
            "#.....#  #.....#",
            "#.....#  #.....#",
            "#######  #######",
        ]
    )
