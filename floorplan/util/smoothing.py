"""Line-of-sight path smoothing.

A* on a 4-connected grid produces staircase paths. `smooth` drops every
waypoint that can be skipped with a straight, unobstructed line, leaving a
short polyline that downstream consumers can use as navigation hints.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import tcod.los

if TYPE_CHECKING:
    import numpy as np

    from floorplan.environment.grid import Grid
    from floorplan.types import WorldTilePos


def get_line(start: WorldTilePos, end: WorldTilePos) -> list[WorldTilePos]:
    """Return Bresenham line points from start to end, both included."""
    return [(int(x), int(y)) for x, y in tcod.los.bresenham(start, end).tolist()]


def has_line_of_sight(
    start: WorldTilePos,
    end: WorldTilePos,
    grid: Grid,
    walkable: np.ndarray | None = None,
) -> bool:
    """True if every tile on the line between two points is walkable.

    ``walkable`` may be passed in to avoid recomputing the grid's walkable
    map on every call.
    """
    if walkable is None:
        walkable = grid.walkable
    return all(
        grid.in_bounds(pos) and walkable[pos] for pos in get_line(start, end)
    )


def smooth(raw_path: Sequence[WorldTilePos], grid: Grid) -> list[WorldTilePos]:
    """
    Remove redundant waypoints from a path.

    From the current anchor, scans for the farthest later waypoint that is
    still visible along a straight line, jumps to it and repeats. The output
    keeps the first and last points, is a subsequence of the input, and is
    never longer than it.

    Args:
        raw_path: Waypoints to smooth, typically an A* result.
        grid: Grid used for the visibility checks.

    Returns:
        The smoothed waypoints. Paths of two points or fewer are returned as
        a copy.
    """
    if len(raw_path) <= 2:
        return list(raw_path)

    walkable = grid.walkable
    result = [raw_path[0]]
    anchor = 0
    last = len(raw_path) - 1
    while anchor < last:
        # Farthest first; the immediate successor is always accepted.
        nxt = anchor + 1
        for candidate in range(last, anchor + 1, -1):
            if has_line_of_sight(
                raw_path[anchor], raw_path[candidate], grid, walkable
            ):
                nxt = candidate
                break
        result.append(raw_path[nxt])
        anchor = nxt
    return result
