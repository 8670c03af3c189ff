"""
A spatial hash grid for fast nearest-tile queries.

This module provides a `SpatialHashGrid` class that implements a
`SpatialIndex` interface. The corridor orchestrator uses it to find the
primary-corridor tile closest to a room, replacing an O(n) scan over every
spine tile with a search over the few nearby cells. `nearest_linear` gives
the same answer by brute force and is used for small spines.
"""

import abc
from collections import defaultdict
from collections.abc import Collection, Iterable
from typing import Generic, Protocol, TypeAlias, TypeVar

from floorplan.types import WorldTileCoord

# A type alias for coordinate tuples to improve readability.
Coord: TypeAlias = tuple[int, int]


class HasPosition(Protocol):
    """A protocol for objects that have integer x and y attributes."""

    x: int
    y: int


# Any object stored in the spatial index has .x and .y attributes.
T = TypeVar("T", bound=HasPosition)


class SpatialIndex(abc.ABC, Generic[T]):
    """Abstract base class for a spatial indexing data structure."""

    @abc.abstractmethod
    def add(self, obj: T) -> None:
        """Add an object to the index."""

    @abc.abstractmethod
    def remove(self, obj: T) -> None:
        """Remove an object from the index."""

    @abc.abstractmethod
    def get_at_point(self, x: WorldTileCoord, y: WorldTileCoord) -> list[T]:
        """Get all objects at a specific tile (x, y)."""

    @abc.abstractmethod
    def get_in_bounds(self, x1: int, y1: int, x2: int, y2: int) -> list[T]:
        """Get all objects within a rectangular bounding box (inclusive)."""

    @abc.abstractmethod
    def nearest(
        self, x: int, y: int, exclude: Collection[Coord] = ()
    ) -> list[T]:
        """Get every object tied for the smallest Manhattan distance."""

    @abc.abstractmethod
    def clear(self) -> None:
        """Remove all objects from the index."""


class SpatialHashGrid(SpatialIndex[T]):
    """
    A spatial hash grid for efficient spatial queries of objects.

    The grid divides the layout into square cells of a fixed size. Objects
    are stored in a dictionary mapping cell coordinates to the set of objects
    within that cell, so a query only has to look at the relevant cells.
    """

    def __init__(self, cell_size: int = 16):
        if cell_size <= 0:
            raise ValueError("Cell size must be a positive integer.")
        self.cell_size = cell_size
        self.grid: dict[Coord, set[T]] = defaultdict(set)
        self._obj_to_cell: dict[T, Coord] = {}

    def __len__(self) -> int:
        return len(self._obj_to_cell)

    def _hash(self, x: int, y: int) -> Coord:
        """Converts tile coordinates to grid cell coordinates."""
        return x // self.cell_size, y // self.cell_size

    def add(self, obj: T) -> None:
        """Add an object to the grid."""
        cell_xy = self._hash(obj.x, obj.y)
        self.grid[cell_xy].add(obj)
        self._obj_to_cell[obj] = cell_xy

    def extend(self, objs: Iterable[T]) -> None:
        for obj in objs:
            self.add(obj)

    def remove(self, obj: T) -> None:
        """Remove an object from the grid."""
        cell_xy = self._obj_to_cell.pop(obj, None)
        if cell_xy is None:
            return  # Object not in the grid.

        cell = self.grid.get(cell_xy)
        if cell is not None:
            cell.discard(obj)
            # Drop empty cells so ring searches can stop early.
            if not cell:
                del self.grid[cell_xy]

    def get_at_point(self, x: int, y: int) -> list[T]:
        """Get all objects at a specific tile (x, y)."""
        cell_contents = self.grid.get(self._hash(x, y), ())
        return [obj for obj in cell_contents if obj.x == x and obj.y == y]

    def get_in_bounds(self, x1: int, y1: int, x2: int, y2: int) -> list[T]:
        """Get all objects within a rectangular bounding box."""
        if x1 > x2:
            x1, x2 = x2, x1
        if y1 > y2:
            y1, y2 = y2, y1

        cx1, cy1 = self._hash(x1, y1)
        cx2, cy2 = self._hash(x2, y2)
        return [
            obj
            for cx in range(cx1, cx2 + 1)
            for cy in range(cy1, cy2 + 1)
            for obj in self.grid.get((cx, cy), ())
            if x1 <= obj.x <= x2 and y1 <= obj.y <= y2
        ]

    def nearest(self, x: int, y: int, exclude: Collection[Coord] = ()) -> list[T]:
        """Get every object tied for the smallest Manhattan distance to (x, y).

        Searches square rings of cells outward from the query cell. Any
        object in ring r+1 or beyond is more than ``r * cell_size`` tiles
        away, so once the best distance found is within that bound the
        search stops.

        Args:
            x: Query tile x.
            y: Query tile y.
            exclude: Tile positions to ignore (e.g. targets that already
                failed).

        Returns:
            The tied objects, sorted by (y, x). Empty if the index holds no
            eligible object.
        """
        if not self.grid:
            return []

        qcx, qcy = self._hash(x, y)
        max_ring = max(
            max(abs(cx - qcx), abs(cy - qcy)) for cx, cy in self.grid
        )

        best_dist: int | None = None
        best: list[T] = []
        for ring in range(max_ring + 1):
            for cell_xy in _ring_cells(qcx, qcy, ring):
                for obj in self.grid.get(cell_xy, ()):
                    if (obj.x, obj.y) in exclude:
                        continue
                    dist = abs(obj.x - x) + abs(obj.y - y)
                    if best_dist is None or dist < best_dist:
                        best_dist = dist
                        best = [obj]
                    elif dist == best_dist:
                        best.append(obj)
            if best_dist is not None and best_dist <= ring * self.cell_size:
                break

        return sorted(best, key=lambda o: (o.y, o.x))

    def clear(self) -> None:
        """Remove all objects from the index."""
        self.grid.clear()
        self._obj_to_cell.clear()


def _ring_cells(cx: int, cy: int, ring: int) -> list[Coord]:
    """Cells at exactly Chebyshev distance ``ring`` from (cx, cy)."""
    if ring == 0:
        return [(cx, cy)]
    cells = [(x, cy - ring) for x in range(cx - ring, cx + ring + 1)]
    cells.extend((x, cy + ring) for x in range(cx - ring, cx + ring + 1))
    cells.extend((cx - ring, y) for y in range(cy - ring + 1, cy + ring))
    cells.extend((cx + ring, y) for y in range(cy - ring + 1, cy + ring))
    return cells


def nearest_linear(
    objs: Iterable[T], x: int, y: int, exclude: Collection[Coord] = ()
) -> list[T]:
    """Brute-force counterpart of SpatialHashGrid.nearest with identical output."""
    best_dist: int | None = None
    best: list[T] = []
    for obj in objs:
        if (obj.x, obj.y) in exclude:
            continue
        dist = abs(obj.x - x) + abs(obj.y - y)
        if best_dist is None or dist < best_dist:
            best_dist = dist
            best = [obj]
        elif dist == best_dist:
            best.append(obj)
    return sorted(best, key=lambda o: (o.y, o.x))
