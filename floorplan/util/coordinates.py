"""Integer rectangle geometry and bounds helpers."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from floorplan.types import TileCoord, WorldTilePos


@dataclass(frozen=True, slots=True)
class Rect:
    """Rectangle in tile coordinates.

    ``(x1, y1)`` is the inclusive top-left cell; ``x2`` and ``y2`` are
    exclusive, so a Rect covers ``width * height`` cells.
    """

    x: TileCoord
    y: TileCoord
    width: TileCoord
    height: TileCoord

    @classmethod
    def from_bounds(
        cls, x1: TileCoord, y1: TileCoord, x2: TileCoord, y2: TileCoord
    ) -> Rect:
        """Create a Rect from corner coordinates (x1, y1, x2, y2)."""
        return cls(x1, y1, x2 - x1, y2 - y1)

    @property
    def x1(self) -> TileCoord:
        return self.x

    @property
    def y1(self) -> TileCoord:
        return self.y

    @property
    def x2(self) -> TileCoord:
        return self.x + self.width

    @property
    def y2(self) -> TileCoord:
        return self.y + self.height

    @property
    def area(self) -> int:
        return max(0, self.width) * max(0, self.height)

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def center(self) -> WorldTilePos:
        """Return the middle covered cell, rounding toward the top-left."""
        return (self.x + (self.width - 1) // 2, self.y + (self.height - 1) // 2)

    def contains(self, x: TileCoord, y: TileCoord) -> bool:
        return self.x1 <= x < self.x2 and self.y1 <= y < self.y2

    def contains_rect(self, other: Rect) -> bool:
        return (
            self.x1 <= other.x1
            and self.y1 <= other.y1
            and other.x2 <= self.x2
            and other.y2 <= self.y2
        )

    def intersects(self, other: Rect) -> bool:
        """True if the two rectangles share at least one cell."""
        return (
            self.x1 < other.x2
            and other.x1 < self.x2
            and self.y1 < other.y2
            and other.y1 < self.y2
        )

    def inset(self, left: int, top: int, right: int, bottom: int) -> Rect:
        return Rect.from_bounds(
            self.x1 + left, self.y1 + top, self.x2 - right, self.y2 - bottom
        )

    def expanded(self, amount: int) -> Rect:
        return Rect.from_bounds(
            self.x1 - amount, self.y1 - amount, self.x2 + amount, self.y2 + amount
        )

    def cells(self) -> Iterator[WorldTilePos]:
        """Yield every covered cell, row by row."""
        for y in range(self.y1, self.y2):
            for x in range(self.x1, self.x2):
                yield (x, y)

    def perimeter_ring(self) -> Iterator[WorldTilePos]:
        """Yield the cells orthogonally adjacent to this rectangle.

        Diagonal corner cells are excluded: a corridor can only enter a room
        through one of these cells.
        """
        for x in range(self.x1, self.x2):
            yield (x, self.y1 - 1)
            yield (x, self.y2)
        for y in range(self.y1, self.y2):
            yield (self.x1 - 1, y)
            yield (self.x2, y)

    def __repr__(self) -> str:
        return f"Rect(x1={self.x1}, y1={self.y1}, x2={self.x2}, y2={self.y2})"


# =============================================================================
# BOUNDS CHECKING HELPERS
# =============================================================================


def is_valid_world_tile_pos(
    pos: WorldTilePos, map_width: TileCoord, map_height: TileCoord
) -> bool:
    """Check if world tile position is within map bounds."""
    x, y = pos
    return 0 <= x < map_width and 0 <= y < map_height


def manhattan(a: WorldTilePos, b: WorldTilePos) -> int:
    """Manhattan (taxicab) distance between two tiles."""
    return abs(a[0] - b[0]) + abs(a[1] - b[1])
