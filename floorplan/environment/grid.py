"""Dense tile grid shared by every generation phase."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

import numpy as np

from floorplan.environment import tile_types
from floorplan.environment.tile_types import TileState

if TYPE_CHECKING:
    from floorplan.environment.layout import Room
    from floorplan.types import TileCoord, WorldTilePos
    from floorplan.util.coordinates import Rect


class Grid:
    """A width x height array of TileState values.

    The backing array has shape ``(width, height)`` in Fortran order and is
    indexed ``tiles[x, y]``. Reads outside the grid return
    ``TileState.OUT_OF_BOUNDS``; writes outside the grid are ignored.
    """

    def __init__(
        self,
        width: TileCoord,
        height: TileCoord,
        fill: TileState = TileState.EMPTY,
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.tiles = np.full((width, height), fill, dtype=np.uint8, order="F")

    @classmethod
    def from_array(cls, tiles: np.ndarray) -> Grid:
        """Wrap a copy of an existing (width, height) uint8 array."""
        width, height = tiles.shape
        grid = cls(width, height)
        grid.tiles[:] = tiles
        return grid

    @classmethod
    def from_text(cls, rows: Sequence[str]) -> Grid:
        """Build a grid from rows of tile glyphs, top row first.

        Rows shorter than the longest row are padded with EMPTY.
        """
        height = len(rows)
        width = max((len(row) for row in rows), default=0)
        grid = cls(width, height)
        for y, row in enumerate(rows):
            for x, ch in enumerate(row):
                grid.tiles[x, y] = tile_types.state_for_glyph(ch)
        return grid

    # -------------------------------------------------------------------------
    # Cell access
    # -------------------------------------------------------------------------

    def in_bounds(self, pos: WorldTilePos) -> bool:
        x, y = pos
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, pos: WorldTilePos) -> TileState:
        if not self.in_bounds(pos):
            return TileState.OUT_OF_BOUNDS
        return TileState(int(self.tiles[pos]))

    def set(self, pos: WorldTilePos, state: TileState) -> None:
        if state == TileState.OUT_OF_BOUNDS:
            raise ValueError("OUT_OF_BOUNDS is a query sentinel and cannot be stored")
        if self.in_bounds(pos):
            self.tiles[pos] = state

    def is_walkable(self, pos: WorldTilePos) -> bool:
        return tile_types.is_walkable(self.get(pos))

    def fill_rect(self, rect: Rect, state: TileState) -> None:
        """Set every cell of ``rect`` that lies inside the grid."""
        x1, y1 = max(rect.x1, 0), max(rect.y1, 0)
        x2, y2 = min(rect.x2, self.width), min(rect.y2, self.height)
        if x1 < x2 and y1 < y2:
            self.tiles[x1:x2, y1:y2] = state

    # -------------------------------------------------------------------------
    # Whole-grid queries
    # -------------------------------------------------------------------------

    @property
    def walkable(self) -> np.ndarray:
        """Boolean (width, height) map of walkable cells."""
        return tile_types.get_walkable_map(self.tiles)

    def positions_of(self, state: TileState) -> list[WorldTilePos]:
        """All cells holding ``state``, sorted by (x, y)."""
        xs, ys = np.nonzero(self.tiles == state)
        return [(int(x), int(y)) for x, y in zip(xs, ys, strict=True)]

    def count(self, state: TileState) -> int:
        return int(np.count_nonzero(self.tiles == state))

    def copy(self) -> Grid:
        return Grid.from_array(self.tiles)

    def to_text(self) -> str:
        """Render one glyph per tile, rows top to bottom."""
        glyphs = tile_types.get_glyph_map(self.tiles)
        return "\n".join("".join(glyphs[:, y]) for y in range(self.height))

    # -------------------------------------------------------------------------
    # Rasterization
    # -------------------------------------------------------------------------

    def paint_rooms(self, rooms: Iterable[Room]) -> None:
        for room in rooms:
            self.fill_rect(room.rect, TileState.ROOM_FLOOR)

    def enclose_rooms(self, rooms: Iterable[Room]) -> int:
        """Turn EMPTY cells around each room, corners included, into WALL.

        Returns:
            The number of cells converted.
        """
        converted = 0
        for room in rooms:
            ring = room.rect.expanded(1)
            x1, y1 = max(ring.x1, 0), max(ring.y1, 0)
            x2, y2 = min(ring.x2, self.width), min(ring.y2, self.height)
            if x1 >= x2 or y1 >= y2:
                continue
            window = self.tiles[x1:x2, y1:y2]
            mask = window == TileState.EMPTY
            converted += int(np.count_nonzero(mask))
            window[mask] = TileState.WALL
        return converted

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return bool(
            self.width == other.width
            and self.height == other.height
            and np.array_equal(self.tiles, other.tiles)
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Grid(width={self.width}, height={self.height})"
