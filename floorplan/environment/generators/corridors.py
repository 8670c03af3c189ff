"""Two-pass corridor placement.

Pass 1 lays a primary spine through a handful of large "core" rooms, one
from each shallow region of the partition tree. Pass 2 hangs every other
room off that spine with a secondary branch to the nearest spine tile. A
final step marks doorways and walls rooms in.

The passes are exposed separately (`build_spine`, `attach_branches`,
`finalize`) so a caller can pause between them; `connect_rooms` runs all
three.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from floorplan import config as defaults
from floorplan.environment.layout import Corridor, CorridorKind, Room
from floorplan.environment.tile_types import TileState
from floorplan.util.coordinates import manhattan
from floorplan.util.pathfinding import PathfindingStats, find_path
from floorplan.util.rng import RNGProvider
from floorplan.util.smoothing import smooth
from floorplan.util.spatial import SpatialHashGrid, nearest_linear

if TYPE_CHECKING:
    from floorplan.environment.generators.partition import PartitionTree
    from floorplan.environment.generators.settings import CorridorConfig
    from floorplan.environment.grid import Grid
    from floorplan.types import RandomSeed, RoomId, WorldTilePos
    from floorplan.util.rng import RNG

logger = logging.getLogger(__name__)

_CORRIDOR_STATES = frozenset(
    {TileState.PRIMARY_CORRIDOR, TileState.SECONDARY_CORRIDOR, TileState.DOORWAY}
)


@dataclass(frozen=True, slots=True)
class CorridorTile:
    """A spine path cell, tagged with the corridor and step that laid it."""

    x: int
    y: int
    corridor_id: int
    step: int


@dataclass
class ConnectionResult:
    """Outcome of connecting a set of rooms.

    Attributes:
        corridors: Every corridor carved, in carve order.
        unconnected_room_ids: Rooms neither pass could reach.
        entry_room_id: First core room, or None without rooms.
        core_room_ids: Rooms on the primary spine, in spine order.
        stats: Pathfinder counters accumulated across both passes.
    """

    corridors: list[Corridor] = field(default_factory=list)
    unconnected_room_ids: list[RoomId] = field(default_factory=list)
    entry_room_id: RoomId | None = None
    core_room_ids: list[RoomId] = field(default_factory=list)
    stats: PathfindingStats = field(default_factory=PathfindingStats)


def select_core_rooms(
    rooms: Sequence[Room],
    config: CorridorConfig,
    tree: PartitionTree | None = None,
) -> list[Room]:
    """
    Choose the rooms the primary spine will connect.

    With a partition tree, every subtree rooted at ``spine_depth`` (or a
    shallower leaf) contributes its largest room, ties going to the lower
    id. Without one, the ``min_core_rooms`` largest rooms are used. Either
    way the set is topped up with the largest remaining rooms until it
    holds ``min_core_rooms``.

    Returns:
        The core rooms ordered by id, which is partition tree order.
    """
    if not rooms:
        return []

    by_id = {room.id: room for room in rooms}
    by_size = sorted(rooms, key=lambda r: (-r.area, r.id))
    chosen: dict[RoomId, Room] = {}

    if tree is not None and len(tree):
        for node in tree.subtree():
            if node.depth != config.spine_depth and not (
                node.is_leaf and node.depth < config.spine_depth
            ):
                continue
            candidates = [
                by_id[leaf.room.id]
                for leaf in tree.subtree_leaves(node.index)
                if leaf.room is not None and leaf.room.id in by_id
            ]
            if candidates:
                best = min(candidates, key=lambda r: (-r.area, r.id))
                chosen[best.id] = best
    else:
        for room in by_size[: config.min_core_rooms]:
            chosen[room.id] = room

    for room in by_size:
        if len(chosen) >= min(config.min_core_rooms, len(rooms)):
            break
        chosen.setdefault(room.id, room)

    return sorted(chosen.values(), key=lambda r: r.id)


class CorridorOrchestrator:
    """Connects rooms on a shared grid with a primary spine and branches.

    One orchestrator handles one layout: construct it, then call
    `build_spine`, `attach_branches` and `finalize` in that order (or
    `connect_rooms` to do all three). The grid is modified in place.
    """

    def __init__(
        self,
        config: CorridorConfig,
        rng: RNG,
        *,
        doorways: Mapping[RoomId, WorldTilePos] | None = None,
    ) -> None:
        self.config = config
        self.rng = rng
        self.doorways = dict(doorways or {})
        self.result = ConnectionResult()
        self._attached: set[RoomId] = set()
        self._spine_cells: dict[WorldTilePos, CorridorTile] = {}
        self._rooms: list[Room] = []

    # -------------------------------------------------------------------------
    # Public entry points
    # -------------------------------------------------------------------------

    def connect_rooms(
        self,
        rooms: Sequence[Room],
        grid: Grid,
        *,
        tree: PartitionTree | None = None,
    ) -> ConnectionResult:
        self.build_spine(rooms, grid, tree=tree)
        self.attach_branches(rooms, grid)
        return self.finalize(rooms, grid)

    def build_spine(
        self,
        rooms: Sequence[Room],
        grid: Grid,
        *,
        tree: PartitionTree | None = None,
    ) -> list[Corridor]:
        """Pass 1: connect consecutive core rooms with primary corridors.

        Each core room is routed from the last core room that was actually
        joined, so one failed segment does not split the spine. A core room
        that cannot be reached is left for the branch pass.

        Returns:
            The primary corridors carved.
        """
        core = select_core_rooms(rooms, self.config, tree)
        self.result.core_room_ids = [room.id for room in core]
        if not core:
            return []

        self.result.entry_room_id = core[0].id
        self._attached.add(core[0].id)

        carved = []
        anchor = core[0]
        for room in core[1:]:
            path = self._route(anchor, room, grid)
            if path is None:
                logger.debug(
                    f"Spine could not reach core room {room.id} from {anchor.id}"
                )
                continue
            corridor = self._carve(path, anchor.id, room.id, CorridorKind.PRIMARY, grid)
            for step, pos in enumerate(corridor.path):
                if pos not in self._spine_cells:
                    self._spine_cells[pos] = CorridorTile(
                        pos[0], pos[1], corridor.id, step
                    )
            self._attached.add(room.id)
            carved.append(corridor)
            anchor = room

        logger.debug(
            f"Primary spine: {len(carved)} corridors through "
            f"{len(self._attached)}/{len(core)} core rooms"
        )
        return carved

    def attach_branches(self, rooms: Sequence[Room], grid: Grid) -> list[Corridor]:
        """Pass 2: connect every remaining room to the spine.

        Rooms the spine already runs through or alongside get a short
        junction. Others are routed to the nearest primary-corridor tile,
        trying up to ``max_branch_attempts`` targets. Rooms that cannot be
        connected are recorded in ``result.unconnected_room_ids``.

        Returns:
            The secondary corridors carved.
        """
        primary_tiles = [
            tile
            for pos, tile in self._spine_cells.items()
            if grid.get(pos) == TileState.PRIMARY_CORRIDOR
        ]
        use_hash = len(primary_tiles) >= self.config.spatial_hash_min_tiles
        index: SpatialHashGrid[CorridorTile] | None = None
        if use_hash:
            index = SpatialHashGrid(self.config.spatial_hash_cell_size)
            index.extend(primary_tiles)

        self._rooms = sorted(rooms, key=lambda r: r.id)
        carved = []
        for room in self._rooms:
            if room.id in self._attached:
                continue

            corridor = self._junction(room, grid)
            if corridor is None:
                corridor = self._branch(room, grid, primary_tiles, index)
            if corridor is None:
                self.result.unconnected_room_ids.append(room.id)
                logger.debug(f"Room {room.id} could not be connected")
                continue
            self._attached.add(room.id)
            carved.append(corridor)

        logger.debug(
            f"Secondary pass: {len(carved)} branches, "
            f"{len(self.result.unconnected_room_ids)} rooms unconnected "
            f"({'spatial hash' if use_hash else 'linear scan'} over "
            f"{len(primary_tiles)} spine tiles)"
        )
        return carved

    def finalize(self, rooms: Sequence[Room], grid: Grid) -> ConnectionResult:
        """Mark doorways, wall rooms in and attach smoothed waypoints."""
        finished = []
        for corridor in self.result.corridors:
            doorways = []
            path = corridor.path
            for i, pos in enumerate(path):
                if grid.get(pos) not in _CORRIDOR_STATES:
                    continue
                neighbors = path[max(0, i - 1) : i + 2]
                if any(grid.get(n) == TileState.ROOM_FLOOR for n in neighbors):
                    grid.set(pos, TileState.DOORWAY)
                    doorways.append(pos)
            finished.append(replace(corridor, doorways=tuple(doorways)))

        if self.config.enclose_rooms:
            grid.enclose_rooms(rooms)

        if self.config.smooth_paths:
            finished = [
                replace(c, waypoints=tuple(smooth(c.path, grid))) for c in finished
            ]
        self.result.corridors = finished
        return self.result

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _anchor_point(self, room: Room, grid: Grid) -> WorldTilePos:
        """Where paths into or out of a room start: its doorway or center."""
        doorway = self.doorways.get(room.id)
        if doorway is not None and grid.in_bounds(doorway):
            return doorway
        return room.center

    def _route(self, a: Room, b: Room, grid: Grid) -> list[WorldTilePos] | None:
        return find_path(
            self._anchor_point(a, grid),
            self._anchor_point(b, grid),
            grid,
            self.config.costs,
            free_rects=(a.rect, b.rect),
            stats=self.result.stats,
        )

    def _carve(
        self,
        path: Sequence[WorldTilePos],
        room_a: RoomId,
        room_b: RoomId,
        kind: CorridorKind,
        grid: Grid,
    ) -> Corridor:
        """Paint a path onto the grid and record it as a corridor.

        Only EMPTY cells change state, so room floors and earlier corridors
        are kept. Corridors wider than one cell are painted with a square
        brush anchored at each path cell.
        """
        if kind is CorridorKind.PRIMARY:
            state, width = TileState.PRIMARY_CORRIDOR, self.config.primary_width
        else:
            state, width = TileState.SECONDARY_CORRIDOR, self.config.secondary_width

        for x, y in path:
            for dx in range(width):
                for dy in range(width):
                    cell = (x + dx, y + dy)
                    if grid.get(cell) == TileState.EMPTY:
                        grid.set(cell, state)

        corridor = Corridor(
            id=len(self.result.corridors),
            room_a=room_a,
            room_b=room_b,
            path=tuple(path),
            width=width,
            kind=kind,
        )
        self.result.corridors.append(corridor)
        logger.debug(
            f"{kind.value.capitalize()} corridor {corridor.id}: "
            f"room {room_a} -> room {room_b}, {corridor.length} steps"
        )
        return corridor

    def _spine_room_near(self, tile: CorridorTile) -> RoomId:
        """The end of the tile's spine corridor that is closer along the path."""
        corridor = self.result.corridors[tile.corridor_id]
        if tile.step * 2 <= corridor.length:
            return corridor.room_a
        return corridor.room_b

    def _junction(self, room: Room, grid: Grid) -> Corridor | None:
        """Join a room the spine already passes through or alongside."""
        if not self._spine_cells:
            return None
        for pos in room.rect.cells():
            tile = self._spine_cells.get(pos)
            if tile is not None:
                return self._carve(
                    [pos],
                    room.id,
                    self._spine_room_near(tile),
                    CorridorKind.SECONDARY,
                    grid,
                )
        for pos in room.rect.perimeter_ring():
            tile = self._spine_cells.get(pos)
            if tile is None:
                continue
            x, y = pos
            inside = (
                min(max(x, room.rect.x1), room.rect.x2 - 1),
                min(max(y, room.rect.y1), room.rect.y2 - 1),
            )
            return self._carve(
                [inside, pos],
                room.id,
                self._spine_room_near(tile),
                CorridorKind.SECONDARY,
                grid,
            )
        return None

    def _branch(
        self,
        room: Room,
        grid: Grid,
        primary_tiles: Sequence[CorridorTile],
        index: SpatialHashGrid[CorridorTile] | None,
    ) -> Corridor | None:
        """Route a room to the nearest spine tile, or to the nearest joined room."""
        start = self._anchor_point(room, grid)
        if not primary_tiles:
            return self._branch_to_room(room, grid)

        excluded: set[WorldTilePos] = set()
        for _ in range(self.config.max_branch_attempts):
            if index is not None:
                candidates = index.nearest(start[0], start[1], excluded)
            else:
                candidates = nearest_linear(primary_tiles, start[0], start[1], excluded)
            if not candidates:
                break
            if len(candidates) == 1:
                target = candidates[0]
            else:
                target = self.rng.choice(candidates)
            goal = (target.x, target.y)
            path = find_path(
                start,
                goal,
                grid,
                self.config.costs,
                free_rects=(room.rect,),
                stats=self.result.stats,
            )
            if path is not None:
                return self._carve(
                    path,
                    room.id,
                    self._spine_room_near(target),
                    CorridorKind.SECONDARY,
                    grid,
                )
            excluded.add(goal)
        return None

    def _branch_to_room(self, room: Room, grid: Grid) -> Corridor | None:
        """Fallback when the spine has no corridor tiles: join a connected room."""
        start = self._anchor_point(room, grid)
        targets = [
            other
            for other in self._rooms
            if other.id in self._attached and other.id != room.id
        ]
        targets.sort(key=lambda other: (manhattan(start, other.center), other.id))
        for other in targets[: self.config.max_branch_attempts]:
            path = self._route(room, other, grid)
            if path is not None:
                return self._carve(
                    path, room.id, other.id, CorridorKind.SECONDARY, grid
                )
        return None


def connect_rooms(
    rooms: Sequence[Room],
    grid: Grid,
    config: CorridorConfig,
    seed: RandomSeed,
    *,
    tree: PartitionTree | None = None,
    doorways: Mapping[RoomId, WorldTilePos] | None = None,
) -> ConnectionResult:
    """
    Connect rooms with a primary spine and secondary branches.

    Args:
        rooms: Rooms already painted onto ``grid``.
        grid: Shared grid; corridors, doorways and walls are written into it.
        config: Corridor parameters. Assumed already validated.
        seed: Master seed; tie-breaks draw from its corridor stream.
        tree: Partition tree the rooms came from, used to pick core rooms.
        doorways: Optional preferred start tile per room id.

    Returns:
        The carved corridors plus the rooms that could not be connected.
    """
    rng = RNGProvider(seed).get(defaults.RNG_DOMAIN_CORRIDORS)
    orchestrator = CorridorOrchestrator(config, rng, doorways=doorways)
    return orchestrator.connect_rooms(rooms, grid, tree=tree)
