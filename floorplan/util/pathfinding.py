from __future__ import annotations

import heapq
import logging
import math
from collections import deque
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from floorplan import config
from floorplan.environment.tile_types import TileState
from floorplan.util.coordinates import manhattan

if TYPE_CHECKING:
    from floorplan.environment.grid import Grid
    from floorplan.util.coordinates import Rect

from floorplan.types import WorldTilePos

logger = logging.getLogger(__name__)

# Fixed expansion order: north, east, south, west.
NEIGHBOR_OFFSETS: tuple[tuple[int, int], ...] = ((0, -1), (1, 0), (0, 1), (-1, 0))


@dataclass(frozen=True)
class TerrainCosts:
    """Cost of entering each tile state. ``None`` means impassable.

    The defaults make existing corridors cheapest, open space moderate and
    room floors expensive, so corridors reuse each other and route around
    rooms rather than through them.
    """

    corridor: float | None = config.CORRIDOR_STEP_COST
    doorway: float | None = config.DOORWAY_STEP_COST
    empty: float | None = config.EMPTY_STEP_COST
    room_floor: float | None = config.ROOM_FLOOR_STEP_COST
    wall: float | None = None

    @classmethod
    def uniform(cls) -> TerrainCosts:
        """Every walkable tile costs 1: an unweighted grid."""
        return cls(corridor=1.0, doorway=1.0, empty=1.0, room_floor=1.0, wall=None)

    def validate(self) -> list[str]:
        problems = []
        for name in ("corridor", "doorway", "empty", "room_floor", "wall"):
            value = getattr(self, name)
            if value is not None and not (value > 0 and math.isfinite(value)):
                problems.append(f"terrain cost {name}={value} must be positive")
        if self.empty is None:
            problems.append("terrain cost empty must not be impassable")
        return problems

    def cost_table(self) -> np.ndarray:
        """Lookup table from TileState value to step cost (inf = impassable)."""
        table = np.full(256, np.inf, dtype=np.float64)
        for state, value in (
            (TileState.EMPTY, self.empty),
            (TileState.ROOM_FLOOR, self.room_floor),
            (TileState.WALL, self.wall),
            (TileState.PRIMARY_CORRIDOR, self.corridor),
            (TileState.SECONDARY_CORRIDOR, self.corridor),
            (TileState.DOORWAY, self.doorway),
        ):
            if value is not None:
                table[state] = value
        return table

    @property
    def min_step_cost(self) -> float:
        """Cheapest passable step. Scales the heuristic so it stays admissible."""
        values = [
            v
            for v in (self.corridor, self.doorway, self.empty, self.room_floor)
            if v is not None
        ]
        if self.wall is not None:
            values.append(self.wall)
        return min(values) if values else 1.0


DEFAULT_TERRAIN_COSTS = TerrainCosts()


@dataclass
class PathfindingStats:
    """Running counters across find_path calls."""

    calls: int = 0
    successes: int = 0
    failures: int = 0
    nodes_expanded: int = 0

    @property
    def success_rate(self) -> float:
        return self.successes / self.calls if self.calls else 0.0

    def reset(self) -> None:
        self.calls = self.successes = self.failures = self.nodes_expanded = 0


@dataclass(slots=True)
class PathNode:
    """One search node. ``parent`` is an arena index, -1 for the start."""

    pos: WorldTilePos
    g: float
    h: float
    parent: int = -1


def build_cost_map(
    grid: Grid,
    costs: TerrainCosts = DEFAULT_TERRAIN_COSTS,
    free_rects: Iterable[Rect] = (),
) -> np.ndarray:
    """Per-tile step costs for a grid, shape (width, height).

    Passable cells inside ``free_rects`` are charged the empty-tile cost
    instead of their own, so a corridor is not penalized for crossing the
    floor of the rooms it connects.
    """
    cost = costs.cost_table()[grid.tiles]
    free_cost = costs.empty if costs.empty is not None else np.inf
    for rect in free_rects:
        x1, y1 = max(rect.x1, 0), max(rect.y1, 0)
        x2, y2 = min(rect.x2, grid.width), min(rect.y2, grid.height)
        if x1 >= x2 or y1 >= y2:
            continue
        window = cost[x1:x2, y1:y2]
        passable = np.isfinite(window)
        window[passable] = np.minimum(window[passable], free_cost)
    return cost


def find_path(
    start: WorldTilePos,
    goal: WorldTilePos,
    grid: Grid,
    costs: TerrainCosts | None = None,
    *,
    free_rects: Sequence[Rect] = (),
    stats: PathfindingStats | None = None,
) -> list[WorldTilePos] | None:
    """
    Find the cheapest 4-connected path between two tiles using A*.

    The heuristic is the Manhattan distance scaled by the cheapest step
    cost, so it never overestimates for any cost table. Among open nodes
    with equal f the one with the lower h is expanded first, then the one
    queued first; neighbors are always visited in N, E, S, W order. The
    result is therefore a pure function of its inputs.

    Args:
        start: The (x, y) starting tile.
        goal: The (x, y) target tile.
        grid: The grid to search.
        costs: Step costs per tile state. Defaults to DEFAULT_TERRAIN_COSTS.
        free_rects: Rectangles whose floor is charged the empty-tile cost.
        stats: Optional counters to accumulate into.

    Returns:
        The path from start to goal, both included, or None if the goal
        cannot be reached (including when either end is out of bounds or
        impassable). ``[start]`` when start == goal.
    """
    costs = costs if costs is not None else DEFAULT_TERRAIN_COSTS
    if stats is not None:
        stats.calls += 1

    path = None
    if grid.in_bounds(start) and grid.in_bounds(goal):
        cost = build_cost_map(grid, costs, free_rects)
        if math.isfinite(cost[start]) and math.isfinite(cost[goal]):
            path = _astar(cost, start, goal, costs.min_step_cost, stats)

    if stats is not None:
        if path is None:
            stats.failures += 1
        else:
            stats.successes += 1
    if path is None:
        logger.debug(f"No path from {start} to {goal}")
    return path


def _astar(
    cost: np.ndarray,
    start: WorldTilePos,
    goal: WorldTilePos,
    min_step: float,
    stats: PathfindingStats | None = None,
) -> list[WorldTilePos] | None:
    """A* on a (width, height) cost array; inf marks impassable cells.

    Heap entries are ``(f, h, counter, node_index)``; the counter keeps
    ordering stable for nodes with equal f and h.
    """
    if start == goal:
        return [start]

    width, height = cost.shape
    # Search state grows with the explored region, not the map.
    step_cost = cost.item
    best_g: dict[WorldTilePos, float] = {}
    closed: set[WorldTilePos] = set()

    gx, gy = goal
    nodes: list[PathNode] = []
    heap: list[tuple[float, float, int, int]] = []
    counter = 0

    h0 = manhattan(start, goal) * min_step
    nodes.append(PathNode(start, 0.0, h0))
    best_g[start] = 0.0
    heapq.heappush(heap, (h0, h0, counter, 0))

    expanded = 0
    found = -1
    while heap:
        _, _, _, index = heapq.heappop(heap)
        node = nodes[index]
        if node.pos in closed:
            continue
        closed.add(node.pos)
        x, y = node.pos
        expanded += 1

        if x == gx and y == gy:
            found = index
            break

        for dx, dy in NEIGHBOR_OFFSETS:
            nx, ny = x + dx, y + dy
            if nx < 0 or ny < 0 or nx >= width or ny >= height:
                continue
            pos = (nx, ny)
            if pos in closed:
                continue
            step = step_cost(nx, ny)
            if step == math.inf:
                continue
            g = node.g + step
            if g >= best_g.get(pos, math.inf):
                continue
            best_g[pos] = g
            h = (abs(nx - gx) + abs(ny - gy)) * min_step
            nodes.append(PathNode(pos, g, h, index))
            counter += 1
            heapq.heappush(heap, (g + h, h, counter, len(nodes) - 1))

    if stats is not None:
        stats.nodes_expanded += expanded
    if found < 0:
        return None

    path: list[WorldTilePos] = []
    index = found
    while index != -1:
        path.append(nodes[index].pos)
        index = nodes[index].parent
    path.reverse()
    return path


def reachable_positions(
    start: WorldTilePos,
    grid: Grid,
    max_distance: int | None = None,
) -> set[WorldTilePos]:
    """
    Flood fill over walkable tiles from a start tile.

    Args:
        start: The tile to flood from.
        grid: The grid to search.
        max_distance: Optional limit on the number of steps from start.

    Returns:
        Every walkable tile reachable from start, start included. Empty if
        start itself is not walkable.
    """
    walkable = grid.walkable
    if not grid.in_bounds(start) or not walkable[start]:
        return set()

    seen = {start}
    queue: deque[tuple[WorldTilePos, int]] = deque([(start, 0)])
    while queue:
        (x, y), dist = queue.popleft()
        if max_distance is not None and dist >= max_distance:
            continue
        for dx, dy in NEIGHBOR_OFFSETS:
            nxt = (x + dx, y + dy)
            if nxt in seen or not grid.in_bounds(nxt) or not walkable[nxt]:
                continue
            seen.add(nxt)
            queue.append((nxt, dist + 1))
    return seen


def path_exists(start: WorldTilePos, goal: WorldTilePos, grid: Grid) -> bool:
    """Cheap BFS reachability check that ignores terrain costs."""
    if not grid.in_bounds(goal) or not grid.is_walkable(goal):
        return False
    if start == goal:
        return grid.is_walkable(start)
    return goal in reachable_positions(start, grid)


def path_cost(
    path: Sequence[WorldTilePos],
    grid: Grid,
    costs: TerrainCosts | None = None,
) -> float:
    """Total cost of walking a path: the sum of every entered tile's cost.

    Returns inf if any entered tile is impassable or off the grid.
    """
    table = (costs if costs is not None else DEFAULT_TERRAIN_COSTS).cost_table()
    return float(sum(table[grid.get(pos)] for pos in path[1:]))


def is_contiguous(path: Sequence[WorldTilePos]) -> bool:
    """True if every consecutive pair of cells is 4-adjacent."""
    return all(manhattan(a, b) == 1 for a, b in zip(path, path[1:], strict=False))
