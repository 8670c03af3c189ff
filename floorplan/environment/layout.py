"""Rooms, corridors and the finished layout handed back to callers."""

from __future__ import annotations

import heapq
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from floorplan.environment.generators.partition import PartitionStatistics
    from floorplan.environment.grid import Grid
    from floorplan.environment.validation import ValidationReport
    from floorplan.types import CorridorId, NodeIndex, RandomSeed, RoomId, WorldTilePos
    from floorplan.util.coordinates import Rect


class RoomClassification(Enum):
    """Functional role assigned to a room from its size and depth."""

    STORAGE = "storage"
    OFFICE = "office"
    CONFERENCE = "conference"
    LOBBY = "lobby"


class CorridorKind(Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"


@dataclass(frozen=True)
class Room:
    """A rectangular room carved from one leaf partition.

    Attributes:
        id: Position of the room in partition tree order.
        rect: Floor area of the room, inset from its partition.
        depth: Depth of the leaf partition that produced the room.
        partition_index: Arena index of that leaf in the PartitionTree.
        classification: Functional role of the room.
        metadata: Free-form data for downstream systems. Not compared.
    """

    id: RoomId
    rect: Rect
    depth: int
    partition_index: NodeIndex
    classification: RoomClassification = RoomClassification.OFFICE
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def center(self) -> WorldTilePos:
        return self.rect.center()

    @property
    def area(self) -> int:
        return self.rect.area

    @property
    def width(self) -> int:
        return self.rect.width

    @property
    def height(self) -> int:
        return self.rect.height


@dataclass(frozen=True)
class Corridor:
    """A carved connection between two rooms.

    Attributes:
        id: Position of the corridor in carve order.
        room_a: Room the path starts in or next to.
        room_b: Room the path ends in or next to.
        path: Contiguous 4-connected cells from start to end, both included.
        width: Nominal corridor width in cells.
        kind: PRIMARY for spine segments, SECONDARY for branches.
        waypoints: Line-of-sight smoothed polyline over ``path``.
        doorways: Cells of ``path`` that were marked as doorways.
    """

    id: CorridorId
    room_a: RoomId
    room_b: RoomId
    path: tuple[WorldTilePos, ...]
    width: int
    kind: CorridorKind
    waypoints: tuple[WorldTilePos, ...] = ()
    doorways: tuple[WorldTilePos, ...] = ()

    @property
    def length(self) -> int:
        """Number of steps along the path."""
        return max(0, len(self.path) - 1)

    @property
    def endpoints(self) -> tuple[RoomId, RoomId]:
        return (self.room_a, self.room_b)

    def connects(self, room_id: RoomId) -> bool:
        return room_id in (self.room_a, self.room_b)

    def other_end(self, room_id: RoomId) -> RoomId:
        if room_id == self.room_a:
            return self.room_b
        if room_id == self.room_b:
            return self.room_a
        raise ValueError(f"Corridor {self.id} does not touch room {room_id}")


@dataclass(frozen=True)
class MapLayout:
    """Everything one generation call produced.

    Attributes:
        rooms: Rooms in id order.
        corridors: Corridors in id order.
        width: Grid width in tiles.
        height: Grid height in tiles.
        seed: Master seed the layout was generated from.
        grid: Rasterized tile states.
        entry_room_id: Room connectivity is measured from, or None if there
            are no rooms.
        core_room_ids: Rooms on the primary spine, in spine order.
        partition_stats: Summary of the partition tree that produced the rooms.
        report: Validation report, attached once validation has run.
        metrics: Phase timings (``*_ms``) and pathfinding counters.
    """

    rooms: tuple[Room, ...]
    corridors: tuple[Corridor, ...]
    width: int
    height: int
    seed: RandomSeed
    grid: Grid
    entry_room_id: RoomId | None = None
    core_room_ids: tuple[RoomId, ...] = ()
    partition_stats: PartitionStatistics | None = None
    report: ValidationReport | None = field(default=None, compare=False)
    metrics: dict[str, float] = field(default_factory=dict, compare=False)

    def room(self, room_id: RoomId) -> Room:
        if 0 <= room_id < len(self.rooms) and self.rooms[room_id].id == room_id:
            return self.rooms[room_id]
        for room in self.rooms:
            if room.id == room_id:
                return room
        raise KeyError(f"No room with id {room_id}")

    def corridors_for(self, room_id: RoomId) -> list[Corridor]:
        return [c for c in self.corridors if c.connects(room_id)]

    def adjacency(self) -> dict[RoomId, list[RoomId]]:
        """Room id to sorted ids of rooms sharing a corridor with it."""
        neighbors: dict[RoomId, set[RoomId]] = {room.id: set() for room in self.rooms}
        for corridor in self.corridors:
            if corridor.room_a == corridor.room_b:
                continue
            neighbors.setdefault(corridor.room_a, set()).add(corridor.room_b)
            neighbors.setdefault(corridor.room_b, set()).add(corridor.room_a)
        return {room_id: sorted(ids) for room_id, ids in neighbors.items()}

    def total_corridor_length(self) -> int:
        return sum(c.length for c in self.corridors)

    def connected_components(self) -> list[list[RoomId]]:
        """Groups of mutually reachable rooms, each sorted, ordered by first id."""
        adjacency = self.adjacency()
        seen: set[RoomId] = set()
        components: list[list[RoomId]] = []
        for start in sorted(adjacency):
            if start in seen:
                continue
            component = []
            queue = deque([start])
            seen.add(start)
            while queue:
                current = queue.popleft()
                component.append(current)
                for neighbor in adjacency[current]:
                    if neighbor not in seen:
                        seen.add(neighbor)
                        queue.append(neighbor)
            components.append(sorted(component))
        return components

    def shortest_route(self, start: RoomId, goal: RoomId) -> list[Corridor]:
        """Corridors along the shortest walk from one room to another.

        Dijkstra over the corridor graph, weighted by corridor length.

        Returns:
            The corridors in walking order. Empty if ``start == goal`` or the
            rooms are not connected.
        """
        if start == goal:
            return []

        by_room: dict[RoomId, list[Corridor]] = {}
        for corridor in self.corridors:
            by_room.setdefault(corridor.room_a, []).append(corridor)
            if corridor.room_b != corridor.room_a:
                by_room.setdefault(corridor.room_b, []).append(corridor)

        best: dict[RoomId, int] = {start: 0}
        via: dict[RoomId, Corridor] = {}
        heap: list[tuple[int, RoomId]] = [(0, start)]
        while heap:
            dist, room_id = heapq.heappop(heap)
            if room_id == goal:
                break
            if dist > best.get(room_id, dist):
                continue
            for corridor in by_room.get(room_id, ()):
                neighbor = corridor.other_end(room_id)
                candidate = dist + max(1, corridor.length)
                if candidate < best.get(neighbor, candidate + 1):
                    best[neighbor] = candidate
                    via[neighbor] = corridor
                    heapq.heappush(heap, (candidate, neighbor))

        if goal not in via:
            return []
        route: list[Corridor] = []
        current = goal
        while current != start:
            corridor = via[current]
            route.append(corridor)
            current = corridor.other_end(current)
        route.reverse()
        return route
