"""Tests for the two-pass corridor orchestrator."""

from __future__ import annotations

import pytest

from floorplan.environment.generators.corridors import (
    CorridorOrchestrator,
    connect_rooms,
    select_core_rooms,
)
from floorplan.environment.generators.partition import generate_partition
from floorplan.environment.generators.settings import (
    ConfigurationError,
    CorridorConfig,
    PartitionConfig,
)
from floorplan.environment.grid import Grid
from floorplan.environment.layout import CorridorKind, MapLayout
from floorplan.environment.tile_types import TileState
from floorplan.environment.validation import validate
from floorplan.util.coordinates import Rect
from floorplan.util.pathfinding import is_contiguous
from floorplan.util.rng import RNGProvider
from tests.helpers import make_room


def _partitioned(width: int, height: int, seed: int, **overrides):
    cfg = PartitionConfig(**overrides)
    tree = generate_partition(
        Rect(0, 0, width, height), cfg, RNGProvider(seed).get("layout.partition")
    )
    rooms = tree.rooms()
    grid = Grid(width, height)
    grid.paint_rooms(rooms)
    return tree, rooms, grid


def _as_layout(rooms, grid, result) -> MapLayout:
    return MapLayout(
        rooms=tuple(rooms),
        corridors=tuple(result.corridors),
        width=grid.width,
        height=grid.height,
        seed=0,
        grid=grid,
        entry_room_id=result.entry_room_id,
    )


class TestCoreRooms:
    def test_without_tree_picks_largest(self) -> None:
        rooms = [
            make_room(0, 0, 0, 4, 4),
            make_room(1, 10, 0, 8, 8),
            make_room(2, 20, 0, 6, 6),
            make_room(3, 30, 0, 3, 3),
        ]
        core = select_core_rooms(rooms, CorridorConfig(min_core_rooms=2))
        assert [room.id for room in core] == [1, 2]

    def test_tie_goes_to_lower_id(self) -> None:
        rooms = [make_room(i, i * 10, 0, 5, 5) for i in range(4)]
        core = select_core_rooms(rooms, CorridorConfig(min_core_rooms=2))
        assert [room.id for room in core] == [0, 1]

    def test_no_rooms(self) -> None:
        assert select_core_rooms([], CorridorConfig()) == []

    def test_fewer_rooms_than_minimum(self) -> None:
        rooms = [make_room(0, 0, 0, 4, 4)]
        core = select_core_rooms(rooms, CorridorConfig(min_core_rooms=3))
        assert [room.id for room in core] == [0]

    @pytest.mark.parametrize("seed", range(6))
    def test_with_tree_one_per_subtree(self, seed: int) -> None:
        tree, rooms, _ = _partitioned(100, 80, seed, min_room_size=5)
        cfg = CorridorConfig(spine_depth=2, min_core_rooms=2)
        core = select_core_rooms(rooms, cfg, tree)

        assert len(core) >= cfg.min_core_rooms
        assert [room.id for room in core] == sorted(room.id for room in core)
        for node in tree.nodes_at_depth(2):
            subtree_rooms = [leaf.room for leaf in tree.subtree_leaves(node.index)]
            best = min(subtree_rooms, key=lambda r: (-r.area, r.id))
            assert best in core


class TestConnectRooms:
    @pytest.mark.parametrize("seed", range(10))
    def test_every_room_connected(self, seed: int) -> None:
        tree, rooms, grid = _partitioned(70, 50, seed)
        result = connect_rooms(rooms, grid, CorridorConfig(), seed, tree=tree)

        assert result.unconnected_room_ids == []
        report = validate(_as_layout(rooms, grid, result))
        assert report.is_valid, report.summary()
        assert report.unconnected_room_ids == []

    @pytest.mark.parametrize("seed", range(6))
    def test_corridor_shape(self, seed: int) -> None:
        cfg = CorridorConfig()
        tree, rooms, grid = _partitioned(70, 50, seed)
        result = connect_rooms(rooms, grid, cfg, seed, tree=tree)

        room_ids = {room.id for room in rooms}
        for corridor in result.corridors:
            assert corridor.path
            assert is_contiguous(corridor.path)
            assert {corridor.room_a, corridor.room_b} <= room_ids
            if corridor.kind is CorridorKind.PRIMARY:
                expected = cfg.primary_width
            else:
                expected = cfg.secondary_width
            assert corridor.width == expected
            assert corridor.waypoints[0] == corridor.path[0]
            assert corridor.waypoints[-1] == corridor.path[-1]
            for pos in corridor.doorways:
                assert pos in corridor.path
                assert grid.get(pos) == TileState.DOORWAY

    def test_spine_links_consecutive_core_rooms(self) -> None:
        tree, rooms, grid = _partitioned(90, 60, 3)
        result = connect_rooms(rooms, grid, CorridorConfig(), 3, tree=tree)

        primary = [c for c in result.corridors if c.kind is CorridorKind.PRIMARY]
        assert len(primary) == len(result.core_room_ids) - 1
        assert [c.room_b for c in primary] == result.core_room_ids[1:]
        assert result.entry_room_id == result.core_room_ids[0]

    def test_grid_gets_corridors_doorways_and_walls(self) -> None:
        tree, rooms, grid = _partitioned(70, 50, 1)
        connect_rooms(rooms, grid, CorridorConfig(), 1, tree=tree)

        assert grid.count(TileState.PRIMARY_CORRIDOR) > 0
        assert grid.count(TileState.DOORWAY) > 0
        assert grid.count(TileState.WALL) > 0
        # Room floors are never overwritten by corridors.
        assert grid.count(TileState.ROOM_FLOOR) == sum(room.area for room in rooms)

    def test_walls_can_be_disabled(self) -> None:
        tree, rooms, grid = _partitioned(70, 50, 1)
        connect_rooms(rooms, grid, CorridorConfig(enclose_rooms=False), 1, tree=tree)
        assert grid.count(TileState.WALL) == 0

    def test_deterministic(self) -> None:
        results = []
        grids = []
        for _ in range(2):
            tree, rooms, grid = _partitioned(80, 60, 17)
            results.append(connect_rooms(rooms, grid, CorridorConfig(), 17, tree=tree))
            grids.append(grid)
        assert results[0].corridors == results[1].corridors
        assert grids[0] == grids[1]

    def test_spatial_hash_and_linear_scan_agree(self) -> None:
        outputs = []
        for threshold in (0, 10**9):
            tree, rooms, grid = _partitioned(120, 90, 8, min_room_size=5)
            cfg = CorridorConfig(
                spatial_hash_min_tiles=threshold, spatial_hash_cell_size=5
            )
            result = connect_rooms(rooms, grid, cfg, 8, tree=tree)
            outputs.append((result.corridors, grid))
        assert outputs[0][0] == outputs[1][0]
        assert outputs[0][1] == outputs[1][1]

    def test_without_tree(self) -> None:
        rooms = [
            make_room(0, 2, 2, 6, 6),
            make_room(1, 20, 2, 5, 5),
            make_room(2, 32, 10, 7, 7),
        ]
        grid = Grid(45, 20)
        grid.paint_rooms(rooms)
        result = connect_rooms(rooms, grid, CorridorConfig(), 0)
        assert result.core_room_ids == [0, 2]
        assert result.unconnected_room_ids == []

    def test_single_room(self) -> None:
        rooms = [make_room(0, 2, 2, 6, 6)]
        grid = Grid(10, 10)
        grid.paint_rooms(rooms)
        result = connect_rooms(rooms, grid, CorridorConfig(), 0)
        assert result.corridors == []
        assert result.entry_room_id == 0
        assert result.unconnected_room_ids == []

    def test_doorway_overrides_start(self) -> None:
        rooms = [make_room(0, 2, 2, 6, 6), make_room(1, 20, 2, 6, 6)]
        grid = Grid(30, 12)
        grid.paint_rooms(rooms)
        result = connect_rooms(
            rooms, grid, CorridorConfig(), 0, doorways={0: (7, 7), 1: (20, 2)}
        )
        (corridor,) = result.corridors
        assert corridor.path[0] == (7, 7)
        assert corridor.path[-1] == (20, 2)


class TestUnreachableRooms:
    def _sealed_setup(self):
        rooms = [
            make_room(0, 2, 2, 6, 6),
            make_room(1, 30, 2, 6, 6),
            make_room(2, 16, 10, 5, 5),
        ]
        grid = Grid(40, 20)
        grid.paint_rooms(rooms)
        grid.fill_rect(Rect(15, 9, 7, 7), TileState.WALL)
        grid.fill_rect(rooms[2].rect, TileState.ROOM_FLOOR)
        return rooms, grid

    def test_sealed_room_is_reported(self) -> None:
        rooms, grid = self._sealed_setup()
        result = connect_rooms(rooms, grid, CorridorConfig(), 5)

        assert result.core_room_ids == [0, 1]
        assert result.unconnected_room_ids == [2]
        assert result.stats.failures == CorridorConfig().max_branch_attempts

    def test_validator_reports_only_sealed_room(self) -> None:
        rooms, grid = self._sealed_setup()
        result = connect_rooms(rooms, grid, CorridorConfig(), 5)
        report = validate(_as_layout(rooms, grid, result))

        assert report.unconnected_room_ids == [2]
        assert report.reachable_room_ids == [0, 1]
        assert not report.is_valid

    def test_phases_can_run_separately(self) -> None:
        rooms, grid = self._sealed_setup()
        orchestrator = CorridorOrchestrator(CorridorConfig(), RNGProvider(5).get("c"))

        spine = orchestrator.build_spine(rooms, grid)
        assert [c.kind for c in spine] == [CorridorKind.PRIMARY]
        assert grid.count(TileState.DOORWAY) == 0

        branches = orchestrator.attach_branches(rooms, grid)
        assert branches == []

        result = orchestrator.finalize(rooms, grid)
        assert result.unconnected_room_ids == [2]
        assert grid.count(TileState.DOORWAY) > 0


def test_corridor_config_validation() -> None:
    with pytest.raises(ConfigurationError) as excinfo:
        CorridorConfig(
            primary_width=0, secondary_width=0, max_branch_attempts=0
        ).validate()
    assert len(excinfo.value.problems) == 3
    CorridorConfig().validate()
