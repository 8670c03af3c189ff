"""Performance tests for the A* pathfinder on large maps.

Search state must scale with the explored region, so short searches on a
huge map stay cheap.
"""

from __future__ import annotations

import time

from floorplan.environment.grid import Grid
from floorplan.util.pathfinding import PathfindingStats, TerrainCosts, find_path


class TestPathfindingPerformance:
    """Performance checks for find_path."""

    def test_short_paths_on_1000x1000_under_1s(self) -> None:
        """20 short searches on a 1000x1000 grid should take under 1s."""
        grid = Grid(1000, 1000)
        stats = PathfindingStats()

        start = time.perf_counter()
        for i in range(20):
            origin = (100 + i * 40, 500)
            goal = (origin[0] + 12, 508)
            path = find_path(origin, goal, grid, TerrainCosts.uniform(), stats=stats)
            assert path is not None
            assert len(path) == 21
        elapsed = time.perf_counter() - start

        assert elapsed < 1.0, f"20 searches took {elapsed:.2f}s, expected <1.0s"

    def test_expansions_bounded_by_search_region(self) -> None:
        """An unobstructed search expands few nodes regardless of map size."""
        small, large = PathfindingStats(), PathfindingStats()
        costs = TerrainCosts.uniform()
        find_path((5, 5), (15, 9), Grid(30, 30), costs, stats=small)
        find_path((5, 5), (15, 9), Grid(800, 800), costs, stats=large)

        assert small.nodes_expanded == large.nodes_expanded
        assert large.nodes_expanded < 200
