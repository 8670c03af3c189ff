from __future__ import annotations

from floorplan.environment.grid import Grid
from floorplan.util import smoothing
from floorplan.util.pathfinding import TerrainCosts, find_path
from floorplan.util.smoothing import get_line, has_line_of_sight, smooth
from tests.helpers import l_path


def _is_subsequence(short: list, long: list) -> bool:
    it = iter(long)
    return all(item in it for item in short)


def test_get_line_includes_endpoints() -> None:
    line = get_line((0, 0), (4, 2))
    assert line[0] == (0, 0)
    assert line[-1] == (4, 2)
    assert all(isinstance(x, int) for pos in line for x in pos)


def test_line_of_sight_blocked_by_wall() -> None:
    grid = Grid.from_text(["     ", "  #  ", "     "])
    assert not has_line_of_sight((0, 1), (4, 1), grid)
    assert has_line_of_sight((0, 0), (4, 0), grid)


def test_line_of_sight_accepts_precomputed_walkable_map() -> None:
    grid = Grid.from_text(["     ", "  #  ", "     "])
    walkable = grid.walkable
    for a, b in [((0, 1), (4, 1)), ((0, 0), (4, 0)), ((0, 0), (4, 2))]:
        assert has_line_of_sight(a, b, grid, walkable) == has_line_of_sight(a, b, grid)


def test_smoothing_uses_line_of_sight(monkeypatch) -> None:
    """Every shortcut taken by smooth is a line-of-sight check that passed."""
    checked: list[tuple] = []
    real = smoothing.has_line_of_sight

    def recording(a, b, grid, walkable=None):
        visible = real(a, b, grid, walkable)
        checked.append((a, b, visible))
        return visible

    monkeypatch.setattr(smoothing, "has_line_of_sight", recording)
    grid = Grid(10, 10)
    result = smooth(l_path((0, 0), (7, 5)), grid)

    assert result == [(0, 0), (7, 5)]
    assert checked == [((0, 0), (7, 5), True)]


def test_short_paths_are_copied() -> None:
    grid = Grid(3, 3)
    path = [(0, 0), (1, 0)]
    result = smooth(path, grid)
    assert result == path
    assert result is not path
    assert smooth([], grid) == []


def test_open_grid_collapses_to_endpoints() -> None:
    grid = Grid(10, 10)
    assert smooth(l_path((0, 0), (7, 5)), grid) == [(0, 0), (7, 5)]


def test_smoothing_around_obstacle() -> None:
    grid = Grid.from_text(
        [
            "          ",
            "   ####   ",
            "   ####   ",
            "   ####   ",
            "          ",
        ]
    )
    raw = find_path((0, 2), (9, 2), grid, TerrainCosts.uniform())
    assert raw is not None

    result = smooth(raw, grid)

    assert result[0] == raw[0]
    assert result[-1] == raw[-1]
    assert len(result) <= len(raw)
    assert 2 < len(result)
    assert _is_subsequence(result, raw)
    for a, b in zip(result, result[1:], strict=False):
        assert has_line_of_sight(a, b, grid)


def test_smoothing_never_lengthens() -> None:
    grid = Grid.from_text(
        ["    #    ", "  # # #  ", "  #   #  ", "  #####  ", "         "]
    )
    for goal in [(8, 0), (4, 2), (8, 4)]:
        raw = find_path((0, 0), goal, grid, TerrainCosts.uniform())
        assert raw is not None
        result = smooth(raw, grid)
        assert len(result) <= len(raw)
        assert result[0] == raw[0] and result[-1] == raw[-1]
        assert _is_subsequence(result, raw)
