from __future__ import annotations

from floorplan.environment.layout import MapLayout
from tests.helpers import make_corridor, make_layout, make_room


def _chain() -> MapLayout:
    """Three rooms in a row joined a-b and b-c."""
    a = make_room(0, 1, 1, 5, 5)
    b = make_room(1, 12, 1, 5, 5)
    c = make_room(2, 24, 1, 5, 5)
    corridors = [make_corridor(0, a, b), make_corridor(1, b, c)]
    return make_layout([a, b, c], corridors)


class TestMapLayout:
    def test_corridors_for(self) -> None:
        layout = _chain()
        assert [c.id for c in layout.corridors_for(0)] == [0]
        assert [c.id for c in layout.corridors_for(1)] == [0, 1]
        assert [c.id for c in layout.corridors_for(2)] == [1]
        assert layout.corridors_for(9) == []

    def test_total_corridor_length(self) -> None:
        layout = _chain()
        # Centers (3, 3) -> (14, 3) -> (26, 3).
        assert [c.length for c in layout.corridors] == [11, 12]
        assert layout.total_corridor_length() == 23

    def test_total_corridor_length_without_corridors(self) -> None:
        layout = make_layout([make_room(0, 1, 1, 5, 5)])
        assert layout.total_corridor_length() == 0

    def test_room_lookup_and_adjacency(self) -> None:
        layout = _chain()
        assert layout.room(2).rect.x == 24
        assert layout.adjacency() == {0: [1], 1: [0, 2], 2: [1]}
        assert layout.connected_components() == [[0, 1, 2]]
