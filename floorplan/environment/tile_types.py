"""
Tile states for the layout grid.

This module defines:
- `TileState`: the small set of integer states a grid cell can hold. `Grid`
  stores a NumPy uint8 array of these values.
- `TileStateData`: a structured dtype describing the intrinsic properties of
  each state (walkable, corridor, text glyph, display name).
- Lookup tables indexed by state value, plus helpers that turn a whole state
  array into a property map in one vectorized step. These back the
  pathfinder's cost map and the validator's checks.
"""

from enum import IntEnum

import numpy as np


class TileState(IntEnum):
    """The state of one grid cell."""

    EMPTY = 0
    ROOM_FLOOR = 1
    WALL = 2
    PRIMARY_CORRIDOR = 3
    SECONDARY_CORRIDOR = 4
    DOORWAY = 5
    # Sentinel returned for queries outside the grid. Never stored.
    OUT_OF_BOUNDS = 255


TileStateData = np.dtype(
    [
        ("walkable", bool),
        ("corridor", bool),  # Carved by the corridor orchestrator
        ("glyph", "U1"),  # Character used by Grid.to_text / Grid.from_text
        ("display_name", "U32"),
    ]
)


def make_tile_state_data(
    *,
    walkable: bool,
    glyph: str,
    display_name: str,
    corridor: bool = False,
) -> np.ndarray:
    """Create a TileStateData instance."""
    return np.array((walkable, corridor, glyph, display_name), dtype=TileStateData)


_STATE_DATA: dict[TileState, np.ndarray] = {
    TileState.EMPTY: make_tile_state_data(
        walkable=True, glyph=" ", display_name="Empty"
    ),
    TileState.ROOM_FLOOR: make_tile_state_data(
        walkable=True, glyph=".", display_name="Room Floor"
    ),
    TileState.WALL: make_tile_state_data(
        walkable=False, glyph="#", display_name="Wall"
    ),
    TileState.PRIMARY_CORRIDOR: make_tile_state_data(
        walkable=True, corridor=True, glyph="=", display_name="Primary Corridor"
    ),
    TileState.SECONDARY_CORRIDOR: make_tile_state_data(
        walkable=True, corridor=True, glyph="-", display_name="Secondary Corridor"
    ),
    TileState.DOORWAY: make_tile_state_data(
        walkable=True, corridor=True, glyph="+", display_name="Doorway"
    ),
    TileState.OUT_OF_BOUNDS: make_tile_state_data(
        walkable=False, glyph="?", display_name="Out of Bounds"
    ),
}

# Lookup tables cover every uint8 value so any stored byte indexes safely.
# Unknown values behave like OUT_OF_BOUNDS.
_tile_state_properties_walkable = np.zeros(256, dtype=bool)
_tile_state_properties_corridor = np.zeros(256, dtype=bool)
_tile_state_properties_glyph = np.full(256, "?", dtype="U1")
for _state, _data in _STATE_DATA.items():
    _tile_state_properties_walkable[_state] = _data["walkable"]
    _tile_state_properties_corridor[_state] = _data["corridor"]
    _tile_state_properties_glyph[_state] = _data["glyph"]

_GLYPH_TO_STATE: dict[str, TileState] = {
    str(data["glyph"]): state
    for state, data in _STATE_DATA.items()
    if state != TileState.OUT_OF_BOUNDS
}

# --- Public Helper Functions for Accessing Tile Properties ---


def get_walkable_map(states: np.ndarray) -> np.ndarray:
    """
    Converts a map of TileState values into a boolean map of walkability.
    Everything except WALL and OUT_OF_BOUNDS is walkable.
    """
    return _tile_state_properties_walkable[states]


def get_corridor_map(states: np.ndarray) -> np.ndarray:
    """Boolean map of corridor and doorway tiles."""
    return _tile_state_properties_corridor[states]


def get_glyph_map(states: np.ndarray) -> np.ndarray:
    return _tile_state_properties_glyph[states]


def is_walkable(state: int) -> bool:
    return bool(_tile_state_properties_walkable[state])


def state_for_glyph(glyph: str) -> TileState:
    """Map a text-grid character back to its TileState.

    Raises:
        ValueError: If the character is not a known tile glyph.
    """
    try:
        return _GLYPH_TO_STATE[glyph]
    except KeyError:
        raise ValueError(f"Unknown tile glyph: {glyph!r}") from None


def get_tile_state_name(state: int) -> str:
    """Human-readable name of a tile state (e.g. "Room Floor")."""
    try:
        return str(_STATE_DATA[TileState(state)]["display_name"])
    except ValueError:
        return f"Unknown ({state})"
