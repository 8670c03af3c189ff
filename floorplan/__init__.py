"""Deterministic BSP floorplan generation.

Partition a rectangle into rooms, connect them with a primary corridor
spine and secondary branches, and validate that every room is reachable.

Example:
    import floorplan

    layout = floorplan.generate_layout(60, 40, seed=42)
    print(layout.grid.to_text())
    print(layout.report.summary())
"""

from __future__ import annotations

from collections.abc import Mapping

from floorplan.environment.generators import (
    ConfigurationError,
    CorridorConfig,
    PartitionConfig,
    create_layout_pipeline,
)
from floorplan.environment.layout import Corridor, MapLayout, Room
from floorplan.environment.validation import ValidationReport, validate
from floorplan.types import RandomSeed, RoomId, WorldTilePos


def generate_layout(
    width: int,
    height: int,
    seed: RandomSeed,
    *,
    partition: PartitionConfig | None = None,
    corridors: CorridorConfig | None = None,
    doorways: Mapping[RoomId, WorldTilePos] | None = None,
) -> MapLayout:
    """Generate a validated floorplan.

    The same (width, height, configs, seed) always yields the same layout.
    Rooms that could not be connected do not raise; they are listed in
    ``layout.report.unconnected_room_ids``.

    Raises:
        ConfigurationError: If the bounds or configs are invalid.
    """
    generator = create_layout_pipeline(
        "office",
        width,
        height,
        seed,
        partition_config=partition,
        corridor_config=corridors,
        doorways=doorways,
    )
    return generator.generate()


__all__ = [
    "ConfigurationError",
    "Corridor",
    "CorridorConfig",
    "MapLayout",
    "PartitionConfig",
    "Room",
    "ValidationReport",
    "generate_layout",
    "validate",
]
