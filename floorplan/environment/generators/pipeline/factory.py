"""Factory functions for creating pre-configured pipelines.

These functions provide convenient ways to create common pipeline
configurations without needing to manually assemble layers.

Currently implemented:
- "office": Partition, primary spine, secondary branches, validation
- "draft": The same without the validation phase, for fast previews
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

from .layers import (
    PartitionLayer,
    PrimarySpineLayer,
    SecondaryBranchLayer,
    ValidationLayer,
)
from .pipeline import LayoutGenerator

if TYPE_CHECKING:
    from floorplan.environment.generators.settings import (
        CorridorConfig,
        PartitionConfig,
    )
    from floorplan.types import RandomSeed, RoomId, WorldTilePos


def create_layout_pipeline(
    name: str,
    width: int,
    height: int,
    seed: RandomSeed = None,
    *,
    partition_config: PartitionConfig | None = None,
    corridor_config: CorridorConfig | None = None,
    doorways: Mapping[RoomId, WorldTilePos] | None = None,
) -> LayoutGenerator:
    """Create a pre-configured pipeline by name.

    Available pipelines:
    - "office": Full generation including validation
    - "draft": Generation without validation (``layout.report`` stays None)

    Args:
        name: Name of the pipeline configuration to use.
        width: Map width in tiles.
        height: Map height in tiles.
        seed: Random seed for deterministic generation.
        partition_config: Optional partition parameters.
        corridor_config: Optional corridor parameters.
        doorways: Optional preferred corridor start tile per room id.

    Returns:
        A configured LayoutGenerator ready to generate layouts.

    Raises:
        ValueError: If the pipeline name is not recognized.
        ConfigurationError: If the bounds or configs are invalid.
    """
    layers = [PartitionLayer(), PrimarySpineLayer(), SecondaryBranchLayer()]
    if name == "office":
        layers.append(ValidationLayer())
    elif name != "draft":
        raise ValueError(f"Unknown pipeline name: {name!r}")
    return LayoutGenerator(
        layers=layers,
        map_width=width,
        map_height=height,
        seed=seed,
        partition_config=partition_config,
        corridor_config=corridor_config,
        doorways=doorways,
    )
