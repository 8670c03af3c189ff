"""Layout generation algorithms.

This package provides:
- generate_partition: BSP partitioning of the bounds into room leaves
- CorridorOrchestrator / connect_rooms: two-pass corridor placement
- LayoutGenerator: pipeline that runs partitioning, the primary spine,
  secondary branches and validation as pausable phases

Configuration lives in PartitionConfig and CorridorConfig; invalid values
raise ConfigurationError before any work starts.
"""

from .base import BaseLayoutGenerator
from .corridors import ConnectionResult, CorridorOrchestrator, connect_rooms
from .partition import PartitionTree, SplitOrientation, generate_partition
from .pipeline import (
    GenerationContext,
    GenerationLayer,
    LayoutGenerator,
    PhaseReport,
    create_layout_pipeline,
)
from .settings import (
    ClassificationPolicy,
    ConfigurationError,
    CorridorConfig,
    PartitionConfig,
)

__all__ = [
    "BaseLayoutGenerator",
    "ClassificationPolicy",
    "ConfigurationError",
    "ConnectionResult",
    "CorridorConfig",
    "CorridorOrchestrator",
    "GenerationContext",
    "GenerationLayer",
    "LayoutGenerator",
    "PartitionConfig",
    "PartitionTree",
    "PhaseReport",
    "SplitOrientation",
    "connect_rooms",
    "create_layout_pipeline",
    "generate_partition",
]
