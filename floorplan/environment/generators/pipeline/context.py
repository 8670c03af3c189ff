"""Generation context for the layout pipeline.

The GenerationContext is a mutable container that holds all state during
one layout generation. Each layer receives the same context and modifies
it in place. A context that is abandoned part way through is simply
dropped; nothing outside it is touched.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from floorplan.environment.generators.corridors import ConnectionResult
from floorplan.environment.grid import Grid
from floorplan.environment.layout import MapLayout, Room
from floorplan.util.rng import RNGProvider

if TYPE_CHECKING:
    from floorplan.environment.generators.corridors import CorridorOrchestrator
    from floorplan.environment.generators.partition import PartitionTree
    from floorplan.environment.generators.settings import (
        CorridorConfig,
        PartitionConfig,
    )
    from floorplan.environment.validation import ValidationReport
    from floorplan.types import RandomSeed, RoomId, WorldTilePos


@dataclass
class GenerationContext:
    """Mutable state container passed through the generation pipeline.

    Attributes:
        width: Map width in tiles.
        height: Map height in tiles.
        seed: Master seed of the layout.
        partition_config: Parameters for the partition phase.
        corridor_config: Parameters for both corridor phases.
        grid: Shared tile grid, filled in by the layers.
        rng: Provider of the per-phase random streams.
        doorways: Optional preferred corridor start tile per room id.
        tree: Partition tree, set by the partition phase.
        rooms: Rooms in id order, set by the partition phase.
        orchestrator: Corridor orchestrator shared by both corridor phases.
        connection: Corridor results, set once branches are finalized.
        report: Validation report, set by the validation phase.
        metrics: Phase timings and counters.
    """

    width: int
    height: int
    seed: RandomSeed
    partition_config: PartitionConfig
    corridor_config: CorridorConfig
    grid: Grid
    rng: RNGProvider
    doorways: dict[RoomId, WorldTilePos] = field(default_factory=dict)
    tree: PartitionTree | None = None
    rooms: list[Room] = field(default_factory=list)
    orchestrator: CorridorOrchestrator | None = None
    connection: ConnectionResult = field(default_factory=ConnectionResult)
    report: ValidationReport | None = None
    metrics: dict[str, float] = field(default_factory=dict)

    @classmethod
    def create_empty(
        cls,
        width: int,
        height: int,
        seed: RandomSeed,
        partition_config: PartitionConfig,
        corridor_config: CorridorConfig,
        doorways: Mapping[RoomId, WorldTilePos] | None = None,
    ) -> GenerationContext:
        """Create a context with an all-EMPTY grid and fresh RNG streams."""
        return cls(
            width=width,
            height=height,
            seed=seed,
            partition_config=partition_config,
            corridor_config=corridor_config,
            grid=Grid(width, height),
            rng=RNGProvider(seed),
            doorways=dict(doorways or {}),
        )

    def to_layout(self) -> MapLayout:
        """Snapshot the current state as a MapLayout."""
        connection = self.connection
        if self.orchestrator is not None and not connection.corridors:
            connection = self.orchestrator.result
        metrics = dict(self.metrics)
        metrics["path_calls"] = connection.stats.calls
        metrics["path_failures"] = connection.stats.failures
        metrics["nodes_expanded"] = connection.stats.nodes_expanded
        layout = MapLayout(
            rooms=tuple(self.rooms),
            corridors=tuple(connection.corridors),
            width=self.width,
            height=self.height,
            seed=self.seed,
            grid=self.grid,
            entry_room_id=(
                connection.entry_room_id
                if connection.entry_room_id is not None
                else (self.rooms[0].id if self.rooms else None)
            ),
            core_room_ids=tuple(connection.core_room_ids),
            partition_stats=self.tree.statistics() if self.tree is not None else None,
            metrics=metrics,
        )
        if self.report is not None:
            layout = replace(layout, report=self.report)
        return layout
