"""Layout generator that runs the generation phases as a pipeline.

The LayoutGenerator runs a sequence of GenerationLayers over a shared
GenerationContext. `iter_phases` yields after every layer so a caller can
spread generation over several frames or stop early; `generate` simply
runs every phase to completion.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from floorplan.environment.generators.base import BaseLayoutGenerator
from floorplan.environment.generators.settings import (
    CorridorConfig,
    PartitionConfig,
    validate_bounds,
)

from .context import GenerationContext

if TYPE_CHECKING:
    from floorplan.environment.layout import MapLayout
    from floorplan.types import RandomSeed, RoomId, TileCoord, WorldTilePos

    from .layer import GenerationLayer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PhaseReport:
    """Progress notice yielded after each completed phase.

    Attributes:
        name: Name of the layer that just ran.
        index: Zero-based position of that layer.
        total: Number of layers in the pipeline.
        elapsed_ms: Wall time the layer took.
    """

    name: str
    index: int
    total: int
    elapsed_ms: float

    @property
    def is_last(self) -> bool:
        return self.index == self.total - 1


class LayoutGenerator(BaseLayoutGenerator):
    """Layout generator that runs layers sequentially on a shared context.

    Example:
        generator = LayoutGenerator(
            layers=[
                PartitionLayer(),
                PrimarySpineLayer(),
                SecondaryBranchLayer(),
                ValidationLayer(),
            ],
            map_width=80,
            map_height=50,
            seed=12345,
        )
        layout = generator.generate()

    Attributes:
        layers: GenerationLayer instances to apply, in order.
        seed: Master seed for reproducible generation.
        layout: The finished layout, None until every phase has run.
    """

    def __init__(
        self,
        layers: list[GenerationLayer],
        map_width: TileCoord,
        map_height: TileCoord,
        seed: RandomSeed = None,
        *,
        partition_config: PartitionConfig | None = None,
        corridor_config: CorridorConfig | None = None,
        doorways: Mapping[RoomId, WorldTilePos] | None = None,
    ) -> None:
        """Initialize the generator and check its configuration.

        Raises:
            ConfigurationError: If the bounds or either config is invalid.
        """
        validate_bounds(map_width, map_height)
        self.partition_config = partition_config or PartitionConfig()
        self.corridor_config = corridor_config or CorridorConfig()
        self.partition_config.validate()
        self.corridor_config.validate()

        super().__init__(map_width, map_height)
        self.layers = layers
        self.seed = seed
        self.doorways = dict(doorways or {})
        self.layout: MapLayout | None = None

    def iter_phases(self) -> Iterator[PhaseReport]:
        """Run the pipeline one layer at a time.

        Yields a PhaseReport after each layer. ``self.layout`` is set just
        before the final report; a caller that stops iterating earlier gets
        no layout and the partial state is discarded.
        """
        self.layout = None
        ctx = GenerationContext.create_empty(
            width=self.map_width,
            height=self.map_height,
            seed=self.seed,
            partition_config=self.partition_config,
            corridor_config=self.corridor_config,
            doorways=self.doorways,
        )

        total = len(self.layers)
        started = time.perf_counter()
        for index, layer in enumerate(self.layers):
            layer_start = time.perf_counter()
            layer.apply(ctx)
            elapsed_ms = (time.perf_counter() - layer_start) * 1000.0
            ctx.metrics[f"{layer.name}_ms"] = elapsed_ms

            if index == total - 1:
                ctx.metrics["total_ms"] = (time.perf_counter() - started) * 1000.0
                self.layout = self._finish(ctx)
            yield PhaseReport(layer.name, index, total, elapsed_ms)

        if total == 0:
            self.layout = self._finish(ctx)

    def generate(self) -> MapLayout:
        """Run every phase and return the finished layout."""
        for _ in self.iter_phases():
            pass
        if self.layout is None:
            raise RuntimeError("Layout pipeline finished without producing a layout")
        return self.layout

    def _finish(self, ctx: GenerationContext) -> MapLayout:
        layout = ctx.to_layout()
        logger.info(
            f"Generated {layout.width}x{layout.height} layout (seed={layout.seed!r}): "
            f"{len(layout.rooms)} rooms, {len(layout.corridors)} corridors "
            f"in {ctx.metrics.get('total_ms', 0.0):.1f} ms"
        )
        unconnected = (
            layout.report.unconnected_room_ids
            if layout.report is not None
            else ctx.connection.unconnected_room_ids
        )
        if unconnected:
            logger.warning(
                f"Layout seed={layout.seed!r} left rooms unconnected: {unconnected}"
            )
        return layout
