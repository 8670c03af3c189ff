"""Partition layer: split the bounds into leaves and carve one room per leaf."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from floorplan import config
from floorplan.environment.generators.partition import generate_partition
from floorplan.util.coordinates import Rect

from ..layer import GenerationLayer

if TYPE_CHECKING:
    from ..context import GenerationContext

logger = logging.getLogger(__name__)


class PartitionLayer(GenerationLayer):
    """Builds the partition tree and paints its rooms onto the grid."""

    name = "partition"

    def apply(self, ctx: GenerationContext) -> None:
        bounds = Rect(0, 0, ctx.width, ctx.height)
        ctx.tree = generate_partition(
            bounds, ctx.partition_config, ctx.rng.get(config.RNG_DOMAIN_PARTITION)
        )
        ctx.rooms = ctx.tree.rooms()
        ctx.grid.paint_rooms(ctx.rooms)
        logger.debug(f"Partition phase produced {len(ctx.rooms)} rooms")
