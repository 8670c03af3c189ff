"""Corridor layers: the primary spine, then secondary branches.

The two passes are separate layers so the pipeline can pause between
them. Both share the CorridorOrchestrator stored on the context.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from floorplan import config
from floorplan.environment.generators.corridors import CorridorOrchestrator

from ..layer import GenerationLayer

if TYPE_CHECKING:
    from ..context import GenerationContext


def _orchestrator(ctx: GenerationContext) -> CorridorOrchestrator:
    if ctx.orchestrator is None:
        ctx.orchestrator = CorridorOrchestrator(
            ctx.corridor_config,
            ctx.rng.get(config.RNG_DOMAIN_CORRIDORS),
            doorways=ctx.doorways,
        )
    return ctx.orchestrator


class PrimarySpineLayer(GenerationLayer):
    """Connects the core rooms with primary corridors."""

    name = "primary"

    def apply(self, ctx: GenerationContext) -> None:
        _orchestrator(ctx).build_spine(ctx.rooms, ctx.grid, tree=ctx.tree)


class SecondaryBranchLayer(GenerationLayer):
    """Hangs the remaining rooms off the spine, then marks doorways and walls."""

    name = "secondary"

    def apply(self, ctx: GenerationContext) -> None:
        orchestrator = _orchestrator(ctx)
        orchestrator.attach_branches(ctx.rooms, ctx.grid)
        ctx.connection = orchestrator.finalize(ctx.rooms, ctx.grid)
