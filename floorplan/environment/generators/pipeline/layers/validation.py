"""Validation layer: check the assembled layout and keep the report."""

from __future__ import annotations

from typing import TYPE_CHECKING

from floorplan.environment.validation import validate

from ..layer import GenerationLayer

if TYPE_CHECKING:
    from ..context import GenerationContext


class ValidationLayer(GenerationLayer):
    name = "validation"

    def apply(self, ctx: GenerationContext) -> None:
        cfg = ctx.corridor_config
        ctx.report = validate(
            ctx.to_layout(),
            expected_widths={cfg.primary_width, cfg.secondary_width},
        )
