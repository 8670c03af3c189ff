"""Pipeline-based layout generation.

Each phase of layout generation is a layer that transforms a shared
GenerationContext. The LayoutGenerator runs the layers in order and can
pause between them.

Example usage:
    from floorplan.environment.generators.pipeline import create_layout_pipeline

    generator = create_layout_pipeline("office", width=80, height=50, seed=7)
    for phase in generator.iter_phases():
        print(phase.name, f"{phase.elapsed_ms:.1f} ms")
    layout = generator.layout
"""

from .context import GenerationContext
from .factory import create_layout_pipeline
from .layer import GenerationLayer
from .layers import (
    PartitionLayer,
    PrimarySpineLayer,
    SecondaryBranchLayer,
    ValidationLayer,
)
from .pipeline import LayoutGenerator, PhaseReport

__all__ = [
    "GenerationContext",
    "GenerationLayer",
    "LayoutGenerator",
    "PartitionLayer",
    "PhaseReport",
    "PrimarySpineLayer",
    "SecondaryBranchLayer",
    "ValidationLayer",
    "create_layout_pipeline",
]
