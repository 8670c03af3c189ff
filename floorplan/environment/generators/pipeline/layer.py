"""Abstract base class for generation layers.

Each layer in the pipeline implements the GenerationLayer interface and
performs one phase of layout generation on the shared GenerationContext:
partitioning, the primary spine, secondary branches or validation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .context import GenerationContext


class GenerationLayer(ABC):
    """Abstract base class for layout generation layers.

    Layers are applied sequentially by the LayoutGenerator. Each layer
    receives a GenerationContext and modifies it in place. The generator
    may pause between layers but never inside one.

    Attributes:
        name: Phase name used in phase reports and timing metrics.
    """

    name: str = "layer"

    @abstractmethod
    def apply(self, ctx: GenerationContext) -> None:
        """Apply this layer's generation logic to the context.

        Args:
            ctx: The generation context to modify.
        """
        raise NotImplementedError
