"""Base class for layout generators."""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from floorplan.environment.layout import MapLayout
    from floorplan.types import TileCoord


class BaseLayoutGenerator(abc.ABC):
    """Abstract base class for layout generation algorithms."""

    def __init__(self, map_width: TileCoord, map_height: TileCoord) -> None:
        self.map_width = map_width
        self.map_height = map_height

    @abc.abstractmethod
    def generate(self) -> MapLayout:
        """Generate the rooms, corridors and grid of one layout."""
        raise NotImplementedError
