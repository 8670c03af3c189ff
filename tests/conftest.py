from __future__ import annotations

import pytest

from floorplan import generate_layout
from floorplan.environment.generators import PartitionConfig
from floorplan.environment.layout import MapLayout


@pytest.fixture(scope="module")
def reference_layout() -> MapLayout:
    """The 50x50, seed 42, 8-cell minimum room layout used across tests."""
    return generate_layout(50, 50, 42, partition=PartitionConfig(min_room_size=8))
