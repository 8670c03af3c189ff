"""
Configuration constants.

Centralizes the default values used by the layout generator. The settings
dataclasses in ``floorplan.environment.generators.settings`` take their
defaults from here. Organized by functional area for easy maintenance.
"""

import logging
import math
from pathlib import Path

# =============================================================================
# GENERAL
# =============================================================================

PROJECT_ROOT_PATH = Path(__file__).resolve().parent.parent

RANDOM_SEED = 42

# Level applied by developer scripts. The library itself installs no handlers.
LOG_LEVEL = logging.INFO

# RNG domains. Each phase draws from its own stream so that adding draws to
# one phase never shifts another phase's sequence.
RNG_DOMAIN_PARTITION = "layout.partition"
RNG_DOMAIN_CORRIDORS = "layout.corridors"

# =============================================================================
# PARTITIONING (BSP)
# =============================================================================

MIN_ROOM_SIZE = 6
MAX_ROOM_SIZE = 20
MAX_PARTITION_DEPTH = 6

# Long side / short side. Nodes above this are always cut across the long side.
MAX_ASPECT_RATIO = 2.5

# Probability of choosing a horizontal cut when both orientations are allowed.
SPLIT_BIAS = 0.5

# Random offset of the cut from the partition center, as a fraction of span.
SPLIT_JITTER = 0.15

# Blend weight pulling the cut toward a golden-ratio division of the span.
GOLDEN_RATIO_WEIGHT = 0.3
GOLDEN_CUT = 1.0 - 1.0 / ((1.0 + math.sqrt(5.0)) / 2.0)  # ~0.382

# Chance that a node which already fits a maximum room stops splitting.
EARLY_STOP_CHANCE = 0.1

# Inset between a partition edge and its room, drawn per side.
MIN_ROOM_MARGIN = 1
MAX_ROOM_MARGIN = 2

# Extra cells reserved across a cut for corridors between sibling rooms.
CORRIDOR_CLEARANCE = 2

# =============================================================================
# ROOM CLASSIFICATION
# =============================================================================

SMALL_ROOM_AREA = 36
LARGE_ROOM_AREA = 144
# Large rooms at or above this depth (closer to the root) become lobbies.
SHALLOW_ROOM_DEPTH = 2

# =============================================================================
# CORRIDORS
# =============================================================================

PRIMARY_CORRIDOR_WIDTH = 2
SECONDARY_CORRIDOR_WIDTH = 1

# Partition depth whose subtrees each contribute one core room to the spine.
SPINE_DEPTH = 2
MIN_CORE_ROOMS = 2

# Candidate primary tiles tried per room before it is reported unconnected.
MAX_BRANCH_ATTEMPTS = 3

# Nearest-corridor lookups switch from a linear scan to a spatial hash once
# the spine has at least this many tiles.
SPATIAL_HASH_MIN_TILES = 256
SPATIAL_HASH_CELL_SIZE = 16

SMOOTH_CORRIDOR_PATHS = True
ENCLOSE_ROOMS_WITH_WALLS = True

# =============================================================================
# TERRAIN COSTS (A*)
# =============================================================================

# Cost of entering a tile. Existing corridors are cheapest so new paths
# reuse them; room floors are expensive so corridors route around rooms.
CORRIDOR_STEP_COST = 1.0
DOORWAY_STEP_COST = 1.0
EMPTY_STEP_COST = 2.0
ROOM_FLOOR_STEP_COST = 10.0

# =============================================================================
# VALIDATION
# =============================================================================

MIN_CORRIDOR_WIDTH = 1
# Rooms narrower than this on either axis produce a warning.
NARROW_ROOM_WARNING_SIZE = 3
