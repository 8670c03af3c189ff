"""Configuration for layout generation.

Both config dataclasses take their defaults from ``floorplan.config`` and
are checked up front: ``validate()`` collects every problem and raises a
single ConfigurationError before any generation work starts.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from floorplan import config
from floorplan.util.pathfinding import TerrainCosts


class ConfigurationError(ValueError):
    """Raised when generation parameters are inconsistent or out of range."""

    def __init__(self, problems: list[str]) -> None:
        self.problems = list(problems)
        super().__init__("Invalid layout configuration: " + "; ".join(self.problems))


@dataclass(frozen=True)
class ClassificationPolicy:
    """Area and depth thresholds used to classify rooms."""

    small_room_area: int = config.SMALL_ROOM_AREA
    large_room_area: int = config.LARGE_ROOM_AREA
    shallow_depth: int = config.SHALLOW_ROOM_DEPTH

    def validate(self) -> list[str]:
        problems = []
        if self.small_room_area < 0:
            problems.append(f"small_room_area={self.small_room_area} must be >= 0")
        if self.large_room_area <= self.small_room_area:
            problems.append(
                f"large_room_area={self.large_room_area} must exceed "
                f"small_room_area={self.small_room_area}"
            )
        if self.shallow_depth < 0:
            problems.append(f"shallow_depth={self.shallow_depth} must be >= 0")
        return problems


@dataclass(frozen=True)
class PartitionConfig:
    """Parameters of the BSP partitioner.

    Attributes:
        min_room_size: Smallest partition side a cut may leave, per child.
        max_room_size: Largest room side; bigger leaves get a shrunken room.
        max_depth: Deepest level the tree may reach (root is depth 0).
        max_aspect_ratio: Long/short side limit that forces the cut direction.
        split_bias: Probability of a horizontal cut when both are allowed.
        split_jitter: Random offset of the cut from center, fraction of span.
        golden_ratio_weight: Pull of the cut toward a golden-ratio division.
        early_stop_chance: Chance a node that fits a max-size room stops.
        min_margin: Smallest inset between partition edge and room.
        max_margin: Largest inset between partition edge and room.
        corridor_clearance: Cells reserved across each cut for corridors.
        classification: Thresholds for room classification.
    """

    min_room_size: int = config.MIN_ROOM_SIZE
    max_room_size: int = config.MAX_ROOM_SIZE
    max_depth: int = config.MAX_PARTITION_DEPTH
    max_aspect_ratio: float = config.MAX_ASPECT_RATIO
    split_bias: float = config.SPLIT_BIAS
    split_jitter: float = config.SPLIT_JITTER
    golden_ratio_weight: float = config.GOLDEN_RATIO_WEIGHT
    early_stop_chance: float = config.EARLY_STOP_CHANCE
    min_margin: int = config.MIN_ROOM_MARGIN
    max_margin: int = config.MAX_ROOM_MARGIN
    corridor_clearance: int = config.CORRIDOR_CLEARANCE
    classification: ClassificationPolicy = field(default_factory=ClassificationPolicy)

    def validate(self) -> None:
        """Raise ConfigurationError listing every invalid parameter."""
        problems = []
        if self.min_room_size < 1:
            problems.append(f"min_room_size={self.min_room_size} must be >= 1")
        if self.max_room_size < self.min_room_size:
            problems.append(
                f"max_room_size={self.max_room_size} must be >= "
                f"min_room_size={self.min_room_size}"
            )
        if self.max_depth < 0:
            problems.append(f"max_depth={self.max_depth} must be >= 0")
        if self.max_aspect_ratio < 1.0:
            problems.append(f"max_aspect_ratio={self.max_aspect_ratio} must be >= 1")
        for name in ("split_bias", "split_jitter", "golden_ratio_weight"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                problems.append(f"{name}={value} must be within [0, 1]")
        if not 0.0 <= self.early_stop_chance <= 1.0:
            problems.append(
                f"early_stop_chance={self.early_stop_chance} must be within [0, 1]"
            )
        if self.min_margin < 0:
            problems.append(f"min_margin={self.min_margin} must be >= 0")
        if self.max_margin < self.min_margin:
            problems.append(
                f"max_margin={self.max_margin} must be >= min_margin={self.min_margin}"
            )
        if self.corridor_clearance < 0:
            problems.append(
                f"corridor_clearance={self.corridor_clearance} must be >= 0"
            )
        problems.extend(self.classification.validate())
        if problems:
            raise ConfigurationError(problems)


@dataclass(frozen=True)
class CorridorConfig:
    """Parameters of the two-pass corridor orchestrator.

    Attributes:
        primary_width: Nominal width recorded for spine corridors.
        secondary_width: Nominal width recorded for branch corridors.
        spine_depth: Tree depth whose subtrees each supply one core room.
        min_core_rooms: Fewest rooms the spine connects.
        max_branch_attempts: Spine tiles tried per room before giving up.
        spatial_hash_min_tiles: Spine size at which nearest-tile lookups use
            a spatial hash instead of a linear scan.
        spatial_hash_cell_size: Cell size of that spatial hash.
        smooth_paths: Store line-of-sight waypoints on each corridor.
        enclose_rooms: Surround rooms with WALL tiles after carving.
        costs: Terrain costs for the pathfinder.
    """

    primary_width: int = config.PRIMARY_CORRIDOR_WIDTH
    secondary_width: int = config.SECONDARY_CORRIDOR_WIDTH
    spine_depth: int = config.SPINE_DEPTH
    min_core_rooms: int = config.MIN_CORE_ROOMS
    max_branch_attempts: int = config.MAX_BRANCH_ATTEMPTS
    spatial_hash_min_tiles: int = config.SPATIAL_HASH_MIN_TILES
    spatial_hash_cell_size: int = config.SPATIAL_HASH_CELL_SIZE
    smooth_paths: bool = config.SMOOTH_CORRIDOR_PATHS
    enclose_rooms: bool = config.ENCLOSE_ROOMS_WITH_WALLS
    costs: TerrainCosts = field(default_factory=TerrainCosts)

    def validate(self) -> None:
        """Raise ConfigurationError listing every invalid parameter."""
        problems = []
        if self.primary_width < 1:
            problems.append(f"primary_width={self.primary_width} must be >= 1")
        if self.secondary_width < 1:
            problems.append(f"secondary_width={self.secondary_width} must be >= 1")
        if self.spine_depth < 0:
            problems.append(f"spine_depth={self.spine_depth} must be >= 0")
        if self.min_core_rooms < 1:
            problems.append(f"min_core_rooms={self.min_core_rooms} must be >= 1")
        if self.max_branch_attempts < 1:
            problems.append(
                f"max_branch_attempts={self.max_branch_attempts} must be >= 1"
            )
        if self.spatial_hash_min_tiles < 0:
            problems.append(
                f"spatial_hash_min_tiles={self.spatial_hash_min_tiles} must be >= 0"
            )
        if self.spatial_hash_cell_size < 1:
            problems.append(
                f"spatial_hash_cell_size={self.spatial_hash_cell_size} must be >= 1"
            )
        problems.extend(self.costs.validate())
        if problems:
            raise ConfigurationError(problems)


def validate_bounds(width: int, height: int) -> None:
    """Raise ConfigurationError unless both dimensions are positive integers."""
    problems = []
    for name, value in (("width", width), ("height", height)):
        if isinstance(value, bool) or not isinstance(value, int):
            problems.append(f"{name}={value!r} must be an integer")
        elif value < 1:
            problems.append(f"{name}={value} must be >= 1")
    if problems:
        raise ConfigurationError(problems)
