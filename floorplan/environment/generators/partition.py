"""Binary space partitioning of the layout bounds into room-sized leaves.

The tree is an arena: nodes live in a flat list and refer to each other by
integer index, with -1 meaning "no node". Nodes are appended in pre-order
(left child first), so room ids follow left-to-right tree order.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from floorplan import config as defaults
from floorplan.environment.generators.classification import classify_room
from floorplan.environment.layout import Room
from floorplan.util.coordinates import Rect

if TYPE_CHECKING:
    from floorplan.environment.generators.settings import PartitionConfig
    from floorplan.types import NodeIndex
    from floorplan.util.rng import RNG

logger = logging.getLogger(__name__)

NO_NODE: NodeIndex = -1


class SplitOrientation(Enum):
    """Direction of the cut line.

    A HORIZONTAL cut runs along the x axis and stacks its children top and
    bottom. A VERTICAL cut runs along the y axis and places them left and
    right.
    """

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


@dataclass
class PartitionNode:
    """One region of the partition tree.

    Attributes:
        index: Position of this node in the tree arena.
        rect: Region covered by the node.
        depth: Distance from the root (root is 0).
        parent: Arena index of the parent, NO_NODE for the root.
        left: Top or left child, NO_NODE for leaves.
        right: Bottom or right child, NO_NODE for leaves.
        orientation: Cut direction of an internal node.
        split_position: Coordinate of the cut line of an internal node.
        room: Room carved from a leaf.
    """

    index: NodeIndex
    rect: Rect
    depth: int
    parent: NodeIndex = NO_NODE
    left: NodeIndex = NO_NODE
    right: NodeIndex = NO_NODE
    orientation: SplitOrientation | None = None
    split_position: int | None = None
    room: Room | None = None

    @property
    def is_leaf(self) -> bool:
        return self.left == NO_NODE and self.right == NO_NODE


@dataclass(frozen=True)
class PartitionStatistics:
    """Summary of one partition tree."""

    total_nodes: int = 0
    internal_nodes: int = 0
    leaf_nodes: int = 0
    rooms_generated: int = 0
    max_depth: int = 0
    horizontal_splits: int = 0
    vertical_splits: int = 0
    total_room_area: int = 0

    @property
    def average_room_area(self) -> float:
        if not self.rooms_generated:
            return 0.0
        return self.total_room_area / self.rooms_generated


@dataclass
class PartitionTree:
    """Arena holding every node of one partition."""

    bounds: Rect
    nodes: list[PartitionNode] = field(default_factory=list)

    @property
    def root(self) -> PartitionNode:
        return self.nodes[0]

    def node(self, index: NodeIndex) -> PartitionNode:
        return self.nodes[index]

    def is_leaf(self, index: NodeIndex) -> bool:
        return self.nodes[index].is_leaf

    def __len__(self) -> int:
        return len(self.nodes)

    def _append(self, rect: Rect, depth: int, parent: NodeIndex) -> PartitionNode:
        node = PartitionNode(
            index=len(self.nodes), rect=rect, depth=depth, parent=parent
        )
        self.nodes.append(node)
        return node

    # -------------------------------------------------------------------------
    # Traversal
    # -------------------------------------------------------------------------

    def subtree(self, index: NodeIndex = 0) -> Iterator[PartitionNode]:
        """Pre-order walk of the subtree rooted at ``index``, left first."""
        if not self.nodes:
            return
        stack = [index]
        while stack:
            node = self.nodes[stack.pop()]
            yield node
            if node.right != NO_NODE:
                stack.append(node.right)
            if node.left != NO_NODE:
                stack.append(node.left)

    def subtree_leaves(self, index: NodeIndex) -> list[PartitionNode]:
        return [node for node in self.subtree(index) if node.is_leaf]

    def leaves(self) -> list[PartitionNode]:
        """All leaves in left-to-right tree order."""
        return self.subtree_leaves(0) if self.nodes else []

    def rooms(self) -> list[Room]:
        return [leaf.room for leaf in self.leaves() if leaf.room is not None]

    def nodes_at_depth(self, depth: int) -> list[PartitionNode]:
        """Nodes at exactly ``depth``, in tree order."""
        return [node for node in self.subtree() if node.depth == depth]

    def ancestors(self, index: NodeIndex) -> list[NodeIndex]:
        """Indices from the parent of ``index`` up to the root."""
        result = []
        current = self.nodes[index].parent
        while current != NO_NODE:
            result.append(current)
            current = self.nodes[current].parent
        return result

    @property
    def max_depth(self) -> int:
        return max((node.depth for node in self.nodes), default=0)

    # -------------------------------------------------------------------------
    # Diagnostics
    # -------------------------------------------------------------------------

    def statistics(self) -> PartitionStatistics:
        leaves = [node for node in self.nodes if node.is_leaf]
        internal = [node for node in self.nodes if not node.is_leaf]
        rooms = [leaf.room for leaf in leaves if leaf.room is not None]
        return PartitionStatistics(
            total_nodes=len(self.nodes),
            internal_nodes=len(internal),
            leaf_nodes=len(leaves),
            rooms_generated=len(rooms),
            max_depth=self.max_depth,
            horizontal_splits=sum(
                1 for n in internal if n.orientation is SplitOrientation.HORIZONTAL
            ),
            vertical_splits=sum(
                1 for n in internal if n.orientation is SplitOrientation.VERTICAL
            ),
            total_room_area=sum(room.area for room in rooms),
        )

    def validate(self) -> list[str]:
        """Check the tree's structure.

        Returns:
            Human-readable problems; empty if the tree is sound.
        """
        problems = []
        for node in self.nodes:
            if node.rect.is_empty:
                problems.append(f"node {node.index} has empty bounds {node.rect}")
            if node.is_leaf:
                if node.room is None:
                    problems.append(f"leaf {node.index} has no room")
                elif not node.rect.contains_rect(node.room.rect):
                    problems.append(f"room {node.room.id} escapes leaf {node.index}")
                continue
            if node.left == NO_NODE or node.right == NO_NODE:
                problems.append(f"internal node {node.index} has a single child")
                continue
            left, right = self.nodes[node.left], self.nodes[node.right]
            for child in (left, right):
                if child.parent != node.index:
                    problems.append(f"node {child.index} has wrong parent")
                if child.depth != node.depth + 1:
                    problems.append(f"node {child.index} has wrong depth")
                if not node.rect.contains_rect(child.rect):
                    problems.append(f"node {child.index} escapes parent {node.index}")
            if left.rect.intersects(right.rect):
                problems.append(f"children of node {node.index} overlap")
        return problems


def generate_partition(
    bounds: Rect, config: PartitionConfig, rng: RNG
) -> PartitionTree:
    """
    Recursively split ``bounds`` into a tree of partitions, one room per leaf.

    Random draws happen in a fixed order, so the tree is a pure function of
    (bounds, config, RNG state).

    Args:
        bounds: Region to partition.
        config: Partitioning parameters. Assumed already validated.
        rng: Random source for split and margin choices.

    Returns:
        The populated PartitionTree.
    """
    return _PartitionBuilder(config, rng).build(bounds)


class _PartitionBuilder:
    def __init__(self, config: PartitionConfig, rng: RNG) -> None:
        self.config = config
        self.rng = rng
        self._next_room_id = 0

    def build(self, bounds: Rect) -> PartitionTree:
        tree = PartitionTree(bounds=bounds)
        self._split(tree, bounds, depth=0, parent=NO_NODE)
        logger.debug(
            f"Partitioned {bounds.width}x{bounds.height} into "
            f"{self._next_room_id} rooms over {len(tree)} nodes"
        )
        return tree

    def _split(
        self, tree: PartitionTree, rect: Rect, depth: int, parent: NodeIndex
    ) -> NodeIndex:
        node = tree._append(rect, depth, parent)
        orientation = self._choose_orientation(rect, depth)
        if orientation is None:
            node.room = self._make_room(rect, depth, node.index)
            return node.index

        cut = self._choose_cut(rect, orientation)
        first, second = self._child_rects(rect, orientation, cut)
        node.orientation = orientation
        node.split_position = cut
        node.left = self._split(tree, first, depth + 1, node.index)
        node.right = self._split(tree, second, depth + 1, node.index)
        return node.index

    # -------------------------------------------------------------------------
    # Split decisions
    # -------------------------------------------------------------------------

    def _can_split(self, length: int) -> bool:
        return length >= 2 * self.config.min_room_size + self.config.corridor_clearance

    def _choose_orientation(self, rect: Rect, depth: int) -> SplitOrientation | None:
        """Pick the cut direction, or None to make ``rect`` a leaf."""
        cfg = self.config
        if depth >= cfg.max_depth:
            return None

        can_horizontal = self._can_split(rect.height)
        can_vertical = self._can_split(rect.width)
        if not (can_horizontal or can_vertical):
            if rect.width < cfg.min_room_size or rect.height < cfg.min_room_size:
                logger.debug(f"Degenerate region {rect} kept as a leaf")
            return None

        fits_max_room = (
            rect.width <= cfg.max_room_size + 2 * cfg.max_margin
            and rect.height <= cfg.max_room_size + 2 * cfg.max_margin
        )
        if depth >= 1 and fits_max_room and self.rng.random() < cfg.early_stop_chance:
            return None

        if not can_vertical:
            return SplitOrientation.HORIZONTAL
        if not can_horizontal:
            return SplitOrientation.VERTICAL

        long_side = max(rect.width, rect.height)
        short_side = min(rect.width, rect.height)
        if long_side / short_side > cfg.max_aspect_ratio:
            if rect.width > rect.height:
                return SplitOrientation.VERTICAL
            return SplitOrientation.HORIZONTAL

        horizontal_ok = _aspect(rect.width, rect.height / 2) <= cfg.max_aspect_ratio
        vertical_ok = _aspect(rect.width / 2, rect.height) <= cfg.max_aspect_ratio
        if horizontal_ok and not vertical_ok:
            return SplitOrientation.HORIZONTAL
        if vertical_ok and not horizontal_ok:
            return SplitOrientation.VERTICAL

        if self.rng.random() < cfg.split_bias:
            return SplitOrientation.HORIZONTAL
        return SplitOrientation.VERTICAL

    def _cut_range(self, start: int, length: int) -> tuple[int, int]:
        clearance = self.config.corridor_clearance
        lo = start + self.config.min_room_size + clearance // 2
        hi = start + length - self.config.min_room_size - (clearance - clearance // 2)
        return lo, hi

    def _choose_cut(self, rect: Rect, orientation: SplitOrientation) -> int:
        """Blend a jittered center cut with a golden-ratio cut."""
        cfg = self.config
        if orientation is SplitOrientation.HORIZONTAL:
            start, length = rect.y, rect.height
        else:
            start, length = rect.x, rect.width
        lo, hi = self._cut_range(start, length)

        offset = self.rng.uniform(-1.0, 1.0) * cfg.split_jitter * length
        jittered = start + length / 2 + offset
        fraction = defaults.GOLDEN_CUT
        if self.rng.random() >= 0.5:
            fraction = 1.0 - defaults.GOLDEN_CUT
        golden = start + length * fraction
        weight = cfg.golden_ratio_weight
        cut = round((1.0 - weight) * jittered + weight * golden)
        return max(lo, min(hi, cut))

    def _child_rects(
        self, rect: Rect, orientation: SplitOrientation, cut: int
    ) -> tuple[Rect, Rect]:
        """Split at ``cut``, leaving the corridor clearance between children."""
        clearance = self.config.corridor_clearance
        before = cut - clearance // 2
        after = cut + (clearance - clearance // 2)
        if orientation is SplitOrientation.HORIZONTAL:
            return (
                Rect.from_bounds(rect.x1, rect.y1, rect.x2, before),
                Rect.from_bounds(rect.x1, after, rect.x2, rect.y2),
            )
        return (
            Rect.from_bounds(rect.x1, rect.y1, before, rect.y2),
            Rect.from_bounds(after, rect.y1, rect.x2, rect.y2),
        )

    # -------------------------------------------------------------------------
    # Leaves
    # -------------------------------------------------------------------------

    def _make_room(self, rect: Rect, depth: int, index: NodeIndex) -> Room:
        cfg = self.config
        left, top, right, bottom = (
            self.rng.randint(cfg.min_margin, cfg.max_margin) for _ in range(4)
        )
        left, right = _fit_margins(left, right, rect.width)
        top, bottom = _fit_margins(top, bottom, rect.height)
        inner = rect.inset(left, top, right, bottom)

        x, width = inner.x, inner.width
        if width > cfg.max_room_size:
            x += self.rng.randint(0, width - cfg.max_room_size)
            width = cfg.max_room_size
        y, height = inner.y, inner.height
        if height > cfg.max_room_size:
            y += self.rng.randint(0, height - cfg.max_room_size)
            height = cfg.max_room_size

        room_rect = Rect(x, y, width, height)
        room = Room(
            id=self._next_room_id,
            rect=room_rect,
            depth=depth,
            partition_index=index,
            classification=classify_room(room_rect.area, depth, cfg.classification),
        )
        self._next_room_id += 1
        return room


def _aspect(a: float, b: float) -> float:
    short = min(a, b)
    return max(a, b) / short if short > 0 else float("inf")


def _fit_margins(first: int, second: int, length: int) -> tuple[int, int]:
    """Shrink a pair of margins until at least one cell remains between them."""
    while first + second > length - 1 and (first > 0 or second > 0):
        if second >= first:
            second -= 1
        else:
            first -= 1
    return first, second
