#!/usr/bin/env python3
"""Benchmark layout generation across map sizes.

Generates layouts at several sizes and prints a per-phase timing table,
followed by determinism and connectivity checks.

Usage:
    uv run python scripts/benchmark_generation.py
"""

# ruff: noqa: E402  # Allow path setup before importing project modules

from __future__ import annotations

import logging
import sys
import timeit
from pathlib import Path

# Add the project root to Python path so running as a script works.
project_root = Path(__file__).resolve().parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from floorplan import config, generate_layout
from floorplan.environment.generators import PartitionConfig

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

PHASES = ("partition", "primary", "secondary", "validation")


def _bench(width: int, height: int, seed: int) -> float:
    """Return mean milliseconds per full generation."""
    timer = timeit.Timer(lambda: generate_layout(width, height, seed))
    number, total = timer.autorange()
    return (total / number) * 1000


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------


def main() -> None:
    logging.basicConfig(level=config.LOG_LEVEL)
    # Per-layout summaries would drown the table.
    logging.getLogger("floorplan").setLevel(logging.WARNING)

    sizes = [(40, 30), (80, 50), (120, 80), (200, 150), (256, 256)]

    print("Layout generation benchmark")
    print("=" * 86)
    header = "".join(f"{name:>12}" for name in PHASES)
    print(f"{'Size':<12} {'rooms':>6} {'corr':>6}{header} {'mean':>10}")
    print("-" * 86)

    for width, height in sizes:
        layout = generate_layout(width, height, config.RANDOM_SEED)
        phase_cols = "".join(
            f"{layout.metrics.get(f'{name}_ms', 0.0):>10.2f}ms" for name in PHASES
        )
        mean_ms = _bench(width, height, config.RANDOM_SEED)
        print(
            f"{f'{width}x{height}':<12} {len(layout.rooms):>6} "
            f"{len(layout.corridors):>6}{phase_cols} {mean_ms:>8.2f}ms"
        )

    print("-" * 86)
    print()

    # ------------------------------------------------------------------
    # Correctness checks
    # ------------------------------------------------------------------
    print("Correctness checks...")

    a = generate_layout(120, 80, "bench")
    b = generate_layout(120, 80, "bench")
    if a == b and a.grid.tiles.tobytes() == b.grid.tiles.tobytes():
        print("  Determinism check: identical seeds give identical layouts. OK!")
    else:
        print("  Determinism FAIL: layouts differ for the same seed")

    unconnected_total = 0
    for seed in range(20):
        layout = generate_layout(
            90, 60, seed, partition=PartitionConfig(min_room_size=5)
        )
        unconnected_total += len(layout.report.unconnected_room_ids)
    if unconnected_total == 0:
        print("  Connectivity check: every room reached across 20 seeds. OK!")
    else:
        print(f"  Connectivity: {unconnected_total} unconnected rooms across 20 seeds")


if __name__ == "__main__":
    main()
