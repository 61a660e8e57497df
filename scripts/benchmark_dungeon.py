#!/usr/bin/env python3
"""Benchmark level generation and per-turn visibility updates.

Generates a batch of seeded levels, then walks the player's field of view
through each level's room centers, and prints a timing table.

Usage:
    python scripts/benchmark_dungeon.py
    python scripts/benchmark_dungeon.py --levels 200 --width 120 --height 80
"""

# ruff: noqa: E402  # Allow path setup before importing project modules

from __future__ import annotations

import argparse
import statistics
import sys
import time
from pathlib import Path

# Add the project root to Python path so running as a script works.
project_root = Path(__file__).resolve().parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from undercroft import config
from undercroft.game.level import Level, generate_dungeon


def _generate(args: argparse.Namespace, seed: int) -> tuple[Level, float]:
    start = time.perf_counter()
    level = generate_dungeon(
        args.width,
        args.height,
        config.MIN_ROOM_SIZE,
        config.MAX_ROOM_SIZE,
        args.max_rooms,
        config.MAX_MONSTERS_PER_ROOM,
        config.MAX_ITEMS_PER_ROOM,
        seed=seed,
    )
    return level, (time.perf_counter() - start) * 1000


def _walk_fov(level: Level) -> list[float]:
    """Time one FOV update per room center, in ms."""
    timings = []
    for room in level.rooms:
        start = time.perf_counter()
        level.update_fov(room.center())
        timings.append((time.perf_counter() - start) * 1000)
    return timings


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Benchmark dungeon generation")
    parser.add_argument(
        "--levels", type=int, default=50, help="Number of levels (default: 50)"
    )
    parser.add_argument("--width", type=int, default=config.MAP_WIDTH)
    parser.add_argument("--height", type=int, default=config.MAP_HEIGHT)
    parser.add_argument("--max-rooms", type=int, default=config.MAX_NUM_ROOMS)
    args = parser.parse_args(argv)

    generation_ms: list[float] = []
    fov_ms: list[float] = []
    room_counts: list[int] = []
    fallbacks = 0

    for seed in range(args.levels):
        level, elapsed = _generate(args, seed)
        generation_ms.append(elapsed)
        room_counts.append(len(level.rooms))
        fallbacks += level.stats.used_fallback
        fov_ms.extend(_walk_fov(level))

    print(f"Dungeon benchmark: {args.levels} levels, {args.width}x{args.height}")
    print("=" * 56)
    print(f"{'Operation':<20} {'mean':>10} {'median':>10} {'max':>10}")
    print("-" * 56)
    for name, samples in (("generate_dungeon", generation_ms), ("update_fov", fov_ms)):
        print(
            f"{name:<20} {statistics.fmean(samples):>8.3f}ms "
            f"{statistics.median(samples):>8.3f}ms {max(samples):>8.3f}ms"
        )
    print("-" * 56)
    print(
        f"Rooms per level: mean {statistics.fmean(room_counts):.1f}, "
        f"min {min(room_counts)}, max {max(room_counts)}; fallbacks: {fallbacks}"
    )


if __name__ == "__main__":
    main()
