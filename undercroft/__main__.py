"""Print a generated level as ASCII.

Usage:
    python -m undercroft --width 50 --height 30 --seed 7
    python -m undercroft --seed 7 --fov --log-level DEBUG
"""

from __future__ import annotations

import argparse
import logging
import sys

from undercroft import config
from undercroft.game.level import generate_dungeon

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="undercroft", description="Generate a dungeon level and print it"
    )
    parser.add_argument("--width", type=int, default=config.MAP_WIDTH)
    parser.add_argument("--height", type=int, default=config.MAP_HEIGHT)
    parser.add_argument("--min-room", type=int, default=config.MIN_ROOM_SIZE)
    parser.add_argument("--max-room", type=int, default=config.MAX_ROOM_SIZE)
    parser.add_argument("--max-rooms", type=int, default=config.MAX_NUM_ROOMS)
    parser.add_argument(
        "--max-monsters", type=int, default=config.MAX_MONSTERS_PER_ROOM
    )
    parser.add_argument("--max-items", type=int, default=config.MAX_ITEMS_PER_ROOM)
    parser.add_argument(
        "--seed",
        default=config.RANDOM_SEED,
        help=(
            "Seed for generation. Seeds are treated as text, so 7 and '7' build"
            " the same level. Use 'none' for a random level."
        ),
    )
    parser.add_argument(
        "--fov",
        action="store_true",
        help="Compute the player's field of view and hide unexplored cells",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s %(name)s: %(message)s",
    )

    seed = None if str(args.seed).lower() == "none" else args.seed

    try:
        level = generate_dungeon(
            args.width,
            args.height,
            args.min_room,
            args.max_room,
            args.max_rooms,
            args.max_monsters,
            args.max_items,
            seed=seed,
        )
    except ValueError as e:
        logger.error("Invalid dungeon parameters: %s", e)
        return 2

    if args.fov:
        level.update_fov()

    print(level.render_ascii(fog=args.fov))
    stats = level.stats
    print(
        f"seed={seed} rooms={len(level.rooms)} spawn={level.spawn_cell} "
        f"monsters={stats.monsters_placed} items={stats.items_placed} "
        f"skipped={stats.entities_skipped} fallback={stats.used_fallback}"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
