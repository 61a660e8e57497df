"""Choose where the player starts."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from undercroft import config
from undercroft.environment.map import GameMap
from undercroft.game.entities import Occupancy
from undercroft.types import WorldTileCoord, WorldTilePos
from undercroft.util.coordinates import Rect
from undercroft.util.rng import RNG, randrange_or_start

from .base import DungeonGenerationError, GenerationStats

logger = logging.getLogger(__name__)


def _on_margin(room: Rect, x: WorldTileCoord, y: WorldTileCoord) -> bool:
    """True when (x, y) is on the wall ring or the ring of cells just inside it."""
    return x <= room.x1 + 1 or x >= room.x2 - 1 or y <= room.y1 + 1 or y >= room.y2 - 1


def select_spawn_cell(
    rooms: Sequence[Rect],
    game_map: GameMap,
    rng: RNG,
    occupancy: Occupancy | None = None,
    *,
    max_attempts: int = config.MAX_PLACEMENT_ATTEMPTS,
    stats: GenerationStats | None = None,
) -> WorldTilePos:
    """Pick a floor cell strictly inside the first room for the player.

    The room's center is used unless it sits on the margin next to a wall, in
    which case a random interior cell is drawn instead. Cells that are not
    walkable or already hold an entity are redrawn up to *max_attempts* times,
    then the interior is scanned in order.

    Raises:
        DungeonGenerationError: If *rooms* is empty or every interior cell of
            the first room is taken.
    """
    if not rooms:
        raise DungeonGenerationError("No rooms were placed; cannot choose a spawn cell")

    room = rooms[0]

    def usable(x: WorldTileCoord, y: WorldTileCoord) -> bool:
        return (
            room.contains_interior(x, y)
            and game_map.is_walkable(x, y)
            and not (occupancy is not None and occupancy.is_occupied(x, y))
        )

    def draw() -> WorldTilePos:
        return (
            randrange_or_start(rng, room.x1 + 1, room.x2 - 1),
            randrange_or_start(rng, room.y1 + 1, room.y2 - 1),
        )

    x, y = room.center()
    resampled = False
    if _on_margin(room, x, y):
        x, y = draw()
        resampled = True

    attempts = 0
    while not usable(x, y) and attempts < max_attempts:
        x, y = draw()
        resampled = True
        attempts += 1

    if stats is not None:
        stats.spawn_resampled = resampled

    if usable(x, y):
        logger.debug("Spawn cell (%d, %d) in %r", x, y, room)
        return (x, y)

    for cell in room.interior_cells():
        if usable(*cell):
            logger.debug("Spawn cell %s found by interior scan", cell)
            return cell

    raise DungeonGenerationError(f"Spawn room {room!r} has no free floor cell")
