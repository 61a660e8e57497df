"""Scatter monsters and items over the floor of freshly carved rooms."""

from __future__ import annotations

import logging

from undercroft import config
from undercroft.environment.map import GameMap
from undercroft.game.entities import EntityFactory, Occupancy
from undercroft.types import EntityTypeTag, SpawnTable, WorldTileCoord, WorldTilePos
from undercroft.util.coordinates import Rect, cell_to_world
from undercroft.util.rng import RNG, randrange_or_start

from .base import GenerationStats

logger = logging.getLogger(__name__)


def weighted_choice(table: SpawnTable, roll: float) -> EntityTypeTag:
    """Pick the entry whose cumulative weight band contains *roll*.

    Args:
        table: ``(type_tag, weight)`` pairs, scanned in order.
        roll: Uniform draw in ``[0, 1)``.

    Raises:
        ValueError: If the table is empty or its weights sum to zero.
    """
    total = sum(weight for _tag, weight in table)
    if not table or total <= 0:
        raise ValueError("Spawn table needs at least one positive weight")
    threshold = roll * total
    cumulative = 0.0
    for tag, weight in table:
        cumulative += weight
        if threshold < cumulative:
            return tag
    # Float rounding can leave a roll just under 1.0 past the last band.
    return table[-1][0]


class EntityPlacer:
    """Places a random number of monsters and items inside each room.

    A candidate cell must be strictly inside the room's walls, walkable, and
    free of any entity, whether the entity is already on the live roster or
    was placed earlier in this run. Each entity gets a bounded number of
    candidate draws; when they run out the entity is skipped and counted in
    ``stats.entities_skipped``.
    """

    def __init__(
        self,
        game_map: GameMap,
        factory: EntityFactory,
        occupancy: Occupancy,
        rng: RNG,
        *,
        max_monsters_per_room: int,
        max_items_per_room: int,
        monster_table: SpawnTable = config.MONSTER_SPAWN_TABLE,
        item_table: SpawnTable = config.ITEM_SPAWN_TABLE,
        max_attempts: int = config.MAX_PLACEMENT_ATTEMPTS,
        stats: GenerationStats | None = None,
    ) -> None:
        if max_monsters_per_room < 0 or max_items_per_room < 0:
            raise ValueError("Per-room entity caps must not be negative")
        if max_attempts <= 0:
            raise ValueError("max_attempts must be positive")
        self.game_map = game_map
        self.factory = factory
        self.occupancy = occupancy
        self.rng = rng
        self.max_monsters_per_room = max_monsters_per_room
        self.max_items_per_room = max_items_per_room
        self.monster_table = monster_table
        self.item_table = item_table
        self.max_attempts = max_attempts
        self.stats = stats if stats is not None else GenerationStats()
        self._placed: set[WorldTilePos] = set()

    def populate_room(self, room: Rect) -> None:
        """Place this room's monsters, then its items."""
        monster_count = self.rng.randint(0, self.max_monsters_per_room)
        for _ in range(monster_count):
            if self._place_one(room, self.monster_table):
                self.stats.monsters_placed += 1

        item_count = self.rng.randint(0, self.max_items_per_room)
        for _ in range(item_count):
            if self._place_one(room, self.item_table):
                self.stats.items_placed += 1

    def is_occupied(self, x: WorldTileCoord, y: WorldTileCoord) -> bool:
        return (x, y) in self._placed or self.occupancy.is_occupied(x, y)

    def is_free(self, x: WorldTileCoord, y: WorldTileCoord) -> bool:
        return self.game_map.is_walkable(x, y) and not self.is_occupied(x, y)

    def find_free_cell(self, room: Rect) -> WorldTilePos | None:
        """Draw interior cells of *room* until one is free, or give up."""
        for _ in range(self.max_attempts):
            x = randrange_or_start(self.rng, room.x1 + 1, room.x2 - 1)
            y = randrange_or_start(self.rng, room.y1 + 1, room.y2 - 1)
            if self.is_free(x, y):
                return (x, y)
        return None

    def _place_one(self, room: Rect, table: SpawnTable) -> bool:
        cell = self.find_free_cell(room)
        if cell is None:
            self.stats.entities_skipped += 1
            logger.debug(
                "No free cell in %r after %d attempts; skipping entity",
                room,
                self.max_attempts,
            )
            return False

        type_tag = weighted_choice(table, self.rng.random())
        self.factory.spawn(type_tag, cell_to_world(cell))
        self._placed.add(cell)
        return True
