"""Dungeon-style map generation with rooms and corridors."""

from __future__ import annotations

import logging

from undercroft import config
from undercroft.environment.map import GameMap
from undercroft.game.entities import EntityFactory, Occupancy
from undercroft.types import TileCoord, WorldTilePos
from undercroft.util import rng
from undercroft.util.coordinates import Rect, cell_to_world, clamp
from undercroft.util.lines import get_l_path
from undercroft.util.rng import RNG, randrange_or_start

from .base import BaseMapGenerator, GeneratedDungeon, GenerationStats
from .placement import EntityPlacer
from .spawn import select_spawn_cell

logger = logging.getLogger(__name__)

_rng = rng.get("map.dungeon")


def carve_room(game_map: GameMap, room: Rect) -> None:
    """Dig out a room: floor inside, wall on the border unless already floor."""
    for x, y in room.cells():
        if room.is_border(x, y):
            game_map.place_wall_if_not_floor(x, y)
        else:
            game_map.carve_floor(x, y)


def carve_tunnel(game_map: GameMap, path: list[WorldTilePos]) -> None:
    """Turn every path cell into floor and wall in its 8 neighbours.

    Neighbours that are already floor, or fall outside the map, are left alone.
    """
    for x, y in path:
        game_map.carve_floor(x, y)
        for nx in range(x - 1, x + 2):
            for ny in range(y - 1, y + 2):
                if game_map.in_bounds(nx, ny):
                    game_map.place_wall_if_not_floor(nx, ny)


def tunnel_path(
    old_room: Rect, new_room: Rect, horizontal_first: bool
) -> list[WorldTilePos]:
    """L-shaped path between two room centers.

    ``horizontal_first`` bends at ``(new.x, old.y)``, otherwise at
    ``(old.x, new.y)``.
    """
    old_x, old_y = old_room.center()
    new_x, new_y = new_room.center()
    elbow = (new_x, old_y) if horizontal_first else (old_x, new_y)
    return get_l_path((old_x, old_y), elbow, (new_x, new_y))


def tunnel_between(
    game_map: GameMap, old_room: Rect, new_room: Rect, rng: RNG
) -> list[WorldTilePos]:
    """Carve an L-shaped tunnel between two rooms, choosing the bend at random."""
    path = tunnel_path(old_room, new_room, horizontal_first=rng.random() < 0.5)
    carve_tunnel(game_map, path)
    return path


class RoomsAndCorridorsGenerator(BaseMapGenerator):
    """Generates a map with rooms and connecting corridors.

    Each of ``max_rooms`` attempts samples a room and drops it if it overlaps
    an accepted one. Accepted rooms are carved, tunnelled to the previous
    accepted room (a chain, not a full graph), and populated. When an entity
    factory is supplied the player is spawned in the first room.

    Every random draw comes from the one ``rng`` in a fixed order: width,
    height, x, y per attempt; the tunnel bend; monster count and per-monster
    cell and type; item count and per-item cell and type; finally the spawn
    cell if the first room's center is unusable.
    """

    def __init__(
        self,
        map_width: TileCoord,
        map_height: TileCoord,
        max_rooms: int,
        min_room_size: int,
        max_room_size: int,
        max_monsters_per_room: int = 0,
        max_items_per_room: int = 0,
        *,
        rng: RNG | None = None,
        factory: EntityFactory | None = None,
        occupancy: Occupancy | None = None,
    ) -> None:
        super().__init__(map_width, map_height)
        if min_room_size < config.SMALLEST_ROOM_SIZE:
            raise ValueError(
                f"min_room_size must be at least {config.SMALLEST_ROOM_SIZE}, "
                f"got {min_room_size}"
            )
        if max_room_size < min_room_size:
            raise ValueError(
                f"max_room_size ({max_room_size}) is smaller than "
                f"min_room_size ({min_room_size})"
            )
        if max_rooms < 0:
            raise ValueError(f"max_rooms must not be negative, got {max_rooms}")
        if max_monsters_per_room < 0 or max_items_per_room < 0:
            raise ValueError("Per-room entity caps must not be negative")
        largest = self.largest_room_size(min_room_size, max_room_size)
        if map_width < largest or map_height < largest:
            raise ValueError(
                f"A {map_width}x{map_height} map cannot hold rooms up to "
                f"{largest} cells wide"
            )
        if factory is not None and occupancy is None:
            raise ValueError("An entity factory needs an occupancy view")

        self.max_rooms = max_rooms
        self.min_room_size = min_room_size
        self.max_room_size = max_room_size
        self.max_monsters_per_room = max_monsters_per_room
        self.max_items_per_room = max_items_per_room
        self.rng: RNG = rng if rng is not None else _rng
        self.factory = factory
        self.occupancy = occupancy

    @staticmethod
    def largest_room_size(min_room_size: int, max_room_size: int) -> int:
        """Largest side length a room can be drawn with."""
        return max(min_room_size, max_room_size - 1)

    def _sample_room(self) -> Rect:
        w = randrange_or_start(self.rng, self.min_room_size, self.max_room_size)
        h = randrange_or_start(self.rng, self.min_room_size, self.max_room_size)

        x = randrange_or_start(self.rng, 0, self.map_width - w - 1)
        y = randrange_or_start(self.rng, 0, self.map_height - h - 1)
        x = clamp(x, 0, self.map_width - w)
        y = clamp(y, 0, self.map_height - h)

        return Rect(x, y, w, h)

    def generate(self, game_map: GameMap) -> GeneratedDungeon:
        if (game_map.width, game_map.height) != (self.map_width, self.map_height):
            raise ValueError(
                f"Generator is configured for {self.map_width}x{self.map_height} "
                f"but the map is {game_map.width}x{game_map.height}"
            )

        stats = GenerationStats()
        placer: EntityPlacer | None = None
        if self.factory is not None and self.occupancy is not None:
            placer = EntityPlacer(
                game_map,
                self.factory,
                self.occupancy,
                self.rng,
                max_monsters_per_room=self.max_monsters_per_room,
                max_items_per_room=self.max_items_per_room,
                stats=stats,
            )

        rooms: list[Rect] = []
        tunnels: list[list[WorldTilePos]] = []

        for attempt in range(self.max_rooms):
            stats.rooms_attempted += 1
            new_room = self._sample_room()

            if any(new_room.intersects(other) for other in rooms):
                stats.rooms_rejected += 1
                logger.debug("Room attempt %d rejected: %r overlaps", attempt, new_room)
                continue

            carve_room(game_map, new_room)

            if rooms:
                tunnels.append(tunnel_between(game_map, rooms[-1], new_room, self.rng))

            if placer is not None:
                placer.populate_room(new_room)

            rooms.append(new_room)

        occupancy = placer if placer is not None else self.occupancy
        spawn_cell = select_spawn_cell(
            rooms, game_map, self.rng, occupancy, stats=stats
        )
        if self.factory is not None:
            self.factory.spawn(config.PLAYER_TYPE_TAG, cell_to_world(spawn_cell))

        logger.info(
            "Generated %d/%d rooms (%d rejected), %d monsters, %d items, "
            "%d entities skipped, spawn at %s",
            len(rooms),
            self.max_rooms,
            stats.rooms_rejected,
            stats.monsters_placed,
            stats.items_placed,
            stats.entities_skipped,
            spawn_cell,
        )
        return GeneratedDungeon(
            rooms=rooms, spawn_cell=spawn_cell, tunnels=tunnels, stats=stats
        )
