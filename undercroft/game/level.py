"""Level facade: the dungeon generation entry point, the single-room fallback
and the per-turn spatial and visibility queries.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

import numpy as np

from undercroft import config
from undercroft.environment import fov, tile_types
from undercroft.environment.generators import (
    DungeonGenerationError,
    GeneratedDungeon,
    GenerationStats,
    RoomsAndCorridorsGenerator,
    carve_room,
)
from undercroft.environment.map import GameMap, TilePaintSink
from undercroft.environment.tile_types import TileTypeID
from undercroft.game.entities import (
    Entity,
    EntityFactory,
    EntityRegistry,
    OccupancyView,
)
from undercroft.types import (
    RandomSeed,
    TileCoord,
    WorldPos,
    WorldTileCoord,
    WorldTilePos,
)
from undercroft.util import rng
from undercroft.util.coordinates import Rect, cell_to_world, world_to_cell
from undercroft.util.rng import RNG, seeded

logger = logging.getLogger(__name__)

_rng = rng.get("map.dungeon")


class Level:
    """
    One generated dungeon level: its tile store, its entities and the layout
    the generator produced.

    Owns no rendering or turn logic. Visibility and turn systems call into it
    every turn; everything else is fixed once generation finishes.
    """

    def __init__(
        self,
        game_map: GameMap,
        registry: EntityRegistry,
        generated: GeneratedDungeon,
        seed: RandomSeed = None,
    ) -> None:
        self.game_map = game_map
        self.registry = registry
        self.generated = generated
        self.seed = seed

    @property
    def rooms(self) -> list[Rect]:
        return self.generated.rooms

    @property
    def spawn_cell(self) -> WorldTilePos:
        return self.generated.spawn_cell

    @property
    def stats(self) -> GenerationStats:
        return self.generated.stats

    @property
    def player(self) -> Entity | None:
        return self.registry.player

    # ------------------------------------------------------------------
    # Spatial queries
    # ------------------------------------------------------------------

    def is_in_bounds(self, x: TileCoord, y: TileCoord) -> bool:
        return self.game_map.in_bounds(x, y)

    def is_walkable(self, x: TileCoord, y: TileCoord) -> bool:
        return self.game_map.is_walkable(x, y)

    def is_valid_position(self, world_pos: WorldPos) -> bool:
        """True when the cell containing *world_pos* can be stood on."""
        x, y = world_to_cell(world_pos)
        return self.game_map.is_walkable(x, y)

    def get_entity_at(self, x: WorldTileCoord, y: WorldTileCoord) -> Entity | None:
        """Return the entity on (x, y), preferring one that blocks movement."""
        entities = self.registry.get_at(x, y)
        if not entities:
            return None
        for entity in entities:
            if entity.blocks_movement:
                return entity
        return entities[0]

    # ------------------------------------------------------------------
    # Visibility
    # ------------------------------------------------------------------

    def update_visibility(self, new_visible_cells: Iterable[WorldTilePos]) -> None:
        self.game_map.update_visibility(new_visible_cells)

    def update_fov(
        self, origin: WorldTilePos | None = None, radius: int = config.FOV_RADIUS
    ) -> list[WorldTilePos]:
        """Recompute the field of view and push it into the tile store.

        Args:
            origin: Viewer cell. Defaults to the player's cell.
            radius: Sight radius handed to tcod.

        Returns:
            The newly visible cells.
        """
        if origin is None:
            player = self.player
            if player is None:
                raise ValueError("No origin given and the level has no player")
            origin = player.cell

        visible = fov.compute_fov(self.game_map.transparent, origin, radius)
        # tcod lights every in-radius cell it can see, including uncarved rock
        # next to walls; the store ignores those.
        cells = fov.visible_cells(visible)
        self.update_visibility(cells)
        return cells

    def visible_entities(self) -> list[Entity]:
        """Entities on currently visible cells. The player is always included."""
        return [
            entity
            for entity in self.registry
            if entity.kind == "player" or self.game_map.is_visible(entity.x, entity.y)
        ]

    # ------------------------------------------------------------------
    # Preview
    # ------------------------------------------------------------------

    def render_ascii(self, fog: bool = False) -> str:
        """Draw the level as text, one row per line.

        With *fog* set, only explored cells and visible entities are drawn.
        """
        glyphs = tile_types.get_glyph_map(self.game_map.terrain)
        if fog:
            glyphs[~self.game_map.explored] = " "
            entities = self.visible_entities()
        else:
            entities = list(self.registry)

        # Player last so it is never hidden under an item.
        draw_order = {"item": 0, "monster": 1, "player": 2}
        for entity in sorted(entities, key=lambda e: draw_order[e.kind]):
            glyphs[entity.x, entity.y] = config.ENTITY_GLYPHS.get(
                entity.type_tag, entity.type_tag[:1]
            )

        return "\n".join("".join(row).rstrip() for row in np.transpose(glyphs))


def build_fallback(
    game_map: GameMap, factory: EntityFactory, room_size: int
) -> GeneratedDungeon:
    """Carve one room in the middle of *game_map* and put the player in it."""
    room = Rect(
        (game_map.width - room_size) // 2,
        (game_map.height - room_size) // 2,
        room_size,
        room_size,
    )
    carve_room(game_map, room)
    spawn_cell = room.center()
    factory.spawn(config.PLAYER_TYPE_TAG, cell_to_world(spawn_cell))
    return GeneratedDungeon(
        rooms=[room],
        spawn_cell=spawn_cell,
        stats=GenerationStats(used_fallback=True),
    )


def _discard(game_map: GameMap) -> None:
    """Tell the paint sink that every cell of an abandoned map is empty again."""
    for pos in game_map.carved_cells():
        game_map.paint_sink.set_terrain(pos, TileTypeID.EMPTY)


def generate_dungeon(
    map_width: TileCoord,
    map_height: TileCoord,
    room_min_size: int,
    room_max_size: int,
    max_rooms: int,
    max_monsters_per_room: int,
    max_items_per_room: int,
    *,
    seed: RandomSeed = None,
    rng: RNG | None = None,
    paint_sink: TilePaintSink | None = None,
) -> Level:
    """Generate a complete level: rooms, tunnels, monsters, items and player.

    Randomness comes from *rng* when given, else from a generator derived
    from *seed*, else from the shared ``"map.dungeon"`` stream. A fixed seed
    always rebuilds the same level.

    If no usable spawn cell exists (no rooms, or the spawn room is full) the
    level degrades to a single centred room holding only the player, and
    ``level.stats.used_fallback`` is set.

    Raises:
        ValueError: If the size parameters are inconsistent, or both *seed*
            and *rng* are given.
    """
    if seed is not None and rng is not None:
        raise ValueError("Pass either seed or rng, not both")
    if rng is None:
        rng = seeded(seed) if seed is not None else _rng

    registry = EntityRegistry()
    generator = RoomsAndCorridorsGenerator(
        map_width,
        map_height,
        max_rooms=max_rooms,
        min_room_size=room_min_size,
        max_room_size=room_max_size,
        max_monsters_per_room=max_monsters_per_room,
        max_items_per_room=max_items_per_room,
        rng=rng,
        factory=registry,
        occupancy=OccupancyView(registry),
    )
    game_map = GameMap(map_width, map_height, paint_sink)

    try:
        generated = generator.generate(game_map)
    except DungeonGenerationError as e:
        logger.warning("Dungeon generation failed (%s); using a single room", e)
        _discard(game_map)
        game_map = GameMap(map_width, map_height, paint_sink)
        registry.clear()
        generated = build_fallback(game_map, registry, room_min_size)

    game_map.setup_fog()
    return Level(game_map, registry, generated, seed=seed)
