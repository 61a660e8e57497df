"""Map generation algorithms for Undercroft.

- RoomsAndCorridorsGenerator: classic dungeon of rectangular rooms chained
  together by L-shaped tunnels, populated with monsters and items.
- select_spawn_cell: picks the player's start cell in the first room.
"""

from .base import (
    BaseMapGenerator,
    DungeonGenerationError,
    GeneratedDungeon,
    GenerationStats,
)
from .dungeon import RoomsAndCorridorsGenerator, carve_room, carve_tunnel
from .placement import EntityPlacer, weighted_choice
from .spawn import select_spawn_cell

__all__ = [
    "BaseMapGenerator",
    "DungeonGenerationError",
    "EntityPlacer",
    "GeneratedDungeon",
    "GenerationStats",
    "RoomsAndCorridorsGenerator",
    "carve_room",
    "carve_tunnel",
    "select_spawn_cell",
    "weighted_choice",
]
