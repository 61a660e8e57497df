"""Base classes for map generation."""

from __future__ import annotations

import abc
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from undercroft.environment.map import GameMap
    from undercroft.types import TileCoord, WorldTilePos
    from undercroft.util.coordinates import Rect


class DungeonGenerationError(RuntimeError):
    """Generation could not produce a level with a valid spawn cell."""


@dataclass
class GenerationStats:
    """Diagnostics collected while generating one level.

    Attributes:
        rooms_attempted: Candidate rooms sampled.
        rooms_rejected: Candidates dropped because they overlapped a room.
        monsters_placed: Monsters handed to the entity factory.
        items_placed: Items handed to the entity factory.
        entities_skipped: Monsters or items dropped after exhausting their
            placement attempts.
        spawn_resampled: Whether the spawn room's center was unusable.
        used_fallback: Whether the level is the single-room fallback.
    """

    rooms_attempted: int = 0
    rooms_rejected: int = 0
    monsters_placed: int = 0
    items_placed: int = 0
    entities_skipped: int = 0
    spawn_resampled: bool = False
    used_fallback: bool = False


@dataclass
class GeneratedDungeon:
    """Everything a generator produced besides the carved map itself.

    Attributes:
        rooms: Accepted rooms in placement order. The first is the spawn room.
        spawn_cell: Player start cell, strictly inside ``rooms[0]``.
        tunnels: Carved corridor paths, one per consecutive room pair.
        stats: Placement diagnostics.
    """

    rooms: list[Rect]
    spawn_cell: WorldTilePos
    tunnels: list[list[WorldTilePos]] = field(default_factory=list)
    stats: GenerationStats = field(default_factory=GenerationStats)


class BaseMapGenerator(abc.ABC):
    """Abstract base class for map generation algorithms."""

    def __init__(self, map_width: TileCoord, map_height: TileCoord) -> None:
        self.map_width = map_width
        self.map_height = map_height

    @abc.abstractmethod
    def generate(self, game_map: GameMap) -> GeneratedDungeon:
        """Carve the layout into *game_map* and return its structural data."""
        raise NotImplementedError
