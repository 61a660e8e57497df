from __future__ import annotations

from collections import deque
from collections.abc import Iterable
from random import Random

from undercroft.environment.generators import carve_room
from undercroft.environment.map import GameMap
from undercroft.environment.tile_types import TileTypeID
from undercroft.types import EntityTypeTag, Opacity, WorldPos, WorldTilePos
from undercroft.util.coordinates import Rect


class RecordingPaintSink:
    """Paint sink that remembers the last value painted on each cell."""

    def __init__(self) -> None:
        self.terrain: dict[WorldTilePos, TileTypeID] = {}
        self.alpha: dict[WorldTilePos, Opacity] = {}
        self.terrain_calls = 0

    def set_terrain(self, pos: WorldTilePos, kind: TileTypeID) -> None:
        self.terrain[pos] = kind
        self.terrain_calls += 1

    def set_overlay_alpha(self, pos: WorldTilePos, alpha: Opacity) -> None:
        self.alpha[pos] = alpha


class RecordingFactory:
    """Entity factory that only records what it was asked to build."""

    def __init__(self) -> None:
        self.spawned: list[tuple[EntityTypeTag, WorldPos]] = []

    def spawn(self, type_tag: EntityTypeTag, world_position: WorldPos) -> object:
        self.spawned.append((type_tag, world_position))
        return object()


class StaticOccupancy:
    """Occupancy over a fixed set of cells."""

    def __init__(self, cells: Iterable[WorldTilePos] = ()) -> None:
        self.cells = set(cells)

    def is_occupied(self, x: int, y: int) -> bool:
        return (x, y) in self.cells


class MaxCountRandom(Random):
    """Seeded Random whose randint always returns the upper bound."""

    def randint(self, a: int, b: int) -> int:
        return b


class RecordingRandom:
    """Wraps a seeded Random and logs which draw methods were called."""

    def __init__(self, seed: int = 0) -> None:
        self._random = Random(seed)
        self.calls: list[str] = []

    def random(self) -> float:
        self.calls.append("random")
        return self._random.random()

    def randint(self, a: int, b: int) -> int:
        self.calls.append("randint")
        return self._random.randint(a, b)

    def randrange(self, start: int, stop: int | None = None, step: int = 1) -> int:
        self.calls.append("randrange")
        return self._random.randrange(start, stop, step)


def carved_room_map(width: int, height: int, room: Rect) -> GameMap:
    """A map holding a single carved room."""
    game_map = GameMap(width, height)
    carve_room(game_map, room)
    return game_map


def reachable_cells(game_map: GameMap, start: WorldTilePos) -> set[WorldTilePos]:
    """All walkable cells 8-connected to *start*."""
    seen = {start}
    queue = deque([start])
    while queue:
        x, y = queue.popleft()
        for dx in (-1, 0, 1):
            for dy in (-1, 0, 1):
                nxt = (x + dx, y + dy)
                if nxt not in seen and game_map.is_walkable(*nxt):
                    seen.add(nxt)
                    queue.append(nxt)
    return seen
