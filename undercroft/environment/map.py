"""Per-cell terrain and exploration state for one level."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Protocol

import numpy as np

from undercroft import config
from undercroft.environment import tile_types
from undercroft.environment.tile_types import TileTypeID
from undercroft.types import Opacity, TileCoord, WorldTilePos

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Tile:
    """State of one carved cell.

    ``explored`` only ever goes from False to True. ``visible`` is rewritten
    on every visibility update.
    """

    terrain: TileTypeID
    explored: bool = False
    visible: bool = False


class TilePaintSink(Protocol):
    """Receives a notification after every terrain or fog change.

    Renderers implement this to mirror the store; the store never reads back
    from it.
    """

    def set_terrain(self, pos: WorldTilePos, kind: TileTypeID) -> None: ...

    def set_overlay_alpha(self, pos: WorldTilePos, alpha: Opacity) -> None: ...


class NullTilePaintSink:
    """Paint sink that discards everything (headless use and tests)."""

    def set_terrain(self, pos: WorldTilePos, kind: TileTypeID) -> None:
        pass

    def set_overlay_alpha(self, pos: WorldTilePos, alpha: Opacity) -> None:
        pass


class GameMap:
    """Sparse coordinate -> Tile store plus the current visible set.

    Tiles are created lazily the first time a coordinate receives terrain and
    are never deleted. Any in-bounds coordinate without a tile reads as EMPTY:
    not walkable, not explored, not visible.
    """

    def __init__(
        self,
        width: TileCoord,
        height: TileCoord,
        paint_sink: TilePaintSink | None = None,
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Map size must be positive, got {width}x{height}")
        self.width: TileCoord = width
        self.height: TileCoord = height
        self.paint_sink: TilePaintSink = (
            paint_sink if paint_sink is not None else NullTilePaintSink()
        )

        self.tiles: dict[WorldTilePos, Tile] = {}
        # Ordered set of the currently lit cells (dict keys keep insertion order).
        self._visible_cells: dict[WorldTilePos, None] = {}

        # Dense views for FOV and rendering, rebuilt on demand.
        self._terrain_map_cache: np.ndarray | None = None
        self._walkable_map_cache: np.ndarray | None = None
        self._transparent_map_cache: np.ndarray | None = None
        self._explored_map_cache: np.ndarray | None = None
        self._visible_map_cache: np.ndarray | None = None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def in_bounds(self, x: TileCoord, y: TileCoord) -> bool:
        """Return True if x and y are inside the bounds of this map."""
        return 0 <= x < self.width and 0 <= y < self.height

    def tile_at(self, x: TileCoord, y: TileCoord) -> Tile | None:
        if not self.in_bounds(x, y):
            return None
        return self.tiles.get((x, y))

    def terrain_at(self, x: TileCoord, y: TileCoord) -> TileTypeID:
        tile = self.tile_at(x, y)
        return TileTypeID.EMPTY if tile is None else tile.terrain

    def is_walkable(self, x: TileCoord, y: TileCoord) -> bool:
        return self.in_bounds(x, y) and tile_types.is_walkable(self.terrain_at(x, y))

    def is_explored(self, x: TileCoord, y: TileCoord) -> bool:
        tile = self.tile_at(x, y)
        return tile is not None and tile.explored

    def is_visible(self, x: TileCoord, y: TileCoord) -> bool:
        tile = self.tile_at(x, y)
        return tile is not None and tile.visible

    @property
    def visible_cells(self) -> tuple[WorldTilePos, ...]:
        """The current visible set, in the order the cells were lit."""
        return tuple(self._visible_cells)

    def carved_cells(self) -> Iterator[WorldTilePos]:
        return iter(self.tiles)

    def count_terrain(self, kind: TileTypeID) -> int:
        return sum(1 for tile in self.tiles.values() if tile.terrain == kind)

    # ------------------------------------------------------------------
    # Terrain mutation (generation only)
    # ------------------------------------------------------------------

    def set_terrain(self, x: TileCoord, y: TileCoord, kind: TileTypeID) -> None:
        """Assign terrain to a cell, creating its tile on first use.

        Raises:
            IndexError: If (x, y) lies outside the map.
        """
        if not self.in_bounds(x, y):
            raise IndexError(
                f"Cell ({x}, {y}) outside {self.width}x{self.height} map"
            )
        tile = self.tiles.get((x, y))
        if tile is None:
            self.tiles[(x, y)] = Tile(kind)
        elif tile.terrain == kind:
            return
        else:
            tile.terrain = kind
        self.invalidate_property_caches()
        self.paint_sink.set_terrain((x, y), kind)

    def carve_floor(self, x: TileCoord, y: TileCoord) -> None:
        """Make a cell FLOOR, replacing any WALL there."""
        self.set_terrain(x, y, TileTypeID.FLOOR)

    def place_wall_if_not_floor(self, x: TileCoord, y: TileCoord) -> bool:
        """Make a cell WALL unless it is already FLOOR.

        Returns:
            True if the cell is a wall afterwards, False if it was floor.
        """
        if self.terrain_at(x, y) == TileTypeID.FLOOR:
            return False
        self.set_terrain(x, y, TileTypeID.WALL)
        return True

    def invalidate_property_caches(self) -> None:
        """Call this whenever terrain changes to clear cached property maps."""
        self._terrain_map_cache = None
        self._walkable_map_cache = None
        self._transparent_map_cache = None
        self._invalidate_exploration_caches()

    def _invalidate_exploration_caches(self) -> None:
        self._explored_map_cache = None
        self._visible_map_cache = None

    # ------------------------------------------------------------------
    # Exploration state
    # ------------------------------------------------------------------

    def _known_tiles(
        self, cells: Iterable[WorldTilePos]
    ) -> Iterator[tuple[WorldTilePos, Tile]]:
        """Yield the carved tiles among *cells*; everything else is skipped."""
        skipped = 0
        for x, y in cells:
            tile = self.tile_at(x, y)
            if tile is None:
                skipped += 1
                continue
            yield (x, y), tile
        if skipped:
            logger.debug("Ignored %d uncarved or out-of-bounds cells", skipped)

    def mark_explored(self, cells: Iterable[WorldTilePos]) -> None:
        for _pos, tile in self._known_tiles(cells):
            tile.explored = True
        self._invalidate_exploration_caches()

    def mark_visible(self, cells: Iterable[WorldTilePos]) -> None:
        """Light *cells*: flag them visible, clear their fog, add them to the
        visible set."""
        for pos, tile in self._known_tiles(cells):
            tile.visible = True
            self._visible_cells[pos] = None
            self.paint_sink.set_overlay_alpha(pos, config.FOG_VISIBLE_ALPHA)
        self._invalidate_exploration_caches()

    def update_visibility(self, new_visible_cells: Iterable[WorldTilePos]) -> None:
        """Replace the visible set with *new_visible_cells*.

        Every previously visible cell becomes explored (if it was not yet),
        loses visibility and gets the dimmed overlay. Then every new cell that
        is in bounds and carved is lit. Cells without a tile are ignored so the
        visible set always stays a subset of the tile map.
        """
        for pos in self._visible_cells:
            tile = self.tiles[pos]
            if not tile.explored:
                tile.explored = True
            tile.visible = False
            self.paint_sink.set_overlay_alpha(pos, config.FOG_EXPLORED_ALPHA)

        self._visible_cells.clear()
        self.mark_visible(new_visible_cells)

    def setup_fog(self) -> None:
        """Paint the unexplored overlay over every carved tile."""
        for pos in self.tiles:
            self.paint_sink.set_overlay_alpha(pos, config.FOG_UNEXPLORED_ALPHA)

    # ------------------------------------------------------------------
    # Dense views
    # ------------------------------------------------------------------

    @property
    def terrain(self) -> np.ndarray:
        """uint8 array of shape (width, height) holding a TileTypeID per cell."""
        if self._terrain_map_cache is None:
            terrain = np.full(
                (self.width, self.height),
                fill_value=TileTypeID.EMPTY,
                dtype=np.uint8,
                order="F",
            )
            for (x, y), tile in self.tiles.items():
                terrain[x, y] = tile.terrain
            self._terrain_map_cache = terrain
        return self._terrain_map_cache

    @property
    def walkable(self) -> np.ndarray:
        """Boolean array of shape (width, height) where True means tile is walkable."""
        if self._walkable_map_cache is None:
            self._walkable_map_cache = tile_types.get_walkable_map(self.terrain)
        return self._walkable_map_cache

    @property
    def transparent(self) -> np.ndarray:
        """Boolean array of shape (width, height) where True means tile is transparent
        (for FOV)."""
        if self._transparent_map_cache is None:
            self._transparent_map_cache = tile_types.get_transparent_map(self.terrain)
        return self._transparent_map_cache

    @property
    def explored(self) -> np.ndarray:
        """Boolean array of shape (width, height) of explored cells."""
        if self._explored_map_cache is None:
            self._explored_map_cache = self._flag_map("explored")
        return self._explored_map_cache

    @property
    def visible(self) -> np.ndarray:
        """Boolean array of shape (width, height) of currently visible cells."""
        if self._visible_map_cache is None:
            self._visible_map_cache = self._flag_map("visible")
        return self._visible_map_cache

    def _flag_map(self, attr: str) -> np.ndarray:
        flags = np.zeros((self.width, self.height), dtype=bool, order="F")
        for (x, y), tile in self.tiles.items():
            if getattr(tile, attr):
                flags[x, y] = True
        return flags
