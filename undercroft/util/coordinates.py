"""Rectangles and conversions between tile cells and world positions."""

from __future__ import annotations

import math
from collections.abc import Iterator
from dataclasses import dataclass

from undercroft.types import TileCoord, WorldPos, WorldTilePos


@dataclass(frozen=True, slots=True)
class Rect:
    """Rectangle/bounding box in tile coordinates.

    A room occupies every cell with ``x1 <= cx < x2`` and ``y1 <= cy < y2``.
    The outermost ring of those cells is the room's wall border and the rest
    is its floor interior.
    """

    x: TileCoord
    y: TileCoord
    width: TileCoord
    height: TileCoord

    @property
    def x1(self) -> TileCoord:
        return self.x

    @property
    def y1(self) -> TileCoord:
        return self.y

    @property
    def x2(self) -> TileCoord:
        return self.x + self.width

    @property
    def y2(self) -> TileCoord:
        return self.y + self.height

    def center(self) -> WorldTilePos:
        return (self.x + self.width // 2, self.y + self.height // 2)

    def intersects(self, other: Rect) -> bool:
        """True when the two rectangles share at least one cell.

        Rectangles that only touch edge to edge do not intersect.
        """
        return (
            self.x1 < other.x2
            and other.x1 < self.x2
            and self.y1 < other.y2
            and other.y1 < self.y2
        )

    def is_border(self, x: TileCoord, y: TileCoord) -> bool:
        return x in (self.x1, self.x2 - 1) or y in (self.y1, self.y2 - 1)

    def contains_interior(self, x: TileCoord, y: TileCoord) -> bool:
        """True when (x, y) lies strictly inside the wall border."""
        return self.x1 < x < self.x2 - 1 and self.y1 < y < self.y2 - 1

    def cells(self) -> Iterator[WorldTilePos]:
        for x in range(self.x1, self.x2):
            for y in range(self.y1, self.y2):
                yield x, y

    def interior_cells(self) -> Iterator[WorldTilePos]:
        for x in range(self.x1 + 1, self.x2 - 1):
            for y in range(self.y1 + 1, self.y2 - 1):
                yield x, y

    def __repr__(self) -> str:
        return f"Rect(x1={self.x1}, y1={self.y1}, x2={self.x2}, y2={self.y2})"


def clamp(value: int, lower: int, upper: int) -> int:
    return max(lower, min(value, upper))


# =============================================================================
# CELL <-> WORLD CONVERSION
# =============================================================================


def cell_to_world(pos: WorldTilePos) -> WorldPos:
    """World position of a cell's center."""
    x, y = pos
    return (x + 0.5, y + 0.5)


def world_to_cell(pos: WorldPos) -> WorldTilePos:
    """Cell containing a world position (floors each axis)."""
    wx, wy = pos
    return (math.floor(wx), math.floor(wy))
