"""
A spatial hash grid for answering "what stands on this cell?" quickly.

The entity registry keeps every live entity in a `SpatialHashGrid`, so the
occupancy checks made while scattering monsters and items over a level are
O(1) on average instead of a scan over the whole roster.
"""

from collections import defaultdict
from typing import Generic, Protocol, TypeVar

from undercroft.types import WorldTileCoord

# A type alias for bucket coordinate tuples to improve readability.
type Coord = tuple[int, int]


class HasPosition(Protocol):
    """A protocol for objects that have integer x and y attributes."""

    x: int
    y: int


# Anything stored in the index must expose .x and .y.
T = TypeVar("T", bound=HasPosition)


class SpatialHashGrid(Generic[T]):
    """
    Buckets objects by fixed-size square cells of the tile grid.

    Objects are stored in a dictionary mapping bucket coordinates to the set
    of objects inside that bucket. Point queries only look at the bucket
    they fall in, then filter on exact coordinates.
    """

    def __init__(self, cell_size: int = 16):
        if cell_size <= 0:
            raise ValueError("Cell size must be a positive integer.")
        self.cell_size = cell_size
        self.grid: dict[Coord, set[T]] = defaultdict(set)
        self._obj_to_cell: dict[T, Coord] = {}

    def _hash(self, x: int, y: int) -> Coord:
        """Converts tile coordinates to bucket coordinates."""
        return x // self.cell_size, y // self.cell_size

    def __contains__(self, obj: object) -> bool:
        return obj in self._obj_to_cell

    def add(self, obj: T) -> None:
        """Add an object to the grid."""
        cell_xy = self._hash(obj.x, obj.y)
        self.grid[cell_xy].add(obj)
        self._obj_to_cell[obj] = cell_xy

    def remove(self, obj: T) -> None:
        """Remove an object from the grid. Unknown objects are ignored."""
        cell_xy = self._obj_to_cell.pop(obj, None)
        if cell_xy is None:
            return

        bucket = self.grid.get(cell_xy)
        if bucket is not None:
            bucket.discard(obj)
            if not bucket:
                del self.grid[cell_xy]

    def update(self, obj: T) -> None:
        """Re-bucket an object after its x/y changed."""
        old_cell_xy = self._obj_to_cell.get(obj)
        new_cell_xy = self._hash(obj.x, obj.y)

        if old_cell_xy == new_cell_xy:
            return  # Fast path: object stayed in the same bucket

        if old_cell_xy is not None:
            bucket = self.grid.get(old_cell_xy)
            if bucket is not None:
                bucket.discard(obj)
                if not bucket:
                    del self.grid[old_cell_xy]

        self.grid[new_cell_xy].add(obj)
        self._obj_to_cell[obj] = new_cell_xy

    def get_at_point(self, x: WorldTileCoord, y: WorldTileCoord) -> list[T]:
        """Get all objects at a specific tile (x, y)."""
        bucket = self.grid.get(self._hash(x, y), ())
        # A bucket covers a region; filter for the exact coordinates.
        return [obj for obj in bucket if obj.x == x and obj.y == y]

    def clear(self) -> None:
        """Remove all objects from the index."""
        self.grid.clear()
        self._obj_to_cell.clear()
