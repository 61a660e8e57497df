"""
Terrain kinds for the level grid, stored with the flyweight pattern.

This module defines:
- `TileTypeID`: the small integer identifying a terrain kind (EMPTY, FLOOR,
  WALL). `GameMap` stores one of these per carved cell.
- `TileTypeData`: the intrinsic properties of a terrain kind (walkable,
  transparent, preview glyph). One instance exists per kind.
- Helper functions that convert a NumPy array of `TileTypeID`s into a map of a
  single property (e.g., a boolean walkability map) with one vectorized
  lookup. FOV computation and the ASCII preview use these.
"""

from __future__ import annotations

from enum import IntEnum

import numpy as np


class TileTypeID(IntEnum):
    """Terrain kinds. EMPTY is the value of every never-carved cell."""

    EMPTY = 0
    FLOOR = 1
    WALL = 2


TileTypeData = np.dtype(
    [
        ("walkable", bool),
        ("transparent", bool),  # FOV/line-of-sight
        ("glyph", "U1"),  # Character used by the ASCII preview
    ]
)

# Indexed by TileTypeID; filled by register_tile_type below.
_registered_tile_type_data_list: list[np.ndarray] = []


def make_tile_type_data(
    *,  # Forces keyword arguments - prevents bugs from wrong parameter order
    walkable: bool,
    transparent: bool,
    glyph: str,
) -> np.ndarray:
    """Create a TileTypeData instance."""
    return np.array((walkable, transparent, glyph), dtype=TileTypeData)


def register_tile_type(tile_type_id: TileTypeID, data: np.ndarray) -> None:
    """Register the flyweight for *tile_type_id*.

    Kinds must be registered in ID order so the list index equals the ID.

    Raises:
        ValueError: If the ID is registered twice or out of order.
    """
    if tile_type_id != len(_registered_tile_type_data_list):
        raise ValueError(
            f"Tile type {tile_type_id.name} registered out of order "
            f"(expected ID {len(_registered_tile_type_data_list)})."
        )
    _registered_tile_type_data_list.append(data)


# Empty cells have never been carved: solid rock that is neither walkable nor
# see-through.
register_tile_type(
    TileTypeID.EMPTY,
    make_tile_type_data(walkable=False, transparent=False, glyph=" "),
)
register_tile_type(
    TileTypeID.FLOOR,
    make_tile_type_data(walkable=True, transparent=True, glyph="."),
)
register_tile_type(
    TileTypeID.WALL,
    make_tile_type_data(walkable=False, transparent=False, glyph="#"),
)


# --- Pre-calculated Property Arrays for Efficient Lookups ---
# Built after registration so they cover every kind.

_tile_type_properties_walkable = np.array(
    [t["walkable"] for t in _registered_tile_type_data_list], dtype=bool
)
_tile_type_properties_transparent = np.array(
    [t["transparent"] for t in _registered_tile_type_data_list], dtype=bool
)
_tile_type_properties_glyph = np.array(
    [t["glyph"] for t in _registered_tile_type_data_list], dtype="U1"
)


def get_walkable_map(tile_type_ids_map: np.ndarray) -> np.ndarray:
    """
    Converts a map of TileTypeIDs into a boolean map of walkability.
    True means the tile at that position is walkable.
    """
    return _tile_type_properties_walkable[tile_type_ids_map]


def get_transparent_map(tile_type_ids_map: np.ndarray) -> np.ndarray:
    """
    Converts a map of TileTypeIDs into a boolean map of transparency.
    True means the tile at that position is transparent (for FOV).
    """
    return _tile_type_properties_transparent[tile_type_ids_map]


def get_glyph_map(tile_type_ids_map: np.ndarray) -> np.ndarray:
    return _tile_type_properties_glyph[tile_type_ids_map]


def is_walkable(tile_type_id: int) -> bool:
    return bool(_tile_type_properties_walkable[tile_type_id])

