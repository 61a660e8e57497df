from __future__ import annotations

import numpy as np
import pytest

from undercroft.environment import tile_types
from undercroft.environment.tile_types import TileTypeID


def test_property_maps_are_vectorized_lookups() -> None:
    ids = np.array(
        [[TileTypeID.EMPTY, TileTypeID.FLOOR], [TileTypeID.WALL, TileTypeID.FLOOR]],
        dtype=np.uint8,
    )

    walkable = tile_types.get_walkable_map(ids)
    transparent = tile_types.get_transparent_map(ids)

    assert walkable.tolist() == [[False, True], [False, True]]
    assert transparent.tolist() == [[False, True], [False, True]]
    assert tile_types.get_glyph_map(ids).tolist() == [[" ", "."], ["#", "."]]


def test_only_floor_is_walkable() -> None:
    assert tile_types.is_walkable(TileTypeID.FLOOR)
    assert not tile_types.is_walkable(TileTypeID.WALL)
    assert not tile_types.is_walkable(TileTypeID.EMPTY)


def test_register_out_of_order_raises() -> None:
    data = tile_types.make_tile_type_data(
        walkable=True, transparent=True, glyph="d"
    )
    with pytest.raises(ValueError):
        tile_types.register_tile_type(TileTypeID.FLOOR, data)
