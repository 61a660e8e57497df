"""Field-of-view computation on top of tcod's symmetric shadowcasting."""

from __future__ import annotations

import numpy as np
import tcod.map
from numpy.typing import NDArray

from undercroft import config
from undercroft.types import WorldTilePos


def compute_fov(
    transparent: NDArray[np.bool_],
    origin: WorldTilePos,
    radius: int = config.FOV_RADIUS,
) -> NDArray[np.bool_]:
    """Compute the tiles visible from *origin*.

    Args:
        transparent: Boolean array shaped ``(width, height)``.
            ``True`` means the tile is see-through.
        origin: ``(x, y)`` position of the viewer.
        radius: Maximum sight distance. ``0`` means unlimited.

    Returns:
        Boolean array with the same shape as *transparent*, where ``True``
        marks a visible tile. Walls bordering visible floor are included when
        ``config.FOV_LIGHT_WALLS`` is set.
    """
    width, height = transparent.shape
    ox, oy = origin
    if not (0 <= ox < width and 0 <= oy < height):
        raise ValueError(f"FOV origin {origin} outside {width}x{height} map")
    return tcod.map.compute_fov(
        transparent,
        (ox, oy),
        radius=radius,
        light_walls=config.FOV_LIGHT_WALLS,
        algorithm=config.FOV_ALGORITHM,
    )


def visible_cells(visible: NDArray[np.bool_]) -> list[WorldTilePos]:
    """List the ``(x, y)`` cells flagged in a visibility array, x-major."""
    return [(x, y) for x, y in np.argwhere(visible).tolist()]
