"""Line rasterization on the tile grid."""

from __future__ import annotations

import tcod.los

from undercroft.types import WorldTilePos


def get_line(start: WorldTilePos, end: WorldTilePos) -> list[WorldTilePos]:
    """Return Bresenham line points from *start* to *end*, both included.

    The result is a pure function of its inputs. Identical endpoints yield a
    single-cell path.
    """
    points = tcod.los.bresenham(
        (int(start[0]), int(start[1])), (int(end[0]), int(end[1]))
    )
    return [(x, y) for x, y in points.tolist()]


def get_l_path(
    start: WorldTilePos, elbow: WorldTilePos, end: WorldTilePos
) -> list[WorldTilePos]:
    """Concatenate the two straight segments ``start -> elbow -> end``.

    The elbow cell appears twice, once at the end of each segment.
    """
    return get_line(start, elbow) + get_line(elbow, end)
