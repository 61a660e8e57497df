from __future__ import annotations

import pytest

from undercroft.util.coordinates import (
    Rect,
    cell_to_world,
    clamp,
    world_to_cell,
)


def test_rect_edges_and_center() -> None:
    room = Rect(10, 20, 6, 5)
    assert (room.x1, room.y1, room.x2, room.y2) == (10, 20, 16, 25)
    assert room.center() == (13, 22)


def test_rect_repr_uses_bounds() -> None:
    assert repr(Rect(1, 2, 3, 4)) == "Rect(x1=1, y1=2, x2=4, y2=6)"


@pytest.mark.parametrize(
    ("other", "expected"),
    [
        (Rect(0, 0, 5, 5), True),  # identical
        (Rect(4, 4, 5, 5), True),  # one shared corner cell
        (Rect(5, 0, 5, 5), False),  # touching on the right edge
        (Rect(0, 5, 5, 5), False),  # touching on the bottom edge
        (Rect(1, 1, 2, 2), True),  # contained
        (Rect(20, 20, 3, 3), False),  # far away
    ],
)
def test_rect_intersects(other: Rect, expected: bool) -> None:
    room = Rect(0, 0, 5, 5)
    assert room.intersects(other) is expected
    assert other.intersects(room) is expected


def test_border_and_interior() -> None:
    room = Rect(0, 0, 4, 4)
    assert room.is_border(0, 0)
    assert room.is_border(3, 1)
    assert room.is_border(2, 3)
    assert not room.is_border(1, 1)

    assert room.contains_interior(1, 1)
    assert room.contains_interior(2, 2)
    assert not room.contains_interior(3, 2)
    assert not room.contains_interior(0, 1)


def test_cells_and_interior_cells() -> None:
    room = Rect(0, 0, 4, 3)
    assert len(list(room.cells())) == 12
    assert list(room.interior_cells()) == [(1, 1), (2, 1)]


def test_clamp() -> None:
    assert clamp(-3, 0, 10) == 0
    assert clamp(4, 0, 10) == 4
    assert clamp(11, 0, 10) == 10


def test_cell_world_conversion() -> None:
    assert cell_to_world((5, 3)) == (5.5, 3.5)
    assert world_to_cell((5.5, 3.5)) == (5, 3)
    assert world_to_cell((5.99, 3.0)) == (5, 3)
    assert world_to_cell((-0.5, 0.2)) == (-1, 0)
