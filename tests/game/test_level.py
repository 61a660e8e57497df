from __future__ import annotations

import logging
from random import Random

import numpy as np
import pytest

from tests.helpers import RecordingPaintSink
from undercroft import config
from undercroft.environment.tile_types import TileTypeID
from undercroft.game.level import Level, generate_dungeon
from undercroft.util.coordinates import Rect
from undercroft.util.rng import seeded

LEVEL_ARGS = (50, 30, 6, 10, 5, 2, 2)


class LowRollRandom(Random):
    """Always rolls the smallest position and the largest count."""

    def randrange(self, start: int, stop: int | None = None, step: int = 1) -> int:
        return start

    def randint(self, a: int, b: int) -> int:
        return b

    def random(self) -> float:
        return 0.0


def _snapshot(level: Level):
    return (
        level.rooms,
        level.spawn_cell,
        [(e.type_tag, e.cell) for e in level.registry],
    )


def test_generate_dungeon_is_reproducible() -> None:
    a = generate_dungeon(*LEVEL_ARGS, seed=1234)
    b = generate_dungeon(*LEVEL_ARGS, seed=1234)

    assert _snapshot(a) == _snapshot(b)
    assert np.array_equal(a.game_map.terrain, b.game_map.terrain)


def test_different_seeds_usually_differ() -> None:
    layouts = {tuple(generate_dungeon(*LEVEL_ARGS, seed=s).rooms) for s in range(5)}
    assert len(layouts) > 1


def test_explicit_rng_matches_seed() -> None:
    by_seed = generate_dungeon(*LEVEL_ARGS, seed="cellar")
    by_rng = generate_dungeon(*LEVEL_ARGS, rng=seeded("cellar"))
    assert _snapshot(by_seed) == _snapshot(by_rng)


def test_seed_and_rng_together_raise() -> None:
    with pytest.raises(ValueError):
        generate_dungeon(*LEVEL_ARGS, seed=1, rng=Random(1))


@pytest.mark.parametrize("seed", range(10))
def test_generated_level_basics(seed: int) -> None:
    level = generate_dungeon(*LEVEL_ARGS, seed=seed)

    assert 1 <= len(level.rooms) <= 5
    x, y = level.spawn_cell
    assert level.is_in_bounds(x, y)
    assert level.is_walkable(x, y)
    assert level.rooms[0].contains_interior(x, y)
    assert not level.stats.used_fallback


@pytest.mark.parametrize("seed", range(10))
def test_no_two_entities_share_a_cell(seed: int) -> None:
    level = generate_dungeon(*LEVEL_ARGS, seed=seed)
    cells = [entity.cell for entity in level.registry]
    assert len(cells) == len(set(cells))


def test_exactly_one_player_at_spawn() -> None:
    level = generate_dungeon(*LEVEL_ARGS, seed=3)
    players = level.registry.of_kind("player")
    assert len(players) == 1
    assert players[0] is level.player
    assert level.player.cell == level.spawn_cell
    assert level.get_entity_at(*level.spawn_cell) is level.player


def test_fog_is_set_up_after_generation() -> None:
    sink = RecordingPaintSink()
    level = generate_dungeon(*LEVEL_ARGS, seed=3, paint_sink=sink)

    assert set(sink.terrain) == set(level.game_map.tiles)
    assert set(sink.alpha) == set(level.game_map.tiles)
    assert set(sink.alpha.values()) == {config.FOG_UNEXPLORED_ALPHA}


def test_no_rooms_falls_back_to_single_room(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        level = generate_dungeon(20, 10, 4, 6, 0, 2, 2, seed=1)

    assert level.stats.used_fallback
    assert level.rooms == [Rect(8, 3, 4, 4)]
    assert level.spawn_cell == (10, 5)
    assert [e.kind for e in level.registry] == ["player"]
    assert any(r.levelno == logging.WARNING for r in caplog.records)


def test_full_spawn_room_falls_back_and_repaints() -> None:
    """A monster on the only interior cell leaves no room for the player."""
    sink = RecordingPaintSink()
    level = generate_dungeon(9, 9, 3, 3, 1, 1, 0, rng=LowRollRandom(), paint_sink=sink)

    assert level.stats.used_fallback
    assert level.rooms == [Rect(3, 3, 3, 3)]
    assert level.spawn_cell == (4, 4)
    assert len(level.registry) == 1
    assert sink.terrain[(0, 0)] == TileTypeID.EMPTY
    assert sink.terrain[(4, 4)] == TileTypeID.FLOOR


def test_invalid_parameters_raise() -> None:
    with pytest.raises(ValueError):
        generate_dungeon(50, 30, 2, 10, 5, 2, 2, seed=1)


# =============================================================================
# Visibility
# =============================================================================


def test_update_fov_lights_player_cell() -> None:
    level = generate_dungeon(*LEVEL_ARGS, seed=8)

    cells = level.update_fov()

    assert level.spawn_cell in cells
    assert level.game_map.is_visible(*level.spawn_cell)
    assert set(level.game_map.visible_cells) <= set(level.game_map.tiles)
    assert level.rooms[0].center() in level.game_map.visible_cells


def test_explored_grows_while_walking_between_rooms() -> None:
    level = generate_dungeon(*LEVEL_ARGS, seed=8)
    counts = []
    for room in level.rooms:
        level.update_fov(room.center())
        counts.append(int(level.game_map.explored.sum()))
    level.update_visibility([])
    counts.append(int(level.game_map.explored.sum()))

    assert counts == sorted(counts)
    assert counts[-1] > 0


def test_update_fov_without_player_needs_origin() -> None:
    level = generate_dungeon(*LEVEL_ARGS, seed=8)
    level.registry.clear()
    with pytest.raises(ValueError):
        level.update_fov()


def test_visible_entities_always_include_player() -> None:
    level = generate_dungeon(*LEVEL_ARGS, seed=8)

    level.update_visibility([])
    assert level.visible_entities() == [level.player]

    level.update_fov()
    for entity in level.visible_entities():
        assert entity.kind == "player" or level.game_map.is_visible(*entity.cell)


def test_monster_in_view_is_visible() -> None:
    level = generate_dungeon(*LEVEL_ARGS, seed=8)
    x, y = level.spawn_cell
    target = next(
        (cx, cy)
        for cx, cy in level.rooms[0].interior_cells()
        if not level.registry.is_occupied(cx, cy)
    )
    monster = level.registry.spawn("fly_mob", (target[0] + 0.5, target[1] + 0.5))

    level.update_visibility([(x, y), target])

    assert monster in level.visible_entities()


def test_position_queries() -> None:
    level = generate_dungeon(*LEVEL_ARGS, seed=8)
    x, y = level.spawn_cell

    assert level.is_valid_position((x + 0.5, y + 0.5))
    assert level.is_valid_position((x + 0.99, y))
    assert not level.is_valid_position((-1.0, 0.0))
    assert not level.is_valid_position((0.5, 0.5))  # map corner is never floor
    assert level.get_entity_at(0, 0) is None


def test_render_ascii_shape_and_player() -> None:
    level = generate_dungeon(*LEVEL_ARGS, seed=8)
    lines = level.render_ascii().split("\n")

    assert len(lines) == 30
    assert all(len(line) <= 50 for line in lines)
    x, y = level.spawn_cell
    assert lines[y][x] == "@"
    assert "#" in level.render_ascii()


def test_render_ascii_with_fog_hides_unexplored() -> None:
    level = generate_dungeon(*LEVEL_ARGS, seed=8)
    assert level.render_ascii(fog=True).replace("\n", "").strip() == "@"

    level.update_fov()
    level.update_fov()  # second pass marks the first view as explored
    assert "." in level.render_ascii(fog=True)
