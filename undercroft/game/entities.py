"""Entities on a level and the seams generation uses to create and find them.

Generation never owns entities. It asks an `EntityFactory` to build them and
reads positions back from an `EntityRoster`, both of which belong to whoever
runs the game. `EntityRegistry` is the in-process implementation of both,
backed by a spatial hash so occupancy checks stay cheap.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from undercroft import config
from undercroft.types import (
    EntityId,
    EntityKind,
    EntityTypeTag,
    WorldPos,
    WorldTileCoord,
    WorldTilePos,
)
from undercroft.util.coordinates import cell_to_world, world_to_cell
from undercroft.util.spatial import SpatialHashGrid

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Entity:
    """A player, monster or item standing on a cell.

    Compared and hashed by identity so it can live in the spatial index while
    its position changes.
    """

    entity_id: EntityId
    type_tag: EntityTypeTag
    kind: EntityKind
    x: WorldTileCoord
    y: WorldTileCoord

    @property
    def cell(self) -> WorldTilePos:
        return (self.x, self.y)

    @property
    def world_position(self) -> WorldPos:
        return cell_to_world(self.cell)

    @property
    def blocks_movement(self) -> bool:
        return self.kind != "item"


class EntityFactory(Protocol):
    """Builds an entity of the tagged type at a world position."""

    def spawn(self, type_tag: EntityTypeTag, world_position: WorldPos) -> object: ...


class EntityRoster(Protocol):
    """Enumerates the world positions of every live entity."""

    def positions(self) -> Iterable[WorldPos]: ...


@runtime_checkable
class Occupancy(Protocol):
    """Answers whether some entity already stands on a cell."""

    def is_occupied(self, x: WorldTileCoord, y: WorldTileCoord) -> bool: ...


class OccupancyView:
    """Occupancy derived on demand from any roster.

    A roster that can answer occupancy itself (such as `EntityRegistry` with
    its spatial index) is asked directly. Otherwise every query maps the
    roster's current world positions to cells. Nothing is cached, so entities
    added mid-generation are seen immediately.
    """

    def __init__(self, roster: EntityRoster) -> None:
        self.roster = roster

    def occupied_cells(self) -> set[WorldTilePos]:
        return {world_to_cell(pos) for pos in self.roster.positions()}

    def is_occupied(self, x: WorldTileCoord, y: WorldTileCoord) -> bool:
        if isinstance(self.roster, Occupancy):
            return self.roster.is_occupied(x, y)
        return (x, y) in self.occupied_cells()


def default_kinds() -> dict[EntityTypeTag, EntityKind]:
    """Map every configured type tag to its entity kind."""
    kinds: dict[EntityTypeTag, EntityKind] = {config.PLAYER_TYPE_TAG: "player"}
    kinds.update({tag: "monster" for tag, _weight in config.MONSTER_SPAWN_TABLE})
    kinds.update({tag: "item" for tag, _weight in config.ITEM_SPAWN_TABLE})
    return kinds


class EntityRegistry:
    """Live roster of a level's entities; also serves as its entity factory."""

    def __init__(
        self,
        kinds: Mapping[EntityTypeTag, EntityKind] | None = None,
        cell_size: int = 16,
    ) -> None:
        self.kinds: dict[EntityTypeTag, EntityKind] = (
            dict(kinds) if kinds is not None else default_kinds()
        )
        self.spatial_index: SpatialHashGrid[Entity] = SpatialHashGrid(cell_size)
        self.entities: list[Entity] = []
        self._next_id = itertools.count(1)

    def __len__(self) -> int:
        return len(self.entities)

    def __iter__(self) -> Iterator[Entity]:
        return iter(self.entities)

    def spawn(self, type_tag: EntityTypeTag, world_position: WorldPos) -> Entity:
        """Create an entity at the cell containing *world_position*.

        Raises:
            ValueError: If *type_tag* is not a known entity type.
        """
        kind = self.kinds.get(type_tag)
        if kind is None:
            raise ValueError(f"Unknown entity type: {type_tag!r}")
        x, y = world_to_cell(world_position)
        entity = Entity(EntityId(next(self._next_id)), type_tag, kind, x, y)
        self.add(entity)
        logger.debug("Spawned %s #%d at (%d, %d)", type_tag, entity.entity_id, x, y)
        return entity

    def add(self, entity: Entity) -> None:
        self.entities.append(entity)
        self.spatial_index.add(entity)

    def remove(self, entity: Entity) -> None:
        if entity in self.spatial_index:
            self.entities.remove(entity)
            self.spatial_index.remove(entity)

    def move(self, entity: Entity, x: WorldTileCoord, y: WorldTileCoord) -> None:
        entity.x, entity.y = x, y
        self.spatial_index.update(entity)

    def clear(self) -> None:
        self.entities.clear()
        self.spatial_index.clear()

    def positions(self) -> Iterator[WorldPos]:
        for entity in self.entities:
            yield entity.world_position

    def get_at(self, x: WorldTileCoord, y: WorldTileCoord) -> list[Entity]:
        return self.spatial_index.get_at_point(x, y)

    def is_occupied(self, x: WorldTileCoord, y: WorldTileCoord) -> bool:
        return bool(self.spatial_index.get_at_point(x, y))

    def of_kind(self, kind: EntityKind) -> list[Entity]:
        return [entity for entity in self.entities if entity.kind == kind]

    @property
    def player(self) -> Entity | None:
        return next((e for e in self.entities if e.kind == "player"), None)
