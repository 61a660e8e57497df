from __future__ import annotations

from typing import Literal, NewType

# =============================================================================
# SPATIAL TYPES
# =============================================================================

type TileCoord = int  # Always integer tile position

# World coordinates - absolute positions on the level grid
type WorldTileCoord = TileCoord  # Example: x=5, y=3
type WorldTilePos = tuple[
    WorldTileCoord, WorldTileCoord
]  # Example: (5, 3) = tile 5,3 on map

# Continuous world position handed to entity factories. A cell's world
# position is its center, so cell (5, 3) lives at (5.5, 3.5).
type WorldCoord = float
type WorldPos = tuple[WorldCoord, WorldCoord]

# =============================================================================
# RENDERING-RELATED TYPES
# =============================================================================

# Opacity of the fog overlay painted over a tile. 0.0 is fully clear
# (visible), 1.0 is fully opaque (never seen).
Opacity = NewType("Opacity", float)

# =============================================================================
# GAME-RELATED TYPES
# =============================================================================

# Unique identifier for an Entity on the level. Assigned sequentially by the
# entity registry.
EntityId = NewType("EntityId", int)

# Tag naming which kind of thing an entity factory should build
# (e.g., "player", "fire_sprite", "potion_of_heart").
type EntityTypeTag = str

type EntityKind = Literal["player", "monster", "item"]

# Random seed for deterministic generation (map generation, etc.)
# Can be an int for numeric seeds or a descriptive string like "burrito1".
type RandomSeed = int | str | None

# (type_tag, weight) pairs used for weighted random draws. Weights are
# relative; they do not need to sum to 1.
type SpawnTable = tuple[tuple[EntityTypeTag, float], ...]
