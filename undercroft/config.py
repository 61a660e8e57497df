"""
Configuration constants.

Centralizes the magic numbers and configuration values used by level
generation and the visibility store. Organized by functional area for easy
maintenance.
"""

import tcod.constants

from undercroft.types import Opacity, RandomSeed, SpawnTable

# =============================================================================
# GENERAL
# =============================================================================

# RANDOM_SEED = None
RANDOM_SEED: RandomSeed = "undercroft1"

# =============================================================================
# MAP GENERATION
# =============================================================================

# Map size
MAP_WIDTH = 80
MAP_HEIGHT = 45

# Room generation. Room sizes are drawn from the half-open range
# [MIN_ROOM_SIZE, MAX_ROOM_SIZE).
MAX_ROOM_SIZE = 14
MIN_ROOM_SIZE = 6
MAX_NUM_ROOMS = 10

# Smallest room that still has a one-cell interior inside its wall ring.
SMALLEST_ROOM_SIZE = 3

# Per-room content caps
MAX_MONSTERS_PER_ROOM = 2
MAX_ITEMS_PER_ROOM = 2

# Upper bound on candidate cells tried for a single entity (or for the player
# spawn) before it is skipped.
MAX_PLACEMENT_ATTEMPTS = 30

# =============================================================================
# ENTITY SPAWNING
# =============================================================================

PLAYER_TYPE_TAG = "player"

# Weighted tables for monster and item type draws. One uniform roll is
# compared against the cumulative weights in order.
MONSTER_SPAWN_TABLE: SpawnTable = (
    ("fire_sprite", 0.8),
    ("fly_mob", 0.2),
)

ITEM_SPAWN_TABLE: SpawnTable = (
    ("potion_of_heart", 0.7),
    ("confusion_scroll", 0.1),
    ("fireball_scroll", 0.1),
    ("lightning_scroll", 0.1),
)

# Characters used for entities in the ASCII preview. Unlisted tags fall back
# to the first letter of the tag.
ENTITY_GLYPHS: dict[str, str] = {
    PLAYER_TYPE_TAG: "@",
    "fire_sprite": "s",
    "fly_mob": "f",
    "potion_of_heart": "!",
    "confusion_scroll": "?",
    "fireball_scroll": "?",
    "lightning_scroll": "?",
}

# =============================================================================
# FIELD OF VIEW & FOG
# =============================================================================

# Field of view
FOV_RADIUS = 8  # Player's sight radius
FOV_ALGORITHM = tcod.constants.FOV_SYMMETRIC_SHADOWCAST
FOV_LIGHT_WALLS = True

# Fog overlay opacity for each exploration state
FOG_UNEXPLORED_ALPHA = Opacity(1.0)
FOG_EXPLORED_ALPHA = Opacity(0.5)
FOG_VISIBLE_ALPHA = Opacity(0.0)
