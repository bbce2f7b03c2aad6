"""
Game constants - all magic numbers in one place.
NO UI DEPENDENCIES.
"""

# =============================================================================
# SCENE (scene units, origin top-left, y grows downward)
# =============================================================================
GAME_WIDTH = 800
GAME_HEIGHT = 600
GROUND_HEIGHT = 40
GROUND_Y = GAME_HEIGHT - GROUND_HEIGHT   # incoming projectiles detonate here

# =============================================================================
# STRUCTURES
# =============================================================================
STRUCTURE_COUNT = 6
STRUCTURE_WIDTH = 60
STRUCTURE_HEIGHT = 30
STRUCTURE_INITIAL_AMMO = 10

# =============================================================================
# PROJECTILES (all speeds in scene units per tick)
# =============================================================================
INCOMING_SPEED_MIN = 1.2
INCOMING_SPEED_MAX = 2.6
INCOMING_SPEED_LEVEL_SCALING = 0.1
OUTGOING_SPEED = 5.2

# Chance that an incoming projectile is aimed at a surviving structure
TARGET_STRUCTURE_PROBABILITY = 0.8

# =============================================================================
# BLASTS
# =============================================================================
BLAST_MAX_RADIUS = 50          # outgoing projectile reaching its target
IMPACT_BLAST_MAX_RADIUS = 20   # incoming projectile hitting the ground
CHAIN_BLAST_MAX_RADIUS = min(15, BLAST_MAX_RADIUS)
BLAST_GROWTH_RATE = 1.6
BLAST_SHRINK_FACTOR = 1.5      # shrink step = growth * factor

# =============================================================================
# SCORING
# =============================================================================
SCORE_PER_KILL = 25
SCORE_PER_STRUCTURE_SAVED = 100

# =============================================================================
# PACING (milliseconds)
# =============================================================================
SPAWN_INTERVAL_BASE_MS = 3000.0
SPAWN_INTERVAL_MIN_MS = 500.0
SPAWN_INTERVAL_LEVEL_SCALING = 0.8

QUOTA_BASE = 10
QUOTA_PER_LEVEL = 2

# =============================================================================
# PERSISTENCE
# =============================================================================
BEST_SCORE_STORAGE_KEY = 'missile_cmd_best_score'
