"""Game configuration constants."""

# Grid dimensions (both modes)
GRID_ROWS = 12
GRID_COLS = 12

# Map generation
ASTEROID_COUNT = 10
ASTEROID_PLACEMENT_ATTEMPTS = 100
RANDOM_PLACEMENT_ATTEMPTS = 100

# Fleet drafting
TACTICAL_FLEET_BUDGET = 30
CLASSIC_FLEET_BUDGET = 0

# Action points
CLASSIC_BASE_AP = 1
TACTICAL_BASE_AP = 2
ATTACK_COST = 1
ABILITY_COST = 2

# Ability cooldowns, in the caster's own turns
REPAIR_COOLDOWN = 3
RADAR_COOLDOWN = 3
JAM_COOLDOWN = 4
SCOUT_COOLDOWN = 4
COMMAND_COOLDOWN = 4
SHIELD_COOLDOWN = 5

# Limited-use abilities
DECOY_USES = 2
CAMO_USES = 1
ESCAPE_USES = 1

# Status effect durations
JAM_DURATION = 1  # Opponent turns
TARGET_LOCK_DURATION = 3  # Caster turns

# Ability geometry
CAMO_SIZE = 4  # Camouflage field is CAMO_SIZE x CAMO_SIZE
MULTI_TARGET_COUNT = 4  # Radar, jam and target-lock cells

# Targeting AI
AI_ATTACK_THRESHOLD = 10
AI_ACTION_DELAY = 1.2  # Seconds between streamed AI actions
HIT_ADJACENT_MULTIPLIER = 5
SHIELD_ADJACENT_MULTIPLIER = 3
SHIELD_ROLL = 0.10  # AI shields when random() > SHIELD_ROLL
INTEL_ROLL = 0.15  # Jam, scout, radar and decoy rolls
COMMAND_ROLL = 0.20
BLUFF_ROLL = 0.75  # Above this the AI prefers a top-3 bluff shield
BLUFF_CANDIDATES = 5
CAMO_MOTHERSHIP_BONUS = 3

# Testing
RNG_SEED_DEFAULT = 42  # Default seed for testing
