"""
Configuration constants.

Centralizes all magic numbers and configuration values used throughout the codebase.
Organized by functional area for easy maintenance.
"""

# =============================================================================
# GENERAL
# =============================================================================

# RANDOM_SEED = None
RANDOM_SEED = "burrito1"

# =============================================================================
# AGENT VITALS
# =============================================================================

MAX_HEALTH = 100.0
MAX_ENERGY = 100.0

# Below this health the agent routes through recovery items on the way
# to a threat.
WOUNDED_HEALTH_THRESHOLD = 70.0

# =============================================================================
# PATHFINDING
# =============================================================================

# Edge cost is 1 / (value + 1) * MOVE_COST_SCALE. The same formula drains
# energy when the agent actually steps onto a cell.
MOVE_COST_SCALE = 0.1

# Multiplier applied to cells holding a recovery item in the
# recovery-aware cost model.
RECOVERY_DISCOUNT = 0.5

# Weight applied to the heuristic. 1.0 is plain A*, larger values
# trade optimality for fewer expansions.
HEURISTIC_WEIGHT = 1.0

# =============================================================================
# HOSTILE EFFECTS
# =============================================================================

# Damage dealt per move while the agent stands inside a poison cloud.
POISON_DAMAGE = 5.0

# How much a poison cloud's level drops after each agent move.
POISON_DECAY = 10.0

# Cloud radius in tiles is int(level / POISON_RADIUS_DIVISOR).
POISON_RADIUS_DIVISOR = 10.0

# Poison level given to POISON hostiles created without an explicit level.
DEFAULT_POISON_LEVEL = 30.0

# =============================================================================
# AUTOPLAY
# =============================================================================

# Suggested interval for the caller-owned scheduler that drives tick().
AUTOPLAY_TICK_INTERVAL_MS = 500
