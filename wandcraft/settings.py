"""
Settings
=========
Simulation-wide configuration, debug flags and the stat merge table.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, Tuple


@dataclass
class Settings:
    """Tunable limits shared by every wand in a simulation."""
    max_deck_size: int = 64  # Capacity of every deck/hand/discard pile
    max_cast_depth: int = 256  # Nested draws allowed in a single cast
    arena_width: int = 80
    arena_height: int = 24


class Flag(Enum):
    """Runtime toggles. A simulation holds the set of enabled flags."""
    DEBUG_WAND_EXECUTION_LOGS = auto()


# =============================================================================
# STAT MERGING
# =============================================================================
# How each projectile stat combines when a modifier or blueprint is merged
# onto an accumulator. Rule names:
#   add          a + b (absent side is identity)
#   override     b if present, else a (last writer in draw order wins)
#   range_add    elementwise (low, high) sum, infinite stays infinite
#   range_union  (min of lows, max of highs)

STAT_MERGE_RULES: Dict[str, str] = {
    'damage': 'add',
    'speed': 'add',
    'spread': 'add',
    'bounces': 'add',
    'lifetime': 'range_add',
}

# Values used for stats nobody set, at materialization time
STAT_DEFAULTS: Dict[str, object] = {
    'damage': 0,
    'speed': 0.0,
    'spread': 0.0,
    'bounces': 0,
    'lifetime': (60, 60),  # One second at 60 ticks per second
}

# Lifetime sentinel: the projectile never expires
INFINITE_LIFETIME = -1
INFINITE_LIFETIME_RANGE: Tuple[int, int] = (INFINITE_LIFETIME, INFINITE_LIFETIME)
