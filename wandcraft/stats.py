"""
Stat Algebra
=============
Projectile stat modifiers and the rules for stacking them.

A Stats value only carries the fields somebody set; every other field is
None. Combination is driven by settings.STAT_MERGE_RULES so the balance
policy for each field lives in one table.
"""

from dataclasses import dataclass, fields, replace
from typing import Callable, Dict, Optional, Tuple

from . import settings as config


@dataclass
class Stats:
    """Projectile stat block. None means the field is not present."""
    damage: Optional[float] = None
    speed: Optional[float] = None
    spread: Optional[float] = None  # Radians of extra jitter
    bounces: Optional[int] = None
    lifetime: Optional[Tuple[float, float]] = None  # (low, high) in ticks


def no_stats() -> Stats:
    """The identity element: merging it changes nothing."""
    return Stats()


# =============================================================================
# COMBINATION RULES
# =============================================================================

def _add(a, b):
    return a + b


def _override(a, b):
    return b


def _is_infinite(span) -> bool:
    return tuple(span) == config.INFINITE_LIFETIME_RANGE


def _range_add(a, b):
    if _is_infinite(a) or _is_infinite(b):
        return config.INFINITE_LIFETIME_RANGE
    return (a[0] + b[0], a[1] + b[1])


def _range_union(a, b):
    return (min(a[0], b[0]), max(a[1], b[1]))


MERGE_RULES: Dict[str, Callable] = {
    'add': _add,
    'override': _override,
    'range_add': _range_add,
    'range_union': _range_union,
}


def _combine(name: str, a, b):
    """Combine one field. An absent side leaves the other untouched."""
    if b is None:
        return a
    if a is None:
        return b

    rule_name = config.STAT_MERGE_RULES.get(name)
    rule = MERGE_RULES.get(rule_name)
    if rule is None:
        # wand imports this module
        from .wand import WandConfigError
        raise WandConfigError(
            f'No usable merge rule for stat {name!r} (got {rule_name!r})'
        )
    return rule(a, b)


def merge_stats_mut(dst: Stats, a: Stats, b: Stats) -> Stats:
    """
    Write the combination of a and b into dst.

    dst may be the same object as a (the usual accumulator case).
    """
    for f in fields(Stats):
        setattr(dst, f.name, _combine(f.name, getattr(a, f.name), getattr(b, f.name)))
    return dst


def merge_stats(a: Stats, b: Stats) -> Stats:
    """Return a new Stats combining a then b."""
    return merge_stats_mut(Stats(), a, b)


def resolve_stats(stats: Stats) -> Stats:
    """Fill every absent field from settings.STAT_DEFAULTS."""
    filled = {
        f.name: config.STAT_DEFAULTS[f.name]
        for f in fields(Stats)
        if getattr(stats, f.name) is None
    }
    return replace(stats, **filled)
