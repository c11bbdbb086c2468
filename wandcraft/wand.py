"""
Wand Model
===========
Card, effect and wand definitions, plus the runtime state a cast works on.

Definitions (Card, Wand, ProjectileBlueprint) are immutable and shared by
every holder. WandState belongs to one holder entity; CastState lives for a
single cast and is handed over to trigger/timer projectiles afterwards.
"""

import math
from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional, Tuple, Union

from .circular_buffer import CircularBuffer
from .stats import Stats, no_stats


CardId = str
WandId = str
BlueprintId = str


# =============================================================================
# ERRORS
# =============================================================================

class WandConfigError(Exception):
    """Fatal problem with wand content or limits. Halts the offending wand."""


class UnknownCardError(WandConfigError):
    """A wand references a card id missing from the registry."""


class UnknownWandError(WandConfigError):
    """A holder references a wand id missing from the registry."""


class UnknownBlueprintError(WandConfigError):
    """A projectile effect references a missing blueprint."""


class CastDepthExceeded(WandConfigError):
    """A cast recursed deeper than settings.max_cast_depth."""


class DeckTooLargeError(WandConfigError):
    """A wand holds more cards than a pile can store."""


# =============================================================================
# TRANSFORMS
# =============================================================================

@dataclass(frozen=True)
class Transform2D:
    """Relative offset: position plus facing direction (radians)."""
    position: Tuple[float, float] = (0.0, 0.0)
    direction: float = 0.0

    def compose(self, child: 'Transform2D') -> 'Transform2D':
        """Apply a child offset expressed in this transform's frame."""
        cx, cy = child.position
        cos_d = math.cos(self.direction)
        sin_d = math.sin(self.direction)
        return Transform2D(
            position=(
                self.position[0] + cx * cos_d - cy * sin_d,
                self.position[1] + cx * sin_d + cy * cos_d,
            ),
            direction=self.direction + child.direction,
        )


def identity_transform() -> Transform2D:
    return Transform2D()


# =============================================================================
# PROJECTILE KINDS
# =============================================================================
# On a card these are templates (payload None). The interpreter copies them
# with the resolved inner CastState attached as payload.

@dataclass(frozen=True)
class NormalKind:
    """Plain projectile, nothing happens when it ends."""


@dataclass(frozen=True)
class TriggerKind:
    """Casts its payload when the projectile hits something."""
    payload: Optional['CastState'] = None


@dataclass(frozen=True)
class TimerKind:
    """Casts its payload once `delay` ticks have passed."""
    delay: int = 0
    payload: Optional['CastState'] = None


ProjectileKind = Union[NormalKind, TriggerKind, TimerKind]


# =============================================================================
# EFFECTS
# =============================================================================

@dataclass(frozen=True)
class MulticastEffect:
    """Draw once per formation entry, each under its own sub-transform."""
    formation: Tuple[Transform2D, ...] = ()


@dataclass(frozen=True)
class ProjectileEffect:
    """Emit one projectile built from a blueprint."""
    blueprint: BlueprintId
    kind: ProjectileKind = field(default_factory=NormalKind)


@dataclass(frozen=True)
class ModifierEffect:
    """Stack stats onto every card drawn after this one in the branch."""
    stats: Stats = field(default_factory=no_stats)


Effect = Union[MulticastEffect, ProjectileEffect, ModifierEffect]


# =============================================================================
# DEFINITIONS
# =============================================================================

@dataclass(frozen=True)
class Card:
    """A spell card. Shared by reference between all wands holding it."""
    id: CardId
    name: str
    mana_cost: int = 0
    cast_delay: int = 0  # Added to the time until projectiles fire
    recharge_delay: int = 0  # Added to the time until the deck resets
    effects: Tuple[Effect, ...] = ()
    symbol: str = '?'


@dataclass(frozen=True)
class ProjectileBlueprint:
    """Base stats and look of a projectile."""
    id: BlueprintId
    stats: Stats = field(default_factory=no_stats)
    char: str = '*'
    color: int = 255


@dataclass(frozen=True)
class Wand:
    """Card loadout with base timing and mana stats."""
    id: WandId
    name: str
    cards: Tuple[CardId, ...] = ()
    max_mana: int = 100
    mana_recharge: float = 1.0  # Per tick
    cast_delay: int = 10
    recharge_delay: int = 30
    spread: float = 0.0  # Radians


# =============================================================================
# RUNTIME STATE
# =============================================================================

class CardRef(NamedTuple):
    """A card in a pile, tagged with its slot in the wand's declared order."""
    id: CardId
    index: int


@dataclass
class WandState:
    """
    Mutable per-holder wand state.

    Every card dealt into the deck is always in exactly one of the three
    piles while no cast is running.
    """
    deck: CircularBuffer
    hand: CircularBuffer
    discarded: CircularBuffer
    mana: float = 0.0
    recharge_delay: int = 0

    def pile_sizes(self) -> Tuple[int, int, int]:
        return self.deck.used, self.hand.used, self.discarded.used


@dataclass
class ProjectileDescriptor:
    """A projectile waiting to be spawned, relative to the caster."""
    blueprint: BlueprintId
    position: Tuple[float, float] = (0.0, 0.0)
    direction: float = 0.0
    continuation: ProjectileKind = field(default_factory=NormalKind)


@dataclass
class CastState:
    """Accumulator threaded through one cast and its recursive draws."""
    transform: Transform2D = field(default_factory=identity_transform)
    stats: Stats = field(default_factory=no_stats)
    projectiles: List[ProjectileDescriptor] = field(default_factory=list)
    force_recharge: bool = False
    cast_delay: int = 0
