"""
Content
========
Card, projectile blueprint and wand definitions.

Everything here is immutable data. Adding a card is one more entry in
CARDS; wands refer to cards by id.
"""

import math
from typing import Dict, Iterable

from .engine import NEON_CYAN, NEON_MAGENTA, NEON_GREEN, NEON_RED
from .stats import Stats
from .wand import (
    Card, CardId, ProjectileBlueprint, BlueprintId, Wand, WandId,
    MulticastEffect, ProjectileEffect, ModifierEffect,
    TriggerKind, TimerKind, Transform2D,
    UnknownCardError, UnknownBlueprintError,
)


# =============================================================================
# PROJECTILE BLUEPRINTS
# =============================================================================

BLUEPRINTS: Dict[BlueprintId, ProjectileBlueprint] = {
    'spark': ProjectileBlueprint(
        id='spark',
        stats=Stats(damage=3, speed=1.0, lifetime=(30, 40)),
        char='•',
        color=NEON_CYAN,
    ),
    'missile': ProjectileBlueprint(
        id='missile',
        stats=Stats(damage=10, speed=0.6, spread=0.05, lifetime=(60, 80)),
        char='◆',
        color=NEON_MAGENTA,
    ),
    'bubble': ProjectileBlueprint(
        id='bubble',
        stats=Stats(damage=2, speed=0.5, bounces=3, spread=0.2, lifetime=(90, 120)),
        char='o',
        color=NEON_GREEN,
    ),
    'orb': ProjectileBlueprint(
        id='orb',
        stats=Stats(damage=60, speed=0.3, lifetime=(120, 120)),
        char='◉',
        color=NEON_RED,
    ),
}


# =============================================================================
# CARDS
# =============================================================================

CARDS: Dict[CardId, Card] = {
    # --- Projectiles ---
    'spark_bolt': Card(
        id='spark_bolt', name='Spark Bolt', symbol='•',
        mana_cost=5, cast_delay=3,
        effects=(ProjectileEffect('spark'),),
    ),
    'magic_missile': Card(
        id='magic_missile', name='Magic Missile', symbol='◆',
        mana_cost=15, cast_delay=10,
        effects=(ProjectileEffect('missile'),),
    ),
    'bubble': Card(
        id='bubble', name='Bouncing Bubble', symbol='o',
        mana_cost=5, cast_delay=-2,
        effects=(ProjectileEffect('bubble'),),
    ),
    'dead_weight': Card(
        id='dead_weight', name='Dead Weight', symbol='◉',
        mana_cost=500, cast_delay=20, recharge_delay=20,
        effects=(ProjectileEffect('orb'),),
    ),
    'spark_trigger': Card(
        id='spark_trigger', name='Spark Bolt With Trigger', symbol='•→',
        mana_cost=10, cast_delay=3,
        effects=(ProjectileEffect('spark', TriggerKind()),),
    ),
    'missile_timer': Card(
        id='missile_timer', name='Magic Missile With Timer', symbol='◆⌚',
        mana_cost=20, cast_delay=10,
        effects=(ProjectileEffect('missile', TimerKind(delay=20)),),
    ),

    # --- Multicasts ---
    'double_spell': Card(
        id='double_spell', name='Double Spell', symbol='2x',
        mana_cost=0,
        effects=(MulticastEffect((Transform2D(), Transform2D())),),
    ),
    'triple_scatter': Card(
        id='triple_scatter', name='Triple Scatter', symbol='3∴',
        mana_cost=2,
        effects=(MulticastEffect((
            Transform2D(direction=-math.pi / 12),
            Transform2D(),
            Transform2D(direction=math.pi / 12),
        )),),
    ),
    'side_arms': Card(
        id='side_arms', name='Side Arms', symbol='⇅',
        mana_cost=4,
        effects=(MulticastEffect((
            Transform2D(position=(0.0, -1.0)),
            Transform2D(position=(0.0, 1.0)),
        )),),
    ),

    # --- Modifiers ---
    'damage_plus': Card(
        id='damage_plus', name='Damage Plus', symbol='+d',
        mana_cost=5, cast_delay=5,
        effects=(ModifierEffect(Stats(damage=10)),),
    ),
    'speed_up': Card(
        id='speed_up', name='Speed Up', symbol='>>',
        mana_cost=3,
        effects=(ModifierEffect(Stats(speed=0.5)),),
    ),
    'focus': Card(
        id='focus', name='Focus', symbol='-∠',
        mana_cost=2,
        effects=(ModifierEffect(Stats(spread=-0.2)),),
    ),
    'bouncy': Card(
        id='bouncy', name='Bouncy', symbol='↷',
        mana_cost=2,
        effects=(ModifierEffect(Stats(bounces=2)),),
    ),
    'linger': Card(
        id='linger', name='Linger', symbol='⌛',
        mana_cost=3, recharge_delay=5,
        effects=(ModifierEffect(Stats(lifetime=(20, 40))),),
    ),
    'eternity': Card(
        id='eternity', name='Eternity', symbol='∞',
        mana_cost=60, recharge_delay=30,
        effects=(ModifierEffect(Stats(lifetime=(-1, -1))),),
    ),
}


# =============================================================================
# WANDS
# =============================================================================

WANDS: Dict[WandId, Wand] = {
    'starter': Wand(
        id='starter', name='Starter Wand',
        cards=('spark_bolt', 'spark_bolt', 'spark_bolt'),
        max_mana=40, mana_recharge=0.5, cast_delay=6, recharge_delay=25,
        spread=0.05,
    ),
    'scatter': Wand(
        id='scatter', name='Scattergun',
        cards=('triple_scatter', 'spark_bolt', 'spark_bolt', 'spark_bolt',
               'speed_up', 'magic_missile'),
        max_mana=60, mana_recharge=0.8, cast_delay=8, recharge_delay=30,
        spread=0.1,
    ),
    'chain': Wand(
        id='chain', name='Chain Caster',
        cards=('spark_trigger', 'double_spell', 'spark_bolt', 'spark_bolt',
               'missile_timer', 'bubble'),
        max_mana=80, mana_recharge=1.0, cast_delay=10, recharge_delay=40,
    ),
    'heavy': Wand(
        id='heavy', name='Overloaded Staff',
        cards=('dead_weight', 'damage_plus', 'magic_missile'),
        max_mana=100, mana_recharge=1.5, cast_delay=12, recharge_delay=35,
    ),
    'bouncer': Wand(
        id='bouncer', name='Rubber Rod',
        cards=('bouncy', 'side_arms', 'bubble', 'bubble', 'focus', 'bubble'),
        max_mana=50, mana_recharge=0.6, cast_delay=5, recharge_delay=20,
        spread=0.15,
    ),
    'wisp': Wand(
        id='wisp', name='Wisp Maker',
        cards=('eternity', 'linger', 'spark_bolt'),
        max_mana=70, mana_recharge=0.4, cast_delay=15, recharge_delay=60,
    ),
}


# =============================================================================
# VALIDATION
# =============================================================================

def validate_wand(wand: Wand, cards: Dict[CardId, Card],
                  blueprints: Dict[BlueprintId, ProjectileBlueprint]) -> None:
    """Check every card and blueprint a wand can reach exists."""
    for card_id in wand.cards:
        card = cards.get(card_id)
        if card is None:
            raise UnknownCardError(
                f'Wand {wand.id!r} references unknown card {card_id!r}'
            )
        for blueprint_id in _blueprints_of(card):
            if blueprint_id not in blueprints:
                raise UnknownBlueprintError(
                    f'Card {card.id!r} references unknown blueprint {blueprint_id!r}'
                )


def _blueprints_of(card: Card) -> Iterable[BlueprintId]:
    for effect in card.effects:
        if isinstance(effect, ProjectileEffect):
            yield effect.blueprint
