"""Shared fixtures: a tiny card set and a factory for simulations."""

import math

import pytest

from wandcraft.casting import spawn_wand
from wandcraft.components import Position, Rotation
from wandcraft.settings import Settings
from wandcraft.simulation import Simulation
from wandcraft.stats import Stats, no_stats
from wandcraft.wand import (
    Card, Wand, ProjectileBlueprint, ProjectileEffect, ModifierEffect,
    MulticastEffect, TriggerKind, TimerKind, Transform2D,
)


def bolt_card(card_id, cost=1, cast_delay=0, recharge_delay=0):
    """Card that fires one bolt and stops."""
    return Card(
        id=card_id, name=card_id.upper(), mana_cost=cost,
        cast_delay=cast_delay, recharge_delay=recharge_delay,
        effects=(ProjectileEffect('bolt'),),
    )


TEST_BLUEPRINTS = {
    'bolt': ProjectileBlueprint(
        id='bolt', stats=Stats(damage=1, speed=2.0, lifetime=(10, 10)),
    ),
    'wisp': ProjectileBlueprint(
        id='wisp', stats=Stats(damage=1, speed=1.0, lifetime=(-1, -1)),
    ),
    'ball': ProjectileBlueprint(
        id='ball', stats=Stats(damage=1, speed=1.0, bounces=1, lifetime=(500, 500)),
    ),
}


TEST_CARDS = {
    'a': bolt_card('a'),
    'b': bolt_card('b'),
    'c': bolt_card('c'),
    'd': bolt_card('d'),
    # Fires a bolt, then keeps drawing
    'a_chain': Card(
        id='a_chain', name='A', mana_cost=1,
        effects=(ProjectileEffect('bolt'), ModifierEffect(no_stats())),
    ),
    'slow': bolt_card('slow', cost=1, cast_delay=7, recharge_delay=3),
    'pricey': bolt_card('pricey', cost=999),
    'dmg': Card(
        id='dmg', name='Damage Up', mana_cost=1, cast_delay=2,
        effects=(ModifierEffect(Stats(damage=5)),),
    ),
    'fast': Card(
        id='fast', name='Speed Up', mana_cost=1,
        effects=(ModifierEffect(Stats(speed=1.0)),),
    ),
    'multi3': Card(
        id='multi3', name='Triple', mana_cost=0,
        effects=(MulticastEffect((
            Transform2D(direction=-0.5),
            Transform2D(),
            Transform2D(direction=0.5),
        )),),
    ),
    'side': Card(
        id='side', name='Side', mana_cost=0,
        effects=(MulticastEffect((
            Transform2D(position=(0.0, 1.0)),
            Transform2D(position=(0.0, -1.0)),
        )),),
    ),
    'trig': Card(
        id='trig', name='Trigger Bolt', mana_cost=1,
        effects=(ProjectileEffect('bolt', TriggerKind()),),
    ),
    'timer': Card(
        id='timer', name='Timer Bolt', mana_cost=1,
        effects=(ProjectileEffect('bolt', TimerKind(delay=15)),),
    ),
    'wisp': Card(
        id='wisp', name='Wisp', mana_cost=0,
        effects=(ProjectileEffect('wisp'),),
    ),
    'ball': Card(
        id='ball', name='Ball', mana_cost=0,
        effects=(ProjectileEffect('ball'),),
    ),
}


def make_wand(wand_id, cards, max_mana=100, mana_recharge=0.0,
              cast_delay=5, recharge_delay=20, spread=0.0):
    return Wand(
        id=wand_id, name=wand_id, cards=tuple(cards), max_mana=max_mana,
        mana_recharge=mana_recharge, cast_delay=cast_delay,
        recharge_delay=recharge_delay, spread=spread,
    )


@pytest.fixture
def make_sim():
    """Factory: a Simulation over the test card set."""
    def _make(seed=1234, **settings_overrides):
        config = Settings(**settings_overrides)
        return Simulation(
            cards=dict(TEST_CARDS),
            wands={},
            blueprints=dict(TEST_BLUEPRINTS),
            config=config,
            seed=seed,
        )
    return _make


@pytest.fixture
def sim(make_sim):
    return make_sim()


@pytest.fixture
def holder():
    """Factory: register a wand and attach it to a fresh holder entity."""
    def _holder(sim, cards, x=10.0, y=10.0, angle=0.0, **wand_kwargs):
        wand_id = f'wand{len(sim.wands)}'
        sim.wands[wand_id] = make_wand(wand_id, cards, **wand_kwargs)
        entity_id = sim.world.create_entity(Position(x, y), Rotation(angle))
        return spawn_wand(sim, wand_id, entity_id)
    return _holder


def pile_ids(buffer):
    return [ref.id for ref in buffer]


def approx_angle(a, b, tol=1e-9):
    return abs(math.remainder(a - b, 2 * math.pi)) < tol
