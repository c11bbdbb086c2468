"""
Simulation
===========
The state every system works on, the action dispatcher and the tick loop.
"""

import logging
import random
from typing import Dict, Iterable, Optional

from .actions import (
    Action, SHOOT_WAND, DESPAWN_ENTITY, DEBUG_LOG, despawn_entity, on_despawn
)
from .casting import cast_wand, update_wand_timers, update_mana_bars
from .components import WandHolder
from .content import CARDS, WANDS, BLUEPRINTS
from .ecs import World
from .scheduler import TickScheduler
from .settings import Settings, Flag
from .systems import movement_system, rotation_system, projectile_boundary_system
from .wand import Card, CardId, Wand, WandId, ProjectileBlueprint, BlueprintId, WandConfigError


logger = logging.getLogger(__name__)


class Simulation:
    """
    Central simulation state. Passed through all systems.

    Registries default to the built-in content. `rng` drives every random
    roll (spread jitter, lifetimes), so a fixed seed replays exactly.
    """

    def __init__(
        self,
        cards: Optional[Dict[CardId, Card]] = None,
        wands: Optional[Dict[WandId, Wand]] = None,
        blueprints: Optional[Dict[BlueprintId, ProjectileBlueprint]] = None,
        config: Optional[Settings] = None,
        seed: Optional[int] = None,
        flags: Iterable[Flag] = (),
    ):
        self.world = World()
        self.scheduler = TickScheduler()
        self.tick = 0

        self.cards = dict(CARDS) if cards is None else cards
        self.wands = dict(WANDS) if wands is None else wands
        self.blueprints = dict(BLUEPRINTS) if blueprints is None else blueprints

        self.settings = config or Settings()
        self.rng = random.Random(seed)
        self.flags = set(flags)

        # Holder id -> reason, for wands stopped by a configuration error
        self.halted: Dict[int, str] = {}

    def toggle_flag(self, flag: Flag) -> bool:
        """Flip a flag. Returns the new state."""
        if flag in self.flags:
            self.flags.discard(flag)
            return False
        self.flags.add(flag)
        return True

    def step(self) -> None:
        """Advance one tick."""
        self.tick += 1

        for task in self.scheduler.pop_due(self.tick):
            handle_game_action(self, task)

        update_wand_timers(self)
        rotation_system(self.world)
        movement_system(self.world)

        expired = projectile_boundary_system(
            self.world, self.settings.arena_width, self.settings.arena_height
        )
        for entity_id in expired:
            handle_game_action(self, despawn_entity(entity_id))

        update_mana_bars(self)
        self.world.process_dead_entities()

    def run(self, ticks: int) -> None:
        for _ in range(ticks):
            self.step()


# =============================================================================
# ACTION DISPATCH
# =============================================================================

def handle_game_action(sim: Simulation, action: Action) -> None:
    if action.kind == SHOOT_WAND:
        _shoot_wand(sim, action.entity_id)
    elif action.kind == DESPAWN_ENTITY:
        entity_id = action.entity_id
        if not sim.world.is_alive(entity_id):
            return
        trigger_event(sim, on_despawn(entity_id))
        sim.world.destroy_entity(entity_id)
    elif action.kind == DEBUG_LOG:
        logger.info('Debug log: %s', action.message)
    else:
        logger.warning('Unknown game action %r', action)


def trigger_event(sim: Simulation, event: Action) -> None:
    """Run every task that was waiting on `event`."""
    for task in sim.scheduler.trigger_event(event):
        handle_game_action(sim, task)


def _shoot_wand(sim: Simulation, holder_id: int) -> None:
    world = sim.world

    # The holder may have died or been halted since this cast was scheduled
    if not world.is_alive(holder_id) or not world.has_component(holder_id, WandHolder):
        logger.debug('Dropping cast for entity %d, it no longer holds a wand', holder_id)
        return

    try:
        cast_wand(sim, holder_id)
    except WandConfigError as error:
        logger.exception('Halting wand on entity %d', holder_id)
        world.remove_component(holder_id, WandHolder)
        sim.halted[holder_id] = str(error)
