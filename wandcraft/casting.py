"""
Wand Casting
=============
Deck rotation, the recursive cast interpreter and projectile spawning.

A cast draws cards off the wand's deck one at a time. A card either
stacks stats onto everything drawn after it (modifier), fans out into
several draws under offset transforms (multicast), or emits a projectile.
Trigger and timer projectiles draw their payload from the same deck.

Drawn cards sit in the hand until the cast ends, so a card can never be
drawn twice in one cast. When the deck runs dry mid-cast the discard pile
goes back into the deck in its original order ("wrapping") and the wand is
forced to recharge once the cast is over.
"""

import logging
import math
from dataclasses import replace
from typing import List, Optional

from .actions import shoot_wand, despawn_entity
from .circular_buffer import CircularBuffer
from .components import (
    Position, Velocity, Rotation, Renderable, Projectile, ProjectileTag,
    WandHolder, ManaBar
)
from .content import validate_wand
from .settings import Flag, INFINITE_LIFETIME
from .stats import merge_stats, merge_stats_mut, resolve_stats
from .systems import normalize_angle, rotate_vector
from .wand import (
    Card, CardId, CardRef, CastState, ProjectileBlueprint, BlueprintId,
    ProjectileDescriptor, ProjectileKind, Wand, WandId, WandState,
    ModifierEffect, MulticastEffect, ProjectileEffect, NormalKind,
    UnknownCardError, UnknownWandError, UnknownBlueprintError,
    CastDepthExceeded, DeckTooLargeError,
)


logger = logging.getLogger(__name__)


def _debug(sim, message: str, *args) -> None:
    """Trace a cast step. Silent unless wand execution logs are enabled."""
    if Flag.DEBUG_WAND_EXECUTION_LOGS in sim.flags:
        logger.debug(message, *args)


# =============================================================================
# LOOKUPS
# =============================================================================

def get_card(sim, card_id: CardId) -> Card:
    card = sim.cards.get(card_id)
    if card is None:
        raise UnknownCardError(f'Cannot find card {card_id!r}')
    return card


def get_wand(sim, wand_id: WandId) -> Wand:
    wand = sim.wands.get(wand_id)
    if wand is None:
        raise UnknownWandError(f'Cannot find wand {wand_id!r}')
    return wand


def get_blueprint(sim, blueprint_id: BlueprintId) -> ProjectileBlueprint:
    blueprint = sim.blueprints.get(blueprint_id)
    if blueprint is None:
        raise UnknownBlueprintError(f'Cannot find projectile blueprint {blueprint_id!r}')
    return blueprint


# =============================================================================
# WAND STATE
# =============================================================================

def empty_cast_state() -> CastState:
    """A cast state with nothing attached to it (yet)."""
    return CastState()


def reset_wand_state(wand: Wand, wand_state: WandState) -> None:
    """Put every card back into the deck in declared order."""
    wand_state.deck.clear()
    wand_state.hand.clear()
    wand_state.discarded.clear()

    wand_state.recharge_delay = wand.recharge_delay

    wand_state.deck.push_many(
        CardRef(card_id, index) for index, card_id in enumerate(wand.cards)
    )


def empty_wand_state(sim, wand_id: WandId) -> WandState:
    """Fresh state for a newly attached wand: full deck, full mana."""
    wand = get_wand(sim, wand_id)
    capacity = sim.settings.max_deck_size

    if len(wand.cards) > capacity:
        raise DeckTooLargeError(
            f'Wand {wand.id!r} holds {len(wand.cards)} cards, '
            f'piles only fit {capacity}'
        )

    wand_state = WandState(
        deck=CircularBuffer(capacity),
        hand=CircularBuffer(capacity),
        discarded=CircularBuffer(capacity),
        mana=wand.max_mana,
    )
    reset_wand_state(wand, wand_state)
    return wand_state


def spawn_wand(sim, wand_id: WandId, holder_id: Optional[int] = None) -> int:
    """
    Attach a wand to an entity (a new one if none is given) and schedule
    its first cast.
    """
    wand = get_wand(sim, wand_id)
    validate_wand(wand, sim.cards, sim.blueprints)
    wand_state = empty_wand_state(sim, wand_id)

    if holder_id is None:
        holder_id = sim.world.create_entity()

    sim.world.add_component(holder_id, WandHolder(wand_id=wand_id, state=wand_state))
    sim.world.add_component(holder_id, ManaBar())

    schedule_wand_cast(sim, wand.cast_delay, holder_id)
    return holder_id


# =============================================================================
# INTERPRETER
# =============================================================================

def draw(wand_state: WandState, cast_state: CastState) -> Optional[CardRef]:
    """
    Move the next card from the deck into the hand.

    An empty deck wraps: the discard pile is put back in original deck
    order and the cast is flagged for a forced recharge, so ending a wand
    on a draw card cannot skip the recharge delay. Returns None only when
    deck and discard pile are both empty.
    """
    card_ref = wand_state.deck.try_pop_first()

    if card_ref is None:
        if wand_state.discarded.used == 0:
            return None  # Nothing to wrap

        discarded = wand_state.discarded.to_array()
        wand_state.discarded.clear()

        discarded.sort(key=lambda ref: ref.index)
        wand_state.deck.push_many(discarded)

        cast_state.force_recharge = True

        return draw(wand_state, cast_state)

    wand_state.hand.push(card_ref)
    return card_ref


def draw_and_update_cast_state(sim, cast_state: CastState,
                               wand_state: WandState, wand: Wand,
                               depth: int = 0) -> None:
    """Draw one card and resolve it, recursing for whatever it draws next."""
    card_ref = draw(wand_state, cast_state)
    if card_ref is None:
        return  # Wand exhausted, this branch is done

    if depth > sim.settings.max_cast_depth:
        raise CastDepthExceeded(
            f'Wand {wand.id!r} went past {sim.settings.max_cast_depth} '
            f'nested draws in a single cast'
        )

    card = get_card(sim, card_ref.id)
    _debug(sim, 'Drew %s', card.name)

    if wand_state.mana < card.mana_cost:
        _debug(sim, 'Not enough mana to cast %s', card.name)
        draw_and_update_cast_state(sim, cast_state, wand_state, wand, depth + 1)
        return

    wand_state.mana -= card.mana_cost

    cast_state.cast_delay += card.cast_delay
    wand_state.recharge_delay += card.recharge_delay

    for effect in card.effects:
        if isinstance(effect, ModifierEffect):
            merge_stats_mut(cast_state.stats, cast_state.stats, effect.stats)
            draw_and_update_cast_state(sim, cast_state, wand_state, wand, depth + 1)

        elif isinstance(effect, MulticastEffect):
            for offset in effect.formation:
                saved = cast_state.transform
                cast_state.transform = saved.compose(offset)

                draw_and_update_cast_state(sim, cast_state, wand_state, wand, depth + 1)

                cast_state.transform = saved

        elif isinstance(effect, ProjectileEffect):
            transform = cast_state.transform
            continuation = _resolve_continuation(
                sim, cast_state, effect.kind, wand_state, wand, depth
            )
            cast_state.projectiles.append(ProjectileDescriptor(
                blueprint=effect.blueprint,
                position=transform.position,
                direction=transform.direction,
                continuation=continuation,
            ))


def _resolve_continuation(sim, cast_state: CastState, kind: ProjectileKind,
                          wand_state: WandState, wand: Wand,
                          depth: int) -> ProjectileKind:
    """Build the payload of a trigger/timer projectile from the same deck."""
    if isinstance(kind, NormalKind):
        return kind

    inner = empty_cast_state()
    draw_and_update_cast_state(sim, inner, wand_state, wand, depth + 1)

    # A wrap while building the payload still costs the outer cast a recharge
    if inner.force_recharge:
        cast_state.force_recharge = True

    return replace(kind, payload=inner)


def schedule_wand_cast(sim, delay: int, holder_id: int) -> None:
    sim.scheduler.schedule(sim.tick + delay, shoot_wand(holder_id))


def cast_wand(sim, holder_id: int) -> CastState:
    """
    Run one full cast for the wand held by `holder_id`.

    Spawns the resulting projectiles and schedules the next cast. Raises
    WandConfigError subclasses for broken content or runaway recursion.
    """
    holder = sim.world.get_component(holder_id, WandHolder)
    if holder is None:
        raise KeyError(f'Entity {holder_id} holds no wand')

    wand = get_wand(sim, holder.wand_id)
    wand_state = holder.state

    cast_state = empty_cast_state()
    cast_state.cast_delay = wand.cast_delay

    try:
        draw_and_update_cast_state(sim, cast_state, wand_state, wand)
    except RecursionError as error:
        # max_cast_depth set higher than the interpreter stack allows
        raise CastDepthExceeded(
            f'Wand {wand.id!r} ran out of stack before reaching '
            f'{sim.settings.max_cast_depth} nested draws'
        ) from error

    wand_state.hand.push_contents_into(wand_state.discarded)
    wand_state.hand.clear()

    execute_cast_state(sim, wand, cast_state, holder_id)

    _debug(sim, 'Remaining mana %s', wand_state.mana)

    if wand_state.deck.used == 0 or cast_state.force_recharge:
        _debug(sim, 'Recharge!!!')
        # At least one tick, else whichever accumulated delay is bigger
        schedule_wand_cast(
            sim,
            max(1, cast_state.cast_delay, wand_state.recharge_delay),
            holder_id,
        )
        reset_wand_state(wand, wand_state)
    else:
        schedule_wand_cast(sim, cast_state.cast_delay, holder_id)

    return cast_state


# =============================================================================
# PROJECTILE SPAWNING
# =============================================================================

def execute_cast_state(sim, wand: Wand, cast_state: CastState,
                       holder_id: int) -> List[int]:
    """Spawn the top-level projectiles of a finished cast. Returns their ids."""
    world = sim.world
    holder_pos = world.get_component(holder_id, Position) or Position()
    holder_rot = world.get_component(holder_id, Rotation)
    holder_angle = holder_rot.angle if holder_rot else 0.0

    spawned = []

    for descriptor in cast_state.projectiles:
        blueprint = get_blueprint(sim, descriptor.blueprint)
        stats = resolve_stats(merge_stats(cast_state.stats, blueprint.stats))

        offset_x, offset_y = rotate_vector(descriptor.position, holder_angle)

        spread = max(0.0, wand.spread + stats.spread)
        direction = normalize_angle(
            holder_angle + descriptor.direction + sim.rng.uniform(-spread, spread)
        )

        projectile_id = world.create_entity(
            Position(holder_pos.x + offset_x, holder_pos.y + offset_y),
            Velocity(math.cos(direction) * stats.speed,
                     math.sin(direction) * stats.speed),
            Rotation(direction),
            Renderable(char=blueprint.char, color=blueprint.color, layer=8),
            Projectile(
                damage=stats.damage,
                bounces=int(stats.bounces),
                owner_id=holder_id,
                blueprint=blueprint.id,
                continuation=descriptor.continuation,
            ),
            ProjectileTag(),
        )

        # Randomized so infinite wisps are not trivial to build
        low, high = stats.lifetime
        lifetime = math.floor(sim.rng.uniform(low, high))

        if lifetime == INFINITE_LIFETIME:
            _debug(sim, 'Infinite wisp!')
        else:
            sim.scheduler.schedule(sim.tick + lifetime, despawn_entity(projectile_id))

        spawned.append(projectile_id)

    return spawned


# =============================================================================
# PER-TICK SYSTEMS
# =============================================================================

def update_wand_timers(sim) -> None:
    """Regenerate mana on every held wand."""
    for _, holder in sim.world.query(WandHolder):
        wand = get_wand(sim, holder.wand_id)
        holder.state.mana = min(holder.state.mana + wand.mana_recharge, wand.max_mana)


def update_mana_bars(sim) -> None:
    """Mirror each holder's mana into its HUD bar."""
    for _, holder, bar in sim.world.query(WandHolder, ManaBar):
        wand = get_wand(sim, holder.wand_id)
        if wand.max_mana <= 0:
            bar.fill = 0
            continue
        bar.fill = math.floor(255 * holder.state.mana / wand.max_mana)
