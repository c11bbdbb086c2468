"""
Game Actions
=============
Small immutable records handed to the tick scheduler.

An Action doubles as an event key: tasks can wait on on_despawn(eid) and
are released when that entity goes away.
"""

from dataclasses import dataclass


SHOOT_WAND = 'shoot_wand'
DESPAWN_ENTITY = 'despawn_entity'
ON_DESPAWN = 'on_despawn'
DEBUG_LOG = 'debug_log'


@dataclass(frozen=True)
class Action:
    kind: str
    entity_id: int = -1
    message: str = ''


def shoot_wand(entity_id: int) -> Action:
    """Cast the wand held by an entity."""
    return Action(SHOOT_WAND, entity_id)


def despawn_entity(entity_id: int) -> Action:
    return Action(DESPAWN_ENTITY, entity_id)


def on_despawn(entity_id: int) -> Action:
    """Event fired right before an entity is despawned."""
    return Action(ON_DESPAWN, entity_id)


def debug_log(message: str = 'Debug log!') -> Action:
    return Action(DEBUG_LOG, message=message)
