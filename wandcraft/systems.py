"""
ECS Systems
============
Functions that operate on entities with matching components.
Each system queries the World for entities with required components
and updates them.
"""

from typing import List, Tuple
import math

from .ecs import World
from .components import (
    Position, Velocity, Rotation, AngularVelocity, Renderable,
    Projectile, WandHolder
)
from .engine import GameRenderer


# =============================================================================
# PHYSICS SYSTEMS
# =============================================================================

def movement_system(world: World, dt: float = 1.0):
    """Integrate positions from velocities."""
    for entity_id, pos, vel in world.query(Position, Velocity):
        pos.x += vel.x * dt
        pos.y += vel.y * dt


def rotation_system(world: World):
    """Spin entities with an angular velocity."""
    for entity_id, rot, spin in world.query(Rotation, AngularVelocity):
        rot.angle = normalize_angle(rot.angle + spin.value)


def projectile_boundary_system(world: World, width: int, height: int) -> List[int]:
    """
    Bounce projectiles off the arena walls.

    Each bounce spends one of the projectile's bounces. Returns the ids of
    projectiles that left the arena with none left; the caller despawns them.
    """
    expired = []

    for entity_id, pos, vel, proj in world.query(Position, Velocity, Projectile):
        hit_x = pos.x < 0 or pos.x > width - 1
        hit_y = pos.y < 0 or pos.y > height - 1
        if not (hit_x or hit_y):
            continue

        if proj.bounces <= 0:
            expired.append(entity_id)
            continue

        proj.bounces -= 1
        if hit_x:
            vel.x = -vel.x
            pos.x = min(max(pos.x, 0.0), width - 1.0)
        if hit_y:
            vel.y = -vel.y
            pos.y = min(max(pos.y, 0.0), height - 1.0)

        rot = world.get_component(entity_id, Rotation)
        if rot:
            rot.angle = math.atan2(vel.y, vel.x)

    return expired


# =============================================================================
# RENDERING SYSTEMS
# =============================================================================

def render_system(world: World, renderer: GameRenderer):
    """Draw every visible entity, lowest layer first."""
    render_list = []

    for entity_id, pos, rend in world.query(Position, Renderable):
        if rend.visible:
            render_list.append((rend.layer, entity_id, pos, rend))

    render_list.sort(key=lambda x: (x[0], x[1]))

    for _, entity_id, pos, rend in render_list:
        x, y = int(round(pos.x)), int(round(pos.y))
        if 0 <= x < renderer.width and 0 <= y < renderer.game_height:
            renderer.put(x, y, rend.char, rend.color)

        # Aim marker one cell ahead of wand holders
        rot = world.get_component(entity_id, Rotation)
        if rot and world.has_component(entity_id, WandHolder):
            ax = x + int(round(math.cos(rot.angle)))
            ay = y + int(round(math.sin(rot.angle)))
            if 0 <= ax < renderer.width and 0 <= ay < renderer.game_height:
                renderer.put(ax, ay, aim_char(rot.angle), rend.color)


def aim_char(angle: float) -> str:
    """Pick a line character matching an angle."""
    octant = int(round(normalize_angle(angle) / (math.pi / 4))) % 4
    return ['-', '\\', '|', '/'][octant]


# =============================================================================
# GEOMETRY UTILITIES
# =============================================================================

def normalize_angle(angle: float) -> float:
    """Wrap an angle into (-pi, pi]."""
    angle = math.fmod(angle, 2 * math.pi)
    if angle <= -math.pi:
        angle += 2 * math.pi
    elif angle > math.pi:
        angle -= 2 * math.pi
    return angle


def rotate_vector(vector: Tuple[float, float], angle: float) -> Tuple[float, float]:
    """Rotate a 2D vector counter-clockwise by `angle` radians."""
    x, y = vector
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    return (x * cos_a - y * sin_a, x * sin_a + y * cos_a)
