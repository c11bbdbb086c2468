"""
Component Definitions
======================
All components are plain dataclasses with no behavior.
"""

from dataclasses import dataclass, field
from typing import Optional

from .wand import NormalKind, ProjectileKind, WandId, WandState


# =============================================================================
# PHYSICS COMPONENTS
# =============================================================================

@dataclass
class Position:
    """World position with sub-cell precision."""
    x: float = 0.0
    y: float = 0.0


@dataclass
class Velocity:
    """Movement velocity in cells per tick."""
    x: float = 0.0
    y: float = 0.0


@dataclass
class Rotation:
    """Facing angle in radians. 0 points along +x."""
    angle: float = 0.0


@dataclass
class AngularVelocity:
    """Radians added to Rotation every tick."""
    value: float = 0.0


# =============================================================================
# RENDERING COMPONENTS
# =============================================================================

@dataclass
class Renderable:
    """Visual representation of an entity."""
    char: str = '?'
    color: int = 7  # ANSI 256 color
    layer: int = 0  # Higher layers render on top
    visible: bool = True


@dataclass
class ManaBar:
    """HUD fill level of a wand holder's mana, 0-255."""
    fill: int = 255


# =============================================================================
# WAND COMPONENTS
# =============================================================================

@dataclass
class WandHolder:
    """An entity that casts a wand whenever the scheduler says so."""
    wand_id: WandId
    state: WandState


@dataclass
class Projectile:
    """Flight data of a spawned spell projectile."""
    damage: float = 0
    bounces: int = 0
    owner_id: int = -1
    blueprint: Optional[str] = None
    # Trigger/timer projectiles carry their pre-resolved sub-cast here
    continuation: ProjectileKind = field(default_factory=NormalKind)


# =============================================================================
# TAG COMPONENTS (empty, used for queries)
# =============================================================================

@dataclass
class ProjectileTag:
    """Marks a projectile entity."""
    pass


@dataclass
class TurretTag:
    """Marks a sandbox turret that spins while casting."""
    pass
