"""
Projectiles: prototype resource, spawn requests and lifetime expiry.

The Projectile prototype is created once on entering the game state and
holds everything shared by all projectiles (collider, speed, lifetime).
Weapons turn scheduled shots into ``SpawnRequest``s, and the prototype
turns each request into an entity.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from enum import Enum

import numpy as np

from outer_frontiers import log
from outer_frontiers.colliders.shapes import Collider
from outer_frontiers.core.app import Time
from outer_frontiers.core.ecs import World
from outer_frontiers.geombase import GeneralPose3, qfrom_rotation_arc
from outer_frontiers.scene.components import Name, Velocity
from outer_frontiers.settings import GameSettings, ProjectileSettings

AXIS_Y = np.array([0.0, 1.0, 0.0])


@dataclass
class Lifetime:
    """Seconds left before the entity is despawned."""
    seconds: float


class Sensor:
    """Collider reports intersections only, it produces no contact response."""

    def __repr__(self):
        return "Sensor"


class RigidBody(Enum):
    DYNAMIC = "dynamic"
    KINEMATIC_VELOCITY_BASED = "kinematic_velocity_based"


@dataclass
class SpawnRequest:
    """Where a projectile appears and how it moves. Derived per shot, never stored."""
    position: np.ndarray
    direction: np.ndarray
    velocity: np.ndarray


class Projectile:
    """Projectile prototype: a Y-aligned capsule flying at a fixed speed for a limited time."""

    def __init__(self, radius: float = 0.1, half_length_factor: float = 8.0,
                 speed: float = 100.0, lifetime: float = 10.0):
        self.collider = Collider.capsule_y(half_length_factor * radius, radius)
        self.speed = float(speed)
        self.lifetime = Lifetime(float(lifetime))

    @staticmethod
    def from_settings(settings: ProjectileSettings) -> "Projectile":
        return Projectile(
            radius=settings.radius,
            half_length_factor=settings.half_length_factor,
            speed=settings.speed,
            lifetime=settings.lifetime,
        )

    def request(self, position, direction, inherited_velocity, offset_time: float = 0.0) -> SpawnRequest:
        """Spawn request for a shot fired offset_time seconds ago.

        The projectile flies at ``speed`` along direction plus the shooter's
        velocity, and is placed where it would be after offset_time.
        """
        direction = np.asarray(direction, dtype=np.float64)
        velocity = direction * self.speed + np.asarray(inherited_velocity, dtype=np.float64)
        position = np.asarray(position, dtype=np.float64) + velocity * offset_time
        return SpawnRequest(position=position, direction=direction, velocity=velocity)

    def spawn(self, world: World, request: SpawnRequest) -> int:
        # Capsule collider is aligned with the Y axis
        pose = GeneralPose3(
            ang=qfrom_rotation_arc(AXIS_Y, request.direction),
            lin=request.position.copy(),
        )
        return world.spawn(
            pose,
            copy.deepcopy(self.collider),
            Velocity(linvel=request.velocity.copy()),
            Lifetime(self.lifetime.seconds),
            RigidBody.KINEMATIC_VELOCITY_BASED,
            Sensor(),
            Name("Projectile"),
        )


def setup_projectile(world: World):
    """Create the Projectile prototype resource from the game settings, if any."""
    settings = world.get_resource(GameSettings)
    projectile_settings = settings.projectile if settings is not None else ProjectileSettings()
    world.insert_resource(Projectile.from_settings(projectile_settings))
    log.debug(f"setup_projectile: speed={projectile_settings.speed}, lifetime={projectile_settings.lifetime}")


def lifetime(world: World):
    """Count down Lifetime components and despawn entities whose time ran out."""
    dt = world.resource(Time).delta_seconds()
    expired = []
    for entity, remaining in world.query(Lifetime):
        remaining.seconds -= dt
        if remaining.seconds <= 0.0:
            expired.append(entity)
    for entity in expired:
        world.despawn_recursive(entity)
