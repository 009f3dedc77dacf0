"""
Weapons: fixed-rate fire scheduling and projectiles.

- Weapon - component with the fire latch and cooldown
- schedule_fire - one scheduling step as a pure function
- Projectile - prototype resource that spawns projectile entities
- WeaponPlugin - registers the weapon systems in the App
"""

from .weapon import BARREL_PREFIX, FireState, Weapon, mount_weapons, schedule_fire
from .projectile import (
    Lifetime,
    Projectile,
    RigidBody,
    Sensor,
    SpawnRequest,
    lifetime,
    setup_projectile,
)
from .systems import WeaponPlugin, inherited_velocity, weapon_fire

__all__ = [
    "BARREL_PREFIX",
    "FireState",
    "Weapon",
    "mount_weapons",
    "schedule_fire",
    "Lifetime",
    "Projectile",
    "RigidBody",
    "Sensor",
    "SpawnRequest",
    "lifetime",
    "setup_projectile",
    "WeaponPlugin",
    "inherited_velocity",
    "weapon_fire",
]
