"""Weapon systems and their registration in the App."""

from __future__ import annotations

import numpy as np

from outer_frontiers.core.app import App, GameStates, Stage, Time
from outer_frontiers.core.ecs import World
from outer_frontiers.scene.components import Velocity, global_pose
from outer_frontiers.weapon.projectile import Projectile, lifetime, setup_projectile
from outer_frontiers.weapon.weapon import Weapon


def inherited_velocity(world: World, entity: int) -> np.ndarray:
    """Linear velocity of the nearest entity carrying Velocity: the entity itself, then its ancestors.

    Zero when nothing on the chain moves.
    """
    velocity = world.get(entity, Velocity)
    if velocity is not None:
        return velocity.linvel
    for ancestor in world.ancestors(entity):
        velocity = world.get(ancestor, Velocity)
        if velocity is not None:
            return velocity.linvel
    return np.zeros(3)


def weapon_fire(world: World):
    """Run every weapon's scheduler for this frame and spawn the owed projectiles."""
    projectile = world.resource(Projectile)
    dt = world.resource(Time).delta_seconds()

    requests = []
    for entity, weapon in world.query(Weapon):
        offsets = weapon.step(dt)
        if not offsets:
            continue
        pose = global_pose(world, entity)
        direction = pose.forward()
        inherited = inherited_velocity(world, entity)
        for offset in offsets:
            requests.append(projectile.request(pose.lin, direction, inherited, offset))

    for request in requests:
        projectile.spawn(world, request)


class WeaponPlugin:
    def build(self, app: App):
        on_enter_next = app.on_enter(GameStates.NEXT)
        on_enter_next += setup_projectile
        app.add_system(Stage.UPDATE, weapon_fire, run_in_state=GameStates.NEXT)
        app.add_system(Stage.POST_UPDATE, lifetime)
