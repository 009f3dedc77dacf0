"""
Weapon component and its fire scheduler.

A weapon fires at a fixed nominal rate for as long as someone keeps
calling ``Weapon.fire()`` once per frame. The latch is cleared by every
scheduling step, so input code has to re-arm it each frame.

``cooldown`` is the time left until the next shot is due. While the
weapon fires it can go negative: a frame step longer than the fire
interval leaves several shots owed, and all of them are emitted in that
same step. Each emitted shot carries an offset time (how long ago it
should have happened) so that its projectile can be advanced to where
it would be by now.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace

from outer_frontiers.core.ecs import World
from outer_frontiers.scene.components import Mesh3d, Name
from outer_frontiers.scene.spawner import SceneSetup

BARREL_PREFIX = "barrel."


@dataclass(frozen=True)
class FireState:
    """Snapshot of the scheduling state of one weapon."""
    is_firing: bool
    fire_timeout: float
    cooldown: float

    def __post_init__(self):
        if not math.isfinite(self.fire_timeout) or self.fire_timeout <= 0.0:
            raise ValueError(f"FireState: fire timeout must be a positive finite number, got {self.fire_timeout}")
        if not math.isfinite(self.cooldown):
            raise ValueError(f"FireState: cooldown must be finite, got {self.cooldown}")


def schedule_fire(state: FireState, elapsed: float) -> tuple[FireState, list[float]]:
    """Advance a weapon by elapsed seconds.

    Returns the new state and the offset times of the shots emitted in
    this step, in emission order (oldest first, so offsets decrease).
    """
    if not math.isfinite(elapsed) or elapsed < 0.0:
        raise ValueError(f"schedule_fire: elapsed must be finite and non-negative, got {elapsed}")

    if not state.is_firing:
        return replace(state, cooldown=max(state.cooldown, 0.0)), []

    cooldown = state.cooldown
    if cooldown > 0.0:
        cooldown -= elapsed

    offsets = []
    while cooldown <= 0.0:
        offsets.append(-cooldown)
        cooldown += state.fire_timeout

    return FireState(is_firing=False, fire_timeout=state.fire_timeout, cooldown=cooldown), offsets


class Weapon:
    """Fixed-rate weapon mounted on an entity; shoots along the entity's forward (-Z)."""

    def __init__(self, rate_of_fire: float = 20.0):
        if not math.isfinite(rate_of_fire) or rate_of_fire <= 0.0:
            raise ValueError(f"Weapon: rate of fire must be a positive finite number, got {rate_of_fire}")
        self.is_firing = False
        self._fire_timeout = 1.0 / rate_of_fire
        self.cooldown = 0.0

    @property
    def fire_timeout(self) -> float:
        """Delay between shots in seconds."""
        return self._fire_timeout

    @property
    def rate_of_fire(self) -> float:
        return 1.0 / self.fire_timeout

    def fire(self):
        """Request fire for the current frame."""
        self.is_firing = True

    def state(self) -> FireState:
        return FireState(self.is_firing, self.fire_timeout, self.cooldown)

    def step(self, elapsed: float) -> list[float]:
        """Run the scheduler on this weapon and return the offsets of emitted shots."""
        new_state, offsets = schedule_fire(self.state(), elapsed)
        self.is_firing = new_state.is_firing
        self.cooldown = new_state.cooldown
        return offsets

    def __repr__(self):
        return f"Weapon(rate_of_fire={self.rate_of_fire:g}, cooldown={self.cooldown:g}, firing={self.is_firing})"


def mount_weapons(rate_of_fire: float) -> SceneSetup:
    """Scene setup that puts a Weapon on every ``barrel.*`` node of the spawned scene.

    glTF mesh entities are skipped, only named transform nodes get a weapon.
    """
    def setup(world: World, entities: list[int]):
        for entity in entities:
            if world.has(entity, Mesh3d):
                continue
            name = world.get(entity, Name)
            if name is not None and name.startswith(BARREL_PREFIX):
                world.insert(entity, Weapon(rate_of_fire))

    return SceneSetup(setup)

