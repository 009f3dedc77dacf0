"""
core/app.py - frame-stepped application shell.

Owns the ECS world, the game state machine and the per-frame schedule.
Hosts (a renderer, a test) drive it by calling ``update(dt)``:

    app = App()
    app.add_plugin(AssetsPlugin(server, Models))
    app.add_plugin(WeaponPlugin())
    while running:
        app.update(clock.tick() / 1000.0)

One frame is (the very first one also fires on_enter of the initial state):
    1. pending state transition (on_exit hooks of the old state, then
       on_enter hooks of the new one);
    2. Time is advanced by dt;
    3. stages in order: Update -> SceneSpawner -> PostUpdate -> Physics;
    4. change trackers are cleared.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Protocol

from outer_frontiers import log
from outer_frontiers.core.ecs import World
from outer_frontiers.core.event import Event

System = Callable[[World], None]


class GameStates(Enum):
    ASSET_LOADING = "asset_loading"
    NEXT = "next"


class Stage(Enum):
    UPDATE = "Update"
    SCENE_SPAWNER = "SceneSpawner"
    POST_UPDATE = "PostUpdate"
    PHYSICS = "Physics"


@dataclass
class Time:
    """Frame clock resource."""
    delta: float = 0.0
    elapsed: float = 0.0

    def delta_seconds(self) -> float:
        return self.delta

    def advance(self, dt: float):
        if not math.isfinite(dt) or dt < 0.0:
            raise ValueError(f"Time: frame step must be finite and non-negative, got {dt}")
        self.delta = dt
        self.elapsed += dt


@dataclass
class State:
    """Current game state resource; ``next`` is applied at the start of the next frame."""
    current: GameStates
    next: GameStates | None = None

    def set(self, state: GameStates):
        self.next = state


class Plugin(Protocol):
    def build(self, app: "App") -> None:
        ...


class App:
    def __init__(self, initial_state: GameStates = GameStates.ASSET_LOADING):
        self.world = World()
        self.world.insert_resource(Time())
        self.world.insert_resource(State(initial_state))

        self._systems: dict[Stage, list[tuple[System, GameStates | None]]] = {
            stage: [] for stage in Stage
        }
        self._on_enter: dict[GameStates, Event[World]] = {s: Event() for s in GameStates}
        self._on_exit: dict[GameStates, Event[World]] = {s: Event() for s in GameStates}
        self._started = False
        self.frame = 0

    # -- Building --

    def add_plugin(self, plugin: Plugin) -> "App":
        plugin.build(self)
        return self

    def add_system(self, stage: Stage, system: System, run_in_state: GameStates | None = None) -> "App":
        """Append a system to a stage, optionally gated on the current game state."""
        self._systems[stage].append((system, run_in_state))
        return self

    def on_enter(self, state: GameStates) -> Event[World]:
        return self._on_enter[state]

    def on_exit(self, state: GameStates) -> Event[World]:
        return self._on_exit[state]

    # -- Running --

    @property
    def state(self) -> GameStates:
        return self.world.resource(State).current

    def set_state(self, state: GameStates):
        self.world.resource(State).set(state)

    def update(self, dt: float):
        """Advance the simulation by one frame of dt seconds."""
        state = self.world.resource(State)
        if not self._started:
            self._started = True
            self._on_enter[state.current].emit(self.world)

        self._apply_transition(state)
        self.world.resource(Time).advance(dt)

        for stage in Stage:
            for system, run_in_state in self._systems[stage]:
                if run_in_state is None or run_in_state == state.current:
                    system(self.world)

        self.world.clear_trackers()
        self.frame += 1

    def _apply_transition(self, state: State):
        if state.next is None or state.next == state.current:
            state.next = None
            return
        old, new = state.current, state.next
        state.next = None
        log.info(f"App: state {old.name} -> {new.name} at frame {self.frame}")
        self._on_exit[old].emit(self.world)
        state.current = new
        self._on_enter[new].emit(self.world)
