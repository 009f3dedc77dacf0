"""Scene instantiation: copies scene assets into the game world.

An entity gets the contents of a scene by carrying ``SceneRoot(handle)``.
The ``scene_spawner`` system (stage SceneSpawner) copies the scene's
nodes under that entity once, marks it with ``SceneInstance`` and then
runs its one-shot ``SceneSetup`` callback, if any.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Callable

from outer_frontiers import log
from outer_frontiers.core.ecs import Children, Parent, World
from outer_frontiers.geombase import GeneralPose3
from outer_frontiers.scene.components import SceneRoot
from outer_frontiers.scene.scene import Scene, SceneAssets

SetupCallback = Callable[[World, list[int]], None]


@dataclass
class SceneInstance:
    """Marks a SceneRoot entity whose scene has been copied in."""
    entities: list[int] = field(default_factory=list)


class SceneSetup:
    """One-shot hook run with the freshly spawned entities of a scene instance."""

    def __init__(self, callback: SetupCallback):
        self.callback = callback


def instantiate(world: World, scene: Scene, root: int) -> list[int]:
    """Copy every node of scene into world, parenting scene roots under root."""
    source = scene.world
    mapping: dict[int, int] = {}
    for src in source.entities():
        components = [
            _copy_component(c) for c in source.components_of(src)
            if not isinstance(c, (Parent, Children))
        ]
        mapping[src] = world.spawn(*components)

    for src, dst in mapping.items():
        parent = source.parent_of(src)
        world.set_parent(dst, mapping[parent] if parent is not None else root)

    return list(mapping.values())


def _copy_component(component):
    if isinstance(component, GeneralPose3):
        return component.copy()
    return copy.deepcopy(component)


def scene_spawner(world: World):
    scenes = world.resource(SceneAssets)
    pending = [
        (eid, root) for eid, root in world.query(SceneRoot)
        if not world.has(eid, SceneInstance)
    ]
    for eid, root in pending:
        scene = scenes.get(root.handle)
        if scene is None:
            log.debug(f"scene_spawner: {root.handle} is not loaded yet, entity {eid} waits")
            continue

        spawned = instantiate(world, scene, eid)
        world.insert(eid, SceneInstance(spawned))
        log.debug(f"scene_spawner: {root.handle} instantiated into entity {eid} ({len(spawned)} nodes)")

        setup = world.remove(eid, SceneSetup)
        if setup is not None:
            setup.callback(world, spawned)
