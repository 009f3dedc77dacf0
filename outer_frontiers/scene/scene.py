"""Scene assets: loaded node hierarchies kept in their own World."""

from __future__ import annotations

from outer_frontiers.core.assets import Assets
from outer_frontiers.core.ecs import Parent, World
from outer_frontiers.geombase import GeneralPose3
from outer_frontiers.scene.components import Mesh3d, Name


class Scene:
    """A loaded scene graph.

    Every node is an entity of ``self.world`` carrying a ``Name``, a local
    ``GeneralPose3`` and optionally a ``Mesh3d``. glTF nodes that reference
    a mesh become a transform-only node with one mesh-bearing child per
    primitive, so named nodes never carry a mesh themselves.
    """

    def __init__(self, world: World | None = None):
        self.world = world if world is not None else World()

    def add_node(
        self,
        name: str,
        pose: GeneralPose3 | None = None,
        parent: int | None = None,
        mesh: Mesh3d | None = None,
    ) -> int:
        components = [Name(name), pose if pose is not None else GeneralPose3.identity()]
        if mesh is not None:
            components.append(mesh)
        eid = self.world.spawn(*components)
        if parent is not None:
            self.world.set_parent(eid, parent)
        return eid

    def roots(self) -> list[int]:
        return [eid for eid in self.world.entities() if not self.world.has(eid, Parent)]

    def find(self, name: str) -> int | None:
        for eid, node_name in self.world.query(Name):
            if node_name == name:
                return eid
        return None

    def names(self) -> list[str]:
        return sorted(str(name) for _, name in self.world.query(Name))

    def __repr__(self):
        return f"Scene(nodes={len(self.world)})"


class SceneAssets(Assets[Scene]):
    """Loaded scenes addressed by Handle."""
