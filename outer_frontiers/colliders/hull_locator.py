"""Classification of scene nodes into renderable geometry and collision hulls.

Content authors mark collision-only geometry by node name: a node named
``<anything>_hull`` or ``<anything>_hull_<n>`` is a hull. The hull node
itself holds the transform; its mesh lives on child entities.
"""

from __future__ import annotations

from enum import Enum

from outer_frontiers.core.ecs import World
from outer_frontiers.scene.components import Mesh3d, Name

HULL_SUFFIX = "_hull"
HULL_INFIX = "_hull_"


class NodeKind(Enum):
    RENDERABLE = "renderable"
    COLLISION_HULL = "collision_hull"


def is_hull_name(name: str) -> bool:
    return name.endswith(HULL_SUFFIX) or HULL_INFIX in name


def node_kind(world: World, eid: int) -> NodeKind:
    """Kind of a named node. Nodes carrying a mesh are always renderable, whatever their name."""
    name = world.get(eid, Name)
    if name is not None and not world.has(eid, Mesh3d) and is_hull_name(name):
        return NodeKind.COLLISION_HULL
    return NodeKind.RENDERABLE


def classify_nodes(world: World) -> dict[int, NodeKind]:
    """Tag every named node with its NodeKind component and return the tags."""
    kinds = {}
    for eid, _ in list(world.query(Name)):
        kind = node_kind(world, eid)
        world.insert(eid, kind)
        kinds[eid] = kind
    return kinds


def locate_hulls(world: World) -> list[int]:
    """Entities of world that are collision hulls, in entity order. Does not modify world."""
    return sorted(
        eid for eid, _ in world.query(Name)
        if node_kind(world, eid) is NodeKind.COLLISION_HULL
    )
