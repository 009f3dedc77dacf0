"""
Collider module: collision shapes built from model geometry.

Contains:
- ConvexHullShape, CapsuleShape, CompoundShape and the Collider component
- Hull node classification (``*_hull``, ``*_hull_<n>``)
- ModelColliders cache with the synthesis and attachment systems
"""

from .shapes import (
    Collider,
    ConvexHullShape,
    CapsuleShape,
    CompoundShape,
    DegenerateHullError,
)
from .hull_locator import NodeKind, is_hull_name, node_kind, classify_nodes, locate_hulls
from .extract import extract_mesh_vertices, extract_world_points
from .model_colliders import (
    ModelColliders,
    build_scene_collider,
    extract_model_colliders,
    extract_model_colliders_system,
    set_model_collider,
)

__all__ = [
    "Collider",
    "ConvexHullShape",
    "CapsuleShape",
    "CompoundShape",
    "DegenerateHullError",
    "NodeKind",
    "is_hull_name",
    "node_kind",
    "classify_nodes",
    "locate_hulls",
    "extract_mesh_vertices",
    "extract_world_points",
    "ModelColliders",
    "build_scene_collider",
    "extract_model_colliders",
    "extract_model_colliders_system",
    "set_model_collider",
]
