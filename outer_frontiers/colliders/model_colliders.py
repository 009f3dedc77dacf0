"""Colliders built from the hull nodes of loaded model scenes.

Physics shapes of the ship and station models are authored as extra
meshes inside the model files. A node named ``*_hull`` or ``*_hull_<n>``
is collision-only: its mesh children are turned into convex hulls, merged
into one compound collider per scene asset and removed from the scene so
they never render.

The collection is filled once, right after all scenes are loaded
(``extract_model_colliders``), and then used every time the corresponding
scene is spawned (``set_model_collider``).
"""

from __future__ import annotations

import copy

import numpy as np

from outer_frontiers import log
from outer_frontiers.core.assets import AssetId
from outer_frontiers.core.ecs import World
from outer_frontiers.colliders.extract import extract_world_points
from outer_frontiers.colliders.hull_locator import NodeKind, classify_nodes
from outer_frontiers.colliders.shapes import Collider, DegenerateHullError
from outer_frontiers.geombase import GeneralPose3
from outer_frontiers.mesh import MeshAssets
from outer_frontiers.scene.components import Mesh3d, Name, SceneRoot
from outer_frontiers.scene.scene import Scene, SceneAssets
from outer_frontiers.settings import ColliderSettings, GameSettings

ZERO_OFFSET = np.zeros(3)
IDENTITY_ROTATION = np.array([0.0, 0.0, 0.0, 1.0])


class ModelColliders:
    """Compound collider per scene asset. Each entry is written once and never evicted."""

    def __init__(self):
        self._colliders: dict[AssetId, Collider] = {}

    def insert(self, scene_id: AssetId, collider: Collider):
        if scene_id in self._colliders:
            raise ValueError(f"ModelColliders: collider for scene {scene_id} is already built")
        self._colliders[scene_id] = collider

    def get(self, scene_id: AssetId) -> Collider | None:
        return self._colliders.get(scene_id)

    def __contains__(self, scene_id: AssetId) -> bool:
        return scene_id in self._colliders

    def __len__(self) -> int:
        return len(self._colliders)


def hull_point_sets(scene: Scene, hulls: list[int], meshes: MeshAssets) -> list[np.ndarray]:
    """World point sets of every mesh-bearing direct child of the given hull nodes.

    Child meshes are transformed by the hull node's own local transform only;
    nested hulls would need transforms combined from the scene root.
    """
    world = scene.world
    point_sets = []
    for hull in hulls:
        pose = world.get(hull, GeneralPose3)
        children = world.children_of(hull)
        if pose is None or not children:
            continue
        affine = pose.as_matrix()

        for child in children:
            mesh_ref = world.get(child, Mesh3d)
            if mesh_ref is None:
                continue
            mesh = meshes.get(mesh_ref.handle)
            if mesh is None:
                raise KeyError(f"broken mesh handle {mesh_ref.handle} under hull {world.get(hull, Name)!r}")
            points = extract_world_points(mesh, affine)
            if points is None:
                log.debug(f"ModelColliders: {world.get(hull, Name)!r} child {child} has no usable positions, skipped")
                continue
            point_sets.append(points)
    return point_sets


def build_scene_collider(
    scene: Scene,
    hulls: list[int],
    meshes: MeshAssets,
    skip_degenerate_hulls: bool = False,
) -> Collider | None:
    """Compound collider of all hull meshes of a scene, or None if no convex shape was built."""
    shapes = []
    for points in hull_point_sets(scene, hulls, meshes):
        try:
            hull_collider = Collider.convex_hull(points)
        except DegenerateHullError as e:
            if not skip_degenerate_hulls:
                raise
            log.warn(e, "ModelColliders: degenerate hull skipped")
            continue
        shapes.append((ZERO_OFFSET, IDENTITY_ROTATION, hull_collider.shape))

    if not shapes:
        return None
    return Collider.compound(shapes)


def remove_hulls(world: World, hulls: list[int]):
    """Detach and despawn hull nodes with their descendants.

    The hull list is collected before any removal happens.
    """
    for entity in hulls:
        # Don't forget to clean parent-child relations
        world.remove_parent(entity)
        world.despawn_recursive(entity)


def extract_model_colliders(
    scenes: SceneAssets,
    meshes: MeshAssets,
    model_colliders: ModelColliders,
    settings: ColliderSettings | None = None,
):
    """Build colliders for every loaded scene and strip hull nodes from the scenes."""
    settings = settings or ColliderSettings()
    for scene_id, scene in scenes.items():
        kinds = classify_nodes(scene.world)
        hulls = sorted(eid for eid, kind in kinds.items() if kind is NodeKind.COLLISION_HULL)
        if not hulls:
            continue

        collider = build_scene_collider(scene, hulls, meshes, settings.skip_degenerate_hulls)
        if collider is not None:
            model_colliders.insert(scene_id, collider)
            log.info(f"ModelColliders: scene {scene_id} -> {len(collider.shape)} convex shapes from {len(hulls)} hulls")
        else:
            log.debug(f"ModelColliders: scene {scene_id} has {len(hulls)} hulls but no hull geometry")

        # TODO: release hull meshes from MeshAssets once no other scene references them
        remove_hulls(scene.world, hulls)


def extract_model_colliders_system(world: World):
    """On-exit hook of the asset loading state."""
    settings = world.get_resource(GameSettings)
    extract_model_colliders(
        world.resource(SceneAssets),
        world.resource(MeshAssets),
        world.resource(ModelColliders),
        settings.colliders if settings is not None else None,
    )


def set_model_collider(world: World):
    """Attach a copy of the model collider to scene instances spawned this frame."""
    colliders = world.resource(ModelColliders)
    for entity in world.changed(SceneRoot):
        scene = world.get(entity, SceneRoot)
        collider = colliders.get(scene.handle.id)
        if collider is not None:
            world.insert(entity, copy.deepcopy(collider))
