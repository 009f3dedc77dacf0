"""Scene graphs: node components, scene assets and instantiation."""

from outer_frontiers.scene.components import Name, Mesh3d, SceneRoot, Velocity, global_pose
from outer_frontiers.scene.scene import Scene, SceneAssets
from outer_frontiers.scene.spawner import SceneInstance, SceneSetup, instantiate, scene_spawner

__all__ = [
    "Name",
    "Mesh3d",
    "SceneRoot",
    "Velocity",
    "global_pose",
    "Scene",
    "SceneAssets",
    "SceneInstance",
    "SceneSetup",
    "instantiate",
    "scene_spawner",
]
