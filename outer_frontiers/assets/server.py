"""AssetServer - loads model files from the assets directory into asset storages."""

from __future__ import annotations

import re
from pathlib import Path

from outer_frontiers import log
from outer_frontiers.core.assets import Handle
from outer_frontiers.loaders.glb_loader import GLBSceneData, build_scene, load_glb_file
from outer_frontiers.mesh import MeshAssets
from outer_frontiers.scene.scene import Scene, SceneAssets

_SCENE_LABEL = re.compile(r"^Scene(\d+)$")


class AssetLoadError(RuntimeError):
    """Asset file is missing, unreadable or has unexpected content."""

    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(f"cannot load {path!r}: {reason}")


def split_label(path: str) -> tuple[str, str]:
    """Split ``models/ship.glb#Scene0`` into file path and label ('' if absent)."""
    file_path, _, label = path.partition("#")
    return file_path, label


class AssetServer:
    """
    Loads ``<file>.glb#Scene<N>`` paths relative to the assets root.

    Every file is parsed once. Scenes and their meshes go into the
    SceneAssets / MeshAssets storages owned by the server, which the
    AssetsPlugin registers as world resources.

    Usage:
        server = AssetServer("assets")
        handle = server.load("models/praetor.glb#Scene0")
        scene = server.scenes.get(handle)
    """

    def __init__(self, root: str | Path = "assets"):
        self.root = Path(root)
        self.scenes = SceneAssets()
        self.meshes = MeshAssets()
        self._files: dict[str, GLBSceneData] = {}
        self._handles: dict[str, Handle[Scene]] = {}

    def load(self, path: str) -> Handle[Scene]:
        """Load a scene by asset path. Loading the same path twice returns the same handle."""
        handle = self._handles.get(path)
        if handle is not None:
            return handle

        file_path, label = split_label(path)
        if not file_path.lower().endswith(".glb"):
            raise AssetLoadError(path, "only .glb files are supported")

        match = _SCENE_LABEL.match(label or "Scene0")
        if match is None:
            raise AssetLoadError(path, f"unsupported label {label!r}, expected Scene<N>")

        scene_data = self._load_file(file_path)
        try:
            scene = build_scene(scene_data, int(match.group(1)), self.meshes, file_path)
        except (ValueError, KeyError, IndexError) as e:
            raise AssetLoadError(path, str(e)) from e

        handle = self.scenes.add(scene, path)
        self._handles[path] = handle
        log.info(f"AssetServer: loaded {path} ({len(scene.world)} nodes)")
        return handle

    def _load_file(self, file_path: str) -> GLBSceneData:
        scene_data = self._files.get(file_path)
        if scene_data is not None:
            return scene_data
        full_path = self.root / file_path
        try:
            scene_data = load_glb_file(full_path)
        except (OSError, ValueError, KeyError, IndexError) as e:
            raise AssetLoadError(str(full_path), str(e)) from e
        self._files[file_path] = scene_data
        return scene_data

    def handle_of(self, path: str) -> Handle[Scene] | None:
        return self._handles.get(path)
