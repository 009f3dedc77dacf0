"""Model file loaders."""

from .glb_loader import GLBSceneData, build_scene, load_glb_file, parse_glb

__all__ = ["GLBSceneData", "build_scene", "load_glb_file", "parse_glb"]
