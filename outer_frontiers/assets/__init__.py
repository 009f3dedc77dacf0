"""
Assets: model collection, asset server and the loading state.

- AssetServer - loads ``*.glb#Scene<N>`` paths into SceneAssets / MeshAssets
- Models - the ship and station models of the game
- LoadingState / AssetsPlugin - load on ASSET_LOADING, synthesize colliders on exit
"""

from .server import AssetLoadError, AssetServer, split_label
from .models import Models, asset, asset_paths, load_collection
from .plugin import AssetsPlugin, LoadingState

__all__ = [
    "AssetLoadError",
    "AssetServer",
    "split_label",
    "Models",
    "asset",
    "asset_paths",
    "load_collection",
    "AssetsPlugin",
    "LoadingState",
]
