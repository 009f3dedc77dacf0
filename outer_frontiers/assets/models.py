"""Asset collections: named handles loaded together during the loading state."""

from __future__ import annotations

from dataclasses import dataclass, field, fields

from outer_frontiers.assets.server import AssetServer
from outer_frontiers.core.assets import Handle


def asset(path: str, default=None):
    """Declare a collection field loaded from the given asset path."""
    return field(default=default, metadata={"asset": path})


def asset_paths(collection_type: type) -> dict[str, str]:
    """Field name -> asset path of a collection dataclass."""
    return {f.name: f.metadata["asset"] for f in fields(collection_type) if "asset" in f.metadata}


def load_collection(collection_type: type, server: AssetServer):
    """Load every declared path of collection_type and return the filled collection."""
    handles = {name: server.load(path) for name, path in asset_paths(collection_type).items()}
    return collection_type(**handles)


@dataclass
class Models:
    zenith_station: Handle = asset("models/zenith_station.glb#Scene0")
    praetor: Handle = asset("models/praetor.glb#Scene0")
    infiltrator: Handle = asset("models/infiltrator.glb#Scene0")
    dragoon: Handle = asset("models/dragoon.glb#Scene0")
