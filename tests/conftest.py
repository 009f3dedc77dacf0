"""Shared fixtures: GLB containers built in memory and on disk."""

import itertools
import json
import struct

import numpy as np
import pytest

from outer_frontiers.assets import Models, asset_paths


def cube_points(size=1.0, center=(0.0, 0.0, 0.0)) -> np.ndarray:
    corners = np.array(list(itertools.product([-0.5, 0.5], repeat=3)), dtype=np.float64)
    return corners * size + np.asarray(center, dtype=np.float64)


def make_glb(gltf: dict, bin_data: bytes = b"") -> bytes:
    json_bytes = json.dumps(gltf).encode("utf-8")
    json_bytes += b" " * ((4 - len(json_bytes) % 4) % 4)
    bin_data = bin_data + b"\x00" * ((4 - len(bin_data) % 4) % 4)

    body = struct.pack("<II", len(json_bytes), 0x4E4F534A) + json_bytes
    if bin_data:
        body += struct.pack("<II", len(bin_data), 0x004E4942) + bin_data
    return struct.pack("<4sII", b"glTF", 2, 12 + len(body)) + body


def ship_glb() -> bytes:
    """
    Ship
     |- body          (mesh "BodyMesh": unit cube, indexed)
     |- body_hull     (mesh "HullMesh": cube of size 1.1, not indexed)
     |- barrel.main   at (0, 0, -2)
    """
    body = cube_points(1.0).astype(np.float32).tobytes()
    indices = (np.arange(36) % 8).astype(np.uint16).tobytes()
    hull = cube_points(1.1).astype(np.float32).tobytes()
    bin_data = body + indices + hull

    gltf = {
        "asset": {"version": "2.0"},
        "scene": 0,
        "scenes": [{"nodes": [0]}],
        "nodes": [
            {"name": "Ship", "children": [1, 2, 3]},
            {"name": "body", "mesh": 0},
            {"name": "body_hull", "mesh": 1},
            {"name": "barrel.main", "translation": [0.0, 0.0, -2.0]},
        ],
        "meshes": [
            {"name": "BodyMesh", "primitives": [{"attributes": {"POSITION": 0}, "indices": 1}]},
            {"name": "HullMesh", "primitives": [{"attributes": {"POSITION": 2}}]},
        ],
        "accessors": [
            {"bufferView": 0, "componentType": 5126, "count": 8, "type": "VEC3"},
            {"bufferView": 1, "componentType": 5123, "count": 36, "type": "SCALAR"},
            {"bufferView": 2, "componentType": 5126, "count": 8, "type": "VEC3"},
        ],
        "bufferViews": [
            {"buffer": 0, "byteOffset": 0, "byteLength": len(body)},
            {"buffer": 0, "byteOffset": len(body), "byteLength": len(indices)},
            {"buffer": 0, "byteOffset": len(body) + len(indices), "byteLength": len(hull)},
        ],
        "buffers": [{"byteLength": len(bin_data)}],
    }
    return make_glb(gltf, bin_data)


@pytest.fixture
def ship_glb_bytes():
    return ship_glb()


@pytest.fixture
def project_dir(tmp_path):
    """Project directory with every model of the Models collection on disk."""
    data = ship_glb()
    for path in asset_paths(Models).values():
        file_path = tmp_path / "assets" / path.partition("#")[0]
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_bytes(data)
    return tmp_path


@pytest.fixture
def build_glb():
    return make_glb
