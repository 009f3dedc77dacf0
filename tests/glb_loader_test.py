"""Tests for GLB parsing and scene building."""

import struct

import numpy as np
import pytest

from outer_frontiers.geombase import GeneralPose3
from outer_frontiers.loaders import build_scene, load_glb_file, parse_glb
from outer_frontiers.mesh import Mesh, MeshAssets, VertexFormat
from outer_frontiers.scene import Mesh3d, Name


def triangle_glb(build_glb, nodes, byte_stride=0):
    """GLB with one triangle mesh; positions optionally padded to byte_stride."""
    positions = np.array([[0, 0, 0], [1, 0, 0], [0, 1, 0]], dtype=np.float32)
    if byte_stride:
        padding = np.zeros((3, (byte_stride - 12) // 4), dtype=np.float32)
        data = np.hstack([positions, padding]).tobytes()
    else:
        data = positions.tobytes()
    view = {"buffer": 0, "byteLength": len(data)}
    if byte_stride:
        view["byteStride"] = byte_stride
    gltf = {
        "asset": {"version": "2.0"},
        "scenes": [{"nodes": [0]}],
        "nodes": nodes,
        "meshes": [{"name": "Tri", "primitives": [{"attributes": {"POSITION": 0}}]}],
        "accessors": [{"bufferView": 0, "componentType": 5126, "count": 3, "type": "VEC3"}],
        "bufferViews": [view],
        "buffers": [{"byteLength": len(data)}],
    }
    return build_glb(gltf, data)


class TestParse:
    def test_ship(self, ship_glb_bytes):
        data = parse_glb(ship_glb_bytes)
        assert [n.name for n in data.nodes] == ["Ship", "body", "body_hull", "barrel.main"]
        assert data.scenes == [[0]]
        assert data.nodes[0].children == [1, 2, 3]
        np.testing.assert_array_almost_equal(data.nodes[3].translation, [0, 0, -2])

        (body,) = data.meshes[0]
        assert body.name == "BodyMesh.0"
        assert body.vertices.shape == (8, 3)
        assert len(body.indices) == 36
        assert data.meshes[1][0].indices is None

    def test_strided_positions(self, build_glb):
        data = parse_glb(triangle_glb(build_glb, [{"name": "tri", "mesh": 0}], byte_stride=20))
        np.testing.assert_array_almost_equal(data.meshes[0][0].vertices,
                                             [[0, 0, 0], [1, 0, 0], [0, 1, 0]])

    def test_matrix_node_is_decomposed(self, build_glb):
        matrix = [2, 0, 0, 0,
                  0, 2, 0, 0,
                  0, 0, 2, 0,
                  1, 2, 3, 1]
        data = parse_glb(triangle_glb(build_glb, [{"name": "tri", "matrix": matrix}]))
        node = data.nodes[0]
        np.testing.assert_array_almost_equal(node.translation, [1, 2, 3])
        np.testing.assert_array_almost_equal(node.scale, [2, 2, 2])
        np.testing.assert_array_almost_equal(node.rotation, [0, 0, 0, 1])

    def test_bad_magic(self, ship_glb_bytes):
        with pytest.raises(ValueError, match="magic"):
            parse_glb(b"glTX" + ship_glb_bytes[4:])

    def test_unsupported_version(self, ship_glb_bytes):
        data = ship_glb_bytes[:4] + struct.pack("<I", 1) + ship_glb_bytes[8:]
        with pytest.raises(ValueError, match="version"):
            parse_glb(data)

    def test_too_small(self):
        with pytest.raises(ValueError):
            parse_glb(b"glTF")

    def test_load_file(self, tmp_path, ship_glb_bytes):
        path = tmp_path / "ship.glb"
        path.write_bytes(ship_glb_bytes)
        assert len(load_glb_file(path).nodes) == 4


class TestBuildScene:
    def test_mesh_primitives_become_child_entities(self, ship_glb_bytes):
        meshes = MeshAssets()
        scene = build_scene(parse_glb(ship_glb_bytes), 0, meshes)
        world = scene.world

        assert scene.names() == ["BodyMesh.0", "HullMesh.0", "Ship", "barrel.main", "body", "body_hull"]
        hull = scene.find("body_hull")
        assert not world.has(hull, Mesh3d)
        (child,) = world.children_of(hull)
        assert world.get(child, Name) == "HullMesh.0"
        mesh = meshes.get(world.get(child, Mesh3d).handle)
        positions = mesh.attribute(Mesh.ATTRIBUTE_POSITION)
        assert positions.format is VertexFormat.FLOAT32X3
        assert positions.data.shape == (8, 3)

    def test_indices_are_not_expanded(self, ship_glb_bytes):
        meshes = MeshAssets()
        scene = build_scene(parse_glb(ship_glb_bytes), 0, meshes)
        (child,) = scene.world.children_of(scene.find("body"))
        mesh = meshes.get(scene.world.get(child, Mesh3d).handle)
        assert len(mesh.attribute(Mesh.ATTRIBUTE_POSITION)) == 8
        assert len(mesh.indices) == 36

    def test_node_transforms(self, ship_glb_bytes):
        scene = build_scene(parse_glb(ship_glb_bytes), 0, MeshAssets())
        pose = scene.world.get(scene.find("barrel.main"), GeneralPose3)
        np.testing.assert_array_almost_equal(pose.lin, [0, 0, -2])
        assert scene.roots() == [scene.find("Ship")]

    def test_shared_mesh_is_added_once(self, build_glb):
        nodes = [
            {"name": "root", "children": [1, 2]},
            {"name": "a", "mesh": 0},
            {"name": "b", "mesh": 0},
        ]
        meshes = MeshAssets()
        scene = build_scene(parse_glb(triangle_glb(build_glb, nodes)), 0, meshes)

        assert len(meshes) == 1
        (a,) = scene.world.children_of(scene.find("a"))
        (b,) = scene.world.children_of(scene.find("b"))
        assert scene.world.get(a, Mesh3d) == scene.world.get(b, Mesh3d)

    def test_missing_scene(self, ship_glb_bytes):
        with pytest.raises(ValueError, match="Scene3"):
            build_scene(parse_glb(ship_glb_bytes), 3, MeshAssets())
