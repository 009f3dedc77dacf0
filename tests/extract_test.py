import math

import numpy as np

from outer_frontiers.colliders import extract_mesh_vertices, extract_world_points
from outer_frontiers.geombase import GeneralPose3, transform_points
from outer_frontiers.mesh import Mesh, VertexAttributeValues, VertexFormat


def mesh_with_positions(fmt, data):
    mesh = Mesh()
    mesh.insert_attribute(Mesh.ATTRIBUTE_POSITION, VertexAttributeValues(fmt, data))
    return mesh


def test_flat_positions_are_grouped_into_triples():
    mesh = mesh_with_positions(VertexFormat.FLOAT32, [0, 1, 2, 3, 4, 5])
    vertices = extract_mesh_vertices(mesh)
    np.testing.assert_array_equal(vertices, [[0, 1, 2], [3, 4, 5]])
    assert vertices.dtype == np.float64


def test_flat_positions_drop_trailing_partial_triple():
    mesh = mesh_with_positions(VertexFormat.FLOAT32, [0, 1, 2, 3, 4, 5, 6])
    assert extract_mesh_vertices(mesh).shape == (2, 3)


def test_grouped_positions():
    data = [[1, 2, 3], [4, 5, 6], [7, 8, 9]]
    mesh = mesh_with_positions(VertexFormat.FLOAT32X3, data)
    np.testing.assert_array_equal(extract_mesh_vertices(mesh), data)


def test_other_encodings_are_unsupported():
    mesh = mesh_with_positions(VertexFormat.FLOAT32X2, [[0, 1], [2, 3]])
    assert extract_mesh_vertices(mesh) is None


def test_missing_positions():
    mesh = Mesh()
    mesh.insert_attribute(Mesh.ATTRIBUTE_NORMAL,
                          VertexAttributeValues(VertexFormat.FLOAT32X3, [[0, 0, 1]]))
    assert extract_mesh_vertices(mesh) is None
    assert extract_world_points(mesh, np.eye(4)) is None


def test_world_points_use_affine():
    mesh = Mesh.from_positions([[1, 0, 0], [0, 1, 0]])
    pose = GeneralPose3.translation(10, 0, 0) * GeneralPose3.rotateZ(math.pi / 2)
    points = extract_world_points(mesh, pose.as_matrix())
    np.testing.assert_array_almost_equal(points, [[10, 1, 0], [9, 0, 0]])


def test_transform_points_applies_scale():
    affine = GeneralPose3(lin=np.array([0.0, 0.0, 1.0]), scale=np.array([2.0, 3.0, 4.0])).as_matrix()
    points = transform_points(np.array([[1.0, 1.0, 1.0]]), affine)
    np.testing.assert_array_almost_equal(points, [[2, 3, 5]])
