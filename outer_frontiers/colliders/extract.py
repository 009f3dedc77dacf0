"""Vertex extraction from meshes for collider building."""

from __future__ import annotations

import numpy as np

from outer_frontiers.geombase import transform_points
from outer_frontiers.mesh import Mesh, VertexFormat


def extract_mesh_vertices(mesh: Mesh) -> np.ndarray | None:
    """Mesh-local vertex positions as an (N, 3) array.

    Accepts a flat FLOAT32 stream (x, y, z triples back to back) or a
    grouped FLOAT32X3 stream. Returns None when the mesh has no positions
    or stores them in any other encoding.
    """
    positions = mesh.attribute(Mesh.ATTRIBUTE_POSITION)
    if positions is None:
        return None
    if positions.format is VertexFormat.FLOAT32:
        flat = positions.data
        # trailing values that do not form a whole triple are dropped
        usable = len(flat) - len(flat) % 3
        return flat[:usable].reshape(-1, 3).astype(np.float64)
    if positions.format is VertexFormat.FLOAT32X3:
        return positions.data.astype(np.float64)
    return None


def extract_world_points(mesh: Mesh, affine: np.ndarray) -> np.ndarray | None:
    """Mesh positions transformed by a 4x4 affine matrix, or None if unavailable."""
    vertices = extract_mesh_vertices(mesh)
    if vertices is None:
        return None
    return transform_points(vertices, affine)
