"""
Collision shapes.

- ConvexHullShape - convex hull of a point cloud (scipy.spatial.ConvexHull / Qhull)
- CompoundShape - several sub-shapes, each with a local offset and rotation
- CapsuleShape - Y-aligned capsule used by projectiles
- Collider - component that attaches a shape to an entity
"""

from __future__ import annotations

import numpy as np
from scipy.spatial import ConvexHull, QhullError

from outer_frontiers.geombase import qrot, qinv
from outer_frontiers.mesh import Mesh


class DegenerateHullError(ValueError):
    """Point set cannot bound a volume (fewer than 4 non-coplanar points)."""

    def __init__(self, point_count: int, reason: str = ""):
        self.point_count = point_count
        message = f"cannot build convex hull from {point_count} points"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class ConvexHullShape:
    """Convex hull of a point set.

    Only the hull vertices are kept. ``triangles`` index into ``points`` and
    ``equations`` hold the outward facet planes (normal, offset) so that
    ``equations[:, :3] @ p + equations[:, 3] <= 0`` for interior points.
    """

    def __init__(self, points):
        pts = np.asarray(points, dtype=np.float64).reshape(-1, 3)
        if len(pts) < 4:
            raise DegenerateHullError(len(pts), "at least 4 points are required")
        try:
            hull = ConvexHull(pts)
        except QhullError as e:
            raise DegenerateHullError(len(pts), str(e).strip().splitlines()[0]) from e

        remap = np.full(len(pts), -1, dtype=np.int64)
        remap[hull.vertices] = np.arange(len(hull.vertices))

        self.points = pts[hull.vertices]
        self.triangles = remap[hull.simplices].astype(np.uint32)
        self.equations = hull.equations.copy()
        self.volume = float(hull.volume)

    def contains_point(self, point, eps: float = 1e-9) -> bool:
        p = np.asarray(point, dtype=np.float64)
        return bool(np.all(self.equations[:, :3] @ p + self.equations[:, 3] <= eps))

    def local_aabb(self) -> tuple[np.ndarray, np.ndarray]:
        return self.points.min(axis=0), self.points.max(axis=0)

    def to_mesh(self) -> Mesh:
        """Triangle mesh of the hull with outward (counter-clockwise) winding, for debug drawing."""
        vertices = self.points.astype(np.float32)
        triangles = self.triangles.copy()
        center = np.mean(vertices, axis=0)

        for i in range(triangles.shape[0]):
            v0 = vertices[triangles[i, 0]]
            v1 = vertices[triangles[i, 1]]
            v2 = vertices[triangles[i, 2]]
            normal = np.cross(v1 - v0, v2 - v0)
            if np.dot(normal, center - v0) > 0:
                triangles[i, [1, 2]] = triangles[i, [2, 1]]

        return Mesh.from_positions(vertices, triangles)

    def __repr__(self):
        return f"ConvexHullShape(vertices={len(self.points)}, faces={len(self.triangles)})"


class CapsuleShape:
    """Capsule along the local Y axis: segment [-half_height, half_height] swept by radius."""

    def __init__(self, half_height: float, radius: float):
        if radius <= 0.0 or half_height < 0.0:
            raise ValueError(f"invalid capsule: half_height={half_height}, radius={radius}")
        self.half_height = float(half_height)
        self.radius = float(radius)

    def contains_point(self, point, eps: float = 1e-9) -> bool:
        p = np.asarray(point, dtype=np.float64)
        y = np.clip(p[1], -self.half_height, self.half_height)
        return bool(np.linalg.norm(p - np.array([0.0, y, 0.0])) <= self.radius + eps)

    def local_aabb(self) -> tuple[np.ndarray, np.ndarray]:
        r, h = self.radius, self.half_height
        return np.array([-r, -h - r, -r]), np.array([r, h + r, r])

    def __repr__(self):
        return f"CapsuleShape(half_height={self.half_height}, radius={self.radius})"


class CompoundShape:
    """Collection of (offset, rotation xyzw, shape) entries in the owner's local space."""

    def __init__(self, shapes):
        self.shapes = [
            (np.asarray(offset, dtype=np.float64), np.asarray(rotation, dtype=np.float64), shape)
            for offset, rotation, shape in shapes
        ]

    def __len__(self) -> int:
        return len(self.shapes)

    def __iter__(self):
        return iter(self.shapes)

    def contains_point(self, point, eps: float = 1e-9) -> bool:
        p = np.asarray(point, dtype=np.float64)
        for offset, rotation, shape in self.shapes:
            if shape.contains_point(qrot(qinv(rotation), p - offset), eps):
                return True
        return False

    def local_aabb(self) -> tuple[np.ndarray, np.ndarray]:
        corners = []
        for offset, rotation, shape in self.shapes:
            lo, hi = shape.local_aabb()
            for x in (lo[0], hi[0]):
                for y in (lo[1], hi[1]):
                    for z in (lo[2], hi[2]):
                        corners.append(qrot(rotation, np.array([x, y, z])) + offset)
        corners = np.array(corners)
        return corners.min(axis=0), corners.max(axis=0)

    def __repr__(self):
        return f"CompoundShape({len(self.shapes)} shapes)"


class Collider:
    """Collision shape component, expressed in the owning entity's local space."""

    def __init__(self, shape):
        self.shape = shape

    @staticmethod
    def convex_hull(points) -> "Collider":
        return Collider(ConvexHullShape(points))

    @staticmethod
    def capsule_y(half_height: float, radius: float) -> "Collider":
        return Collider(CapsuleShape(half_height, radius))

    @staticmethod
    def compound(shapes) -> "Collider":
        return Collider(CompoundShape(shapes))

    def contains_point(self, point) -> bool:
        return self.shape.contains_point(point)

    def __repr__(self):
        return f"Collider({self.shape!r})"
