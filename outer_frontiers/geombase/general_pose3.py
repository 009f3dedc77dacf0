"""GeneralPose3 - 3D pose with scale, used as the local transform of scene nodes.

Composition formula:
    parent * child:
        new_lin = parent.lin + qrot(parent.ang, parent.scale * child.lin)
        new_ang = qmul(parent.ang, child.ang)
        new_scale = parent.scale * child.scale  # element-wise

Axis convention follows glTF: +Y is up, local -Z is forward.
"""

import numpy

from outer_frontiers.geombase.quat import qmul, qrot, qmatrix, qfrom_matrix, qfrom_axis_angle


class GeneralPose3:
    """A 3D Pose with scale, represented by rotation quaternion, translation vector, and scale."""

    __slots__ = ('ang', 'lin', 'scale', '_mat')

    def __init__(
        self,
        ang: numpy.ndarray = None,
        lin: numpy.ndarray = None,
        scale: numpy.ndarray = None
    ):
        if ang is None:
            ang = numpy.array([0.0, 0.0, 0.0, 1.0])
        if lin is None:
            lin = numpy.array([0.0, 0.0, 0.0])
        if scale is None:
            scale = numpy.array([1.0, 1.0, 1.0])
        self.ang = numpy.asarray(ang, dtype=numpy.float64)
        self.lin = numpy.asarray(lin, dtype=numpy.float64)
        self.scale = numpy.asarray(scale, dtype=numpy.float64)
        self._mat = None

    def copy(self) -> 'GeneralPose3':
        return GeneralPose3(
            ang=self.ang.copy(),
            lin=self.lin.copy(),
            scale=self.scale.copy()
        )

    @staticmethod
    def identity() -> 'GeneralPose3':
        return GeneralPose3()

    def rotation_matrix(self) -> numpy.ndarray:
        """3x3 rotation matrix of the orientation (scale not applied)."""
        return qmatrix(self.ang)

    def as_matrix(self) -> numpy.ndarray:
        """4x4 affine matrix with scale baked in.

        Returns TRS matrix: Translation * Rotation * Scale
        """
        if self._mat is None:
            mat = numpy.eye(4)
            mat[:3, :3] = self.rotation_matrix() @ numpy.diag(self.scale)
            mat[:3, 3] = self.lin
            self._mat = mat
        return self._mat

    def transform_point(self, point: numpy.ndarray) -> numpy.ndarray:
        """Transform a 3D point using the pose (with scale)."""
        return qrot(self.ang, self.scale * point) + self.lin

    def transform_vector(self, vector: numpy.ndarray) -> numpy.ndarray:
        """Transform a 3D vector using the pose (with scale, ignoring translation)."""
        return qrot(self.ang, self.scale * vector)

    def forward(self) -> numpy.ndarray:
        """Unit direction of local -Z in parent space. Scale is ignored."""
        return qrot(self.ang, numpy.array([0.0, 0.0, -1.0]))

    def __mul__(self, other: 'GeneralPose3') -> 'GeneralPose3':
        if not isinstance(other, GeneralPose3):
            raise TypeError("Can only multiply GeneralPose3 with GeneralPose3")
        q = qmul(self.ang, other.ang)
        t = self.lin + qrot(self.ang, self.scale * other.lin)
        s = self.scale * other.scale
        return GeneralPose3(ang=q, lin=t, scale=s)

    def __repr__(self):
        return f"GeneralPose3(ang={self.ang}, lin={self.lin}, scale={self.scale})"

    # --- Factory methods ---

    @staticmethod
    def rotation(axis: numpy.ndarray, angle: float) -> 'GeneralPose3':
        """Create a rotation pose around a given axis by a given angle."""
        return GeneralPose3(ang=qfrom_axis_angle(axis, angle))

    @staticmethod
    def rotateX(angle: float) -> 'GeneralPose3':
        return GeneralPose3.rotation(numpy.array([1.0, 0.0, 0.0]), angle)

    @staticmethod
    def rotateY(angle: float) -> 'GeneralPose3':
        return GeneralPose3.rotation(numpy.array([0.0, 1.0, 0.0]), angle)

    @staticmethod
    def rotateZ(angle: float) -> 'GeneralPose3':
        return GeneralPose3.rotation(numpy.array([0.0, 0.0, 1.0]), angle)

    @staticmethod
    def translation(x: float, y: float, z: float) -> 'GeneralPose3':
        return GeneralPose3(lin=numpy.array([x, y, z]))

    @staticmethod
    def scaling(sx: float, sy: float = None, sz: float = None) -> 'GeneralPose3':
        """Create a scale-only pose.

        If only sx is given, uniform scale is applied.
        """
        if sy is None:
            sy = sx
        if sz is None:
            sz = sx
        return GeneralPose3(scale=numpy.array([sx, sy, sz]))

    @staticmethod
    def from_matrix(matrix: numpy.ndarray) -> 'GeneralPose3':
        """Create GeneralPose3 from a 4x4 or 3x4 transformation matrix.

        Extracts translation, rotation (quaternion), and scale from the matrix.
        Shear is not representable and is lost.
        """
        matrix = numpy.asarray(matrix, dtype=numpy.float64)
        if matrix.shape == (3, 4):
            mat = numpy.eye(4)
            mat[:3, :] = matrix
            matrix = mat

        lin = matrix[:3, 3].copy()

        sx = numpy.linalg.norm(matrix[:3, 0])
        sy = numpy.linalg.norm(matrix[:3, 1])
        sz = numpy.linalg.norm(matrix[:3, 2])
        scale = numpy.array([sx, sy, sz])

        rot_mat = numpy.zeros((3, 3))
        rot_mat[:, 0] = matrix[:3, 0] / sx if sx > 1e-8 else matrix[:3, 0]
        rot_mat[:, 1] = matrix[:3, 1] / sy if sy > 1e-8 else matrix[:3, 1]
        rot_mat[:, 2] = matrix[:3, 2] / sz if sz > 1e-8 else matrix[:3, 2]

        # Mirrored bases keep a proper rotation and push the sign into scale
        if numpy.linalg.det(rot_mat) < 0:
            rot_mat[:, 0] = -rot_mat[:, 0]
            scale[0] = -scale[0]

        return GeneralPose3(ang=qfrom_matrix(rot_mat), lin=lin, scale=scale)

    def invalidate_cache(self):
        """Invalidate cached matrix. Call after modifying ang, lin, or scale in place."""
        self._mat = None

    def almost_equal(self, other: 'GeneralPose3', eps: float = 1e-9) -> bool:
        same_rotation = (numpy.allclose(self.ang, other.ang, atol=eps)
                         or numpy.allclose(self.ang, -other.ang, atol=eps))
        return (same_rotation
                and numpy.allclose(self.lin, other.lin, atol=eps)
                and numpy.allclose(self.scale, other.scale, atol=eps))


def transform_points(points: numpy.ndarray, affine: numpy.ndarray) -> numpy.ndarray:
    """Apply a 4x4 affine matrix to an (N, 3) array of points."""
    points = numpy.asarray(points, dtype=numpy.float64).reshape(-1, 3)
    return points @ affine[:3, :3].T + affine[:3, 3]
