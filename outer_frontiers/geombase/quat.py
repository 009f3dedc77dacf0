"""Quaternion helpers. Quaternions are stored as numpy arrays in xyzw order."""

import math
import numpy


def qmul(q1: numpy.ndarray, q2: numpy.ndarray) -> numpy.ndarray:
    """Multiply two quaternions."""
    x1, y1, z1, w1 = q1
    x2, y2, z2, w2 = q2
    return numpy.array([
        w1*x2 + x1*w2 + y1*z2 - z1*y2,
        w1*y2 - x1*z2 + y1*w2 + z1*x2,
        w1*z2 + x1*y2 - y1*x2 + z1*w2,
        w1*w2 - x1*x2 - y1*y2 - z1*z2
    ])


def qinv(q: numpy.ndarray) -> numpy.ndarray:
    """Inverse of a unit quaternion."""
    return numpy.array([-q[0], -q[1], -q[2], q[3]])


def qrot(q: numpy.ndarray, v: numpy.ndarray) -> numpy.ndarray:
    """Rotate vector v by unit quaternion q."""
    u = numpy.asarray(q[:3], dtype=numpy.float64)
    w = float(q[3])
    v = numpy.asarray(v, dtype=numpy.float64)
    t = 2.0 * numpy.cross(u, v)
    return v + w * t + numpy.cross(u, t)


def qmatrix(q: numpy.ndarray) -> numpy.ndarray:
    """3x3 rotation matrix of a unit quaternion."""
    x, y, z, w = q
    return numpy.array([
        [1 - 2*(y**2 + z**2), 2*(x*y - z*w), 2*(x*z + y*w)],
        [2*(x*y + z*w), 1 - 2*(x**2 + z**2), 2*(y*z - x*w)],
        [2*(x*z - y*w), 2*(y*z + x*w), 1 - 2*(x**2 + y**2)]
    ])


def qfrom_matrix(rot_mat: numpy.ndarray) -> numpy.ndarray:
    """Quaternion from an orthonormal 3x3 rotation matrix."""
    trace = numpy.trace(rot_mat)
    if trace > 0:
        s = 0.5 / math.sqrt(trace + 1.0)
        qw = 0.25 / s
        qx = (rot_mat[2, 1] - rot_mat[1, 2]) * s
        qy = (rot_mat[0, 2] - rot_mat[2, 0]) * s
        qz = (rot_mat[1, 0] - rot_mat[0, 1]) * s
    elif rot_mat[0, 0] > rot_mat[1, 1] and rot_mat[0, 0] > rot_mat[2, 2]:
        s = 2.0 * math.sqrt(1.0 + rot_mat[0, 0] - rot_mat[1, 1] - rot_mat[2, 2])
        qw = (rot_mat[2, 1] - rot_mat[1, 2]) / s
        qx = 0.25 * s
        qy = (rot_mat[0, 1] + rot_mat[1, 0]) / s
        qz = (rot_mat[0, 2] + rot_mat[2, 0]) / s
    elif rot_mat[1, 1] > rot_mat[2, 2]:
        s = 2.0 * math.sqrt(1.0 + rot_mat[1, 1] - rot_mat[0, 0] - rot_mat[2, 2])
        qw = (rot_mat[0, 2] - rot_mat[2, 0]) / s
        qx = (rot_mat[0, 1] + rot_mat[1, 0]) / s
        qy = 0.25 * s
        qz = (rot_mat[1, 2] + rot_mat[2, 1]) / s
    else:
        s = 2.0 * math.sqrt(1.0 + rot_mat[2, 2] - rot_mat[0, 0] - rot_mat[1, 1])
        qw = (rot_mat[1, 0] - rot_mat[0, 1]) / s
        qx = (rot_mat[0, 2] + rot_mat[2, 0]) / s
        qy = (rot_mat[1, 2] + rot_mat[2, 1]) / s
        qz = 0.25 * s
    return numpy.array([qx, qy, qz, qw])


def qfrom_axis_angle(axis: numpy.ndarray, angle: float) -> numpy.ndarray:
    axis = numpy.asarray(axis, dtype=numpy.float64)
    axis = axis / numpy.linalg.norm(axis)
    s = math.sin(angle / 2)
    return numpy.array([axis[0] * s, axis[1] * s, axis[2] * s, math.cos(angle / 2)])


def qfrom_rotation_arc(src: numpy.ndarray, dst: numpy.ndarray) -> numpy.ndarray:
    """Shortest-arc rotation that maps unit vector src onto unit vector dst."""
    src = numpy.asarray(src, dtype=numpy.float64)
    dst = numpy.asarray(dst, dtype=numpy.float64)
    dot = float(numpy.dot(src, dst))

    if dot < -1.0 + 1e-6:
        # Opposite vectors: rotate by pi around any axis orthogonal to src
        ortho = numpy.cross(numpy.array([1.0, 0.0, 0.0]), src)
        if numpy.linalg.norm(ortho) < 1e-6:
            ortho = numpy.cross(numpy.array([0.0, 1.0, 0.0]), src)
        ortho = ortho / numpy.linalg.norm(ortho)
        return numpy.array([ortho[0], ortho[1], ortho[2], 0.0])

    axis = numpy.cross(src, dst)
    q = numpy.array([axis[0], axis[1], axis[2], 1.0 + dot])
    return q / numpy.linalg.norm(q)
