"""
Base geometry (Geometric Base).

- GeneralPose3 - pose with translation, rotation quaternion (xyzw) and scale
- transform_points - vectorized affine transform of point arrays
- quaternion helpers (qmul, qrot, qinv, ...)
"""

from .general_pose3 import GeneralPose3, transform_points
from .quat import qmul, qrot, qinv, qmatrix, qfrom_axis_angle, qfrom_rotation_arc

__all__ = [
    'GeneralPose3',
    'transform_points',
    'qmul',
    'qrot',
    'qinv',
    'qmatrix',
    'qfrom_axis_angle',
    'qfrom_rotation_arc',
]
