"""
工具函数
"""

from .quaternion_utils import (
    IDENTITY_QUATERNION,
    normalize_quaternion,
    quaternion_to_rotation_matrix,
    quaternion_multiply,
    quaternion_conjugate,
    quaternion_from_axis_angle,
    quaternion_from_unit_vectors,
    rotate_vector
)

__all__ = [
    'IDENTITY_QUATERNION',
    'normalize_quaternion',
    'quaternion_to_rotation_matrix',
    'quaternion_multiply',
    'quaternion_conjugate',
    'quaternion_from_axis_angle',
    'quaternion_from_unit_vectors',
    'rotate_vector'
]
