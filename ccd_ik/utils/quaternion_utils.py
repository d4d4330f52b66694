"""
四元数工具函数
统一使用 [w, x, y, z] 格式
"""
import numpy as np
from typing import Union


ArrayLike = Union[np.ndarray, list, tuple]

IDENTITY_QUATERNION = np.array([1.0, 0.0, 0.0, 0.0], dtype=np.float64)

# 与 float64 机器精度一致，用于判断两个方向是否反向
_ANTIPARALLEL_EPSILON = np.finfo(np.float64).eps


def normalize_quaternion(quaternion: ArrayLike) -> np.ndarray:
    """
    归一化四元数

    :param quaternion: 四元数，格式为 [w, x, y, z]
    :return: 单位四元数（新数组）
    """
    quaternion = np.asarray(quaternion, dtype=np.float64)

    if quaternion.shape != (4,):
        raise ValueError(f"Quaternion must be a 4-element array, got shape {quaternion.shape}")

    norm = np.linalg.norm(quaternion)
    if not np.isfinite(norm) or norm < 1e-10:
        raise ValueError(f"Quaternion norm too small: {norm}, cannot normalize")
    return quaternion / norm


def quaternion_to_rotation_matrix(quaternion: ArrayLike) -> np.ndarray:
    """
    将四元数转换为旋转矩阵

    :param quaternion: 四元数，格式为 [w, x, y, z] 或 (w, x, y, z)
    :return: 3x3 旋转矩阵
    """
    w, x, y, z = normalize_quaternion(quaternion)

    R = np.array([
        [1 - 2 * (y * y + z * z),     2 * (x * y - w * z),     2 * (x * z + w * y)],
        [    2 * (x * y + w * z), 1 - 2 * (x * x + z * z),     2 * (y * z - w * x)],
        [    2 * (x * z - w * y),     2 * (y * z + w * x), 1 - 2 * (x * x + y * y)]
    ], dtype=np.float64)

    return R


def quaternion_multiply(q1: ArrayLike, q2: ArrayLike) -> np.ndarray:
    """
    四元数乘法 q1 * q2（先应用 q2，再应用 q1）

    :param q1: 左侧四元数 [w, x, y, z]
    :param q2: 右侧四元数 [w, x, y, z]
    :return: 乘积四元数 [w, x, y, z]
    """
    w1, x1, y1, z1 = q1
    w2, x2, y2, z2 = q2

    return np.array([
        w1*w2 - x1*x2 - y1*y2 - z1*z2,  # w
        w1*x2 + w2*x1 + y1*z2 - z1*y2,  # x
        w1*y2 + w2*y1 + z1*x2 - x1*z2,  # y
        w1*z2 + w2*z1 + x1*y2 - y1*x2   # z
    ], dtype=np.float64)


def quaternion_conjugate(quaternion: ArrayLike) -> np.ndarray:
    """共轭四元数；对单位四元数即为其逆"""
    w, x, y, z = quaternion
    return np.array([w, -x, -y, -z], dtype=np.float64)


def quaternion_from_axis_angle(axis: ArrayLike, angle: float) -> np.ndarray:
    """
    由旋转轴和角度构造四元数

    :param axis: 旋转轴（单位向量）
    :param angle: 旋转角度（弧度）
    :return: 单位四元数 [w, x, y, z]
    """
    axis = np.asarray(axis, dtype=np.float64)
    half_angle = angle / 2.0
    xyz = axis * np.sin(half_angle)
    return np.array([np.cos(half_angle), xyz[0], xyz[1], xyz[2]], dtype=np.float64)


def quaternion_from_unit_vectors(v_from: ArrayLike, v_to: ArrayLike) -> np.ndarray:
    """
    计算把单位向量 v_from 旋转到单位向量 v_to 的最短弧旋转。

    两向量反向时旋转轴不唯一，此时取一个与 v_from 垂直的轴旋转 180°。

    :param v_from: 起始方向（单位向量）
    :param v_to: 目标方向（单位向量）
    :return: 单位四元数 [w, x, y, z]
    """
    v_from = np.asarray(v_from, dtype=np.float64)
    v_to = np.asarray(v_to, dtype=np.float64)

    r = float(np.dot(v_from, v_to)) + 1.0

    if r < _ANTIPARALLEL_EPSILON:
        # 反向：挑选绝对值较大的分量构造垂直轴，避免得到零向量
        if abs(v_from[0]) > abs(v_from[2]):
            quaternion = np.array([0.0, -v_from[1], v_from[0], 0.0])
        else:
            quaternion = np.array([0.0, 0.0, -v_from[2], v_from[1]])
    else:
        xyz = np.cross(v_from, v_to)
        quaternion = np.array([r, xyz[0], xyz[1], xyz[2]])

    return normalize_quaternion(quaternion)


def rotate_vector(quaternion: ArrayLike, vector: ArrayLike) -> np.ndarray:
    """
    用四元数旋转三维向量: v' = q * v * q^-1

    :param quaternion: 单位四元数 [w, x, y, z]
    :param vector: 三维向量
    :return: 旋转后的三维向量
    """
    return quaternion_to_rotation_matrix(quaternion) @ np.asarray(vector, dtype=np.float64)
