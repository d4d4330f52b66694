"""
CCD (Cyclic Coordinate Descent) 求解器实现

每轮迭代从末端执行器的父关节开始，逐个向根关节扫描：
把当前关节旋转到使 "关节->末端" 方向对准 "关节->目标" 方向，
再按关节类型做旋转轴投影和角度约束。
"""
import logging
import numpy as np
from typing import Callable, Optional

from ..model import Chain, Joint
from ..utils import (
    normalize_quaternion,
    quaternion_conjugate,
    quaternion_from_axis_angle,
    quaternion_from_unit_vectors,
    quaternion_multiply,
    rotate_vector
)
from .config import IKConfig


logger = logging.getLogger(__name__)

# 方向向量长度小于该值时无法确定方向，跳过该关节的对准步骤
_MIN_DIRECTION_LENGTH = 1e-12


def end_effector_distance(chain: Chain, target: np.ndarray) -> float:
    """
    末端执行器到目标的距离：把目标变换到末端执行器局部坐标系后取模长

    :param chain: IK 链
    :param target: 目标位置（世界坐标系）
    """
    return float(np.linalg.norm(chain.to_local(chain.end_effector, target)))


def rotate_toward_target(chain: Chain, joint: Joint, target: np.ndarray):
    """
    在关节局部坐标系中求 "关节->末端" 到 "关节->目标" 的最短弧旋转，并右乘到关节姿态上
    """
    effector_world_pos = chain.world_position(chain.end_effector)
    direction_to_effector = chain.to_local(joint, effector_world_pos)
    direction_to_target = chain.to_local(joint, target)

    effector_norm = np.linalg.norm(direction_to_effector)
    target_norm = np.linalg.norm(direction_to_target)
    if effector_norm < _MIN_DIRECTION_LENGTH or target_norm < _MIN_DIRECTION_LENGTH:
        return

    joint_to_target_q = quaternion_from_unit_vectors(
        direction_to_effector / effector_norm,
        direction_to_target / target_norm
    )
    joint.quaternion = normalize_quaternion(quaternion_multiply(joint.quaternion, joint_to_target_q))


def project_onto_axis(joint: Joint):
    """
    去掉姿态中与关节轴正交的旋转分量，只保留绕轴的转动。

    修正量 c 把 axis 映射到 q^-1 * axis，于是 (q * c) * axis = axis，
    即修正后的姿态保持旋转轴不动。
    """
    inverse_q = quaternion_conjugate(joint.quaternion)
    axis_inverse = rotate_vector(inverse_q, joint.axis)
    correction_q = quaternion_from_unit_vectors(joint.axis, axis_inverse)
    joint.quaternion = normalize_quaternion(quaternion_multiply(joint.quaternion, correction_q))


def clamp_to_limit(joint: Joint) -> bool:
    """
    把关节绕轴转角截断到 [lower, upper]；发生截断时以截断角重建姿态

    :return: 是否发生了截断
    """
    lower, upper = joint.limit
    angle = joint.rotation_angle()
    if angle < lower:
        clamped_angle = lower
    elif angle > upper:
        clamped_angle = upper
    else:
        return False

    joint.quaternion = quaternion_from_axis_angle(joint.axis, clamped_angle)
    return True


def ccd_solve(chain: Chain, target: np.ndarray, config: IKConfig,
              on_iteration: Optional[Callable[[int, float], None]] = None):
    """
    使用 CCD 原地修改链上各关节的姿态，使末端执行器逼近目标。

    距离不大于 tolerance 或完成 max_iterations 轮扫描后停止；未收敛不视为错误，保留当前最优姿态。

    :param chain: IK 链（会被原地修改）
    :param target: 目标位置（世界坐标系，只读）
    :param config: 求解参数
    :param on_iteration: 每轮扫描结束后的回调，参数为 (已完成的轮数, 当前距离)
    """
    target = np.asarray(target, dtype=np.float64)
    joints = chain.joints

    distance = end_effector_distance(chain, target)
    iteration = 1

    while distance > config.tolerance and iteration <= config.max_iterations:
        # 跳过末端执行器本身，从其父关节扫描到根关节
        for joint in reversed(joints[:-1]):
            if joint.is_fixed:
                continue

            rotate_toward_target(chain, joint, target)

            if joint.is_hinge or joint.is_root:
                project_onto_axis(joint)

            if joint.limit is not None:
                clamp_to_limit(joint)

            # 后续（更靠近根的）关节和距离计算依赖刷新后的全局变换
            chain.update_global_transform(joint)

        distance = end_effector_distance(chain, target)
        if on_iteration is not None:
            on_iteration(iteration, distance)
        iteration += 1

    if distance > config.tolerance:
        logger.debug("CCD stopped after %d iterations, distance %.6f > tolerance %.6f",
                     iteration - 1, distance, config.tolerance)
