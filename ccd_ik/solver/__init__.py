"""
求解层 (Solver Layer)
CCD 迭代、旋转轴投影与角度约束，以及每帧调用的求解调度
"""

from .config import IKConfig
from .ccd import (
    ccd_solve,
    end_effector_distance,
    rotate_toward_target,
    project_onto_axis,
    clamp_to_limit
)
from .ik_solver import IKSolver

__all__ = [
    'IKConfig',
    'ccd_solve',
    'end_effector_distance',
    'rotate_toward_target',
    'project_onto_axis',
    'clamp_to_limit',
    'IKSolver'
]
