"""
CCD 逆运动学求解器

单分支运动链 + 循环坐标下降 (Cyclic Coordinate Descent)，
每次调用把末端执行器推向目标点，支持旋转轴约束和角度限位。
"""

from .model import (
    Chain,
    Joint,
    JointLimit,
    JointType,
    MalformedChainError,
    RobotJoint,
    RobotLink
)
from .solver import IKConfig, IKSolver, ccd_solve

__all__ = [
    'Chain',
    'Joint',
    'JointLimit',
    'JointType',
    'MalformedChainError',
    'RobotJoint',
    'RobotLink',
    'IKConfig',
    'IKSolver',
    'ccd_solve'
]

__version__ = '0.1.0'
