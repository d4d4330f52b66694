"""
模型层 (Model Layer)
机器人描述的内存表示、IK 关节记录以及单分支运动链

- RobotLink / RobotJoint: 外部机器人描述（连杆-关节树）
- Joint: IK 链中的关节记录，带类型、旋转轴与约束
- Chain: 由描述构建的根 -> 末端执行器关节序列，缓存全局变换
"""

from .description import RobotLink, RobotJoint
from .joint import (
    Joint,
    JointType,
    JointLimit,
    DEFAULT_AXIS,
    dominant_axis_name
)
from .chain import (
    Chain,
    MalformedChainError,
    compose_global_transform
)

__all__ = [
    'RobotLink',
    'RobotJoint',
    'Joint',
    'JointType',
    'JointLimit',
    'DEFAULT_AXIS',
    'dominant_axis_name',
    'Chain',
    'MalformedChainError',
    'compose_global_transform'
]
