"""
机器人描述（外部数据源）的内存表示

结构与 URDF 一致：连杆 (RobotLink) 下挂若干关节 (RobotJoint)，每个关节再连接一个子连杆。
IK 链只读取这里的数据来构建，求解完成后（可选）把关节姿态写回 quaternion 字段。
"""
import numpy as np
from typing import List, Optional, Tuple

from ..utils import IDENTITY_QUATERNION, normalize_quaternion


class RobotJoint:
    """
    描述中的一个关节
    """

    def __init__(self, name: str, joint_type: str, position=(0.0, 0.0, 0.0),
                 quaternion: Optional[np.ndarray] = None,
                 axis: Optional[np.ndarray] = None,
                 limits: Optional[Tuple[float, float]] = None):
        """
        :param name: 关节名称
        :param joint_type: 关节类型字符串（'revolute', 'fixed', 'continuous', 'prismatic' ...）
        :param position: 相对父连杆的位移 (Vec3)
        :param quaternion: 相对父连杆的旋转（四元数，格式为[w, x, y, z]），None 表示无旋转
        :param axis: 旋转轴（局部坐标系），None 表示未指定
        :param limits: 约束范围 [lower, upper]（弧度），None 表示无约束
        """
        self.name = name
        self.joint_type = joint_type
        self.position: np.ndarray = np.asarray(position, dtype=np.float64)
        if quaternion is None:
            self.quaternion = IDENTITY_QUATERNION.copy()
        else:
            self.quaternion = normalize_quaternion(quaternion)
        self.axis: Optional[np.ndarray] = None if axis is None else np.asarray(axis, dtype=np.float64)
        self.limits: Optional[Tuple[float, float]] = None if limits is None else tuple(limits)
        self.child: Optional['RobotLink'] = None

    def attach(self, link: 'RobotLink') -> 'RobotLink':
        """设置子连杆并返回它，便于链式构建"""
        self.child = link
        return link

    def __repr__(self):
        return f"<RobotJoint: {self.name} ({self.joint_type})>"


class RobotLink:
    """
    描述中的一个连杆，持有以它为父级的全部关节
    """

    def __init__(self, name: str):
        self.name = name
        self.joints: List[RobotJoint] = []

    def add_joint(self, joint: RobotJoint) -> RobotJoint:
        """添加子关节并返回它"""
        self.joints.append(joint)
        return joint

    def __repr__(self):
        return f"<RobotLink: {self.name}>"
