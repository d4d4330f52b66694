"""
测试用机器人描述
"""
import numpy as np

from ccd_ik.model import RobotJoint, RobotLink


def make_arm(link_lengths, joint_types=None, axes=None, limits=None, quaternions=None):
    """
    构建沿 +X 方向伸展的单分支机械臂描述，末端挂一个 fixed 类型的工具关节。

    第 i 个关节位于上一段连杆的末端，工具关节位于最后一段连杆的末端。

    :param link_lengths: 各段连杆长度
    :param joint_types: 各关节类型，默认全部为 'revolute'
    :param axes: 各关节旋转轴，默认全部为 +Y
    :param limits: 各关节约束，默认全部为 None
    :param quaternions: 各关节初始旋转，默认全部为 None
    :return: 根连杆
    """
    count = len(link_lengths)
    joint_types = joint_types or ['revolute'] * count
    axes = axes or [(0.0, 1.0, 0.0)] * count
    limits = limits or [None] * count
    quaternions = quaternions or [None] * count

    base = RobotLink('base_link')
    link = base
    position = np.zeros(3)
    for i in range(count):
        joint = link.add_joint(RobotJoint(
            name=f'joint{i + 1}',
            joint_type=joint_types[i],
            position=position,
            quaternion=quaternions[i],
            axis=axes[i],
            limits=limits[i]
        ))
        link = joint.attach(RobotLink(f'link{i + 1}'))
        position = np.array([link_lengths[i], 0.0, 0.0])

    link.add_joint(RobotJoint('tool', 'fixed', position=position))
    return base
