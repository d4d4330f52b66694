"""
IK 链：从机器人描述构建的单分支关节序列（根 -> 末端执行器），并缓存各关节的全局变换
"""
import logging
import numpy as np
from typing import List, Optional

from .description import RobotJoint, RobotLink
from .joint import Joint, JointType


logger = logging.getLogger(__name__)

ROOT_JOINT_NAME = '_root'


class MalformedChainError(ValueError):
    """机器人描述无法构成合法的单分支 IK 链"""


def compose_global_transform(joints: List[Joint], index: int) -> np.ndarray:
    """
    不使用缓存，沿父级下标逐级组合局部变换，重新计算 joints[index] 的全局变换

    :param joints: 按根 -> 末端顺序排列的关节列表
    :param index: 目标关节下标
    :return: 4x4 全局变换矩阵
    """
    transform = np.identity(4, dtype=np.float64)
    current: Optional[int] = index
    while current is not None:
        joint = joints[current]
        transform = joint.get_local_matrix() @ transform
        current = joint.parent
    return transform


def _joint_from_description(robot_joint: RobotJoint) -> Joint:
    """复制描述关节的局部位姿、类型、轴与约束，构造 IK 关节"""
    joint_type = JointType.from_description(robot_joint.joint_type)
    # 只有旋转关节的约束有意义
    limit = robot_joint.limits if joint_type is JointType.REVOLUTE else None
    try:
        return Joint(
            name=robot_joint.name,
            offset=robot_joint.position.copy(),
            quaternion=robot_joint.quaternion.copy(),
            joint_type=joint_type,
            axis=robot_joint.axis,
            limit=limit,
            source=robot_joint
        )
    except ValueError as e:
        raise MalformedChainError(f"Joint '{robot_joint.name}': {e}") from e


class Chain:
    """
    单分支运动链。

    关节列表在构建时一次性生成并缓存，只有显式调用 rebuild() 才会重新生成。
    全局变换同样是缓存值：修改任一关节的 quaternion 后，
    需要调用 update_global_transform() 刷新，否则读到的是旧值。
    """

    def __init__(self, description: RobotLink):
        """
        :param description: 机器人描述的根连杆
        """
        self.description = description
        self._joints: List[Joint] = []
        self.rebuild()

    @classmethod
    def build(cls, description: RobotLink) -> 'Chain':
        """从机器人描述构建 IK 链"""
        return cls(description)

    def rebuild(self):
        """
        丢弃现有关节，重新遍历描述生成关节列表。

        链首为一个虚拟根关节（位于原点、无描述、默认 +Y 轴、无约束），
        随后沿连杆逐个复制关节，直到某个关节的子连杆下不再有关节，该关节即末端执行器。
        """
        joints: List[Joint] = [Joint(ROOT_JOINT_NAME, np.zeros(3), joint_type=JointType.ROOT)]
        visited = set()

        link: Optional[RobotLink] = self.description
        while link is not None:
            if id(link) in visited:
                raise MalformedChainError(f"Link '{link.name}' appears twice in the description")
            visited.add(id(link))

            if len(link.joints) > 1:
                names = ', '.join(joint.name for joint in link.joints)
                raise MalformedChainError(f"Link '{link.name}' branches into several joints: {names}")
            if not link.joints:
                break

            robot_joint = link.joints[0]
            joints.append(_joint_from_description(robot_joint))
            link = robot_joint.child

        if len(joints) == 1:
            raise MalformedChainError(f"Description '{self.description.name}' contains no joints")

        for i, joint in enumerate(joints):
            joint.index = i
            joint.parent = i - 1 if i > 0 else None

        self._joints = joints
        self.update_global_transform()
        logger.debug("Built chain with %d joints, end effector '%s'", len(joints), joints[-1].name)

    @property
    def joints(self) -> List[Joint]:
        """根 -> 末端执行器顺序的关节列表（包含虚拟根关节）"""
        return self._joints

    @property
    def end_effector(self) -> Joint:
        return self._joints[-1]

    def __len__(self):
        return len(self._joints)

    def update_global_transform(self, joint: Optional[Joint] = None):
        """
        刷新 joint 及其之后所有关节的全局变换缓存；joint 为 None 时刷新整条链

        :param joint: 起始关节
        """
        start = 0 if joint is None else joint.index
        for current in self._joints[start:]:
            local_transform = current.get_local_matrix()
            if current.parent is None:
                current.global_transform = local_transform
            else:
                # global = parent_global @ local
                current.global_transform = self._joints[current.parent].global_transform @ local_transform

    def world_position(self, joint: Joint) -> np.ndarray:
        """关节原点在世界坐标系中的位置"""
        return joint.global_transform[:3, 3].copy()

    def to_local(self, joint: Joint, world_point: np.ndarray) -> np.ndarray:
        """
        把世界坐标系中的点变换到关节的局部坐标系

        :param joint: 关节
        :param world_point: 世界坐标 (Vec3)
        :return: 局部坐标 (Vec3)
        """
        R_world = joint.global_transform[:3, :3]
        p_world = joint.global_transform[:3, 3]
        # 刚体变换的逆：R^T (p - t)
        return R_world.T @ (np.asarray(world_point, dtype=np.float64) - p_world)

    def write_back(self):
        """把每个关节当前的姿态写回对应的描述关节（根关节没有描述，跳过）"""
        for joint in self._joints:
            if joint.source is not None:
                joint.source.quaternion = joint.quaternion.copy()
