"""
IK 链中的关节记录
"""
import math
import numpy as np
from enum import Enum
from typing import NamedTuple, Optional

from ..utils import IDENTITY_QUATERNION, normalize_quaternion, quaternion_to_rotation_matrix
from .description import RobotJoint


# 描述中未指定旋转轴时使用的默认轴
DEFAULT_AXIS = np.array([0.0, 1.0, 0.0], dtype=np.float64)

AXIS_NAMES = ('x', 'y', 'z')

# 小于该值的轴分量视为 0
AXIS_EPSILON = 1e-6


class JointType(Enum):
    ROOT = 'root'
    REVOLUTE = 'revolute'
    FIXED = 'fixed'
    OTHER = 'other'

    @classmethod
    def from_description(cls, joint_type: str) -> 'JointType':
        """把描述中的类型字符串映射为关节分类；未知类型归为 OTHER"""
        if joint_type == 'revolute':
            return cls.REVOLUTE
        if joint_type == 'fixed':
            return cls.FIXED
        return cls.OTHER


class JointLimit(NamedTuple):
    lower: float
    upper: float


def dominant_axis_name(axis: np.ndarray) -> str:
    """
    返回轴向量第一个非零分量的名称 ('x' / 'y' / 'z')；全部为零时返回空字符串

    :param axis: 旋转轴（局部坐标系）
    """
    for name, component in zip(AXIS_NAMES, axis):
        if abs(component) > AXIS_EPSILON:
            return name
    return ''


class Joint:
    """
    IK 链中的一个关节：局部变换 + 类型 + 旋转轴/约束。

    关节之间不互相持有引用，只通过 parent（父关节在链中的下标）建立层级，
    全局变换由 Chain 负责计算和缓存。
    """

    def __init__(self, name: str, offset: np.ndarray, quaternion: Optional[np.ndarray] = None,
                 joint_type: JointType = JointType.OTHER,
                 axis: Optional[np.ndarray] = None,
                 limit: Optional[JointLimit] = None,
                 source: Optional[RobotJoint] = None):
        """
        :param name: 关节名称
        :param offset: 相对父级的静态位移 (Vec3)
        :param quaternion: 相对父级的旋转（四元数，[w, x, y, z]），None 表示无旋转
        :param joint_type: 关节分类
        :param axis: 旋转轴（局部坐标系，不能为零向量。程序自动归一化），None 表示默认 +Y 轴
        :param limit: 约束范围 (lower, upper)（弧度），None 表示无约束
        :param source: 构建该关节所用的描述关节；根关节为 None
        """
        self.name = name
        self.index: int = 0
        self.parent: Optional[int] = None
        self.local_offset: np.ndarray = np.asarray(offset, dtype=np.float64)
        if self.local_offset.shape != (3,):
            raise ValueError(f"Offset must be a 3-element vector, got shape {self.local_offset.shape}")
        if quaternion is None:
            self.quaternion = IDENTITY_QUATERNION.copy()
        else:
            self.quaternion = normalize_quaternion(quaternion)
        self.joint_type = joint_type
        self.source = source

        if axis is None:
            self.axis = DEFAULT_AXIS.copy()
        else:
            self.axis = np.asarray(axis, dtype=np.float64)
            if self.axis.shape != (3,):
                raise ValueError(f"Axis must be a 3-element vector, got shape {self.axis.shape}")
            axis_norm = np.linalg.norm(self.axis)
            if np.isfinite(axis_norm) and axis_norm > AXIS_EPSILON:
                self.axis = self.axis / axis_norm
            else:
                raise ValueError(f"Axis vector is not a unit vector and too small to be normalized: {self.axis}")
        self.axis_name = dominant_axis_name(self.axis)
        if not self.axis_name:
            raise ValueError(f"Axis vector has no dominant nonzero component: {self.axis}")

        if limit is not None:
            limit = JointLimit(float(limit[0]), float(limit[1]))
            if limit.lower > limit.upper:
                raise ValueError(f"Joint limit lower bound exceeds upper bound: {limit}")
        self.limit: Optional[JointLimit] = limit

        self.global_transform: np.ndarray = np.identity(4, dtype=np.float64)

    @property
    def is_root(self) -> bool:
        return self.joint_type is JointType.ROOT

    @property
    def is_hinge(self) -> bool:
        return self.joint_type is JointType.REVOLUTE

    @property
    def is_fixed(self) -> bool:
        return self.joint_type is JointType.FIXED

    def get_local_matrix(self) -> np.ndarray:
        """
        返回本地变换矩阵：先旋转，再平移（平移为local_offset, 旋转用self.quaternion）
        """
        local_transform = np.identity(4, dtype=np.float64)
        local_transform[:3, :3] = quaternion_to_rotation_matrix(self.quaternion)
        local_transform[:3, 3] = self.local_offset
        return local_transform

    def rotation_angle(self) -> float:
        """
        由当前四元数求绕关节轴的有符号转角（弧度）。

        对绕 axis 旋转 θ 的四元数，其虚部分量 = axis 分量 * sin(θ/2)，
        因此取主导分量相除后求反正弦。比值先截断到 [-1, 1] 以吸收浮点误差。
        """
        i = AXIS_NAMES.index(self.axis_name)
        ratio = self.quaternion[1 + i] / self.axis[i]
        return 2.0 * math.asin(float(np.clip(ratio, -1.0, 1.0)))

    def __repr__(self):
        return f"<Joint: {self.name} ({self.joint_type.value})>"
