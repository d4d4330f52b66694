"""
求解参数
"""
import math
import numbers
from dataclasses import dataclass
from typing import Any, Dict


def _is_number(value: Any) -> bool:
    """bool 虽是 int 的子类，但不作为数值参数接受"""
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


@dataclass
class IKConfig:
    """
    :param tolerance: 末端执行器到目标的距离容差（与链的坐标单位一致）
    :param max_iterations: 每次求解的最大 CCD 迭代（扫描）次数
    :param update_source: 求解后是否把关节姿态写回机器人描述
    """
    tolerance: float = 0.01
    max_iterations: int = 10
    update_source: bool = False

    def __post_init__(self):
        if not _is_number(self.tolerance) or not self.tolerance > 0:
            raise ValueError(f"tolerance must be a positive number, got {self.tolerance!r}")
        if (not _is_number(self.max_iterations) or not math.isfinite(self.max_iterations)
                or int(self.max_iterations) != self.max_iterations):
            raise ValueError(f"max_iterations must be an integer, got {self.max_iterations!r}")
        self.max_iterations = int(self.max_iterations)
        if self.max_iterations <= 0:
            raise ValueError(f"max_iterations must be positive, got {self.max_iterations}")
        self.update_source = bool(self.update_source)

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> 'IKConfig':
        """从配置字典读取求解参数，缺省键使用默认值"""
        return cls(
            tolerance=config.get('tolerance', 0.01),
            max_iterations=config.get('max_iterations', 10),
            update_source=config.get('update_source', False)
        )
