"""
IK 求解调度：持有 IK 链、目标与求解参数，每次外部刷新（如每帧）调用一次 update()
"""
import logging
import numpy as np
from typing import Optional

from ..model import Chain
from .ccd import ccd_solve, end_effector_distance
from .config import IKConfig


logger = logging.getLogger(__name__)


class IKSolver:
    """
    IK 链和目标都可以暂时缺省，缺省时 update() 什么也不做。
    """

    def __init__(self, config: Optional[IKConfig] = None, **overrides):
        """
        :param config: 求解参数，None 表示使用默认值
        :param overrides: 覆盖 config 中同名字段，如 tolerance=1e-3
        """
        if config is None:
            config = IKConfig(**overrides)
        elif overrides:
            config = IKConfig(**{**vars(config), **overrides})
        self.config = config

        self.chain: Optional[Chain] = None
        self.target: Optional[np.ndarray] = None

        # 最近一次求解的诊断信息
        self.last_distance: Optional[float] = None
        self.last_iterations: int = 0

    def _record_iteration(self, iteration: int, distance: float):
        self.last_iterations = iteration
        self.last_distance = distance

    def update(self):
        """
        对当前目标执行一次 CCD 求解；若配置了 update_source，再把结果写回机器人描述
        """
        if self.chain is None or self.target is None:
            logger.debug("IK update skipped: chain or target not set")
            return

        self.last_iterations = 0
        self.last_distance = None
        ccd_solve(self.chain, self.target, self.config, on_iteration=self._record_iteration)
        if self.last_distance is None:
            # 未进入迭代：初始距离已在容差内
            self.last_distance = end_effector_distance(self.chain, self.target)

        if self.config.update_source:
            self.chain.write_back()
