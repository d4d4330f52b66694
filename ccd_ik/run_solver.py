import json
import logging
import os
import sys
import time

from .data_io import (
    export_animation,
    extract_joint_states,
    interpolate_targets,
    load_description,
    load_targets
)
from .model import Chain, MalformedChainError
from .solver import IKConfig, IKSolver


logger = logging.getLogger(__name__)


def run_solver(config_path="config.json"):
    """
    无界面运行：加载配置、机器人描述和目标轨迹，逐帧求解并导出动画

    :param config_path: 配置文件路径
    :return: 成功时返回导出的帧数据列表，失败时返回 None
    """
    # 1. 加载配置
    if not os.path.exists(config_path):
        logger.error("找不到配置文件: %s", config_path)
        return None

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            config = json.load(f)
    except (OSError, ValueError) as e:
        logger.error("配置文件加载失败: %s", e)
        return None
    if not isinstance(config, dict):
        logger.error("配置文件格式错误，应为 JSON 对象: %s", config_path)
        return None

    logger.info("----------- CCD IK Solver Headless -----------")
    logger.info("配置加载: %s", config_path)

    description_path = config.get('description_path')
    targets_path = config.get('targets_path')
    output_path = config.get('output_path', 'animation.json')
    if not description_path or not targets_path:
        logger.error("配置缺少 description_path 或 targets_path")
        return None

    try:
        ik_config = IKConfig.from_dict(config)
    except ValueError as e:
        logger.error("求解参数无效: %s", e)
        return None

    # 2. 加载机器人描述并构建 IK 链
    logger.info("正在加载机器人描述: %s ...", description_path)
    try:
        description = load_description(description_path)
        chain = Chain.build(description)
    except MalformedChainError as e:
        logger.error("IK 链构建失败: %s", e)
        return None
    except (OSError, KeyError, ValueError) as e:
        logger.error("机器人描述加载失败: %s", e)
        return None
    logger.info("IK 链构建成功，包含 %d 个关节，末端执行器: %s", len(chain), chain.end_effector.name)

    # 3. 加载目标轨迹
    logger.info("正在加载目标轨迹: %s ...", targets_path)
    try:
        keyframes = load_targets(targets_path)
    except (OSError, KeyError, ValueError) as e:
        logger.error("目标轨迹加载失败: %s", e)
        return None
    total_frames = keyframes[-1]['frame']
    logger.info("轨迹加载成功，共 %d 个关键帧，总长 %d 帧", len(keyframes), total_frames)

    # 4. 逐帧求解
    solver = IKSolver(ik_config)
    solver.chain = chain
    solver.target = interpolate_targets(keyframes, 0)

    solved_frames = []
    start_time = time.time()
    for frame in range(total_frames + 1):
        # 目标由外部持有，原地更新
        solver.target[:] = interpolate_targets(keyframes, frame)
        solver.update()
        solved_frames.append(extract_joint_states(chain, frame))

        if frame % 10 == 0:
            logger.info("进度: %d/%d (距离 %.5f, 迭代 %d)",
                        frame, total_frames, solver.last_distance, solver.last_iterations)

    duration = time.time() - start_time
    logger.info("求解完成，耗时: %.2f 秒", duration)

    # 5. 导出结果
    logger.info("正在导出到: %s ...", output_path)
    export_animation(solved_frames, output_path)
    logger.info("任务完成！")
    return solved_frames


def main():
    logging.basicConfig(level=logging.INFO, format='[%(levelname)s] %(name)s: %(message)s')
    if len(sys.argv) > 1:
        result = run_solver(sys.argv[1])
    else:
        result = run_solver()
    return 0 if result is not None else 1


if __name__ == "__main__":
    sys.exit(main())
