"""
数据交换功能实现
"""
import json
import os
import numpy as np
from typing import Dict, List
from scipy.spatial.transform import Rotation as R

from .model import Chain, RobotJoint, RobotLink


def _scipy_to_wxyz(quat_xyzw: np.ndarray) -> np.ndarray:
    """scipy 使用 [x, y, z, w] 格式，转换为 [w, x, y, z]"""
    return np.array([quat_xyzw[3], quat_xyzw[0], quat_xyzw[1], quat_xyzw[2]], dtype=np.float64)


def _wxyz_to_scipy(quat_wxyz: np.ndarray) -> np.ndarray:
    return np.array([quat_wxyz[1], quat_wxyz[2], quat_wxyz[3], quat_wxyz[0]], dtype=np.float64)


def load_description(json_path: str) -> RobotLink:
    """
    从 description.json 加载机器人描述，构建连杆-关节树

    关节条目格式：
    {"name", "type", "parent", "child", "position", "quaternion"([w,x,y,z]) 或 "rpy"(弧度, URDF 约定), "axis", "limits"}

    :param json_path: description.json 文件路径
    :return: 根连杆
    """
    with open(json_path, 'r', encoding='utf-8') as f:
        data = json.load(f)

    root_name = data['root_link']
    joints_data = data['joints']

    links: Dict[str, RobotLink] = {root_name: RobotLink(root_name)}

    def get_link(name: str) -> RobotLink:
        if name not in links:
            links[name] = RobotLink(name)
        return links[name]

    for joint_data in joints_data:
        name = joint_data['name']

        quat = None
        if joint_data.get('quaternion') is not None:
            quat = np.array(joint_data['quaternion'], dtype=np.float64)
        elif joint_data.get('rpy') is not None:
            # URDF 的 rpy 为绕固定轴 X-Y-Z 依次旋转（外旋）
            rot = R.from_euler('xyz', joint_data['rpy'], degrees=False)
            quat = _scipy_to_wxyz(rot.as_quat())

        axis = None
        if joint_data.get('axis') is not None:
            axis = np.array(joint_data['axis'], dtype=np.float64)

        limits = None
        if joint_data.get('limits') is not None:
            limits = tuple(joint_data['limits'])
            if len(limits) != 2:
                raise ValueError(f"Joint '{name}' limits must be [lower, upper], got {joint_data['limits']}")

        joint = RobotJoint(
            name=name,
            joint_type=joint_data['type'],
            position=joint_data.get('position', [0.0, 0.0, 0.0]),
            quaternion=quat,
            axis=axis,
            limits=limits
        )

        get_link(joint_data['parent']).add_joint(joint)
        if joint_data.get('child') is not None:
            joint.attach(get_link(joint_data['child']))

    return links[root_name]


def load_targets(json_path: str) -> List[Dict]:
    """
    从targets.json加载目标轨迹

    :param json_path: targets.json文件路径
    :return: 关键帧列表，每个元素为 {"frame": int, "pos": [x,y,z]}
    """
    with open(json_path, 'r', encoding='utf-8') as f:
        data = json.load(f)

    keyframes = []
    for item in data:
        keyframe = {
            'frame': int(item['frame']),
            'pos': np.array(item['pos'], dtype=np.float64)
        }
        keyframes.append(keyframe)

    if not keyframes:
        raise ValueError(f"No keyframes found in {json_path}")

    # 按帧号排序
    keyframes.sort(key=lambda kf: kf['frame'])

    return keyframes


def interpolate_targets(keyframes: List[Dict], frame: int) -> np.ndarray:
    """
    在关键帧之间对目标位置进行线性插值；超出范围时取首/末关键帧

    :param keyframes: 关键帧列表（已按帧号排序）
    :param frame: 当前帧号
    :return: 目标位置 [x, y, z]
    """
    if frame <= keyframes[0]['frame']:
        return keyframes[0]['pos'].copy()

    if frame >= keyframes[-1]['frame']:
        return keyframes[-1]['pos'].copy()

    start_kf = keyframes[0]
    end_kf = keyframes[-1]
    for i in range(len(keyframes) - 1):
        if keyframes[i]['frame'] <= frame < keyframes[i+1]['frame']:
            start_kf = keyframes[i]
            end_kf = keyframes[i+1]
            break

    start_frame = start_kf['frame']
    end_frame = end_kf['frame']
    if end_frame == start_frame:
        alpha = 0.0
    else:
        alpha = (frame - start_frame) / (end_frame - start_frame)

    return (1.0 - alpha) * start_kf['pos'] + alpha * end_kf['pos']


def extract_joint_states(chain: Chain, frame: int) -> Dict:
    """
    提取链上所有描述关节的当前状态（虚拟根关节不导出）

    :return: {'frame': int, 'joints': {name: {...}}}
    """
    frame_data = {
        'frame': frame,
        'joints': {}
    }
    for joint in chain.joints:
        if joint.source is None:
            continue

        q = joint.quaternion
        rot = R.from_quat(_wxyz_to_scipy(q))
        joint_data = {
            'type': joint.source.joint_type,
            'quaternion': [float(q[0]), float(q[1]), float(q[2]), float(q[3])],
            'euler': [float(e) for e in rot.as_euler('XYZ', degrees=False)]
        }
        if joint.is_hinge:
            joint_data['angle'] = joint.rotation_angle()

        frame_data['joints'][joint.name] = joint_data
    return frame_data


def export_animation(frames: List[Dict], output_path: str):
    """
    导出动画数据到animation.json

    :param frames: extract_joint_states() 得到的逐帧数据
    :param output_path: 输出文件路径
    """
    # 确保输出目录存在
    os.makedirs(os.path.dirname(os.path.abspath(output_path)), exist_ok=True)

    output = {'frames': frames}
    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(output, f, indent=2, ensure_ascii=False)
