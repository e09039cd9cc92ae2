"""
Pose detection boundary: the PoseFrame model and pose sources.
"""

from .pose_frame import Joint, Keypoint, PoseFrame
from .base_detector import BasePoseDetector

__all__ = [
    'Joint',
    'Keypoint',
    'PoseFrame',
    'BasePoseDetector'
]
