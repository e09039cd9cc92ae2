from typing import Dict, List, Optional

import cv2
import mediapipe as mp
import numpy as np

from .base_detector import BasePoseDetector
from .pose_frame import PoseFrame


class MediaPipePoseDetector(BasePoseDetector):
    """MediaPipe implementation of the pose source."""

    def __init__(self, min_detection_confidence: float = 0.5, min_tracking_confidence: float = 0.5):
        """
        Initialize the MediaPipe pose detector.

        Args:
            min_detection_confidence: Minimum confidence for pose detection
            min_tracking_confidence: Minimum confidence for pose tracking
        """
        self.mp_pose = mp.solutions.pose
        self.pose = self.mp_pose.Pose(
            static_image_mode=False,
            model_complexity=1,
            min_detection_confidence=min_detection_confidence,
            min_tracking_confidence=min_tracking_confidence
        )
        self._landmark_names = [
            "nose", "left_eye_inner", "left_eye", "left_eye_outer",
            "right_eye_inner", "right_eye", "right_eye_outer", "left_ear",
            "right_ear", "mouth_left", "mouth_right", "left_shoulder",
            "right_shoulder", "left_elbow", "right_elbow", "left_wrist",
            "right_wrist", "left_pinky", "right_pinky", "left_index",
            "right_index", "left_thumb", "right_thumb", "left_hip",
            "right_hip", "left_knee", "right_knee", "left_ankle",
            "right_ankle", "left_heel", "right_heel", "left_foot_index",
            "right_foot_index"
        ]

    def detect(self, frame: np.ndarray, timestamp: Optional[float] = None) -> Optional[PoseFrame]:
        """
        Detect pose landmarks using MediaPipe.

        MediaPipe Pose tracks a single person, so its result is already the
        one skeleton the analyzers consume.
        """
        frame_rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        results = self.pose.process(frame_rgb)

        if not results.pose_landmarks:
            return None

        landmarks: Dict[str, List[float]] = {}
        for idx, landmark in enumerate(results.pose_landmarks.landmark):
            landmarks[self._landmark_names[idx]] = [
                landmark.x,
                landmark.y,
                landmark.z,
                landmark.visibility
            ]
        return PoseFrame.from_landmarks(landmarks, timestamp=timestamp)

    def get_landmark_names(self) -> List[str]:
        """Get the list of landmark names provided by MediaPipe."""
        return self._landmark_names

    def close(self) -> None:
        self.pose.close()
