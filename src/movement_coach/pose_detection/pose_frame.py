from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple


class Joint(Enum):
    """Skeletal landmarks consumed by the movement analyzers."""
    NOSE = "nose"
    LEFT_EYE = "left_eye"
    RIGHT_EYE = "right_eye"
    LEFT_EAR = "left_ear"
    RIGHT_EAR = "right_ear"
    NECK = "neck"
    LEFT_SHOULDER = "left_shoulder"
    RIGHT_SHOULDER = "right_shoulder"
    LEFT_ELBOW = "left_elbow"
    RIGHT_ELBOW = "right_elbow"
    LEFT_WRIST = "left_wrist"
    RIGHT_WRIST = "right_wrist"
    ROOT = "root"
    LEFT_HIP = "left_hip"
    RIGHT_HIP = "right_hip"
    LEFT_KNEE = "left_knee"
    RIGHT_KNEE = "right_knee"
    LEFT_ANKLE = "left_ankle"
    RIGHT_ANKLE = "right_ankle"


# Joints derived from a pair of landmarks when the detector does not report them
_SYNTHESIZED_JOINTS = {
    Joint.NECK: (Joint.LEFT_SHOULDER, Joint.RIGHT_SHOULDER),
    Joint.ROOT: (Joint.LEFT_HIP, Joint.RIGHT_HIP),
}


@dataclass(frozen=True)
class Keypoint:
    """A single joint observation: normalized image position (y grows downward) and confidence."""
    x: float
    y: float
    confidence: float = 1.0

    @property
    def position(self) -> Tuple[float, float]:
        return (self.x, self.y)


@dataclass
class PoseFrame:
    """
    One skeleton for one video frame.

    Attributes:
        keypoints: Observed joints. A joint that is absent, or below the
            analyzer's confidence threshold, is unavailable.
        timestamp: Monotonic capture time in seconds, or None to let the
            orchestrator stamp the frame on arrival.
    """
    keypoints: Dict[Joint, Keypoint] = field(default_factory=dict)
    timestamp: Optional[float] = None

    def get(self, joint: Joint, min_confidence: float = 0.0) -> Optional[Keypoint]:
        keypoint = self.keypoints.get(joint)
        if keypoint is None or keypoint.confidence < min_confidence:
            return None
        return keypoint

    def has(self, joint: Joint, min_confidence: float = 0.0) -> bool:
        return self.get(joint, min_confidence) is not None

    def position(self, joint: Joint) -> Tuple[float, float]:
        return self.keypoints[joint].position

    def missing(self, joints: Iterable[Joint], min_confidence: float = 0.0) -> List[Joint]:
        """Joints from `joints` that are absent or below `min_confidence`."""
        return [joint for joint in joints if not self.has(joint, min_confidence)]

    def with_timestamp(self, timestamp: float) -> "PoseFrame":
        return PoseFrame(keypoints=dict(self.keypoints), timestamp=timestamp)

    @classmethod
    def from_landmarks(
        cls,
        landmarks: Mapping[str, Sequence[float]],
        timestamp: Optional[float] = None
    ) -> "PoseFrame":
        """
        Build a frame from a landmark dictionary.

        Args:
            landmarks: {name: [x, y, visibility]} or {name: [x, y, z, visibility]},
                the layout produced by MediaPipe style detectors. Names that are
                not joints are ignored.
            timestamp: Optional capture time in seconds

        Returns:
            PoseFrame with neck/root synthesized from shoulder/hip midpoints
            when they were not supplied
        """
        keypoints: Dict[Joint, Keypoint] = {}
        for name, values in landmarks.items():
            try:
                joint = Joint(name)
            except ValueError:
                continue
            if len(values) < 2:
                continue
            confidence = float(values[-1]) if len(values) >= 3 else 1.0
            keypoints[joint] = Keypoint(float(values[0]), float(values[1]), confidence)

        for joint, (first, second) in _SYNTHESIZED_JOINTS.items():
            if joint in keypoints or first not in keypoints or second not in keypoints:
                continue
            a, b = keypoints[first], keypoints[second]
            keypoints[joint] = Keypoint(
                (a.x + b.x) / 2.0,
                (a.y + b.y) / 2.0,
                min(a.confidence, b.confidence)
            )
        return cls(keypoints=keypoints, timestamp=timestamp)
