from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from ..feedback.form_feedback import FeedbackGenerator, FeedbackType
from ..pose_detection.pose_frame import Joint, PoseFrame
from ..utils.logger import get_logger
from .base_analyzer import AnalysisResult, BaseExerciseAnalyzer
from .factory import register_analyzer
from .pose_utils import angle_at, angular_difference, circular_mean, direction_angle, wrap_angle_delta
from .session import ExercisePhase, SessionState

logger = get_logger("ArmCircleAnalyzer")


@dataclass
class ArmCircleMetrics:
    left_angle: float
    right_angle: float
    symmetry: float
    extension: float

    @property
    def tracking_angle(self) -> float:
        return circular_mean([self.left_angle, self.right_angle])

    @property
    def form_score(self) -> float:
        return (self.symmetry + self.extension) / 2.0


def mirrored(shoulder, wrist):
    """Reflect the wrist about the vertical through the shoulder."""
    return (2.0 * shoulder[0] - wrist[0], wrist[1])


@register_analyzer("arm_circles", "arm_circle")
class ArmCircleAnalyzer(BaseExerciseAnalyzer):
    """
    Counts full arm circles by integrating how far the arms sweep around
    the shoulders. The right arm is mirrored so both arms turn the same way
    when the circles are done symmetrically.
    """

    config_section = "arm_circles"
    required_joints = (
        Joint.LEFT_SHOULDER, Joint.RIGHT_SHOULDER,
        Joint.LEFT_ELBOW, Joint.RIGHT_ELBOW,
        Joint.LEFT_WRIST, Joint.RIGHT_WRIST,
    )
    missing_joint_message = FeedbackGenerator.show_arms()

    def __init__(self, config=None):
        super().__init__(config)
        self.circle_degrees = float(self.config["circle_degrees"])
        self._previous_angle: Optional[float] = None
        self.circle_progress = 0.0

    def analyze(self, frame: PoseFrame, history: Sequence[PoseFrame], session: SessionState) -> AnalysisResult:
        rejected = self._check_frame(frame, session)
        if rejected is not None:
            return rejected

        metrics = self._calculate_metrics(frame)
        session.add_form_score(metrics.form_score)

        angle = metrics.tracking_angle
        if self._previous_angle is not None:
            self.circle_progress += abs(wrap_angle_delta(angle - self._previous_angle))
        self._previous_angle = angle

        if self.circle_progress >= self.circle_degrees:
            session.increment_reps()
            self.circle_progress = 0.0
            session.current_phase = ExercisePhase.COMPLETED
            logger.info(f"Arm circle {session.rep_count} completed")
        else:
            session.current_phase = ExercisePhase.MID_MOVEMENT

        return self._generate_feedback(metrics, session)

    def _calculate_metrics(self, frame: PoseFrame) -> ArmCircleMetrics:
        left_shoulder = frame.position(Joint.LEFT_SHOULDER)
        right_shoulder = frame.position(Joint.RIGHT_SHOULDER)
        left_wrist = frame.position(Joint.LEFT_WRIST)
        right_wrist = frame.position(Joint.RIGHT_WRIST)

        left_angle = direction_angle(left_shoulder, left_wrist)
        right_angle = direction_angle(right_shoulder, mirrored(right_shoulder, right_wrist))
        symmetry = 100.0 - min(100.0, angular_difference(left_angle, right_angle) * 2.0)

        elbow_angles = [
            angle_at(left_shoulder, frame.position(Joint.LEFT_ELBOW), left_wrist),
            angle_at(right_shoulder, frame.position(Joint.RIGHT_ELBOW), right_wrist),
        ]
        extension = float(np.mean([max(0.0, 100.0 - abs(180.0 - a) * 2.0) for a in elbow_angles]))

        return ArmCircleMetrics(
            left_angle=left_angle,
            right_angle=right_angle,
            symmetry=symmetry,
            extension=extension
        )

    def _generate_feedback(self, metrics: ArmCircleMetrics, session: SessionState) -> AnalysisResult:
        if metrics.form_score > self.config["excellent_score"]:
            return self._result(session, "Perfect circles! Keep it up", FeedbackType.EXCELLENT)
        if metrics.symmetry < self.config["together_symmetry"]:
            return self._result(session, "Keep arms moving together", FeedbackType.NEEDS_IMPROVEMENT)
        if metrics.form_score < self.config["extension_score"]:
            return self._result(session, "Extend arms fully during circles", FeedbackType.NEEDS_IMPROVEMENT)
        percent = int(self.circle_progress / 360.0 * 100.0)
        return self._result(session, f"Circle {percent}% complete", FeedbackType.GOOD)

    def reset(self) -> None:
        self._previous_angle = None
        self.circle_progress = 0.0
