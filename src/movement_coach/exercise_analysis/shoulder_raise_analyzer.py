from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from ..feedback.form_feedback import FeedbackGenerator, FeedbackType
from ..pose_detection.pose_frame import Joint, PoseFrame
from ..utils.logger import get_logger
from .base_analyzer import AnalysisResult, BaseExerciseAnalyzer
from .factory import register_analyzer
from .pose_utils import angle_at
from .session import ExercisePhase, SessionState

logger = get_logger("ShoulderRaiseAnalyzer")


@dataclass
class ShoulderRaiseMetrics:
    left_elevation: float
    right_elevation: float
    symmetry: float
    form_score: float

    @property
    def average_elevation(self) -> float:
        return (self.left_elevation + self.right_elevation) / 2.0


def arm_elevation(shoulder, wrist) -> float:
    """
    Abduction of the arm: 0 hanging down, 90 horizontal, 180 overhead.

    Measured from the hanging position rather than as an angle from the
    horizontal, which reads the same for arms hanging down and arms raised.
    """
    below_shoulder = (shoulder[0], shoulder[1] + 1.0)
    return angle_at(below_shoulder, shoulder, wrist)


@register_analyzer("shoulder_raise", "shoulder_raises")
class ShoulderRaiseAnalyzer(BaseExerciseAnalyzer):
    """
    Lateral raise counter.

    The rep is counted when the arms come back down after a raise that was
    held for at least minimum_hold_time. Raises lowered sooner are dropped.
    """

    config_section = "shoulder_raise"
    required_joints = (
        Joint.LEFT_SHOULDER, Joint.RIGHT_SHOULDER,
        Joint.LEFT_ELBOW, Joint.RIGHT_ELBOW,
        Joint.LEFT_WRIST, Joint.RIGHT_WRIST,
    )
    missing_joint_message = FeedbackGenerator.show_arms()

    def __init__(self, config=None):
        super().__init__(config)
        self.raised_angle = float(self.config["raised_angle"])
        self.target_elevation = float(self.config["target_elevation"])
        self.minimum_hold_time = float(self.config["minimum_hold_time"])
        self.minimum_transition_time = float(self.config["minimum_transition_time"])
        self._is_up = False
        self._last_state_change: Optional[float] = None

    def analyze(self, frame: PoseFrame, history: Sequence[PoseFrame], session: SessionState) -> AnalysisResult:
        rejected = self._check_frame(frame, session)
        if rejected is not None:
            return rejected

        now = self._timestamp(frame, session)
        metrics = self._calculate_metrics(frame)
        session.add_form_score(metrics.form_score)

        self._update_state(metrics, session, now)
        return self._generate_feedback(metrics, session, now)

    def _calculate_metrics(self, frame: PoseFrame) -> ShoulderRaiseMetrics:
        left = arm_elevation(frame.position(Joint.LEFT_SHOULDER), frame.position(Joint.LEFT_WRIST))
        right = arm_elevation(frame.position(Joint.RIGHT_SHOULDER), frame.position(Joint.RIGHT_WRIST))

        symmetry = 100.0 - min(100.0, abs(left - right) * 2.0)
        side_scores = [max(0.0, 100.0 - abs(self.target_elevation - e) * 2.0) for e in (left, right)]
        form_score = float(np.mean(side_scores + [symmetry]))

        return ShoulderRaiseMetrics(
            left_elevation=left,
            right_elevation=right,
            symmetry=symmetry,
            form_score=form_score
        )

    def _since_change(self, now: float) -> float:
        if self._last_state_change is None:
            return np.inf
        return now - self._last_state_change

    def _update_state(self, metrics: ShoulderRaiseMetrics, session: SessionState, now: float) -> bool:
        raised = metrics.average_elevation > self.raised_angle
        since_change = self._since_change(now)

        if raised and not self._is_up:
            if since_change >= self.minimum_transition_time:
                self._is_up = True
                self._last_state_change = now
                logger.debug(f"Arms raised ({metrics.average_elevation:.1f} deg)")
        elif not raised and self._is_up:
            self._is_up = False
            self._last_state_change = now
            if since_change >= self.minimum_hold_time:
                session.increment_reps()
                session.current_phase = ExercisePhase.COMPLETED
                logger.info(f"Shoulder raise rep {session.rep_count} counted (held {since_change:.2f}s)")
                return True
            logger.debug(f"Raise lowered after {since_change:.2f}s, not counted")

        session.current_phase = ExercisePhase.PEAK if self._is_up else ExercisePhase.READY
        return False

    def _generate_feedback(
        self,
        metrics: ShoulderRaiseMetrics,
        session: SessionState,
        now: float
    ) -> AnalysisResult:
        if metrics.form_score > self.config["excellent_score"]:
            return self._result(session, "Excellent form!", FeedbackType.EXCELLENT)
        if metrics.symmetry < self.config["level_symmetry"]:
            return self._result(session, "Keep arms level", FeedbackType.NEEDS_IMPROVEMENT)
        if not self._is_up:
            return self._result(session, "Raise your arms to shoulder height", FeedbackType.NEEDS_IMPROVEMENT)
        if self._since_change(now) < self.minimum_hold_time:
            return self._result(session, "Hold the position", FeedbackType.GOOD)
        return self._result(session, "Great! Now lower slowly", FeedbackType.GOOD)

    def reset(self) -> None:
        self._is_up = False
        self._last_state_change = None
