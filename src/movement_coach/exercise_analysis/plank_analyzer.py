from typing import Optional, Sequence

from ..feedback.form_feedback import FeedbackGenerator, FeedbackType
from ..pose_detection.pose_frame import Joint, PoseFrame
from ..utils.logger import get_logger
from .base_analyzer import AnalysisResult, BaseExerciseAnalyzer
from .factory import register_analyzer
from .pose_utils import angle_at, midpoint
from .session import ExercisePhase, SessionState

logger = get_logger("PlankAnalyzer")


@register_analyzer("plank")
class PlankAnalyzer(BaseExerciseAnalyzer):
    """
    Timed plank hold.

    The body angle is measured at the hip center between the shoulder and
    ankle centers. Held time restarts whenever the body leaves alignment.
    """

    config_section = "plank"
    required_joints = (
        Joint.LEFT_SHOULDER, Joint.RIGHT_SHOULDER,
        Joint.LEFT_HIP, Joint.RIGHT_HIP,
        Joint.LEFT_ANKLE, Joint.RIGHT_ANKLE,
    )
    missing_joint_message = FeedbackGenerator.get_in_plank()

    def __init__(self, config=None):
        super().__init__(config)
        self.target_time = float(self.config["target_time"])
        self.alignment_tolerance = float(self.config["alignment_tolerance"])
        self.sag_tolerance = float(self.config["sag_tolerance"])
        self._plank_start_time: Optional[float] = None
        self.plank_time = 0.0

    def body_angle(self, frame: PoseFrame) -> float:
        shoulder_center = midpoint(frame.position(Joint.LEFT_SHOULDER), frame.position(Joint.RIGHT_SHOULDER))
        hip_center = midpoint(frame.position(Joint.LEFT_HIP), frame.position(Joint.RIGHT_HIP))
        ankle_center = midpoint(frame.position(Joint.LEFT_ANKLE), frame.position(Joint.RIGHT_ANKLE))
        return angle_at(shoulder_center, hip_center, ankle_center)

    def analyze(self, frame: PoseFrame, history: Sequence[PoseFrame], session: SessionState) -> AnalysisResult:
        rejected = self._check_frame(frame, session)
        if rejected is not None:
            return rejected

        now = self._timestamp(frame, session)
        angle = self.body_angle(frame)
        deviation = abs(angle - 180.0)
        in_plank = deviation < self.alignment_tolerance

        if in_plank:
            if self._plank_start_time is None:
                self._plank_start_time = now
                logger.debug("Plank position reached, timer started")
            self.plank_time = now - self._plank_start_time
            if self.plank_time >= self.target_time and session.rep_count == 0:
                session.mark_complete()
                logger.info(f"Plank held for {self.plank_time:.1f}s, exercise complete")
        else:
            self._plank_start_time = None
            self.plank_time = 0.0

        session.add_form_score((180.0 - deviation) / 180.0 * 100.0 if in_plank else 0.0)

        if not in_plank:
            session.current_phase = ExercisePhase.READY
            return self._result(session, FeedbackGenerator.get_in_plank(), FeedbackType.NEEDS_IMPROVEMENT)

        remaining = max(0.0, self.target_time - self.plank_time)
        session.current_phase = ExercisePhase.MID_MOVEMENT if remaining > 0 else ExercisePhase.COMPLETED
        if deviation > self.sag_tolerance:
            return self._result(session, "Keep body straight - don't sag", FeedbackType.NEEDS_IMPROVEMENT)
        if remaining > 0:
            return self._result(session, f"Great form! Hold for {int(remaining)}s", FeedbackType.EXCELLENT)
        return self._result(session, "Plank complete! Well done!", FeedbackType.EXCELLENT)

    def held_time(self) -> float:
        return self.plank_time

    def reset(self) -> None:
        self._plank_start_time = None
        self.plank_time = 0.0
