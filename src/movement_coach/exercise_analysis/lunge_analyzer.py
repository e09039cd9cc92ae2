from enum import Enum
from typing import Sequence

from ..feedback.form_feedback import FeedbackType
from ..pose_detection.pose_frame import Joint, PoseFrame
from ..utils.logger import get_logger
from .base_analyzer import AnalysisResult, BaseExerciseAnalyzer
from .factory import register_analyzer
from .pose_utils import angle_at
from .session import ExercisePhase, SessionState

logger = get_logger("LungeAnalyzer")


class LungeSide(Enum):
    LEFT = "left"
    RIGHT = "right"
    NONE = "none"


@register_analyzer("lunges", "lunge")
class LungeAnalyzer(BaseExerciseAnalyzer):
    """Alternating lunges; a rep is each switch of the forward leg."""

    config_section = "lunges"
    required_joints = (
        Joint.LEFT_HIP, Joint.RIGHT_HIP,
        Joint.LEFT_KNEE, Joint.RIGHT_KNEE,
        Joint.LEFT_ANKLE, Joint.RIGHT_ANKLE,
    )

    def __init__(self, config=None):
        super().__init__(config)
        self.lunge_min_angle = float(self.config["lunge_min_angle"])
        self.lunge_max_angle = float(self.config["lunge_max_angle"])
        self._in_lunge_position = False
        self._last_side = LungeSide.NONE

    def analyze(self, frame: PoseFrame, history: Sequence[PoseFrame], session: SessionState) -> AnalysisResult:
        rejected = self._check_frame(frame, session)
        if rejected is not None:
            return rejected

        left_knee = frame.position(Joint.LEFT_KNEE)
        right_knee = frame.position(Joint.RIGHT_KNEE)
        left_angle = angle_at(frame.position(Joint.LEFT_HIP), left_knee, frame.position(Joint.LEFT_ANKLE))
        right_angle = angle_at(frame.position(Joint.RIGHT_HIP), right_knee, frame.position(Joint.RIGHT_ANKLE))

        if left_knee[1] < right_knee[1]:
            side, active_angle = LungeSide.LEFT, left_angle
        elif right_knee[1] < left_knee[1]:
            side, active_angle = LungeSide.RIGHT, right_angle
        else:
            side, active_angle = LungeSide.NONE, None

        in_lunge = active_angle is not None and self.lunge_min_angle < active_angle < self.lunge_max_angle

        if in_lunge and not self._in_lunge_position and side != self._last_side:
            if self._last_side != LungeSide.NONE:
                session.increment_reps()
                logger.info(f"Lunge rep {session.rep_count} counted ({side.value} leg forward)")
            self._last_side = side
        self._in_lunge_position = in_lunge
        session.current_phase = ExercisePhase.PEAK if in_lunge else ExercisePhase.READY

        feedback = "Keep alternating lunges"
        feedback_type = FeedbackType.GOOD
        if in_lunge:
            if active_angle > self.config["shallow_angle"]:
                feedback = "Go deeper - 90° knee angle"
                feedback_type = FeedbackType.NEEDS_IMPROVEMENT
            elif active_angle < self.config["deep_angle"]:
                feedback = "Don't go too low"
                feedback_type = FeedbackType.NEEDS_IMPROVEMENT
            else:
                feedback = "Perfect depth! Switch legs"
                feedback_type = FeedbackType.EXCELLENT

        session.add_form_score(feedback_type.score * 25.0)
        return self._result(session, feedback, feedback_type)

    def reset(self) -> None:
        self._in_lunge_position = False
        self._last_side = LungeSide.NONE
