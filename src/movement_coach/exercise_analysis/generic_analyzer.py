from typing import Optional, Sequence

from ..feedback.form_feedback import FeedbackType
from ..pose_detection.pose_frame import PoseFrame
from ..utils.logger import get_logger
from .base_analyzer import AnalysisResult, BaseExerciseAnalyzer
from .factory import register_analyzer
from .session import ExercisePhase, SessionState

logger = get_logger("GenericAnalyzer")

# Per-frame score for an exercise whose form is not actually checked
_NEUTRAL_FORM_SCORE = FeedbackType.GOOD.score * 25.0


@register_analyzer("generic")
class GenericAnalyzer(BaseExerciseAnalyzer):
    """
    Placeholder for exercises without a dedicated analyzer.

    It does not look at joints at all: once enough frames are buffered,
    every movement_interval seconds is one movement tick and every
    ticks_per_rep ticks is one rep.
    """

    config_section = "generic"

    def __init__(self, config=None):
        super().__init__(config)
        self.movement_interval = float(self.config["movement_interval"])
        self.ticks_per_rep = int(self.config["ticks_per_rep"])
        self.min_history = int(self.config["min_history"])
        self.movement_count = 0
        self._last_movement_time: Optional[float] = None

    def analyze(self, frame: PoseFrame, history: Sequence[PoseFrame], session: SessionState) -> AnalysisResult:
        now = self._timestamp(frame, session)
        if self._last_movement_time is None:
            self._last_movement_time = now

        if len(history) >= self.min_history and now - self._last_movement_time >= self.movement_interval:
            self.movement_count += 1
            self._last_movement_time = now
            if self.movement_count % self.ticks_per_rep == 0:
                session.increment_reps()
                logger.info(f"Generic rep {session.rep_count} counted")

        session.current_phase = ExercisePhase.MID_MOVEMENT
        session.add_form_score(_NEUTRAL_FORM_SCORE)
        return self._result(session, "Continue exercise with good form", FeedbackType.GOOD)

    def reset(self) -> None:
        self.movement_count = 0
        self._last_movement_time = None
