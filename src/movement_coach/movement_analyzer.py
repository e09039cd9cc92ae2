import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Iterable, List, Optional

from .exercise_analysis.base_analyzer import AnalysisResult, BaseExerciseAnalyzer
from .exercise_analysis.config_utils import get_section
from .exercise_analysis.factory import ExerciseAnalyzerFactory
from .exercise_analysis.session import SessionState, SessionSummary
from .feedback.form_feedback import FeedbackGenerator, FeedbackType
from .pose_detection.pose_frame import PoseFrame
from .utils.logger import get_logger

logger = get_logger("MovementAnalyzer")


@dataclass(frozen=True)
class ExerciseTarget:
    """Prescribed goal for a session. Only used for progress display."""
    reps: Optional[int] = None
    hold_seconds: Optional[float] = None

    def __post_init__(self):
        if self.reps is not None and self.reps <= 0:
            raise ValueError(f"Target reps must be positive, got {self.reps}")
        if self.hold_seconds is not None and self.hold_seconds <= 0:
            raise ValueError(f"Target hold time must be positive, got {self.hold_seconds}")


class MovementAnalyzer:
    """
    Runs one exercise session.

    Owns the session state and a short history of recent frames, and hands
    every incoming frame to the analyzer selected for the exercise.
    """

    def __init__(
        self,
        exercise_id: str,
        factory: Optional[ExerciseAnalyzerFactory] = None,
        target: Optional[ExerciseTarget] = None,
        clock: Callable[[], float] = time.monotonic,
        analyzer: Optional[BaseExerciseAnalyzer] = None
    ):
        """
        Args:
            exercise_id: Exercise identifier, e.g. "squats" or "balance-stand"
            factory: Source of analyzers; a private factory is built when omitted
            target: Optional prescription used by progress()
            clock: Monotonic time source used to stamp frames without a timestamp
            analyzer: Pre-resolved analyzer, bypasses the factory
        """
        self.exercise_id = exercise_id
        self.clock = clock
        if analyzer is None:
            analyzer = (factory or ExerciseAnalyzerFactory()).create(exercise_id)
        self.analyzer = analyzer
        self.target = target or ExerciseTarget(reps=self.analyzer.default_reps)

        history_size = int(get_section("movement_analyzer").get("history_size", 30))
        self._pose_history: Deque[PoseFrame] = deque(maxlen=history_size)
        self._session = SessionState(exercise_id=exercise_id, start_time=self.clock())
        logger.info(f"Session started for '{exercise_id}' with {type(self.analyzer).__name__}")

    @property
    def session(self) -> SessionState:
        return self._session

    @property
    def history(self) -> List[PoseFrame]:
        return list(self._pose_history)

    def analyze_frame(self, frame: Optional[PoseFrame]) -> AnalysisResult:
        """
        Analyze one pose observation.

        Args:
            frame: The detected skeleton, or None when nobody was detected

        Returns:
            AnalysisResult for the rendering layer
        """
        if frame is None:
            return AnalysisResult(
                rep_count=self._session.rep_count,
                feedback=FeedbackGenerator.position_in_view(),
                feedback_type=FeedbackType.NEEDS_IMPROVEMENT
            )

        if frame.timestamp is None:
            frame = frame.with_timestamp(self.clock())
        elif self._session.last_timestamp is None:
            # Source-stamped frames (e.g. video PTS) set the session's time base
            self._session.start_time = frame.timestamp

        self._pose_history.append(frame)
        result = self.analyzer.analyze(frame, self._pose_history, self._session)
        self._session.last_timestamp = frame.timestamp
        return result

    def analyze_poses(self, frames: Iterable[Optional[PoseFrame]]) -> AnalysisResult:
        """Analyze the first detected person of a multi-person observation."""
        for frame in frames:
            if frame is not None:
                return self.analyze_frame(frame)
        return self.analyze_frame(None)

    def get_session_summary(self, now: Optional[float] = None) -> SessionSummary:
        summary = self._session.summary(now)
        logger.info(
            f"Session summary for '{summary.exercise_id}': {summary.total_reps} reps, "
            f"average form {summary.average_form_score:.1f}"
        )
        return summary

    def reset_session(self) -> None:
        self._session.reset(start_time=self.clock())
        self._pose_history.clear()
        self.analyzer.reset()
        logger.info(f"Session reset for '{self.exercise_id}'")

    def progress(self) -> float:
        """Completion percentage against the target, in [0, 100]."""
        if self.target.reps is not None:
            return min(100.0, self._session.rep_count / self.target.reps * 100.0)
        if self.target.hold_seconds is not None:
            return min(100.0, self.analyzer.held_time() / self.target.hold_seconds * 100.0)
        return 0.0
