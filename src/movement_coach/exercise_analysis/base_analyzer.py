from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..feedback.form_feedback import FeedbackGenerator, FeedbackType
from ..pose_detection.pose_frame import Joint, Keypoint, PoseFrame
from ..utils.logger import get_logger
from .config_utils import get_section
from .session import SessionState

logger = get_logger("ExerciseAnalyzer")


@dataclass(frozen=True)
class AnalysisResult:
    """Per-frame output for the rendering layer."""
    rep_count: int
    feedback: str
    feedback_type: FeedbackType


class BaseExerciseAnalyzer(ABC):
    """
    Base class for exercise analysis implementations.

    Subclasses analyze one PoseFrame at a time. They mutate the SessionState
    handed to them (form scores, mistakes, rep count, phase) and keep their
    own hysteresis memory, which reset() clears. Degraded input never raises:
    a frame missing a required joint yields a positioning instruction and
    leaves the session untouched.
    """

    # Name of the section in analyzer_config.json
    config_section: str = ""
    # Joints that must be present above min_confidence to analyze a frame
    required_joints: Sequence[Joint] = ()
    # Message returned when a required joint is absent
    missing_joint_message: str = FeedbackGenerator.face_camera()

    def __init__(self, config: Optional[Mapping[str, Any]] = None):
        """
        Initialize the analyzer with configuration parameters.

        Args:
            config: Optional overrides merged on top of the shipped config section
        """
        self.config: Dict[str, Any] = get_section(self.config_section, config)
        self.min_confidence: float = float(self.config.get("min_confidence", 0.3))
        self.default_reps: int = int(self.config.get("default_reps", 10))

    @abstractmethod
    def analyze(
        self,
        frame: PoseFrame,
        history: Sequence[PoseFrame],
        session: SessionState
    ) -> AnalysisResult:
        """
        Analyze a single frame of exercise performance.

        Args:
            frame: Current pose observation
            history: Recent frames, oldest first, including the current one
            session: Session accumulator owned by the caller

        Returns:
            AnalysisResult with the rep count after this frame
        """
        pass

    @abstractmethod
    def reset(self) -> None:
        """Clear internal state (timers, phase memory). The session is reset by its owner."""
        pass

    def get_exercise_name(self) -> str:
        return self.config_section

    def held_time(self) -> float:
        """Seconds the current hold has lasted; 0 for repetition exercises."""
        return 0.0

    def _missing_joints(self, frame: PoseFrame) -> List[Joint]:
        return frame.missing(self.required_joints, self.min_confidence)

    def _keypoint(self, frame: PoseFrame, joint: Joint) -> Optional[Keypoint]:
        return frame.get(joint, self.min_confidence)

    def _reposition(self, session: SessionState, message: Optional[str] = None) -> AnalysisResult:
        """Positioning instruction for an unusable frame. Does not touch the session."""
        return AnalysisResult(
            rep_count=session.rep_count,
            feedback=message or self.missing_joint_message,
            feedback_type=FeedbackType.NEEDS_IMPROVEMENT
        )

    def _check_frame(self, frame: PoseFrame, session: SessionState) -> Optional[AnalysisResult]:
        """
        Return a reposition result when required joints are unavailable, else None.

        Absent joints get the analyzer's positioning message; joints that are
        all present but tracked below min_confidence ask the user to come closer.
        """
        absent = frame.missing(self.required_joints)
        if absent:
            logger.debug(
                f"[{self.get_exercise_name()}] skipping frame, missing: "
                f"{', '.join(j.value for j in absent)}"
            )
            return self._reposition(session)
        weak = self._missing_joints(frame)
        if weak:
            logger.debug(
                f"[{self.get_exercise_name()}] skipping frame, low confidence: "
                f"{', '.join(j.value for j in weak)}"
            )
            return self._reposition(session, FeedbackGenerator.move_closer())
        return None

    @staticmethod
    def _timestamp(frame: PoseFrame, session: SessionState) -> float:
        """Frame time; frames without one reuse the last seen time."""
        if frame.timestamp is not None:
            return frame.timestamp
        if session.last_timestamp is not None:
            return session.last_timestamp
        return session.start_time

    def _result(self, session: SessionState, feedback: str, feedback_type: FeedbackType) -> AnalysisResult:
        return AnalysisResult(rep_count=session.rep_count, feedback=feedback, feedback_type=feedback_type)
