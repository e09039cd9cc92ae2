from collections import deque
from typing import Deque, Dict, Optional, Sequence

import numpy as np

from ..feedback.form_feedback import FeedbackGenerator, FeedbackType
from ..pose_detection.pose_frame import Joint, PoseFrame
from ..utils.logger import get_logger
from .base_analyzer import AnalysisResult, BaseExerciseAnalyzer
from .factory import register_analyzer
from .pose_utils import Point, mean_deviation
from .session import ExercisePhase, SessionState

logger = get_logger("BalanceAnalyzer")

_HIPS = (Joint.LEFT_HIP, Joint.RIGHT_HIP)


@register_analyzer("balance_stand", "balance")
class BalanceAnalyzer(BaseExerciseAnalyzer):
    """
    Timed single-pose balance hold.

    Stability comes from how much the weighted center of gravity wanders over
    the last few frames. Balanced time accumulates while stable and restarts
    from zero as soon as balance is lost; the exercise counts as one rep once
    target_time is reached.
    """

    config_section = "balance_stand"
    missing_joint_message = FeedbackGenerator.show_body()

    def __init__(self, config=None):
        super().__init__(config)
        self.target_time = float(self.config["target_time"])
        self.stability_window = int(self.config["stability_window"])
        self.balanced_score = float(self.config["balanced_score"])
        self.almost_balanced_score = float(self.config["almost_balanced_score"])
        self.joint_weights: Dict[Joint, float] = {
            Joint(name): float(weight) for name, weight in self.config["joint_weights"].items()
        }
        self.cog_history: Deque[Point] = deque(maxlen=int(self.config["history_size"]))
        self._balance_start_time: Optional[float] = None
        self.balance_time = 0.0

    def analyze(self, frame: PoseFrame, history: Sequence[PoseFrame], session: SessionState) -> AnalysisResult:
        if not any(frame.has(hip, self.min_confidence) for hip in _HIPS):
            logger.debug("[balance_stand] skipping frame, no hip visible")
            return self._reposition(session)

        now = self._timestamp(frame, session)
        cog = self.center_of_gravity(frame)
        self.cog_history.append(cog)

        stability = self.stability_score()
        session.add_form_score(stability)
        is_balanced = stability > self.balanced_score

        if is_balanced:
            if self._balance_start_time is None:
                self._balance_start_time = now
                logger.debug("Balance found, timer started")
            self.balance_time = now - self._balance_start_time
        else:
            if self._balance_start_time is not None:
                logger.debug(f"Balance lost after {self.balance_time:.1f}s")
            self._balance_start_time = None
            self.balance_time = 0.0

        progress = self.progress()
        if progress >= 100.0:
            if session.rep_count == 0:
                logger.info(f"Balance held for {self.balance_time:.1f}s, exercise complete")
            session.mark_complete()
            session.current_phase = ExercisePhase.COMPLETED
            return self._result(session, "Balance complete! Excellent!", FeedbackType.EXCELLENT)

        if is_balanced:
            session.current_phase = ExercisePhase.MID_MOVEMENT
            remaining = int(self.target_time * (100.0 - progress) / 100.0)
            return self._result(session, f"Great balance! {remaining}s remaining", FeedbackType.GOOD)

        session.current_phase = ExercisePhase.READY
        if stability > self.almost_balanced_score:
            return self._result(session, "Almost balanced - stay steady", FeedbackType.NEEDS_IMPROVEMENT)
        return self._result(session, "Find your balance - small adjustments", FeedbackType.POOR)

    def center_of_gravity(self, frame: PoseFrame) -> Point:
        """Confidence-filtered weighted mean of the trunk and leg joints."""
        positions = []
        weights = []
        for joint, weight in self.joint_weights.items():
            keypoint = frame.get(joint, self.min_confidence)
            if keypoint is None:
                continue
            positions.append(keypoint.position)
            weights.append(weight)
        cog = np.average(np.array(positions, dtype=float), axis=0, weights=np.array(weights, dtype=float))
        return (float(cog[0]), float(cog[1]))

    def stability_score(self) -> float:
        if len(self.cog_history) < self.stability_window:
            movement = 1.0
        else:
            recent = list(self.cog_history)[-self.stability_window:]
            movement = mean_deviation(recent)
        return max(0.0, 100.0 - movement * 1000.0)

    def progress(self) -> float:
        return min(100.0, self.balance_time / self.target_time * 100.0)

    def held_time(self) -> float:
        return self.balance_time

    def reset(self) -> None:
        self.cog_history.clear()
        self._balance_start_time = None
        self.balance_time = 0.0
