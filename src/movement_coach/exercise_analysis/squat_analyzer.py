from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from ..feedback.form_feedback import (
    FeedbackType,
    feedback_type_for_severity,
    make_mistake,
    primary_mistake,
    scaled_severity,
)
from ..pose_detection.pose_frame import Joint, PoseFrame
from ..utils.logger import get_logger
from .base_analyzer import AnalysisResult, BaseExerciseAnalyzer
from .factory import register_analyzer
from .pose_utils import angle_at, midpoint, vertical_deviation
from .session import ExercisePhase, FormMistake, MistakeType, SessionState

# --- Logger Setup ---
logger = get_logger("SquatAnalyzer")

_DEGENERATE_SPREAD = 1e-6


@dataclass
class SquatMetrics:
    left_knee_angle: float
    right_knee_angle: float
    hip_depth: float  # hip height / knee height, ~1.0 at parallel
    torso_lean: float  # degrees from vertical
    knee_tracking: float  # knee spread / hip spread
    symmetry: float  # |left - right| knee angle

    @property
    def average_knee_angle(self) -> float:
        return (self.left_knee_angle + self.right_knee_angle) / 2.0


@dataclass
class SquatFormAnalysis:
    form_score: float
    mistakes: List[FormMistake]


@dataclass
class SquatPhaseAnalysis:
    current_phase: ExercisePhase
    is_squatting: bool
    depth: float
    rep_counted: bool


@register_analyzer("squats", "squat")
class SquatAnalyzer(BaseExerciseAnalyzer):
    """
    Squat rep counter and form checker.

    A squat starts when the average knee angle drops below squat_knee_angle
    and ends when it comes back up. Entering is debounced by
    minimum_transition_time, leaving requires minimum_hold_time in the squat,
    and the rep only counts when the deepest angle reached was below
    counted_depth_angle.
    """

    config_section = "squat"
    required_joints = (
        Joint.LEFT_HIP, Joint.RIGHT_HIP,
        Joint.LEFT_KNEE, Joint.RIGHT_KNEE,
        Joint.LEFT_ANKLE, Joint.RIGHT_ANKLE,
        Joint.LEFT_SHOULDER, Joint.RIGHT_SHOULDER,
    )

    def __init__(self, config=None):
        super().__init__(config)
        self.squat_knee_angle = float(self.config["squat_knee_angle"])
        self.counted_depth_angle = float(self.config["counted_depth_angle"])
        self.peak_depth_angle = float(self.config["peak_depth_angle"])
        self.minimum_hold_time = float(self.config["minimum_hold_time"])
        self.minimum_transition_time = float(self.config["minimum_transition_time"])
        self.weights = {MistakeType(k): float(v) for k, v in self.config["weights"].items()}
        self._in_squat_position = False
        self._deepest_point = 0.0
        self._last_state_change: Optional[float] = None

    def analyze(self, frame: PoseFrame, history: Sequence[PoseFrame], session: SessionState) -> AnalysisResult:
        rejected = self._check_frame(frame, session)
        if rejected is not None:
            return rejected

        now = self._timestamp(frame, session)
        metrics = self._calculate_metrics(frame)
        form_analysis = self._analyze_form(metrics, session, now)
        phase_analysis = self._analyze_phase(metrics, session, now)
        return self._generate_feedback(form_analysis, phase_analysis, session)

    def _calculate_metrics(self, frame: PoseFrame) -> SquatMetrics:
        left_hip = frame.position(Joint.LEFT_HIP)
        right_hip = frame.position(Joint.RIGHT_HIP)
        left_knee = frame.position(Joint.LEFT_KNEE)
        right_knee = frame.position(Joint.RIGHT_KNEE)
        left_ankle = frame.position(Joint.LEFT_ANKLE)
        right_ankle = frame.position(Joint.RIGHT_ANKLE)
        left_shoulder = frame.position(Joint.LEFT_SHOULDER)
        right_shoulder = frame.position(Joint.RIGHT_SHOULDER)

        left_knee_angle = angle_at(left_hip, left_knee, left_ankle)
        right_knee_angle = angle_at(right_hip, right_knee, right_ankle)

        # Heights are measured up from the bottom of the image
        hip_height = 1.0 - (left_hip[1] + right_hip[1]) / 2.0
        knee_height = 1.0 - (left_knee[1] + right_knee[1]) / 2.0
        hip_depth = hip_height / knee_height if knee_height > _DEGENERATE_SPREAD else 1.0

        torso_lean = vertical_deviation(
            midpoint(left_shoulder, right_shoulder),
            midpoint(left_hip, right_hip)
        )

        knee_spread = abs(left_knee[0] - right_knee[0])
        hip_spread = abs(left_hip[0] - right_hip[0])
        knee_tracking = knee_spread / hip_spread if hip_spread > _DEGENERATE_SPREAD else 1.0

        return SquatMetrics(
            left_knee_angle=left_knee_angle,
            right_knee_angle=right_knee_angle,
            hip_depth=hip_depth,
            torso_lean=torso_lean,
            knee_tracking=knee_tracking,
            symmetry=abs(left_knee_angle - right_knee_angle)
        )

    def _analyze_form(self, metrics: SquatMetrics, session: SessionState, now: float) -> SquatFormAnalysis:
        mistakes: List[FormMistake] = []
        cfg = self.config

        if metrics.knee_tracking < cfg["knee_tracking_min"]:
            severity = scaled_severity(cfg["knee_tracking_min"] - metrics.knee_tracking, 2.0)
            mistakes.append(make_mistake(MistakeType.KNEES_CAVE_IN, severity, now))

        if metrics.hip_depth > cfg["hip_depth_max"]:
            severity = scaled_severity(metrics.hip_depth - cfg["hip_depth_max"], 3.0)
            mistakes.append(make_mistake(MistakeType.SHALLOW_DEPTH, severity, now))

        if metrics.torso_lean > cfg["torso_lean_max"]:
            severity = scaled_severity(metrics.torso_lean - cfg["torso_lean_max"], 1.0 / 30.0)
            mistakes.append(make_mistake(MistakeType.FORWARD_LEAN, severity, now))

        if metrics.symmetry > cfg["symmetry_max"]:
            severity = scaled_severity(metrics.symmetry - cfg["symmetry_max"], 1.0 / 30.0)
            mistakes.append(make_mistake(MistakeType.ASYMMETRIC_MOVEMENT, severity, now))

        form_score = 100.0
        for mistake in mistakes:
            form_score -= mistake.severity * self.weights.get(mistake.type, 0.0)
            session.add_mistake(mistake)
        form_score = max(0.0, form_score)
        session.add_form_score(form_score)

        return SquatFormAnalysis(form_score=form_score, mistakes=mistakes)

    def _analyze_phase(self, metrics: SquatMetrics, session: SessionState, now: float) -> SquatPhaseAnalysis:
        avg_knee_angle = metrics.average_knee_angle
        since_change = np.inf if self._last_state_change is None else now - self._last_state_change
        currently_squatting = avg_knee_angle < self.squat_knee_angle

        rep_counted = False
        current_phase = session.current_phase

        if currently_squatting and not self._in_squat_position:
            if since_change >= self.minimum_transition_time:
                self._in_squat_position = True
                self._last_state_change = now
                self._deepest_point = avg_knee_angle
                current_phase = self._depth_phase()
                logger.debug(f"Squat entered at {avg_knee_angle:.1f} deg")
        elif not currently_squatting and self._in_squat_position:
            if since_change >= self.minimum_hold_time:
                if self._deepest_point < self.counted_depth_angle:
                    session.increment_reps()
                    rep_counted = True
                    current_phase = ExercisePhase.COMPLETED
                    logger.info(f"Squat rep {session.rep_count} counted (depth {self._deepest_point:.1f} deg)")
                else:
                    current_phase = ExercisePhase.READY
                    logger.debug(f"Shallow squat ignored (depth {self._deepest_point:.1f} deg)")
                self._in_squat_position = False
                self._last_state_change = now
                self._deepest_point = 0.0
        elif currently_squatting and self._in_squat_position:
            self._deepest_point = min(self._deepest_point, avg_knee_angle)
            current_phase = self._depth_phase()

        session.current_phase = current_phase

        return SquatPhaseAnalysis(
            current_phase=current_phase,
            is_squatting=currently_squatting,
            depth=self._deepest_point,
            rep_counted=rep_counted
        )

    def _depth_phase(self) -> ExercisePhase:
        return ExercisePhase.PEAK if self._deepest_point < self.peak_depth_angle else ExercisePhase.MID_MOVEMENT

    def _generate_feedback(
        self,
        form_analysis: SquatFormAnalysis,
        phase_analysis: SquatPhaseAnalysis,
        session: SessionState
    ) -> AnalysisResult:
        feedback = "Keep going!"
        feedback_type = FeedbackType.GOOD

        mistake = primary_mistake(form_analysis.mistakes)
        if mistake is not None:
            feedback = mistake.correction
            feedback_type = feedback_type_for_severity(mistake.severity, self.config["poor_severity"])
        elif phase_analysis.is_squatting:
            if phase_analysis.current_phase == ExercisePhase.PEAK:
                feedback = "Perfect depth! Now stand up"
                feedback_type = FeedbackType.EXCELLENT
            else:
                feedback = "Keep lowering - go deeper"
        elif form_analysis.form_score > self.config["excellent_score"]:
            feedback = "Excellent form!"
            feedback_type = FeedbackType.EXCELLENT

        return self._result(session, feedback, feedback_type)

    def reset(self) -> None:
        self._in_squat_position = False
        self._deepest_point = 0.0
        self._last_state_change = None
