"""
Mistake and feedback synthesis shared by the exercise analyzers.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Optional


class MistakeType(Enum):
    """Technique mistakes. Declaration order breaks ties between equally severe mistakes."""
    KNEES_CAVE_IN = "knees_cave_in"
    FORWARD_LEAN = "forward_lean"
    SHALLOW_DEPTH = "shallow_depth"
    ARM_POSITION = "arm_position"
    ASYMMETRIC_MOVEMENT = "asymmetric_movement"
    SPEED_TOO_FAST = "speed_too_fast"
    BALANCE_ISSUE = "balance_issue"

    @property
    def priority(self) -> int:
        return list(MistakeType).index(self)


@dataclass(frozen=True)
class FormMistake:
    """A single detected technique mistake."""
    type: MistakeType
    severity: float  # 0.0 to 1.0
    timestamp: float
    description: str
    correction: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "severity": round(self.severity, 3),
            "timestamp": self.timestamp,
            "description": self.description,
            "correction": self.correction,
        }


class FeedbackType(Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    NEEDS_IMPROVEMENT = "needs_improvement"
    POOR = "poor"

    @property
    def score(self) -> float:
        return _FEEDBACK_SCORES[self]


_FEEDBACK_SCORES = {
    FeedbackType.EXCELLENT: 4.0,
    FeedbackType.GOOD: 3.0,
    FeedbackType.NEEDS_IMPROVEMENT: 2.0,
    FeedbackType.POOR: 1.0,
}


# --- Feedback Templates ---
class FeedbackGenerator:
    @staticmethod
    def position_in_view():
        return "Position yourself in view"
    @staticmethod
    def face_camera():
        return "Stand facing the camera"
    @staticmethod
    def move_closer():
        return "Move closer to camera"
    @staticmethod
    def show_arms():
        return "Make sure both arms are visible"
    @staticmethod
    def show_body():
        return "Make sure your whole body is visible"
    @staticmethod
    def get_in_plank():
        return "Get in plank position"


# Description / correction text per mistake type
MISTAKE_TEXT = {
    MistakeType.KNEES_CAVE_IN: ("Knees are caving inward", "Push knees out over your toes"),
    MistakeType.FORWARD_LEAN: ("Leaning too far forward", "Keep chest up and back straight"),
    MistakeType.SHALLOW_DEPTH: ("Squat depth too shallow", "Lower your hips below knee level"),
    MistakeType.ARM_POSITION: ("Arms are out of position", "Keep arms at shoulder height"),
    MistakeType.ASYMMETRIC_MOVEMENT: ("Asymmetric movement", "Keep both sides moving evenly"),
    MistakeType.SPEED_TOO_FAST: ("Moving too fast", "Slow down and control the movement"),
    MistakeType.BALANCE_ISSUE: ("Losing balance", "Engage your core and steady yourself"),
}


def scaled_severity(overshoot: float, scale: float) -> float:
    """Severity grows linearly with how far a metric overshoots its limit, capped at 1.0."""
    return max(0.0, min(1.0, overshoot * scale))


def make_mistake(mistake_type: MistakeType, severity: float, timestamp: float) -> FormMistake:
    description, correction = MISTAKE_TEXT[mistake_type]
    return FormMistake(
        type=mistake_type,
        severity=severity,
        timestamp=timestamp,
        description=description,
        correction=correction
    )


def primary_mistake(mistakes: Iterable[FormMistake]) -> Optional[FormMistake]:
    """Most severe mistake; equal severities resolve to the earlier MistakeType."""
    best = None
    for mistake in mistakes:
        if best is None or mistake.severity > best.severity:
            best = mistake
        elif mistake.severity == best.severity and mistake.type.priority < best.type.priority:
            best = mistake
    return best


def feedback_type_for_severity(severity: float, poor_threshold: float = 0.7) -> FeedbackType:
    return FeedbackType.POOR if severity > poor_threshold else FeedbackType.NEEDS_IMPROVEMENT
