from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

import numpy as np

from ..feedback.form_feedback import FormMistake, MistakeType


class ExercisePhase(Enum):
    """Exercise-agnostic movement phases; analyzers map their own sub-phases onto these."""
    READY = "ready"
    STARTING = "starting"
    MID_MOVEMENT = "mid_movement"
    PEAK = "peak"
    RETURNING = "returning"
    COMPLETED = "completed"


@dataclass
class SessionSummary:
    """End-of-session figures handed to the persistence layer."""
    exercise_id: str
    total_reps: int
    average_form_score: float
    duration: float
    peak_performance: float
    common_mistakes: List[FormMistake] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "exercise_id": self.exercise_id,
            "total_reps": self.total_reps,
            "average_form_score": round(self.average_form_score, 1),
            "duration_seconds": round(self.duration, 1),
            "peak_performance": round(self.peak_performance, 1),
            "common_mistakes": [m.to_dict() for m in self.common_mistakes],
        }


@dataclass
class SessionState:
    """
    Per-session accumulator mutated by exactly one analyzer.

    form_scores receives one value per analyzed frame (not per rep);
    detected_mistakes and form_scores only grow until reset().
    """
    exercise_id: str
    start_time: float
    rep_count: int = 0
    form_scores: List[float] = field(default_factory=list)
    detected_mistakes: List[FormMistake] = field(default_factory=list)
    current_phase: ExercisePhase = ExercisePhase.READY
    last_timestamp: Optional[float] = None

    def add_form_score(self, score: float) -> None:
        self.form_scores.append(float(min(100.0, max(0.0, score))))

    def add_mistake(self, mistake: FormMistake) -> None:
        self.detected_mistakes.append(mistake)

    def increment_reps(self, count: int = 1) -> int:
        self.rep_count += count
        return self.rep_count

    def mark_complete(self) -> None:
        """Binary exercises (holds) count as a single rep once finished."""
        self.rep_count = max(self.rep_count, 1)

    def average_form_score(self) -> float:
        if not self.form_scores:
            return 0.0
        return float(np.mean(self.form_scores))

    def peak_performance(self) -> float:
        return max(self.form_scores) if self.form_scores else 0.0

    def duration(self, now: Optional[float] = None) -> float:
        end = now if now is not None else self.last_timestamp
        if end is None:
            return 0.0
        return max(0.0, end - self.start_time)

    def common_mistakes(self, min_occurrences: int = 3) -> List[FormMistake]:
        """First occurrence of every mistake type seen at least `min_occurrences` times."""
        counts: Dict[MistakeType, int] = {}
        first_seen: Dict[MistakeType, FormMistake] = {}
        for mistake in self.detected_mistakes:
            counts[mistake.type] = counts.get(mistake.type, 0) + 1
            first_seen.setdefault(mistake.type, mistake)
        return [m for t, m in first_seen.items() if counts[t] >= min_occurrences]

    def summary(self, now: Optional[float] = None) -> SessionSummary:
        return SessionSummary(
            exercise_id=self.exercise_id,
            total_reps=self.rep_count,
            average_form_score=self.average_form_score(),
            duration=self.duration(now),
            peak_performance=self.peak_performance(),
            common_mistakes=self.common_mistakes(),
        )

    def reset(self, start_time: Optional[float] = None) -> None:
        """Clear everything except the exercise id; optionally restart the clock."""
        if start_time is not None:
            self.start_time = start_time
        self.rep_count = 0
        self.form_scores.clear()
        self.detected_mistakes.clear()
        self.current_phase = ExercisePhase.READY
        self.last_timestamp = None
