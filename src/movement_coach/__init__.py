"""
Movement coach: rep counting and form feedback from 2-D pose keypoints.
"""

from .exercise_analysis import (
    AnalysisResult,
    ExerciseAnalyzerFactory,
    ExercisePhase,
    FormMistake,
    MistakeType,
    SessionState,
    SessionSummary,
)
from .feedback import FeedbackType
from .pose_detection import Joint, Keypoint, PoseFrame
from .movement_analyzer import ExerciseTarget, MovementAnalyzer

__version__ = "0.1.0"

__all__ = [
    'AnalysisResult',
    'ExerciseAnalyzerFactory',
    'ExercisePhase',
    'FormMistake',
    'MistakeType',
    'SessionState',
    'SessionSummary',
    'FeedbackType',
    'Joint',
    'Keypoint',
    'PoseFrame',
    'ExerciseTarget',
    'MovementAnalyzer'
]
