"""
Exercise analysis package for form validation and movement analysis.
"""

from .session import ExercisePhase, FormMistake, MistakeType, SessionState, SessionSummary
from .base_analyzer import AnalysisResult, BaseExerciseAnalyzer
from .factory import ANALYZER_REGISTRY, ExerciseAnalyzerFactory, normalize_exercise_id, register_analyzer

# Importing the analyzers registers them with the factory
from .squat_analyzer import SquatAnalyzer
from .shoulder_raise_analyzer import ShoulderRaiseAnalyzer
from .balance_analyzer import BalanceAnalyzer
from .arm_circle_analyzer import ArmCircleAnalyzer
from .lunge_analyzer import LungeAnalyzer
from .plank_analyzer import PlankAnalyzer
from .generic_analyzer import GenericAnalyzer

__all__ = [
    'ExercisePhase',
    'FormMistake',
    'MistakeType',
    'SessionState',
    'SessionSummary',
    'AnalysisResult',
    'BaseExerciseAnalyzer',
    'ANALYZER_REGISTRY',
    'ExerciseAnalyzerFactory',
    'normalize_exercise_id',
    'register_analyzer',
    'SquatAnalyzer',
    'ShoulderRaiseAnalyzer',
    'BalanceAnalyzer',
    'ArmCircleAnalyzer',
    'LungeAnalyzer',
    'PlankAnalyzer',
    'GenericAnalyzer'
]
