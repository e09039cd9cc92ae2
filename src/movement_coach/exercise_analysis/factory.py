from typing import Any, Dict, List, Mapping, Optional, Type

from ..utils.logger import get_logger
from .config_utils import get_section

logger = get_logger("AnalyzerFactory")

# --- Analyzer Registry ---
ANALYZER_REGISTRY: Dict[str, Type] = {}


def normalize_exercise_id(exercise_id: str) -> str:
    """'Arm-Circles' and 'arm circles' both resolve to 'arm_circles'."""
    return exercise_id.strip().lower().replace("-", "_").replace(" ", "_")


def register_analyzer(*exercise_ids):
    def decorator(cls):
        for exercise_id in exercise_ids:
            ANALYZER_REGISTRY[normalize_exercise_id(exercise_id)] = cls
        return cls
    return decorator


class ExerciseAnalyzerFactory:
    """
    Maps exercise identifiers to analyzer instances.

    Every call to create() returns a fresh analyzer, so two sessions never
    share hysteresis state. Unknown identifiers fall back to the configured
    fallback exercise instead of failing.
    """

    def __init__(
        self,
        fallback_exercise: Optional[str] = None,
        analyzer_configs: Optional[Mapping[str, Mapping[str, Any]]] = None
    ):
        """
        Args:
            fallback_exercise: Analyzer used for unknown ids. Defaults to the
                "factory.fallback_exercise" config value.
            analyzer_configs: Per-section config overrides, keyed by config
                section name (e.g. {"squat": {"minimum_hold_time": 0.5}})
        """
        if fallback_exercise is None:
            fallback_exercise = get_section("factory").get("fallback_exercise", "generic")
        self.fallback_exercise = normalize_exercise_id(fallback_exercise)
        if self.fallback_exercise not in ANALYZER_REGISTRY:
            raise ValueError(f"Fallback exercise '{fallback_exercise}' has no registered analyzer")
        self.analyzer_configs = dict(analyzer_configs or {})

    def create(self, exercise_id: str):
        key = normalize_exercise_id(exercise_id)
        analyzer_cls = ANALYZER_REGISTRY.get(key)
        if analyzer_cls is None:
            logger.warning(f"No analyzer for exercise '{exercise_id}', using '{self.fallback_exercise}'")
            analyzer_cls = ANALYZER_REGISTRY[self.fallback_exercise]
        return analyzer_cls(self.analyzer_configs.get(analyzer_cls.config_section))

    def is_supported(self, exercise_id: str) -> bool:
        return normalize_exercise_id(exercise_id) in ANALYZER_REGISTRY

    @staticmethod
    def supported_exercises() -> List[str]:
        return sorted(ANALYZER_REGISTRY)
