import copy
import json
import os
from typing import Any, Dict, Mapping, Optional

from ..utils.logger import get_logger

logger = get_logger("AnalyzerConfig")

_DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(__file__), "analyzer_config.json")


def _read_json(config_path: str) -> Any:
    with open(config_path, "r") as f:
        return json.load(f)


# Shipped values; user config files are overlaid on top of these.
DEFAULT_CONFIG: Dict[str, Dict[str, Any]] = _read_json(_DEFAULT_CONFIG_PATH)


def load_analyzer_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Load analyzer config from JSON file, merged over the shipped defaults."""
    if config_path is None:
        return copy.deepcopy(DEFAULT_CONFIG)
    try:
        loaded = _read_json(config_path)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Could not load analyzer config from {config_path}: {e}. Using defaults.")
        return copy.deepcopy(DEFAULT_CONFIG)
    if not isinstance(loaded, dict):
        logger.warning(f"Analyzer config {config_path} is not a JSON object. Using defaults.")
        return copy.deepcopy(DEFAULT_CONFIG)
    return merge_config(DEFAULT_CONFIG, loaded)


def merge_config(base: Mapping[str, Any], override: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Recursively overlay `override` onto a copy of `base`."""
    merged = copy.deepcopy(dict(base))
    if not override:
        return merged
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


_ANALYZER_CONFIG = load_analyzer_config()


def get_section(name: str, override: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """Config section `name` from the shipped file, with `override` applied on top."""
    section = _ANALYZER_CONFIG.get(name)
    if section is None:
        logger.warning(f"No config section '{name}', using an empty section.")
        section = {}
    return merge_config(section, override)
