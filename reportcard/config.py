"""Configuration loading for reportcard.

Settings come from, in increasing priority: defaults, a YAML file
(``.reportcard.yml`` in the graded tree, or an explicit path), and
environment variables (a ``.env`` file is loaded first).
"""

import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, Mapping, Optional

import yaml
from dotenv import find_dotenv, load_dotenv

from .core.errors import ConfigError
from .core.grade import DEFAULT_GRADE_TABLE, FAILING_GRADE, GradeTable

CONFIG_FILENAME = ".reportcard.yml"

DEFAULT_THRESHOLD = 90.0
DEFAULT_TIMEOUT = 300.0
DEFAULT_MAX_FILE_SIZE = 1024 * 1024


def _env_float(name: str, default: Optional[float]) -> Optional[float]:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {value!r}") from e


def _as_float(key: str, value: Any) -> float:
    try:
        result = float(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{key} must be a number, got {value!r}") from e
    if not math.isfinite(result):
        raise ConfigError(f"{key} must be finite, got {value!r}")
    return result


@dataclass(frozen=True)
class Settings:
    threshold: float = DEFAULT_THRESHOLD
    timeout: Optional[float] = DEFAULT_TIMEOUT
    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    exclude_dirs: FrozenSet[str] = frozenset()
    weights: Mapping[str, float] = field(default_factory=dict)
    disabled: FrozenSet[str] = frozenset()
    grades: GradeTable = DEFAULT_GRADE_TABLE

    def __post_init__(self):
        if not 0 <= self.threshold <= 100:
            raise ConfigError(f"threshold must be between 0 and 100, got {self.threshold}")
        if self.timeout is not None and self.timeout <= 0:
            raise ConfigError(f"timeout must be positive, got {self.timeout}")
        for name, weight in self.weights.items():
            if weight <= 0:
                raise ConfigError(f"weight of {name!r} must be positive, got {weight}")


def _settings_from_mapping(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Translate a parsed YAML document into Settings keyword arguments."""
    known = {"threshold", "timeout", "max_file_size", "exclude_dirs", "weights", "disable", "grades"}
    unknown = set(data) - known
    if unknown:
        raise ConfigError(f"unknown configuration keys: {', '.join(sorted(unknown))}")

    kwargs: Dict[str, Any] = {}
    if "threshold" in data:
        kwargs["threshold"] = _as_float("threshold", data["threshold"])
    if "timeout" in data:
        kwargs["timeout"] = None if data["timeout"] is None else _as_float("timeout", data["timeout"])
    if "max_file_size" in data:
        kwargs["max_file_size"] = int(_as_float("max_file_size", data["max_file_size"]))
    if "exclude_dirs" in data:
        kwargs["exclude_dirs"] = frozenset(str(d) for d in data["exclude_dirs"] or ())
    if "weights" in data:
        weights = data["weights"] or {}
        if not isinstance(weights, Mapping):
            raise ConfigError("weights must be a mapping of check name to weight")
        kwargs["weights"] = {str(k): _as_float(f"weights.{k}", v) for k, v in weights.items()}
    if "disable" in data:
        kwargs["disabled"] = frozenset(str(d) for d in data["disable"] or ())
    if "grades" in data:
        grades = data["grades"] or {}
        if not isinstance(grades, Mapping):
            raise ConfigError("grades must be a mapping of grade to minimum percentage")
        grades = dict(grades)
        floor = str(grades.pop("floor", FAILING_GRADE))
        kwargs["grades"] = GradeTable.from_mapping(grades, floor=floor)
    return kwargs


def read_config_file(path: str | Path) -> Dict[str, Any]:
    """Read a YAML configuration file.

    Args:
        path: Path to the file

    Returns:
        Parsed mapping (empty for an empty file)
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"could not read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping")
    return data


def load_settings(
    root: str | Path = ".",
    config_path: Optional[str | Path] = None,
    **overrides: Any,
) -> Settings:
    """Load settings for grading a tree.

    Args:
        root: Root of the graded tree, searched for .reportcard.yml
        config_path: Explicit configuration file (must exist)
        **overrides: Values that win over every other source (None is ignored)

    Returns:
        Settings
    """
    load_dotenv(find_dotenv(usecwd=True))

    kwargs: Dict[str, Any] = {}
    if config_path is None:
        candidate = Path(root) / CONFIG_FILENAME
        if candidate.is_file():
            config_path = candidate
    if config_path is not None:
        kwargs.update(_settings_from_mapping(read_config_file(config_path)))

    kwargs["threshold"] = _env_float("REPORTCARD_THRESHOLD", kwargs.get("threshold", DEFAULT_THRESHOLD))
    kwargs["timeout"] = _env_float("REPORTCARD_TIMEOUT", kwargs.get("timeout", DEFAULT_TIMEOUT))

    kwargs.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**kwargs)
