"""Check implementations for reportcard."""

from pathlib import Path
from typing import List, Optional, Sequence, Type

from ..config import Settings
from ..core.check import BaseCheck
from ..core.errors import ConfigError
from .cyclo import CycloCheck
from .fmt import FormatCheck
from .ineffassign import IneffAssignCheck
from .lint import LintCheck
from .misspell import MisspellCheck
from .vet import VetCheck

# Declared order; ties in weight are reported in name order
CHECK_CLASSES: Sequence[Type[BaseCheck]] = (
    FormatCheck,
    VetCheck,
    LintCheck,
    CycloCheck,
    MisspellCheck,
    IneffAssignCheck,
)

CHECK_NAMES = tuple(cls.name for cls in CHECK_CLASSES)


def default_checks(
    root: str | Path,
    filenames: Sequence[str],
    settings: Optional[Settings] = None,
) -> List[BaseCheck]:
    """Build the standard check list for a tree.

    Args:
        root: Root directory of the source tree
        filenames: Files to analyze, relative to root
        settings: Weight overrides and disabled checks

    Returns:
        Checks in declared order, minus disabled ones
    """
    weights = dict(settings.weights) if settings else {}
    disabled = set(settings.disabled) if settings else set()

    unknown = (set(weights) | disabled) - set(CHECK_NAMES)
    if unknown:
        raise ConfigError(f"unknown checks: {', '.join(sorted(unknown))}")

    return [
        cls(root, filenames, weight=weights.get(cls.name))
        for cls in CHECK_CLASSES
        if cls.name not in disabled
    ]


__all__ = [
    "CHECK_CLASSES",
    "CHECK_NAMES",
    "CycloCheck",
    "FormatCheck",
    "IneffAssignCheck",
    "LintCheck",
    "MisspellCheck",
    "VetCheck",
    "default_checks",
]
