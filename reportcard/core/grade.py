"""Grade Module - Maps an aggregate percentage to a letter grade."""

import math
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from .errors import ConfigError

# (minimum percentage, grade), highest first
DEFAULT_THRESHOLDS: Tuple[Tuple[float, str], ...] = (
    (97.0, "A+"),
    (93.0, "A"),
    (90.0, "A-"),
    (87.0, "B+"),
    (83.0, "B"),
    (80.0, "B-"),
    (77.0, "C+"),
    (73.0, "C"),
    (70.0, "C-"),
    (67.0, "D+"),
    (63.0, "D"),
    (60.0, "D-"),
)

FAILING_GRADE = "F"


class GradeTable:
    """Step function from a percentage in [0, 100] to a grade.

    A percentage gets the grade of the highest breakpoint it reaches;
    anything below every breakpoint (or NaN) gets the floor grade.
    """

    def __init__(
        self,
        thresholds: Optional[Sequence[Tuple[float, str]]] = None,
        floor: str = FAILING_GRADE,
    ):
        """Initialize the grade table.

        Args:
            thresholds: (minimum, grade) pairs, strictly decreasing minimums
            floor: Grade for anything below the lowest minimum
        """
        if thresholds is None:
            thresholds = DEFAULT_THRESHOLDS
        self.thresholds = tuple((float(m), str(g)) for m, g in thresholds)
        self.floor = floor
        self._validate()

    def _validate(self) -> None:
        labels = [g for _, g in self.thresholds] + [self.floor]
        if len(set(labels)) != len(labels):
            raise ConfigError(f"grade labels must be unique: {labels}")

        previous = math.inf
        for minimum, grade in self.thresholds:
            if not math.isfinite(minimum):
                raise ConfigError(f"grade {grade!r} has a non-finite minimum")
            if minimum >= previous:
                raise ConfigError(
                    "grade minimums must be strictly decreasing, "
                    f"got {minimum} for {grade!r} after {previous}"
                )
            previous = minimum

    @classmethod
    def from_mapping(
        cls,
        mapping: Mapping[str, Any],
        floor: str = FAILING_GRADE,
    ) -> "GradeTable":
        """Create a grade table from a {grade: minimum} mapping.

        Args:
            mapping: Grade labels to minimum percentages, in any order
            floor: Grade for anything below the lowest minimum

        Returns:
            GradeTable sorted highest first
        """
        try:
            pairs = [(float(minimum), str(grade)) for grade, minimum in mapping.items()]
        except (TypeError, ValueError) as e:
            raise ConfigError(f"invalid grade table: {e}") from e
        pairs.sort(key=lambda p: p[0], reverse=True)
        return cls(pairs, floor=floor)

    def grade(self, percentage: float) -> str:
        """Get the grade for a percentage.

        Args:
            percentage: Score between 0 and 100

        Returns:
            Grade label
        """
        for minimum, grade in self.thresholds:
            if percentage >= minimum:
                return grade
        return self.floor

    @property
    def grades(self) -> Tuple[str, ...]:
        """All grades, best first."""
        return tuple(g for _, g in self.thresholds) + (self.floor,)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "thresholds": {g: m for m, g in self.thresholds},
            "floor": self.floor,
        }

    def __repr__(self) -> str:
        return f"GradeTable({self.thresholds!r}, floor={self.floor!r})"


DEFAULT_GRADE_TABLE = GradeTable()


def grade_from_percentage(percentage: float) -> str:
    """Get the grade for a percentage using the default table."""
    return DEFAULT_GRADE_TABLE.grade(percentage)
