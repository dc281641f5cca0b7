"""Aggregator Module - Folds check scores into the final report card."""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, Optional, Sequence, Set, Tuple

from .check import Score
from .errors import AggregationError
from .grade import DEFAULT_GRADE_TABLE, GradeTable


@dataclass(frozen=True)
class ChecksResult:
    """Overall report card for one run."""
    files: int
    checks: Tuple[Score, ...]
    average: float  # 0-1
    issues: int
    grade: str
    did_error: bool = False
    skipped: Tuple[str, ...] = ()
    calculated_at: datetime = field(default_factory=datetime.now)

    @property
    def percentage(self) -> float:
        """Average expressed on a 0-100 scale."""
        return self.average * 100

    @property
    def failed_checks(self) -> Tuple[Score, ...]:
        """Checks that reported an error."""
        return tuple(c for c in self.checks if not c.success)

    def passes(self, threshold: float) -> bool:
        """Whether the percentage reaches a 0-100 threshold."""
        return self.percentage >= threshold

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "grade": self.grade,
            "average": self.average,
            "files": self.files,
            "issues": self.issues,
            "did_error": self.did_error,
            "skipped": list(self.skipped),
            "checks": [c.to_dict() for c in self.checks],
            "calculated_at": self.calculated_at.isoformat(),
        }


class Aggregator:
    """Computes the weighted report card from check scores."""

    def __init__(self, grade_table: Optional[GradeTable] = None):
        """Initialize the aggregator.

        Args:
            grade_table: Percentage to grade policy (default table if None)
        """
        self.grade_table = grade_table or DEFAULT_GRADE_TABLE

    def aggregate(
        self,
        scores: Iterable[Score],
        files: int,
        skipped: Sequence[str] = (),
    ) -> ChecksResult:
        """Build the report card from all collected scores.

        Errored scores take part in the average with whatever percentage
        they carry.

        Args:
            scores: One score per check, in any order
            files: Number of files analyzed
            skipped: Files left out of the analysis

        Returns:
            ChecksResult with checks ordered heaviest first
        """
        scores = list(scores)
        if not scores:
            raise AggregationError("at least one check score is required")

        for score in scores:
            if not math.isfinite(score.weight) or score.weight <= 0:
                raise AggregationError(
                    f"check {score.name!r} has non-positive weight {score.weight}"
                )

        total_weight = math.fsum(s.weight for s in scores)
        if not math.isfinite(total_weight) or total_weight <= 0:
            raise AggregationError(f"total weight must be positive, got {total_weight}")

        average = math.fsum(s.percentage * s.weight for s in scores) / total_weight

        return ChecksResult(
            files=files,
            checks=self.order(scores),
            average=average,
            issues=len(self.issue_files(scores)),
            grade=self.grade_table.grade(average * 100),
            did_error=any(not s.success for s in scores),
            skipped=tuple(skipped),
        )

    @staticmethod
    def order(scores: Iterable[Score]) -> Tuple[Score, ...]:
        """Sort scores by weight descending, then by name."""
        return tuple(sorted(scores, key=lambda s: (-s.weight, s.name)))

    @staticmethod
    def issue_files(scores: Iterable[Score]) -> Set[str]:
        """Get the distinct filenames flagged by any check."""
        return {
            fs.filename
            for score in scores
            for fs in score.file_summaries
        }
