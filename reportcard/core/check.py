"""Base Check Module - Defines the check contract and its data models."""

import asyncio
import math
import shutil
from abc import ABC, abstractmethod
from collections import defaultdict
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from .errors import ConfigError


@dataclass(frozen=True)
class IssueLocation:
    """A single defect found by a check in one file."""
    filename: str
    line_number: int
    message: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert issue location to dictionary."""
        return {
            "filename": self.filename,
            "line_number": self.line_number,
            "message": self.message,
        }


@dataclass(frozen=True)
class FileSummary:
    """All issues one check found in one file, in line order."""
    filename: str
    errors: Tuple[IssueLocation, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        """Convert file summary to dictionary."""
        return {
            "filename": self.filename,
            "errors": [e.to_dict() for e in self.errors],
        }


def summarize(issues: Iterable[IssueLocation]) -> Tuple[FileSummary, ...]:
    """Group issues by filename.

    Files are sorted by name and issues by line number so that repeated runs
    produce identical output.
    """
    by_file: Dict[str, List[IssueLocation]] = defaultdict(list)
    for issue in issues:
        by_file[issue.filename].append(issue)

    return tuple(
        FileSummary(
            filename=filename,
            errors=tuple(sorted(by_file[filename], key=lambda i: i.line_number)),
        )
        for filename in sorted(by_file)
    )


@dataclass(frozen=True)
class CheckOutcome:
    """What a check returns from a single run.

    ``error`` is None on success. A failed run may still carry a partial
    percentage, which is used as-is in the aggregate.
    """
    percentage: float
    file_summaries: Tuple[FileSummary, ...] = ()
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        """Whether the check completed cleanly."""
        return self.error is None


@dataclass(frozen=True)
class Score:
    """Result of one check for one run, tagged with the check identity."""
    name: str
    description: str
    weight: float
    percentage: float
    file_summaries: Tuple[FileSummary, ...] = field(default_factory=tuple)
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        """Whether the check completed cleanly."""
        return self.error is None

    @property
    def issue_count(self) -> int:
        """Get total number of issues across all files."""
        return sum(len(fs.errors) for fs in self.file_summaries)

    def to_dict(self) -> Dict[str, Any]:
        """Convert score to dictionary."""
        return {
            "name": self.name,
            "description": self.description,
            "weight": self.weight,
            "percentage": self.percentage,
            "file_summaries": [fs.to_dict() for fs in self.file_summaries],
            "error": self.error,
        }


class BaseCheck(ABC):
    """Abstract base class for all checks.

    Subclasses set ``name``, ``description`` and ``weight`` and implement
    :meth:`percentage`.
    """

    name: str = ""
    description: str = ""
    weight: float = 1.0

    def __init__(
        self,
        root: str | Path,
        filenames: Sequence[str],
        weight: Optional[float] = None,
    ):
        """Initialize the check.

        Args:
            root: Root directory of the source tree
            filenames: Files to analyze, relative to root
            weight: Override for the class default weight
        """
        self.root = Path(root)
        self.filenames = list(filenames)
        if weight is not None:
            self.weight = weight
        if not math.isfinite(self.weight) or self.weight <= 0:
            raise ConfigError(
                f"weight of check {self.name!r} must be positive, got {self.weight}"
            )

    @abstractmethod
    async def percentage(self) -> CheckOutcome:
        """Run the check over its files.

        Returns:
            CheckOutcome with the clean fraction, file summaries and error
        """

    def is_available(self) -> bool:
        """Check if the underlying tool can run.

        Returns:
            True if the check can be used
        """
        return True

    def _outcome(
        self,
        issues: Iterable[IssueLocation],
        error: Optional[str] = None,
    ) -> CheckOutcome:
        """Build an outcome scoring the fraction of files with no issues.

        Args:
            issues: Every issue found
            error: Error message if the run was incomplete

        Returns:
            CheckOutcome for this run
        """
        summaries = summarize(issues)
        total = len(self.filenames)
        if total == 0:
            return CheckOutcome(percentage=1.0, file_summaries=summaries, error=error)

        flagged = len(summaries)
        return CheckOutcome(
            percentage=max(0.0, (total - flagged) / total),
            file_summaries=summaries,
            error=error,
        )

    async def _run_command(
        self,
        command: List[str],
        timeout: Optional[float] = None,
    ) -> tuple[int, str, str]:
        """Run a tool asynchronously from the root directory.

        The child process never outlives the call: it is killed and reaped
        on timeout and when the calling task is cancelled.

        Args:
            command: Command and arguments as list
            timeout: Timeout in seconds (None for no limit)

        Returns:
            Tuple of (return_code, stdout, stderr); return_code is -1 when
            the command could not be started or timed out
        """
        process = None
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=str(self.root),
            )

            stdout, stderr = await asyncio.wait_for(
                process.communicate(),
                timeout=timeout,
            )

            return (
                process.returncode or 0,
                stdout.decode("utf-8", errors="replace"),
                stderr.decode("utf-8", errors="replace"),
            )
        except asyncio.TimeoutError:
            return (-1, "", f"Command timed out after {timeout} seconds")
        except OSError as e:
            return (-1, "", str(e))
        finally:
            if process and process.returncode is None:
                try:
                    process.kill()
                except ProcessLookupError:
                    pass
                await process.wait()

    def _check_tool_available(self, tool_name: str) -> bool:
        """Check if a command-line tool is on PATH."""
        return shutil.which(tool_name) is not None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, weight={self.weight})"
