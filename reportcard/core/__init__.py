"""Core modules for reportcard."""

from .aggregator import Aggregator, ChecksResult
from .check import BaseCheck, CheckOutcome, FileSummary, IssueLocation, Score
from .errors import AggregationError, ConfigError, DiscoveryError, ReportCardError
from .executor import ParallelExecutor
from .file_discovery import DiscoveryResult, FileDiscovery, quarantine
from .grade import DEFAULT_GRADE_TABLE, GradeTable, grade_from_percentage

__all__ = [
    "Aggregator",
    "ChecksResult",
    "BaseCheck",
    "CheckOutcome",
    "FileSummary",
    "IssueLocation",
    "Score",
    "AggregationError",
    "ConfigError",
    "DiscoveryError",
    "ReportCardError",
    "ParallelExecutor",
    "DiscoveryResult",
    "FileDiscovery",
    "quarantine",
    "DEFAULT_GRADE_TABLE",
    "GradeTable",
    "grade_from_percentage",
]
