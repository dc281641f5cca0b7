"""Exception hierarchy for reportcard.

ReportCardError is the root. Check-level failures are never raised past the
executor; they are recorded on the Score instead.
"""


class ReportCardError(Exception):
    """Root exception for the entire project."""


class ConfigError(ReportCardError):
    """Invalid configuration: bad weights, grade tables, thresholds."""


class DiscoveryError(ReportCardError):
    """Source discovery failed or found nothing to analyze."""


class AggregationError(ReportCardError):
    """Scores cannot be folded into a result (no checks, bad weights)."""
