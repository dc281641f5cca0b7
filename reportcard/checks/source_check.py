"""Source Check - Base class for checks implemented in-process."""

import asyncio
import logging
from abc import abstractmethod
from typing import Iterable, List

from ..core.check import BaseCheck, CheckOutcome, IssueLocation

logger = logging.getLogger(__name__)


class SourceCheck(BaseCheck):
    """A check that reads each file and analyzes it without external tools.

    The analysis runs in a worker thread so it does not block the checks
    running alongside it.
    """

    async def percentage(self) -> CheckOutcome:
        """Analyze every file and score the ones without issues."""
        return await asyncio.to_thread(self._analyze_all)

    @abstractmethod
    def check_file(self, filename: str, source: str) -> Iterable[IssueLocation]:
        """Find the issues in one file.

        Args:
            filename: Path relative to the root, used in issue locations
            source: File contents

        Raises:
            SyntaxError: The file cannot be parsed; it is then ignored
        """

    def _analyze_all(self) -> CheckOutcome:
        issues: List[IssueLocation] = []
        unreadable: List[str] = []

        for filename in self.filenames:
            try:
                source = (self.root / filename).read_text(encoding="utf-8", errors="replace")
            except OSError as e:
                unreadable.append(f"{filename}: {e.strerror or e}")
                continue

            try:
                issues.extend(self.check_file(filename, source))
            except (SyntaxError, ValueError) as e:
                logger.debug("%s: ignoring unparsable %s: %s", self.name, filename, e)

        error = None
        if unreadable:
            error = f"could not read {len(unreadable)} file(s): {unreadable[0]}"
        return self._outcome(issues, error=error)
