"""Parallel Executor Module - Runs all checks concurrently."""

import asyncio
import logging
from typing import Callable, List, Optional, Sequence

from .check import BaseCheck, CheckOutcome, Score
from .errors import AggregationError

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, str], None]


class ParallelExecutor:
    """Executes a fixed list of checks in parallel and collects one score each."""

    def __init__(
        self,
        checks: Sequence[BaseCheck],
        timeout_per_check: Optional[float] = 300,
        progress_callback: Optional[ProgressCallback] = None,
    ):
        """Initialize the parallel executor.

        Args:
            checks: Checks to run, in declared order
            timeout_per_check: Timeout in seconds for each check (None for no limit)
            progress_callback: Called with (completed_count, total_count, check_name)
                               when each check completes
        """
        self.checks = list(checks)
        self.timeout_per_check = timeout_per_check
        self.progress_callback = progress_callback

    async def execute(self) -> List[Score]:
        """Execute all checks in parallel.

        Returns:
            Exactly one Score per check, in declared order
        """
        if not self.checks:
            raise AggregationError("no checks to run")

        completed_count = 0
        total = len(self.checks)

        async def run_check(check: BaseCheck) -> Score:
            nonlocal completed_count
            try:
                outcome = await self._outcome_for(check)
            finally:
                completed_count += 1
                if self.progress_callback:
                    self.progress_callback(completed_count, total, check.name)

            if outcome.error:
                logger.error("(%s) %s", check.name, outcome.error)

            return Score(
                name=check.name,
                description=check.description,
                weight=check.weight,
                percentage=outcome.percentage,
                file_summaries=outcome.file_summaries,
                error=outcome.error or None,
            )

        tasks = [asyncio.create_task(run_check(check)) for check in self.checks]
        return list(await asyncio.gather(*tasks))

    async def _outcome_for(self, check: BaseCheck) -> CheckOutcome:
        """Run one check, turning every failure into an errored outcome."""
        try:
            if not check.is_available():
                return CheckOutcome(percentage=0.0, error=f"{check.name}: tool not available")

            outcome = await asyncio.wait_for(
                check.percentage(),
                timeout=self.timeout_per_check,
            )
        except asyncio.TimeoutError:
            return CheckOutcome(
                percentage=0.0,
                error=f"timed out after {self.timeout_per_check}s",
            )
        except Exception as e:
            logger.debug("check %s raised", check.name, exc_info=True)
            return CheckOutcome(percentage=0.0, error=str(e) or type(e).__name__)

        if not isinstance(outcome, CheckOutcome):
            return CheckOutcome(
                percentage=0.0,
                error=f"returned {type(outcome).__name__} instead of CheckOutcome",
            )
        return outcome
