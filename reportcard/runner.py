"""Runner Module - Discovers, checks and grades a source tree."""

import logging
from pathlib import Path
from typing import Optional, Sequence

from .checks import default_checks
from .config import Settings
from .core.aggregator import Aggregator, ChecksResult
from .core.check import BaseCheck
from .core.errors import DiscoveryError
from .core.executor import ParallelExecutor, ProgressCallback
from .core.file_discovery import FileDiscovery, quarantine

logger = logging.getLogger(__name__)


async def run(
    root: str | Path,
    settings: Optional[Settings] = None,
    checks: Optional[Sequence[BaseCheck]] = None,
    progress_callback: Optional[ProgressCallback] = None,
) -> ChecksResult:
    """Grade the source tree under root.

    Args:
        root: Root directory of the source tree
        settings: Run settings (defaults if None)
        checks: Checks to run instead of the default list
        progress_callback: Called with (completed, total, check_name)

    Returns:
        ChecksResult for the tree

    Raises:
        DiscoveryError: The tree could not be listed or has no source files
    """
    settings = settings or Settings()

    discovery = FileDiscovery(
        exclude_dirs=set(settings.exclude_dirs),
        max_file_size=settings.max_file_size,
    )
    discovered = discovery.discover(root)
    for error in discovered.errors:
        logger.warning(error)

    if not discovered.files:
        raise DiscoveryError(f"no .py files found in {discovered.root_path}")

    logger.info(
        "grading %d files in %s (%d skipped)",
        discovered.total_files, discovered.root_path, len(discovered.skipped),
    )

    with quarantine(discovered.root_path, discovered.skipped):
        if checks is None:
            checks = default_checks(discovered.root_path, discovered.files, settings)

        executor = ParallelExecutor(
            checks,
            timeout_per_check=settings.timeout,
            progress_callback=progress_callback,
        )
        scores = await executor.execute()

    return Aggregator(settings.grades).aggregate(
        scores,
        files=discovered.total_files,
        skipped=discovered.skipped,
    )
