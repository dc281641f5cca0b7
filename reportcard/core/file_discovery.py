"""File Discovery Module - Finds the source files to grade."""

import fnmatch
import logging
import os
import re
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Set

from .errors import DiscoveryError

logger = logging.getLogger(__name__)

SKIP_SUFFIX = ".skip"

# Generated-file header; only the head of the file is read
GENERATED_RE = re.compile(r"^#.*(Code generated .* DO NOT EDIT|@generated)")
GENERATED_HEADER_LINES = 5


@dataclass
class DiscoveryResult:
    """Result of file discovery operation."""
    root_path: Path
    files: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def total_files(self) -> int:
        """Get number of files to analyze."""
        return len(self.files)


class FileDiscovery:
    """Discovers the Python source files in a tree."""

    SOURCE_PATTERNS: List[str] = ["*.py"]

    # Directories to exclude from scanning
    EXCLUDE_DIRS: Set[str] = {
        ".git",
        ".svn",
        ".hg",
        "node_modules",
        "vendor",
        "third_party",
        "venv",
        ".venv",
        "env",
        "__pycache__",
        ".pytest_cache",
        ".mypy_cache",
        ".tox",
        ".nox",
        "dist",
        "build",
        ".eggs",
        "*.egg-info",
        "site-packages",
        ".idea",
        ".vscode",
    }

    def __init__(
        self,
        exclude_dirs: Optional[Set[str]] = None,
        max_file_size: int = 1024 * 1024,  # 1MB default
    ):
        """Initialize the file discovery.

        Args:
            exclude_dirs: Additional directories to exclude
            max_file_size: Files above this size in bytes are skipped
        """
        self.exclude_dirs = self.EXCLUDE_DIRS.copy()
        if exclude_dirs:
            self.exclude_dirs.update(exclude_dirs)

        self.max_file_size = max_file_size

    def discover(self, root_path: str | Path) -> DiscoveryResult:
        """Discover all source files under the given path.

        Args:
            root_path: Root directory to scan

        Returns:
            DiscoveryResult with paths relative to the root, sorted
        """
        root_path = Path(root_path).resolve()

        if not root_path.exists():
            raise DiscoveryError(f"path does not exist: {root_path}")

        if not root_path.is_dir():
            raise DiscoveryError(f"path is not a directory: {root_path}")

        result = DiscoveryResult(root_path=root_path)

        for current_path in self._walk_directory(root_path, result):
            relative_path = current_path.relative_to(root_path).as_posix()
            try:
                if current_path.stat().st_size > self.max_file_size:
                    logger.info("skipping %s: larger than %d bytes", relative_path, self.max_file_size)
                    result.skipped.append(relative_path)
                    continue

                if self._is_generated(current_path):
                    logger.info("skipping %s: generated file", relative_path)
                    result.skipped.append(relative_path)
                    continue

            except OSError as e:
                result.errors.append(f"Error processing {relative_path}: {e}")
                continue

            result.files.append(relative_path)

        result.files.sort()
        result.skipped.sort()
        return result

    def _walk_directory(self, root_path: Path, result: DiscoveryResult) -> Iterator[Path]:
        """Walk through directory tree, yielding source file paths."""

        def on_error(error: OSError) -> None:
            result.errors.append(f"Error listing {error.filename}: {error.strerror}")

        for dirpath, dirnames, filenames in os.walk(root_path, onerror=on_error):
            # Filter out excluded directories
            dirnames[:] = sorted(
                d for d in dirnames
                if d not in self.exclude_dirs and not any(
                    fnmatch.fnmatch(d, pattern) for pattern in self.exclude_dirs
                )
            )

            for filename in filenames:
                if any(fnmatch.fnmatch(filename, p) for p in self.SOURCE_PATTERNS):
                    yield Path(dirpath) / filename

    def _is_generated(self, file_path: Path) -> bool:
        """Check the head of a file for a generated-code marker."""
        with file_path.open("r", encoding="utf-8", errors="replace") as f:
            for _ in range(GENERATED_HEADER_LINES):
                line = f.readline()
                if not line:
                    break
                if GENERATED_RE.match(line):
                    return True
        return False


@contextmanager
def quarantine(root_path: str | Path, skipped: Sequence[str]) -> Iterator[List[str]]:
    """Hide skipped files from the tools for the duration of a run.

    Each file is renamed to ``<name>.skip`` on entry and restored on exit.
    Failures are logged and never raised.

    Args:
        root_path: Root directory the skipped paths are relative to
        skipped: Relative paths of files to hide

    Yields:
        The relative paths that were actually renamed
    """
    root_path = Path(root_path)
    renamed: List[str] = []

    for relative_path in skipped:
        path = root_path / relative_path
        hidden = path.with_name(path.name + SKIP_SUFFIX)
        if hidden.exists():
            logger.warning("Could not hide skipped file %s: %s already exists", relative_path, hidden.name)
            continue
        try:
            path.rename(hidden)
        except OSError as e:
            logger.warning("Could not hide skipped file %s: %s", relative_path, e)
            continue
        renamed.append(relative_path)

    try:
        yield renamed
    finally:
        for relative_path in renamed:
            path = root_path / relative_path
            try:
                path.with_name(path.name + SKIP_SUFFIX).rename(path)
            except OSError as e:
                logger.error("Could not restore skipped file %s: %s", relative_path, e)
