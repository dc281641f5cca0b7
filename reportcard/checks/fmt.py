"""Format Check - Files that black would reformat."""

import re
from pathlib import Path
from typing import Iterable, List

from ..core.check import IssueLocation
from .tool_check import ToolCheck

DIFF_FILE_RE = re.compile(r"^--- (?P<file>[^\t\n]+)")
HUNK_RE = re.compile(r"^@@ -(?P<line>\d+)")
WOULD_REFORMAT_RE = re.compile(r"^would reformat (?P<file>.+)$")

MESSAGE = "file is not formatted (run black)"


class FormatCheck(ToolCheck):
    """black-based formatting check.

    Every diff hunk black would apply becomes one issue at the hunk's
    first line.
    """

    name = "fmt"
    description = "Files formatted the way black would format them"
    weight = 0.30
    tool = "black"
    ok_return_codes = (0, 1)
    # 123: some files could not be parsed; the others are still reported
    partial_return_codes = (123,)

    def build_command(self) -> List[str]:
        return ["black", "--check", "--diff", "--no-color", "--", *self.filenames]

    def parse_output(self, stdout: str, stderr: str) -> Iterable[IssueLocation]:
        issues: List[IssueLocation] = []
        flagged = set()
        current = None

        for line in stdout.splitlines():
            match = DIFF_FILE_RE.match(line)
            if match:
                current = self._relative(match.group("file").strip())
                continue
            match = HUNK_RE.match(line)
            if match and current:
                issues.append(IssueLocation(current, int(match.group("line")), MESSAGE))
                flagged.add(current)

        # Files reported without a usable diff still count once
        for line in stderr.splitlines():
            match = WOULD_REFORMAT_RE.match(line.strip())
            if match:
                filename = self._relative(match.group("file").strip())
                if filename not in flagged:
                    issues.append(IssueLocation(filename, 0, MESSAGE))
                    flagged.add(filename)

        return issues

    def error_summary(self, stderr: str) -> str:
        for line in stderr.splitlines():
            if line.startswith("error:"):
                return line.strip()
        return super().error_summary(stderr)

    def _relative(self, filename: str) -> str:
        path = Path(filename)
        if path.is_absolute():
            try:
                return path.relative_to(self.root.resolve()).as_posix()
            except ValueError:
                return path.as_posix()
        return path.as_posix()
