"""Tool Check - Base class for checks that wrap an external command."""

import re
from abc import abstractmethod
from typing import Iterable, List, Sequence

from ..core.check import BaseCheck, CheckOutcome, IssueLocation

# path:line[:col]: message
LINE_RE = re.compile(r"^(?P<file>.+?):(?P<line>\d+):(?:\d+:)?\s*(?P<message>.*)$")


class ToolCheck(BaseCheck):
    """A check that runs a command-line tool over every file at once.

    Subclasses set ``tool`` and implement :meth:`build_command` and
    :meth:`parse_output`.
    """

    tool: str = ""
    # Exit statuses that mean the tool ran to completion
    ok_return_codes: Sequence[int] = (0, 1)
    # Exit statuses that mean some files could not be analyzed; the output
    # for the rest is still scored
    partial_return_codes: Sequence[int] = ()

    def is_available(self) -> bool:
        """Check if the tool is installed and available."""
        return self._check_tool_available(self.tool)

    @abstractmethod
    def build_command(self) -> List[str]:
        """Build the tool command for all files."""

    @abstractmethod
    def parse_output(self, stdout: str, stderr: str) -> Iterable[IssueLocation]:
        """Turn tool output into issues.

        Raises:
            ValueError: The output is not in the expected format
        """

    def error_summary(self, stderr: str) -> str:
        """Pick the line of stderr that best describes a failure."""
        return first_line(stderr)

    async def percentage(self) -> CheckOutcome:
        """Run the tool and score the files it did not flag."""
        if not self.filenames:
            return self._outcome([])

        # The executor bounds the run time and cancels the command
        return_code, stdout, stderr = await self._run_command(self.build_command())

        if return_code in self.ok_return_codes:
            error = None
        elif return_code in self.partial_return_codes:
            error = f"{self.tool} reported errors ({return_code}): {self.error_summary(stderr)}"
        else:
            return CheckOutcome(
                percentage=0.0,
                error=f"{self.tool} failed ({return_code}): {self.error_summary(stderr)}",
            )

        try:
            issues = self.parse_output(stdout, stderr)
        except ValueError as e:
            return CheckOutcome(percentage=0.0, error=str(e))

        return self._outcome(self._known(issues), error=error)

    def _known(self, issues: Iterable[IssueLocation]) -> List[IssueLocation]:
        """Drop issues for files that were not part of the run."""
        wanted = set(self.filenames)
        return [i for i in issues if i.filename in wanted]

    @staticmethod
    def parse_lines(output: str) -> List[IssueLocation]:
        """Parse ``path:line[:col]: message`` lines, ignoring anything else."""
        issues = []
        for raw in output.splitlines():
            match = LINE_RE.match(raw.strip())
            if match:
                issues.append(IssueLocation(
                    filename=_normalize(match.group("file")),
                    line_number=int(match.group("line")),
                    message=match.group("message").strip(),
                ))
        return issues


def _normalize(filename: str) -> str:
    filename = filename.replace("\\", "/")
    return filename[2:] if filename.startswith("./") else filename


def first_line(text: str) -> str:
    for line in text.splitlines():
        if line.strip():
            return line.strip()
    return "no output"
