"""Vet Check - Suspicious constructs reported by pyflakes."""

from typing import Iterable, List

from ..core.check import IssueLocation
from .tool_check import ToolCheck


class VetCheck(ToolCheck):
    """pyflakes-based check for unused imports, undefined names and syntax errors."""

    name = "vet"
    description = "Suspicious constructs such as undefined names or unused imports"
    weight = 0.25
    tool = "pyflakes"
    # 1 means warnings were reported
    ok_return_codes = (0, 1)

    def build_command(self) -> List[str]:
        return ["pyflakes", *self.filenames]

    def parse_output(self, stdout: str, stderr: str) -> Iterable[IssueLocation]:
        # Syntax errors go to stderr, followed by the offending source line
        return self.parse_lines(stdout) + self.parse_lines(stderr)
