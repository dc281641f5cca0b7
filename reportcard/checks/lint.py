"""Lint Check - Style problems reported by pylint."""

import json
from typing import Any, Dict, Iterable, List

from ..core.check import IssueLocation
from .tool_check import ToolCheck, first_line


class LintCheck(ToolCheck):
    """pylint-based style check."""

    name = "lint"
    description = "Style mistakes reported by pylint"
    weight = 0.10
    tool = "pylint"
    # pylint exit status is a bit mask of message kinds; 32 is a usage error
    ok_return_codes = tuple(range(32))

    def build_command(self) -> List[str]:
        return [
            "pylint",
            "--output-format=json",
            "--score=n",
            "--persistent=n",
            *self.filenames,
        ]

    def parse_output(self, stdout: str, stderr: str) -> Iterable[IssueLocation]:
        if not stdout.strip():
            return []

        try:
            data = json.loads(stdout)
        except json.JSONDecodeError:
            # Try to find JSON array in output
            json_start = stdout.find("[")
            try:
                if json_start == -1:
                    raise json.JSONDecodeError("no JSON array", stdout, 0)
                data = json.loads(stdout[json_start:])
            except json.JSONDecodeError as e:
                raise ValueError(f"unparsable pylint output: {first_line(stdout)}") from e

        if not isinstance(data, list):
            raise ValueError(f"unparsable pylint output: expected a list, got {type(data).__name__}")

        return [self._issue_from_message(m) for m in data if isinstance(m, dict)]

    @staticmethod
    def _issue_from_message(message: Dict[str, Any]) -> IssueLocation:
        symbol = message.get("symbol") or message.get("message-id") or "pylint"
        return IssueLocation(
            filename=str(message.get("path", "")).replace("\\", "/"),
            line_number=int(message.get("line") or 0),
            message=f"{message.get('message', '').strip()} ({symbol})",
        )
