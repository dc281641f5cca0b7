"""Cyclomatic Complexity Check - Functions that are too complex."""

import ast
from typing import Iterable, List, Optional, Sequence

from ..core.check import IssueLocation
from .source_check import SourceCheck

DEFAULT_OVER = 15

_BRANCHES = (
    ast.If,
    ast.IfExp,
    ast.For,
    ast.AsyncFor,
    ast.While,
    ast.ExceptHandler,
    ast.match_case,
)
_FUNCTIONS = (ast.FunctionDef, ast.AsyncFunctionDef)


def complexity(function: ast.AST) -> int:
    """Cyclomatic complexity of a function body.

    1 plus one per branch point: if/elif, conditional expression, loop,
    except clause, match case, comprehension clause and each extra operand
    of ``and``/``or``. Nested functions and classes are measured on their own.
    """
    count = 1
    stack = list(ast.iter_child_nodes(function))
    while stack:
        node = stack.pop()
        if isinstance(node, _FUNCTIONS + (ast.ClassDef,)):
            continue
        if isinstance(node, _BRANCHES):
            count += 1
        elif isinstance(node, ast.BoolOp):
            count += len(node.values) - 1
        elif isinstance(node, ast.comprehension):
            count += 1 + len(node.ifs)
        stack.extend(ast.iter_child_nodes(node))
    return count


def _functions(tree: ast.AST, prefix: Sequence[str] = ()) -> Iterable[tuple]:
    """Yield (qualified name, node) for every function, depth first."""
    for node in ast.iter_child_nodes(tree):
        if isinstance(node, _FUNCTIONS):
            path = (*prefix, node.name)
            yield ".".join(path), node
            yield from _functions(node, path)
        elif isinstance(node, ast.ClassDef):
            yield from _functions(node, (*prefix, node.name))
        else:
            yield from _functions(node, prefix)


class CycloCheck(SourceCheck):
    """Flags functions whose cyclomatic complexity is over a limit."""

    name = "cyclo"
    description = f"Functions with a cyclomatic complexity over {DEFAULT_OVER}"
    weight = 0.10

    def __init__(self, root, filenames, weight: Optional[float] = None, over: int = DEFAULT_OVER):
        super().__init__(root, filenames, weight=weight)
        self.over = over

    def check_file(self, filename: str, source: str) -> List[IssueLocation]:
        tree = ast.parse(source, filename=filename)
        issues = []
        for qualname, node in _functions(tree):
            score = complexity(node)
            if score > self.over:
                issues.append(IssueLocation(
                    filename=filename,
                    line_number=node.lineno,
                    message=f"cyclomatic complexity {score} of function {qualname}() is high (> {self.over})",
                ))
        return issues
