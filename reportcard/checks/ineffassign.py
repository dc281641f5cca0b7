"""Ineffectual Assignment Check - Local values that are never read."""

import ast
from typing import Dict, List, Set

from ..core.check import IssueLocation
from .source_check import SourceCheck

_FUNCTIONS = (ast.FunctionDef, ast.AsyncFunctionDef)
_SCOPE_INTROSPECTION = {"locals", "vars", "eval", "exec"}


class _FunctionScope(ast.NodeVisitor):
    """Collects local stores and every name read in one function."""

    def __init__(self, function: ast.AST):
        self.function = function
        self.stores: Dict[str, int] = {}
        self.loads: Set[str] = set()
        self.declared: Set[str] = set()
        self.introspects = False

    def collect(self) -> "_FunctionScope":
        for node in ast.iter_child_nodes(self.function):
            self.visit(node)
        return self

    def _store(self, target: ast.AST) -> None:
        if isinstance(target, ast.Name):
            self.stores.setdefault(target.id, target.lineno)

    def visit_Assign(self, node: ast.Assign) -> None:
        for target in node.targets:
            self._store(target)
        self.generic_visit(node)

    def visit_AnnAssign(self, node: ast.AnnAssign) -> None:
        if node.value is not None:
            self._store(node.target)
        self.generic_visit(node)

    def visit_AugAssign(self, node: ast.AugAssign) -> None:
        self._store(node.target)
        self.generic_visit(node)

    def visit_NamedExpr(self, node: ast.NamedExpr) -> None:
        self._store(node.target)
        self.generic_visit(node)

    def visit_Global(self, node: ast.Global) -> None:
        self.declared.update(node.names)

    def visit_Nonlocal(self, node: ast.Nonlocal) -> None:
        self.declared.update(node.names)

    def visit_Name(self, node: ast.Name) -> None:
        if isinstance(node.ctx, (ast.Load, ast.Del)):
            self.loads.add(node.id)
            if node.id in _SCOPE_INTROSPECTION:
                self.introspects = True

    def visit_FunctionDef(self, node: ast.FunctionDef) -> None:
        self._visit_nested(node)

    def visit_AsyncFunctionDef(self, node: ast.AsyncFunctionDef) -> None:
        self._visit_nested(node)

    def visit_Lambda(self, node: ast.Lambda) -> None:
        self._visit_nested(node)

    def visit_ClassDef(self, node: ast.ClassDef) -> None:
        self._visit_nested(node)

    def _visit_nested(self, node: ast.AST) -> None:
        # Closures may read our locals; their own stores are not ours
        for child in ast.walk(node):
            if isinstance(child, ast.Name) and isinstance(child.ctx, (ast.Load, ast.Del)):
                self.loads.add(child.id)

    def unread(self) -> Dict[str, int]:
        if self.introspects:
            return {}
        return {
            name: line
            for name, line in self.stores.items()
            if name not in self.loads
            and name not in self.declared
            and not name.startswith("_")
        }


class IneffAssignCheck(SourceCheck):
    """Flags local variables that are assigned but whose value is never read."""

    name = "ineffassign"
    description = "Local assignments whose value is never used"
    weight = 0.05

    def check_file(self, filename: str, source: str) -> List[IssueLocation]:
        tree = ast.parse(source, filename=filename)
        issues = []
        for node in ast.walk(tree):
            if not isinstance(node, _FUNCTIONS):
                continue
            unread = _FunctionScope(node).collect().unread()
            for name, line in sorted(unread.items(), key=lambda item: item[1]):
                issues.append(IssueLocation(
                    filename=filename,
                    line_number=line,
                    message=f"ineffectual assignment to {name}",
                ))
        return issues
