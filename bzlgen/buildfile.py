"""Minimal build-file syntax tree and printer.

Only the subset of the build language that generated files use is modelled:
string literals, bare identifiers, lists of expressions, keyword arguments
and call statements. ``format_file`` lays the tree out the way buildifier
does, so regenerated files diff cleanly against checked-in ones.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence, Union

_INDENT = "    "


@dataclass(frozen=True)
class StringExpr:
    """A double-quoted string literal."""

    value: str


@dataclass(frozen=True)
class LiteralExpr:
    """A bare token such as an identifier."""

    token: str


@dataclass(frozen=True)
class ListExpr:
    """A list literal."""

    items: tuple["Expr", ...] = ()


@dataclass(frozen=True)
class KeywordArg:
    """A ``name = value`` argument of a call."""

    name: str
    value: "Expr"


@dataclass(frozen=True)
class CallExpr:
    """A function call statement such as ``go_library(...)`` or ``load(...)``."""

    func: str
    args: tuple[Union["Expr", KeywordArg], ...] = ()
    force_compact: bool = False

    def keyword(self, name: str) -> "Expr | None":
        """Return the value of keyword argument ``name`` if present."""
        for arg in self.args:
            if isinstance(arg, KeywordArg) and arg.name == name:
                return arg.value
        return None


Expr = Union[StringExpr, LiteralExpr, ListExpr, CallExpr]


@dataclass
class File:
    """A build file: a path relative to the repository root and its statements."""

    path: str
    stmts: List[CallExpr] = field(default_factory=list)

    def rules(self, kind: str) -> List[CallExpr]:
        """Return the call statements invoking ``kind``."""
        return [stmt for stmt in self.stmts if stmt.func == kind]


def string_list(values: Sequence[str]) -> ListExpr:
    """Build a list literal of strings."""
    return ListExpr(tuple(StringExpr(value) for value in values))


def format_file(file: File) -> str:
    """Render ``file`` as build-file text."""
    if not file.stmts:
        return ""
    return "\n\n".join(_format_call(stmt, 0) for stmt in file.stmts) + "\n"


def _format_call(call: CallExpr, depth: int) -> str:
    has_keywords = any(isinstance(arg, KeywordArg) for arg in call.args)
    if call.force_compact or not has_keywords:
        inner = ", ".join(_format_arg(arg, depth) for arg in call.args)
        return f"{call.func}({inner})"

    indent = _INDENT * (depth + 1)
    lines = [f"{call.func}("]
    for arg in call.args:
        lines.append(f"{indent}{_format_arg(arg, depth + 1)},")
    lines.append(f"{_INDENT * depth})")
    return "\n".join(lines)


def _format_arg(arg: Union[Expr, KeywordArg], depth: int) -> str:
    if isinstance(arg, KeywordArg):
        return f"{arg.name} = {_format_expr(arg.value, depth)}"
    return _format_expr(arg, depth)


def _format_expr(expr: Expr, depth: int) -> str:
    if isinstance(expr, StringExpr):
        return _quote(expr.value)
    if isinstance(expr, LiteralExpr):
        return expr.token
    if isinstance(expr, CallExpr):
        return _format_call(expr, depth)
    if isinstance(expr, ListExpr):
        if len(expr.items) <= 1:
            return "[" + "".join(_format_expr(item, depth) for item in expr.items) + "]"
        indent = _INDENT * (depth + 1)
        lines = ["["]
        for item in expr.items:
            lines.append(f"{indent}{_format_expr(item, depth + 1)},")
        lines.append(f"{_INDENT * depth}]")
        return "\n".join(lines)
    raise TypeError(f"unsupported expression: {expr!r}")


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return f'"{escaped}"'


__all__ = [
    "CallExpr",
    "Expr",
    "File",
    "KeywordArg",
    "ListExpr",
    "LiteralExpr",
    "StringExpr",
    "format_file",
    "string_list",
]
