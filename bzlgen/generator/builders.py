"""Assembly of generated rules into build files."""

from __future__ import annotations

import posixpath
from typing import Dict, List, Optional, Protocol, Sequence

from ..buildfile import CallExpr, File, StringExpr
from ..rules import Rule

# Label of the file providing the Go rules.
GO_RULES_BZL = "@io_bazel_rules_go//go:def.bzl"

# Rule kinds that need to be loaded from GO_RULES_BZL.
_LOADABLE_KINDS = (
    "go_prefix",
    "go_library",
    "go_binary",
    "go_test",
    "cgo_library",
)


class FileBuilder(Protocol):
    """Accumulates rules per package directory and produces build files."""

    def add_rules(self, rel: str, rules: Sequence[Rule]) -> None:
        ...

    def is_empty(self) -> bool:
        ...

    def files(self) -> List[File]:
        ...


class StructuredFileBuilder:
    """Writes the rules of each package directory into that directory's build file."""

    def __init__(self, build_file_name: str = "BUILD", rules_bzl: str = GO_RULES_BZL) -> None:
        self.build_file_name = build_file_name
        self.rules_bzl = rules_bzl
        self._files: Dict[str, File] = {}

    def add_rules(self, rel: str, rules: Sequence[Rule]) -> None:
        file = self._files.get(rel)
        if file is None:
            path = posixpath.join(rel, self.build_file_name) if rel else self.build_file_name
            file = self._files[rel] = File(path=path)
        file.stmts.extend(rule.call() for rule in rules)

    def is_empty(self) -> bool:
        return not self._files

    def files(self) -> List[File]:
        for file in self._files.values():
            add_load(file, self.rules_bzl)
        return list(self._files.values())


class FlatFileBuilder:
    """Writes the rules of every package into a single build file at the root."""

    def __init__(self, build_file_name: str = "BUILD", rules_bzl: str = GO_RULES_BZL) -> None:
        self.rules_bzl = rules_bzl
        self._file = File(path=build_file_name)

    def add_rules(self, rel: str, rules: Sequence[Rule]) -> None:
        self._file.stmts.extend(rule.call() for rule in rules)

    def is_empty(self) -> bool:
        return not self._file.stmts

    def files(self) -> List[File]:
        if self.is_empty():
            return []
        add_load(self._file, self.rules_bzl)
        return [self._file]


def generate_load(file: File, rules_bzl: str = GO_RULES_BZL) -> Optional[CallExpr]:
    """Return the load statement for the rule kinds used in ``file``, if any."""
    kinds = [kind for kind in _LOADABLE_KINDS if file.rules(kind)]
    if not kinds:
        return None
    return load_expr(rules_bzl, kinds)


def load_expr(rules_bzl: str, kinds: Sequence[str]) -> CallExpr:
    """Build ``load(rules_bzl, kinds...)`` with the kinds sorted."""
    args = [StringExpr(rules_bzl)] + [StringExpr(kind) for kind in sorted(set(kinds))]
    return CallExpr("load", tuple(args), force_compact=True)


def add_load(file: File, rules_bzl: str = GO_RULES_BZL) -> None:
    """Prepend the load statement to ``file`` unless it already starts with one."""
    if file.stmts and file.stmts[0].func == "load":
        return
    load = generate_load(file, rules_bzl)
    if load is not None:
        file.stmts.insert(0, load)


__all__ = [
    "FileBuilder",
    "FlatFileBuilder",
    "GO_RULES_BZL",
    "StructuredFileBuilder",
    "add_load",
    "generate_load",
    "load_expr",
]
