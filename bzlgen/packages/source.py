"""Parsing of Go source file headers: build constraints, package clause and imports."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional

_LEXEME = re.compile(
    r'"(?:[^"\\\n]|\\.)*"'
    r"|`[^`]*`"
    r"|'(?:[^'\\\n]|\\.)*'"
    r"|//[^\n]*"
    r"|/\*.*?\*/",
    re.DOTALL,
)
_PACKAGE_CLAUSE = re.compile(r"\A\s*package\s+([A-Za-z_][A-Za-z0-9_]*)")
_IMPORT_KEYWORD = re.compile(r"\s*;?\s*import\b\s*")
_IMPORT_SPEC = re.compile(r"\s*;?\s*(?:[A-Za-z_][A-Za-z0-9_]*|\.)?\s*(\"(?:[^\"\\\n]|\\.)*\"|`[^`]*`)")
_GO_BUILD = re.compile(r"^//go:build\s+(.*)$")
_PLUS_BUILD = re.compile(r"^//\s*\+build\s+(.*)$")


@dataclass
class SourceHeader:
    """What the walker needs to know about one Go file."""

    package: str
    imports: List[str] = field(default_factory=list)
    go_build: Optional[str] = None
    plus_build: List[str] = field(default_factory=list)


def parse_header(text: str) -> SourceHeader:
    """Parse the leading part of a Go file up to the last import declaration.

    Raises ``ValueError`` when the file has no package clause or a malformed
    import declaration.
    """
    go_build, plus_build = _leading_constraints(text)
    code = _LEXEME.sub(_blank_comment, text)

    match = _PACKAGE_CLAUSE.match(code)
    if match is None:
        raise ValueError("expected 'package' clause")
    header = SourceHeader(package=match.group(1), go_build=go_build, plus_build=plus_build)

    pos = match.end()
    while True:
        keyword = _IMPORT_KEYWORD.match(code, pos)
        if keyword is None:
            break
        pos = keyword.end()
        if code.startswith("(", pos):
            pos += 1
            while True:
                spec = _IMPORT_SPEC.match(code, pos)
                if spec is None:
                    break
                header.imports.append(_unquote(spec.group(1)))
                pos = spec.end()
            closing = re.compile(r"\s*;?\s*\)").match(code, pos)
            if closing is None:
                raise ValueError("malformed import block")
            pos = closing.end()
        else:
            spec = _IMPORT_SPEC.match(code, pos)
            if spec is None:
                raise ValueError("malformed import declaration")
            header.imports.append(_unquote(spec.group(1)))
            pos = spec.end()
    return header


def _leading_constraints(text: str) -> tuple[Optional[str], List[str]]:
    go_build: Optional[str] = None
    plus_build: List[str] = []
    in_block = False
    for raw in text.splitlines():
        line = raw.strip()
        if in_block:
            if "*/" in line:
                in_block = False
            continue
        if not line:
            continue
        if line.startswith("/*"):
            in_block = "*/" not in line
            continue
        if not line.startswith("//"):
            break
        match = _GO_BUILD.match(line)
        if match is not None:
            if go_build is None:
                go_build = match.group(1)
            continue
        match = _PLUS_BUILD.match(line)
        if match is not None:
            plus_build.append(match.group(1))
    return go_build, plus_build


def _blank_comment(match: "re.Match[str]") -> str:
    lexeme = match.group(0)
    if lexeme.startswith("//"):
        return ""
    if lexeme.startswith("/*"):
        return "\n" if "\n" in lexeme else " "
    return lexeme


def _unquote(literal: str) -> str:
    # Import paths never need escapes.
    return literal[1:-1]


__all__ = ["SourceHeader", "parse_header"]
