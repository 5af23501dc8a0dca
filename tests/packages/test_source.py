"""Tests for bzlgen.packages.source."""

from __future__ import annotations

import textwrap

import pytest

from bzlgen.packages import parse_header


def _parse(text: str):  # type: ignore[no-untyped-def]
    return parse_header(textwrap.dedent(text).lstrip("\n"))


def test_parses_package_and_grouped_imports() -> None:
    header = _parse(
        """
        // Copyright notice.

        // Package lib does things.
        package lib

        import (
            "fmt"
            alias "github.com/foo/bar" // trailing comment
            _ "github.com/lib/pq"
            . "example.com/repo/dot"
            /* block */ "example.com/repo/after_block"
        )

        import "os"

        func f() { _ = "import \\"not/an/import\\"" }
        """
    )
    assert header.package == "lib"
    assert header.imports == [
        "fmt",
        "github.com/foo/bar",
        "github.com/lib/pq",
        "example.com/repo/dot",
        "example.com/repo/after_block",
        "os",
    ]
    assert header.go_build is None
    assert header.plus_build == []


def test_parses_single_line_imports_and_raw_strings() -> None:
    header = _parse(
        """
        package main; import `example.com/raw`
        import x "example.com/x"
        """
    )
    assert header.package == "main"
    assert header.imports == ["example.com/raw", "example.com/x"]


def test_collects_leading_constraints_only() -> None:
    header = _parse(
        """
        //go:build linux && !cgo
        // +build linux,!cgo

        package lib

        // +build ignored
        """
    )
    assert header.go_build == "linux && !cgo"
    assert header.plus_build == ["linux,!cgo"]


def test_cgo_preamble_comment_is_ignored() -> None:
    header = _parse(
        """
        package lib

        /*
        #include <stdio.h>
        import "not/real"
        */
        import "C"
        """
    )
    assert header.imports == ["C"]


def test_missing_package_clause_is_an_error() -> None:
    with pytest.raises(ValueError):
        parse_header("// just a comment\n")


def test_unterminated_import_block_is_an_error() -> None:
    with pytest.raises(ValueError):
        parse_header('package lib\n\nimport (\n    "fmt"\n')
