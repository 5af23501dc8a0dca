"""Tests for bzlgen.buildfile."""

from __future__ import annotations

from bzlgen.buildfile import CallExpr, File, KeywordArg, ListExpr, LiteralExpr, StringExpr, format_file, string_list


def test_format_empty_file() -> None:
    assert format_file(File("BUILD")) == ""


def test_format_compact_and_keyword_calls() -> None:
    file = File(
        "BUILD",
        [
            CallExpr("load", (StringExpr("//go:def.bzl"), StringExpr("go_library")), force_compact=True),
            CallExpr(
                "go_library",
                (
                    KeywordArg("name", StringExpr("go_default_library")),
                    KeywordArg("srcs", string_list(["a.go", "b.go"])),
                    KeywordArg("visibility", string_list(["//visibility:public"])),
                    KeywordArg("deps", ListExpr()),
                    KeywordArg("cgo", LiteralExpr("True")),
                ),
            ),
        ],
    )
    assert format_file(file) == (
        'load("//go:def.bzl", "go_library")\n'
        "\n"
        "go_library(\n"
        '    name = "go_default_library",\n'
        "    srcs = [\n"
        '        "a.go",\n'
        '        "b.go",\n'
        "    ],\n"
        '    visibility = ["//visibility:public"],\n'
        "    deps = [],\n"
        "    cgo = True,\n"
        ")\n"
    )


def test_strings_are_escaped() -> None:
    file = File("BUILD", [CallExpr("f", (StringExpr('a "quoted" \\ value'),))])
    assert format_file(file) == 'f("a \\"quoted\\" \\\\ value")\n'


def test_rules_filters_by_kind() -> None:
    file = File("BUILD", [CallExpr("go_test"), CallExpr("go_library"), CallExpr("go_test")])
    assert len(file.rules("go_test")) == 2
    assert file.rules("go_binary") == []


def test_keyword_lookup() -> None:
    call = CallExpr("go_library", (KeywordArg("name", StringExpr("lib")),))
    assert call.keyword("name") == StringExpr("lib")
    assert call.keyword("srcs") is None
