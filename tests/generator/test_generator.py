"""Tests for bzlgen.generator.generator."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

import pytest

from bzlgen.buildfile import format_file
from bzlgen.errors import PathValidationError, UnresolvableImportError, WalkerError
from bzlgen.generator import Generator
from bzlgen.models import Package, Style
from bzlgen.rules import VendoredResolver
from tests._fixtures.repo_builder import RepoBuilder

_REPO_FILES = {
    "doc.go": """
        // Package repo is the root.
        package repo
    """,
    "lib/lib.go": """
        package lib

        import (
            "fmt"

            "example.com/repo/lib/internal/impl"
            "github.com/foo/bar"
        )
    """,
    "lib/lib_test.go": """
        package lib

        import "testing"
    """,
    "lib/example_test.go": """
        package lib_test

        import (
            "testing"

            "example.com/repo/lib"
        )
    """,
    "lib/internal/impl/impl.go": """
        package impl
    """,
    "cmd/tool/main.go": """
        package main

        import "example.com/repo/lib"
    """,
    "docs/README.md": "no go code here\n",
}


def _by_path(files) -> dict:  # type: ignore[no-untyped-def]
    return {file.path: format_file(file) for file in files}


def test_structured_generation(repo_builder: RepoBuilder) -> None:
    repo_builder.write(_REPO_FILES)
    files = _by_path(repo_builder.generate(build_tags=["linux", "amd64"]))

    assert list(files) == ["BUILD", "cmd/tool/BUILD", "lib/BUILD", "lib/internal/impl/BUILD"]
    assert files["BUILD"] == (
        'load("@io_bazel_rules_go//go:def.bzl", "go_library", "go_prefix")\n'
        "\n"
        'go_prefix("example.com/repo")\n'
        "\n"
        "go_library(\n"
        '    name = "go_default_library",\n'
        '    srcs = ["doc.go"],\n'
        '    visibility = ["//visibility:public"],\n'
        ")\n"
    )
    assert files["lib/BUILD"] == (
        'load("@io_bazel_rules_go//go:def.bzl", "go_library", "go_test")\n'
        "\n"
        "go_library(\n"
        '    name = "go_default_library",\n'
        '    srcs = ["lib.go"],\n'
        '    visibility = ["//visibility:public"],\n'
        "    deps = [\n"
        '        "//lib/internal/impl:go_default_library",\n'
        '        "@com_github_foo_bar//:go_default_library",\n'
        "    ],\n"
        ")\n"
        "\n"
        "go_test(\n"
        '    name = "go_default_test",\n'
        '    srcs = ["lib_test.go"],\n'
        '    library = ":go_default_library",\n'
        ")\n"
        "\n"
        "go_test(\n"
        '    name = "go_default_xtest",\n'
        '    srcs = ["example_test.go"],\n'
        '    deps = ["//lib:go_default_library"],\n'
        ")\n"
    )
    assert 'visibility = ["//lib:__subpackages__"]' in files["lib/internal/impl/BUILD"]
    assert "go_binary(\n" in files["cmd/tool/BUILD"]
    assert 'name = "tool"' in files["cmd/tool/BUILD"]


def test_flat_generation(repo_builder: RepoBuilder) -> None:
    repo_builder.write(_REPO_FILES)
    files = repo_builder.generate(style=Style.FLAT, build_file_name="BUILD.bazel", build_tags=[])

    (file,) = files
    assert file.path == "BUILD.bazel"
    text = format_file(file)
    assert text.startswith(
        'load("@io_bazel_rules_go//go:def.bzl", "go_binary", "go_library", "go_prefix", "go_test")\n'
    )
    assert '    name = "lib",\n' in text
    assert '    srcs = ["lib/lib.go"],\n' in text
    assert '        ":lib/internal/impl",\n' in text
    assert '    name = "lib_xtest",\n' in text
    assert '    srcs = ["cmd/tool/main.go"],\n' in text
    assert '    deps = [":lib"],\n' in text


def test_generation_is_idempotent(repo_builder: RepoBuilder) -> None:
    repo_builder.write(_REPO_FILES)
    first = _by_path(repo_builder.generate())
    second = _by_path(repo_builder.generate())
    assert first == second


def test_standard_imports_never_become_deps(repo_builder: RepoBuilder) -> None:
    repo_builder.write(_REPO_FILES)
    for text in _by_path(repo_builder.generate()).values():
        assert '"fmt"' not in text
        assert '"testing"' not in text


def test_missing_root_package_gets_prefix_file(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"lib/lib.go": "package lib\n"})
    files = _by_path(repo_builder.generate())

    assert list(files) == ["BUILD", "lib/BUILD"]
    assert files["BUILD"] == (
        'load("@io_bazel_rules_go//go:def.bzl", "go_prefix")\n'
        "\n"
        'go_prefix("example.com/repo")\n'
    )


def test_subdirectory_generation_still_declares_prefix(repo_builder: RepoBuilder) -> None:
    repo_builder.write(_REPO_FILES)
    generator = Generator(repo_builder.path(), "example.com/repo")
    files = _by_path(generator.generate(repo_builder.path() / "lib"))

    assert list(files) == ["BUILD", "lib/BUILD", "lib/internal/impl/BUILD"]
    assert "go_library" not in files["BUILD"]


def test_cgo_files_stay_out_of_library_srcs(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "lib/a.go": "package lib\n",
            "lib/cgo_on.go": "//go:build cgo\n\npackage lib\n",
            "lib/cgo_off.go": "//go:build !cgo\n\npackage lib\n",
            "lib/c.go": 'package lib\n\nimport "C"\n',
        }
    )
    files = _by_path(repo_builder.generate(build_tags=["linux", "amd64"]))

    assert '    srcs = [\n        "a.go",\n        "cgo_on.go",\n    ],\n' in files["lib/BUILD"]
    assert '"c.go"' not in files["lib/BUILD"]
    assert "cgo_off.go" not in files["lib/BUILD"]


def test_external_resolver_is_injected(repo_builder: RepoBuilder) -> None:
    repo_builder.write(_REPO_FILES)
    files = _by_path(repo_builder.generate(external=VendoredResolver()))
    assert '"//vendor/github.com/foo/bar:go_default_library"' in files["lib/BUILD"]


def test_directory_outside_root_is_rejected(repo_builder: RepoBuilder, tmp_path: Path) -> None:
    outside = tmp_path / "elsewhere"
    outside.mkdir()
    generator = Generator(repo_builder.path(), "example.com/repo")
    with pytest.raises(PathValidationError):
        generator.generate(outside)


def test_sibling_with_shared_name_prefix_is_rejected(repo_builder: RepoBuilder, tmp_path: Path) -> None:
    sibling = tmp_path / "repo2"
    sibling.mkdir()
    with pytest.raises(PathValidationError):
        Generator(repo_builder.path(), "example.com/repo").generate(sibling)


def test_unresolvable_import_propagates(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"lib/lib.go": 'package lib\n\nimport "./sibling"\n'})
    with pytest.raises(UnresolvableImportError):
        repo_builder.generate()


def test_walker_errors_propagate(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"lib/a.go": "package a\n", "lib/b.go": "package b\n"})
    with pytest.raises(WalkerError):
        repo_builder.generate()


class _StaticWalker:
    def __init__(self, root: Path, packages: List[Package]) -> None:
        self.root = root
        self.packages = packages
        self.calls: list[tuple[Path, Path]] = []

    def walk(self, dir, base=None) -> Iterable[Package]:  # type: ignore[no-untyped-def]
        self.calls.append((Path(dir), Path(base)))
        return iter(self.packages)


def test_custom_walker_receives_directory_and_root(tmp_path: Path) -> None:
    root = tmp_path.resolve()
    walker = _StaticWalker(root, [Package(dir=str(root / "pkg"), name="pkg", source_files=["pkg.go"])])
    files = Generator(root, "example.com/repo", walker=walker).generate(root)

    assert walker.calls == [(root, root)]
    assert [file.path for file in files] == ["BUILD", "pkg/BUILD"]


def test_unknown_style_is_programmer_error(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        Generator(tmp_path, "example.com/repo", style="flat")  # type: ignore[arg-type]
