"""CLI entrypoint for bzlgen."""

from __future__ import annotations

import argparse
import difflib
import sys
from pathlib import Path
from typing import List, TextIO

from .buildfile import File, format_file
from .config import BzlgenConfig, ConfigError, load_config, parse_build_tags, parse_style
from .errors import BzlgenError
from .generator import Generator
from .logging import configure_logging, get_logger
from .rules import RuleKind, external_modes, external_resolver

_MODES = ("fix", "print", "diff")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bzlgen",
        description="Generate Bazel BUILD files for the Go packages of a repository.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "--repo-root",
        default=".",
        help="Path to the repository root (defaults to current directory).",
    )
    parser.add_argument(
        "--go-prefix",
        default=None,
        help="Go import path corresponding to the repository root.",
    )
    parser.add_argument(
        "--mode",
        choices=_MODES,
        default="fix",
        help=(
            "fix: write BUILD files; print: print them to stdout; diff: show changes. "
            "When fixing a subdirectory, an existing root BUILD file is left alone."
        ),
    )
    parser.add_argument(
        "--style",
        choices=["structured", "flat"],
        default=None,
        help="One BUILD file per package (structured) or a single BUILD file (flat).",
    )
    parser.add_argument(
        "--build-file-name",
        default=None,
        help="Name of the generated build files (BUILD or BUILD.bazel).",
    )
    parser.add_argument(
        "--build-tags",
        default=None,
        help="Comma-separated build tags; replaces the host GOOS and GOARCH when non-empty.",
    )
    parser.add_argument(
        "--external",
        choices=external_modes(),
        default=None,
        help="How imports outside of the go prefix are resolved.",
    )
    parser.add_argument(
        "dirs",
        nargs="*",
        help="Directories to generate BUILD files for (defaults to the repository root).",
    )
    return parser


def _merge_settings(args: argparse.Namespace, config: BzlgenConfig) -> BzlgenConfig:
    if args.go_prefix:
        config.go_prefix = args.go_prefix
    if args.style:
        config.style = parse_style(args.style)
    if args.build_file_name:
        config.build_file_name = args.build_file_name
    if args.build_tags:
        config.build_tags = parse_build_tags(args.build_tags) or config.build_tags
    if args.external:
        config.external = args.external
    return config


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for bzlgen."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))
    logger = get_logger("cli")

    repo_root = Path(args.repo_root).expanduser().resolve()
    try:
        config = _merge_settings(args, load_config(repo_root))
    except ConfigError as exc:
        parser.exit(1, f"bzlgen: {exc}\n")
    if not config.go_prefix:
        parser.exit(1, "bzlgen: --go-prefix is required (or set go_prefix in .bzlgen.yml)\n")

    generator = Generator(
        repo_root,
        config.go_prefix,
        style=config.style,
        build_file_name=config.build_file_name,
        build_tags=config.build_tags,
        external=external_resolver(config.external),
        rules_bzl=config.go_rules_bzl,
        exclude_paths=config.exclude_paths,
    )

    dirs = args.dirs or [str(repo_root)]
    for dir in dirs:
        try:
            files = generator.generate(dir)
        except BzlgenError as exc:
            parser.exit(1, f"bzlgen: {exc}\n")
        logger.debug("Generated %d build files for %s", len(files), dir)
        if args.mode == "fix":
            target = Path(dir).expanduser().resolve()
            _fix(repo_root, files, keep_existing_root=target != repo_root)
        elif args.mode == "print":
            _print(files, sys.stdout)
        elif args.mode == "diff":
            _diff(repo_root, files, sys.stdout)
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(1, "Unknown mode\n")


def _fix(repo_root: Path, files: List[File], *, keep_existing_root: bool = False) -> None:
    logger = get_logger("cli")
    for file in files:
        path = repo_root / file.path
        if keep_existing_root and path.exists() and _declares_prefix_only(file):
            # Only carries go_prefix, which the existing root file already declares.
            logger.info("Keeping existing %s", file.path)
            continue
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(format_file(file), encoding="utf-8")
        logger.info("Wrote %s", file.path)


def _declares_prefix_only(file: File) -> bool:
    return all(stmt.func in ("load", RuleKind.PREFIX.value) for stmt in file.stmts)


def _print(files: List[File], out: TextIO) -> None:
    for file in files:
        out.write(f"# {file.path}\n")
        out.write(format_file(file))


def _diff(repo_root: Path, files: List[File], out: TextIO) -> None:
    for file in files:
        path = repo_root / file.path
        try:
            current = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            current = ""
        diff = difflib.unified_diff(
            current.splitlines(keepends=True),
            format_file(file).splitlines(keepends=True),
            fromfile=f"a/{file.path}",
            tofile=f"b/{file.path}",
        )
        out.writelines(diff)


if __name__ == "__main__":
    main(sys.argv[1:])
