"""Build file generation for a Go repository."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Protocol

from ..buildfile import File
from ..errors import PathValidationError
from ..logging import get_logger
from ..models import Package, Style
from ..packages import PackageWalker
from ..rules import ExternalResolver, RuleGenerator
from .builders import GO_RULES_BZL, FileBuilder, FlatFileBuilder, StructuredFileBuilder


class Walker(Protocol):
    def walk(self, dir: str | Path, base: str | Path | None = None) -> Iterable[Package]:
        ...


_BUILDERS: Dict[Style, Callable[[str, str], FileBuilder]] = {
    Style.STRUCTURED: StructuredFileBuilder,
    Style.FLAT: FlatFileBuilder,
}


class Generator:
    """Generates build files for the Go packages of a repository.

    ``repo_root`` is the repository root directory and ``go_prefix`` the Go
    import path corresponding to it. ``build_tags`` is handed to the package
    walker; ``external`` resolves imports outside of ``go_prefix``.
    """

    def __init__(
        self,
        repo_root: str | Path,
        go_prefix: str,
        *,
        style: Style = Style.STRUCTURED,
        build_file_name: str = "BUILD",
        build_tags: Optional[Iterable[str]] = None,
        external: Optional[ExternalResolver] = None,
        rules_bzl: str = GO_RULES_BZL,
        exclude_paths: Iterable[str] = (),
        walker: Optional[Walker] = None,
    ) -> None:
        if style not in _BUILDERS:
            raise ValueError(f"unrecognized style: {style!r}")
        self.repo_root = Path(repo_root).expanduser().resolve()
        self.go_prefix = go_prefix
        self.style = style
        self.build_file_name = build_file_name
        self.rules_bzl = rules_bzl
        self.walker: Walker = walker or PackageWalker(build_tags, list(exclude_paths))
        self.rule_generator = RuleGenerator(go_prefix, style, external)
        self.logger = get_logger("generator")

    def generate(self, dir: str | Path) -> List[File]:
        """Generate build files for every Go package found under ``dir``.

        ``dir`` must be the repository root or one of its subdirectories.
        """
        target = Path(dir).expanduser().resolve()
        if target != self.repo_root and self.repo_root not in target.parents:
            raise PathValidationError(str(target), str(self.repo_root))

        builder = _BUILDERS[self.style](self.build_file_name, self.rules_bzl)
        self.logger.debug("Generating %s build files under %s", self.style.value, target)

        for package in self.walker.walk(target, self.repo_root):
            rel = Path(package.dir).resolve().relative_to(self.repo_root).as_posix()
            if rel == ".":
                rel = ""
            if builder.is_empty() and rel != "":
                # The walk did not start at a buildable root package, but the
                # root still needs the go_prefix declaration.
                builder.add_rules("", [self.rule_generator.prefix_rule()])

            rules = self.rule_generator.generate(rel, package)
            self.logger.debug("Generated %d rules for %s", len(rules), rel or "//")
            builder.add_rules(rel, rules)

        files = builder.files()
        self.logger.debug("Produced %d build files", len(files))
        return files


__all__ = ["Generator"]
