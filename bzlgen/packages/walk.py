"""Walking a source tree and describing the Go packages found in it."""

from __future__ import annotations

import fnmatch
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Pattern, Sequence, Set

from ..errors import WalkerError
from ..logging import get_logger
from ..models import Package
from .constraints import BuildContext
from .source import parse_header

_EXCLUDED_DIRS = {
    "testdata",
    "node_modules",
}

# Package clause of files that exist only to carry documentation.
_DOCUMENTATION_PACKAGE = "documentation"

_CGO_IMPORT = "C"

logger = get_logger("packages")


@dataclass(frozen=True)
class _Exclusion:
    """One ``exclude_paths`` pattern.

    A trailing ``/`` restricts the pattern to directories. A pattern holding
    another ``/`` is matched against the whole relative path, any other
    pattern against the entry name alone. Excluded directories are pruned, so
    their contents never need matching.
    """

    regex: Pattern[str]
    whole_path: bool
    dirs_only: bool

    @classmethod
    def parse(cls, pattern: str) -> Optional["_Exclusion"]:
        pattern = pattern.strip()
        dirs_only = pattern.endswith("/")
        pattern = pattern.rstrip("/")
        whole_path = "/" in pattern
        pattern = pattern.lstrip("/")
        if not pattern:
            return None
        return cls(re.compile(fnmatch.translate(pattern)), whole_path, dirs_only)

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if self.dirs_only and not is_dir:
            return False
        target = rel_path if self.whole_path else rel_path.rsplit("/", 1)[-1]
        return self.regex.match(target) is not None


@dataclass
class _PackageAccumulator:
    dir: str
    name: str = ""
    source_files: List[str] = field(default_factory=list)
    cgo_files: List[str] = field(default_factory=list)
    test_files: List[str] = field(default_factory=list)
    external_test_files: List[str] = field(default_factory=list)
    imports: Set[str] = field(default_factory=set)
    test_imports: Set[str] = field(default_factory=set)
    external_test_imports: Set[str] = field(default_factory=set)

    def is_empty(self) -> bool:
        return not (self.source_files or self.cgo_files or self.test_files or self.external_test_files)

    def freeze(self) -> Package:
        return Package(
            dir=self.dir,
            name=self.name,
            is_command=self.name == "main",
            source_files=list(self.source_files),
            cgo_files=list(self.cgo_files),
            test_files=list(self.test_files),
            external_test_files=list(self.external_test_files),
            imports=sorted(self.imports),
            test_imports=sorted(self.test_imports),
            external_test_imports=sorted(self.external_test_imports),
        )


class PackageWalker:
    """Enumerates the Go packages in a directory tree.

    Directories are visited depth first, parents before children, entries in
    name order, so the same tree always yields packages in the same order.
    ``build_tags`` replaces the default tag set (host GOOS and GOARCH).
    ``exclude_paths`` holds glob patterns matched against paths relative to
    the walk's base directory.
    """

    def __init__(
        self,
        build_tags: Optional[Iterable[str]] = None,
        exclude_paths: Sequence[str] = (),
    ) -> None:
        self.context = BuildContext(build_tags)
        self._exclusions = [
            exclusion for exclusion in map(_Exclusion.parse, exclude_paths) if exclusion is not None
        ]

    def walk(self, dir: str | Path, base: str | Path | None = None) -> Iterator[Package]:
        """Yield a :class:`Package` for every buildable directory under ``dir``."""
        start = Path(dir)
        base_path = Path(base) if base is not None else start
        if not start.is_dir():
            raise WalkerError(str(start), "not a directory")

        def _on_error(exc: OSError) -> None:
            raise WalkerError(str(exc.filename or start), exc.strerror or str(exc)) from exc

        for dirpath, dirnames, filenames in os.walk(start, onerror=_on_error):
            current = Path(dirpath)
            rel_dir = current.relative_to(base_path).as_posix() if current != base_path else ""

            kept = []
            for name in sorted(dirnames):
                rel_path = f"{rel_dir}/{name}" if rel_dir else name
                if self._skip_dir(name, rel_path):
                    logger.debug("Skipping directory %s", rel_path)
                    continue
                kept.append(name)
            dirnames[:] = kept

            package = self._import_dir(current, rel_dir, sorted(filenames))
            if package is not None:
                yield package

    def _skip_dir(self, name: str, rel_path: str) -> bool:
        if name.startswith((".", "_")) or name in _EXCLUDED_DIRS:
            return True
        if name.startswith("bazel-"):
            return True
        return self._excluded(rel_path, True)

    def _excluded(self, rel_path: str, is_dir: bool) -> bool:
        return any(exclusion.matches(rel_path, is_dir) for exclusion in self._exclusions)

    def _import_dir(self, current: Path, rel_dir: str, filenames: Sequence[str]) -> Optional[Package]:
        acc = _PackageAccumulator(dir=str(current))
        for filename in filenames:
            if not filename.endswith(".go") or filename.startswith((".", "_")):
                continue
            rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
            if self._excluded(rel_path, False):
                continue
            if not self.context.good_os_arch_file(filename):
                logger.debug("Excluding %s by file name constraint", rel_path)
                continue

            path = current / filename
            try:
                text = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                raise WalkerError(str(path), f"cannot read file: {exc}") from exc
            try:
                header = parse_header(text)
                included = self.context.satisfies(header.go_build, header.plus_build)
            except ValueError as exc:
                raise WalkerError(str(path), str(exc)) from exc
            if not included:
                logger.debug("Excluding %s by build constraints", rel_path)
                continue

            self._add_file(acc, filename, header.package, header.imports, path)

        if acc.is_empty():
            return None
        return acc.freeze()

    @staticmethod
    def _add_file(
        acc: _PackageAccumulator,
        filename: str,
        package: str,
        imports: Sequence[str],
        path: Path,
    ) -> None:
        is_test = filename.endswith("_test.go")
        is_xtest = False
        if is_test and package.endswith("_test") and package != acc.name:
            is_xtest = True
            package = package[: -len("_test")]

        if package == _DOCUMENTATION_PACKAGE:
            return
        if not acc.name:
            acc.name = package
        elif package != acc.name:
            raise WalkerError(
                acc.dir,
                f"found packages {acc.name} and {package} ({path.name})",
            )

        if is_xtest:
            acc.external_test_files.append(filename)
            acc.external_test_imports.update(imports)
        elif is_test:
            acc.test_files.append(filename)
            acc.test_imports.update(imports)
        elif _CGO_IMPORT in imports:
            acc.cgo_files.append(filename)
            acc.imports.update(path for path in imports if path != _CGO_IMPORT)
        else:
            acc.source_files.append(filename)
            acc.imports.update(imports)


def walk_packages(
    dir: str | Path,
    *,
    base: str | Path | None = None,
    build_tags: Optional[Iterable[str]] = None,
    exclude_paths: Sequence[str] = (),
) -> Iterator[Package]:
    """Convenience wrapper around :meth:`PackageWalker.walk`."""
    return PackageWalker(build_tags, exclude_paths).walk(dir, base)


__all__ = ["PackageWalker", "walk_packages"]
