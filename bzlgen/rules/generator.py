"""Generation of Go build rules for a single package."""

from __future__ import annotations

import posixpath
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

from ..models import Package, Style
from .label import Label
from .resolve import (
    ExternalResolver,
    LabelResolver,
    PrefixDispatchResolver,
    RemoteResolver,
    is_standard,
    local_resolver,
)
from .rule import AttrValue, Rule, RuleKind, derived_name

_PUBLIC_VISIBILITY = "//visibility:public"


def _structured_srcs(rel: str, srcs: Sequence[str]) -> List[str]:
    return list(srcs)


def _flat_srcs(rel: str, srcs: Sequence[str]) -> List[str]:
    return [posixpath.join(rel, src) for src in srcs]


_SRC_REFERENCES: Dict[Style, Callable[[str, Sequence[str]], List[str]]] = {
    Style.STRUCTURED: _structured_srcs,
    Style.FLAT: _flat_srcs,
}


class RuleGenerator:
    """Generates build rules for the targets of a Go package.

    ``go_prefix`` is the import path corresponding to the repository root.
    ``external`` resolves imports outside of ``go_prefix`` and defaults to
    :class:`RemoteResolver`.
    """

    def __init__(
        self,
        go_prefix: str,
        style: Style = Style.STRUCTURED,
        external: Optional[ExternalResolver] = None,
    ) -> None:
        if style not in _SRC_REFERENCES:
            raise ValueError(f"unrecognized style: {style!r}")
        self.go_prefix = go_prefix
        self.style = style
        self.resolver: LabelResolver = PrefixDispatchResolver(
            go_prefix,
            local_resolver(go_prefix, style),
            external if external is not None else RemoteResolver(),
        )
        self._ref_srcs = _SRC_REFERENCES[style]

    def prefix_rule(self) -> Rule:
        """Return the ``go_prefix`` declaration for the repository root."""
        return Rule(RuleKind.PREFIX, args=(self.go_prefix,))

    def generate(self, rel: str, package: Package) -> List[Rule]:
        """Return the rules for ``package`` located at ``rel``.

        ``rel`` is the slash-separated path from the repository root to the
        package directory, empty for the root itself.
        """
        rules: List[Rule] = []
        if rel == "":
            rules.append(self.prefix_rule())

        primary = self._generate_primary(rel, package)
        rules.append(primary)

        if package.test_files:
            rules.append(self._generate_test(rel, package, primary.name))
        if package.external_test_files:
            rules.append(self._generate_xtest(rel, package, primary.name))
        return rules

    def _generate_primary(self, rel: str, package: Package) -> Rule:
        import_path = posixpath.join(self.go_prefix, rel) if rel else self.go_prefix
        label = self.resolver.resolve(import_path, "")
        name = label.name
        kind = RuleKind.LIBRARY
        if package.is_command:
            kind = RuleKind.BINARY
            name = Path(package.dir).name

        attrs: Dict[str, AttrValue] = {
            "name": name,
            "srcs": self._ref_srcs(rel, package.source_files),
            "visibility": [visibility(rel)],
        }
        deps = self.dependencies(package.imports, rel)
        if deps:
            attrs["deps"] = deps
        return Rule(kind, attrs)

    def _generate_test(self, rel: str, package: Package, library: str) -> Rule:
        attrs: Dict[str, AttrValue] = {
            "name": derived_name(library, "_test"),
            "srcs": self._ref_srcs(rel, package.test_files),
            "library": Label(name=library, relative=True),
        }
        deps = self.dependencies(package.test_imports, rel)
        if deps:
            attrs["deps"] = deps
        return Rule(RuleKind.TEST, attrs)

    def _generate_xtest(self, rel: str, package: Package, library: str) -> Rule:
        attrs: Dict[str, AttrValue] = {
            "name": derived_name(library, "_xtest"),
            "srcs": self._ref_srcs(rel, package.external_test_files),
        }
        deps = self.dependencies(package.external_test_imports, rel)
        if deps:
            attrs["deps"] = deps
        return Rule(RuleKind.TEST, attrs)

    def dependencies(self, imports: Sequence[str], dir: str) -> List[Label]:
        """Resolve non-standard ``imports`` in order; the first failure propagates."""
        return [self.resolver.resolve(path, dir) for path in imports if not is_standard(path)]


def visibility(rel: str) -> str:
    """Return the visibility of a package at ``rel``.

    Packages under an ``internal`` directory are visible only to the tree
    rooted at the parent of the last ``internal`` segment.
    """
    segments = rel.split("/") if rel else []
    for index in range(len(segments) - 1, -1, -1):
        if segments[index] == "internal":
            return "//{}:__subpackages__".format("/".join(segments[:index]))
    return _PUBLIC_VISIBILITY


__all__ = ["RuleGenerator", "visibility"]
