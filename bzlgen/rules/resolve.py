"""Label resolution for Go import paths."""

from __future__ import annotations

import posixpath
import re
from typing import Callable, Dict, Protocol

from ..errors import UnresolvableImportError
from ..models import Style
from .label import Label
from .rule import DEFAULT_LIB_NAME

_REPO_NAME_INVALID = re.compile(r"[^A-Za-z0-9_]")

# Hosts whose repository roots are host/owner/project.
_THREE_SEGMENT_HOSTS = {
    "github.com",
    "bitbucket.org",
    "gitlab.com",
    "golang.org",
}


class LabelResolver(Protocol):
    """Maps an import path, seen from package directory ``dir``, to a label."""

    def resolve(self, import_path: str, dir: str) -> Label:
        ...


class StructuredResolver:
    """Resolves same-repository imports when every package has its own build file."""

    def __init__(self, go_prefix: str) -> None:
        self.go_prefix = go_prefix

    def resolve(self, import_path: str, dir: str) -> Label:
        if import_path == self.go_prefix:
            return Label(name=DEFAULT_LIB_NAME)

        prefix = self.go_prefix + "/"
        if import_path.startswith(prefix):
            return Label(name=DEFAULT_LIB_NAME, pkg=import_path[len(prefix):])

        raise UnresolvableImportError(
            import_path, f"does not start with go_prefix {self.go_prefix!r}"
        )


class FlatResolver:
    """Resolves same-repository imports when all rules share one build file."""

    def __init__(self, go_prefix: str) -> None:
        self.go_prefix = go_prefix

    def resolve(self, import_path: str, dir: str) -> Label:
        if import_path.startswith("./"):
            import_path = posixpath.join(self.go_prefix, dir, import_path[2:])
            import_path = posixpath.normpath(import_path)

        if import_path == self.go_prefix:
            return Label(name=DEFAULT_LIB_NAME, relative=True)

        prefix = self.go_prefix + "/"
        if import_path.startswith(prefix):
            return Label(name=import_path[len(prefix):], relative=True)

        raise UnresolvableImportError(
            import_path, f"does not start with go_prefix {self.go_prefix!r}"
        )


class VendoredResolver:
    """Resolves third-party imports to packages checked in under ``vendor/``."""

    def resolve(self, import_path: str, dir: str) -> Label:
        _check_import_path(import_path)
        return Label(name=DEFAULT_LIB_NAME, pkg=f"vendor/{import_path}")


class RemoteResolver:
    """Resolves third-party imports to external repositories.

    The repository root of ``github.com/foo/bar/baz`` is ``github.com/foo/bar``
    and its repository name is ``com_github_foo_bar``, so the import resolves
    to ``@com_github_foo_bar//baz:go_default_library``. Hosts other than the
    well-known code hosts use host plus one path segment as the root.
    """

    def resolve(self, import_path: str, dir: str) -> Label:
        segments = _check_import_path(import_path)
        host = segments[0]
        root_len = 3 if host in _THREE_SEGMENT_HOSTS else 2
        root_len = min(root_len, len(segments))

        parts = list(reversed(host.split("."))) + segments[1:root_len]
        repo = _REPO_NAME_INVALID.sub("_", "_".join(parts))
        pkg = "/".join(segments[root_len:])
        return Label(name=DEFAULT_LIB_NAME, pkg=pkg, repo=repo)


ExternalResolver = LabelResolver

_EXTERNAL_RESOLVERS: Dict[str, Callable[[], ExternalResolver]] = {
    "external": RemoteResolver,
    "vendored": VendoredResolver,
}


def external_resolver(mode: str) -> ExternalResolver:
    """Return the external resolver registered under ``mode``."""
    try:
        factory = _EXTERNAL_RESOLVERS[mode]
    except KeyError:
        known = ", ".join(sorted(_EXTERNAL_RESOLVERS))
        raise ValueError(f"unknown external resolution mode {mode!r} (expected one of {known})") from None
    return factory()


def external_modes() -> list[str]:
    """Return the registered external resolution modes."""
    return sorted(_EXTERNAL_RESOLVERS)


class PrefixDispatchResolver:
    """Routes imports under go_prefix to the local resolver, others to the external one."""

    def __init__(self, go_prefix: str, local: LabelResolver, external: ExternalResolver) -> None:
        self.go_prefix = go_prefix
        self.local = local
        self.external = external

    def resolve(self, import_path: str, dir: str) -> Label:
        if (
            import_path != self.go_prefix
            and not import_path.startswith(self.go_prefix + "/")
            and not import_path.startswith("./")
        ):
            return self.external.resolve(import_path, dir)
        return self.local.resolve(import_path, dir)


def local_resolver(go_prefix: str, style: Style) -> LabelResolver:
    """Return the same-repository resolver for ``style``."""
    if style is Style.STRUCTURED:
        return StructuredResolver(go_prefix)
    if style is Style.FLAT:
        return FlatResolver(go_prefix)
    raise ValueError(f"unrecognized style: {style!r}")


def is_standard(import_path: str) -> bool:
    """Return True when ``import_path`` names a Go standard library package."""
    first = import_path.split("/", 1)[0]
    return "." not in first


def _check_import_path(import_path: str) -> list[str]:
    segments = import_path.split("/")
    if not import_path or any(not segment for segment in segments):
        raise UnresolvableImportError(import_path, "not a valid import path")
    return segments


__all__ = [
    "ExternalResolver",
    "FlatResolver",
    "LabelResolver",
    "PrefixDispatchResolver",
    "RemoteResolver",
    "StructuredResolver",
    "VendoredResolver",
    "external_modes",
    "external_resolver",
    "is_standard",
    "local_resolver",
]
