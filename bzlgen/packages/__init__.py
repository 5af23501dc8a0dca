"""Enumeration of Go packages in a source tree."""

from __future__ import annotations

from .constraints import BuildContext, default_build_tags
from .source import SourceHeader, parse_header
from .walk import PackageWalker, walk_packages

__all__ = [
    "BuildContext",
    "PackageWalker",
    "SourceHeader",
    "default_build_tags",
    "parse_header",
    "walk_packages",
]
