"""Core build file generation."""

from __future__ import annotations

from .builders import (
    GO_RULES_BZL,
    FileBuilder,
    FlatFileBuilder,
    StructuredFileBuilder,
    generate_load,
)
from .generator import Generator

__all__ = [
    "FileBuilder",
    "FlatFileBuilder",
    "GO_RULES_BZL",
    "Generator",
    "StructuredFileBuilder",
    "generate_load",
]
