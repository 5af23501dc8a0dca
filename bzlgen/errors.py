"""Error types raised while generating build files."""

from __future__ import annotations


class BzlgenError(RuntimeError):
    """Base class for errors that abort a generation run."""


class PathValidationError(BzlgenError):
    """Raised when the requested directory is outside the repository root."""

    def __init__(self, path: str, root: str) -> None:
        super().__init__(f"dir {path} is not under the repository root {root}")
        self.path = path
        self.root = root


class UnresolvableImportError(BzlgenError):
    """Raised when an import path cannot be mapped to a label."""

    def __init__(self, import_path: str, reason: str) -> None:
        super().__init__(f"cannot resolve import {import_path!r}: {reason}")
        self.import_path = import_path


class WalkerError(BzlgenError):
    """Raised when a package directory cannot be read or parsed."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path


__all__ = [
    "BzlgenError",
    "PathValidationError",
    "UnresolvableImportError",
    "WalkerError",
]
