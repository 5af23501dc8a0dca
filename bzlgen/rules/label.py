"""Labels referencing build targets."""

from __future__ import annotations

import posixpath
from dataclasses import dataclass


@dataclass(frozen=True, eq=False)
class Label:
    """A reference to a build target.

    A relative label (``:name``) is only meaningful inside the build file
    that defines the target. An absolute label carries the package path and
    optionally an external repository name.
    """

    name: str
    pkg: str = ""
    repo: str = ""
    relative: bool = False

    def __str__(self) -> str:
        if self.relative:
            return f":{self.name}"
        repo = f"@{self.repo}" if self.repo else ""
        if self.pkg and posixpath.basename(self.pkg) == self.name:
            return f"{repo}//{self.pkg}"
        return f"{repo}//{self.pkg}:{self.name}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Label):
            return NotImplemented
        return str(self) == str(other)

    def __hash__(self) -> int:
        return hash(str(self))


__all__ = ["Label"]
