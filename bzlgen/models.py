"""Core data models shared across bzlgen components."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List


class Style(Enum):
    """Strategy for organizing generated build files."""

    # Every package directory gets its own build file.
    STRUCTURED = "structured"
    # All packages under the prefix share one build file at the root.
    FLAT = "flat"


@dataclass(frozen=True)
class Package:
    """Description of one Go package directory as reported by the walker."""

    dir: str
    name: str
    is_command: bool = False
    source_files: List[str] = field(default_factory=list)
    # Files importing "C"; kept out of source_files.
    cgo_files: List[str] = field(default_factory=list)
    test_files: List[str] = field(default_factory=list)
    external_test_files: List[str] = field(default_factory=list)
    imports: List[str] = field(default_factory=list)
    test_imports: List[str] = field(default_factory=list)
    external_test_imports: List[str] = field(default_factory=list)
