"""Rule records emitted by the rule generator."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Tuple, Union

from ..buildfile import CallExpr, KeywordArg, StringExpr, string_list
from .label import Label

# Name of the go_library rule in a package directory. Must match _DEFAULT_LIB
# in the Go rules' def.bzl.
DEFAULT_LIB_NAME = "go_default_library"
# Test names only need to be unique within their build package.
DEFAULT_TEST_NAME = "go_default_test"
DEFAULT_XTEST_NAME = "go_default_xtest"

# Reserved names keyed by (library name, test suffix).
_RESERVED_NAMES: Dict[Tuple[str, str], str] = {
    (DEFAULT_LIB_NAME, "_test"): DEFAULT_TEST_NAME,
    (DEFAULT_LIB_NAME, "_xtest"): DEFAULT_XTEST_NAME,
}


def derived_name(library: str, suffix: str) -> str:
    """Return the name of a target derived from ``library`` with ``suffix``."""
    return _RESERVED_NAMES.get((library, suffix), library + suffix)


class RuleKind(Enum):
    """Rule kinds produced by the generator."""

    PREFIX = "go_prefix"
    LIBRARY = "go_library"
    BINARY = "go_binary"
    TEST = "go_test"


AttrValue = Union[str, List[str], Label, List[Label]]


@dataclass(frozen=True)
class Rule:
    """A build rule: its kind, positional arguments and ordered attributes."""

    kind: RuleKind
    attrs: Dict[str, AttrValue] = field(default_factory=dict)
    args: Tuple[str, ...] = ()

    @property
    def name(self) -> str:
        value = self.attrs.get("name")
        return value if isinstance(value, str) else ""

    def call(self) -> CallExpr:
        """Convert the rule into a call statement."""
        arguments: list = [StringExpr(arg) for arg in self.args]
        for key, value in self.attrs.items():
            arguments.append(KeywordArg(key, _to_expr(value)))
        return CallExpr(self.kind.value, tuple(arguments))


def _to_expr(value: AttrValue):  # type: ignore[no-untyped-def]
    if isinstance(value, (str, Label)):
        return StringExpr(str(value))
    return string_list([str(item) for item in value])


__all__ = [
    "DEFAULT_LIB_NAME",
    "DEFAULT_TEST_NAME",
    "DEFAULT_XTEST_NAME",
    "Rule",
    "RuleKind",
    "derived_name",
]
