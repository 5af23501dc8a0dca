"""Label resolution and rule generation for Go packages."""

from __future__ import annotations

from .generator import RuleGenerator, visibility
from .label import Label
from .resolve import (
    ExternalResolver,
    FlatResolver,
    LabelResolver,
    PrefixDispatchResolver,
    RemoteResolver,
    StructuredResolver,
    VendoredResolver,
    external_modes,
    external_resolver,
    is_standard,
    local_resolver,
)
from .rule import DEFAULT_LIB_NAME, DEFAULT_TEST_NAME, DEFAULT_XTEST_NAME, Rule, RuleKind

__all__ = [
    "DEFAULT_LIB_NAME",
    "DEFAULT_TEST_NAME",
    "DEFAULT_XTEST_NAME",
    "ExternalResolver",
    "FlatResolver",
    "Label",
    "LabelResolver",
    "PrefixDispatchResolver",
    "RemoteResolver",
    "Rule",
    "RuleGenerator",
    "RuleKind",
    "StructuredResolver",
    "VendoredResolver",
    "external_modes",
    "external_resolver",
    "is_standard",
    "local_resolver",
    "visibility",
]
