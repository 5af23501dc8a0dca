"""bzlgen generates Bazel build files for Go repositories."""

from .errors import BzlgenError, PathValidationError, UnresolvableImportError, WalkerError
from .generator import Generator
from .models import Package, Style

__version__ = "0.1.0"

__all__ = [
    "BzlgenError",
    "Generator",
    "Package",
    "PathValidationError",
    "Style",
    "UnresolvableImportError",
    "WalkerError",
]
