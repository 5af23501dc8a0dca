"""Configuration loading for bzlgen (.bzlgen.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .errors import BzlgenError
from .generator.builders import GO_RULES_BZL
from .models import Style
from .rules import external_modes

CONFIG_FILENAME = ".bzlgen.yml"


class ConfigError(BzlgenError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class BzlgenConfig:
    """Represents the settings defined in .bzlgen.yml."""

    root: Path
    go_prefix: Optional[str] = None
    style: Style = Style.STRUCTURED
    build_file_name: str = "BUILD"
    build_tags: Optional[List[str]] = None
    external: str = "external"
    go_rules_bzl: str = GO_RULES_BZL
    exclude_paths: List[str] = field(default_factory=list)


def load_config(config_path: Path) -> BzlgenConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return BzlgenConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config = BzlgenConfig(root=root)
    config.go_prefix = _as_str(data.get("go_prefix"))

    style = _as_str(data.get("style"))
    if style is not None:
        config.style = parse_style(style)

    build_file_name = _as_str(data.get("build_file_name"))
    if build_file_name:
        config.build_file_name = build_file_name

    if "build_tags" in data and data["build_tags"] is not None:
        config.build_tags = _as_tag_list(data.get("build_tags")) or None

    external = _as_str(data.get("external"))
    if external is not None:
        if external not in external_modes():
            known = ", ".join(external_modes())
            raise ConfigError(f"Unknown external mode {external!r} (expected one of {known})")
        config.external = external

    go_rules_bzl = _as_str(data.get("go_rules_bzl"))
    if go_rules_bzl:
        config.go_rules_bzl = go_rules_bzl

    config.exclude_paths = _as_str_list(data.get("exclude_paths"))
    return config


def parse_style(value: str) -> Style:
    """Return the :class:`Style` named by ``value``."""
    try:
        return Style(value.strip().lower())
    except ValueError:
        known = ", ".join(style.value for style in Style)
        raise ConfigError(f"Unknown style {value!r} (expected one of {known})") from None


def parse_build_tags(value: str) -> List[str]:
    """Split a comma-separated tag list."""
    return [tag.strip() for tag in value.split(",") if tag.strip()]


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


def _as_tag_list(value: Any) -> List[str]:
    if isinstance(value, str):
        return parse_build_tags(value)
    return _as_str_list(value)


__all__ = [
    "BzlgenConfig",
    "CONFIG_FILENAME",
    "ConfigError",
    "load_config",
    "parse_build_tags",
    "parse_style",
]
