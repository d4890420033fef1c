"""Configuration loading for routedoc (.routedoc.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .models import Framework

CONFIG_FILENAME = ".routedoc.yml"

DEFAULT_TITLE = "Generated API"
DEFAULT_VERSION = "1.0.0"
DEFAULT_DESCRIPTION = "API documentation generated from Rust code"

_OUTPUT_FORMATS = {"yaml", "json"}


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class InfoConfig:
    """Document metadata written to the ``info`` section."""

    title: str = DEFAULT_TITLE
    version: str = DEFAULT_VERSION
    description: Optional[str] = DEFAULT_DESCRIPTION


@dataclass
class OutputConfig:
    """Serialization format and destination."""

    format: str = "yaml"
    path: Optional[Path] = None


@dataclass
class RouteDocConfig:
    """Represents the settings defined in .routedoc.yml."""

    root: Path
    framework: Optional[Framework] = None
    info: InfoConfig = field(default_factory=InfoConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    exclude_paths: List[str] = field(default_factory=list)


def load_config(config_path: Path) -> RouteDocConfig:
    """Load configuration from disk, returning defaults when the file is absent."""
    config_file = _resolve_config_path(Path(config_path))
    root = config_file.parent.resolve()

    if not config_file.exists():
        return RouteDocConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    framework = None
    framework_name = _as_str(data.get("framework"))
    if framework_name:
        framework = parse_framework(framework_name)

    info = InfoConfig()
    info_data = _as_dict(data.get("info"))
    if info_data:
        info.title = _as_str(info_data.get("title")) or DEFAULT_TITLE
        info.version = _as_str(info_data.get("version")) or DEFAULT_VERSION
        if "description" in info_data:
            info.description = _as_str(info_data.get("description"))

    output = OutputConfig()
    output_data = _as_dict(data.get("output"))
    if output_data:
        fmt = (_as_str(output_data.get("format")) or "yaml").lower()
        if fmt not in _OUTPUT_FORMATS:
            raise ConfigError(f"Unsupported output format in {CONFIG_FILENAME}: {fmt}")
        output.format = fmt
        path_str = _as_str(output_data.get("path"))
        output.path = root / path_str if path_str else None

    return RouteDocConfig(
        root=root,
        framework=framework,
        info=info,
        output=output,
        exclude_paths=_as_str_list(data.get("exclude_paths")),
    )


def parse_framework(value: str) -> Framework:
    """Map a user supplied framework name onto :class:`Framework`."""
    normalized = value.strip().lower().replace("_", "-")
    if normalized == "actix":
        normalized = Framework.ACTIX_WEB.value
    try:
        return Framework(normalized)
    except ValueError as exc:
        supported = ", ".join(item.value for item in Framework)
        raise ConfigError(f"Unknown framework '{value}' (supported: {supported})") from exc


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


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "InfoConfig",
    "OutputConfig",
    "RouteDocConfig",
    "load_config",
    "parse_framework",
]
