"""Rendering of generated documents to YAML or JSON."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

import yaml

OUTPUT_FORMATS = ("yaml", "json")


def serialize_yaml(document: Dict[str, Any]) -> str:
    return yaml.safe_dump(document, sort_keys=False, allow_unicode=True)


def serialize_json(document: Dict[str, Any]) -> str:
    return json.dumps(document, indent=2, ensure_ascii=False)


def serialize(document: Dict[str, Any], fmt: str = "yaml") -> str:
    """Serialize ``document`` in one of :data:`OUTPUT_FORMATS`."""
    if fmt == "yaml":
        return serialize_yaml(document)
    if fmt == "json":
        return serialize_json(document)
    raise ValueError(f"Unsupported output format: {fmt}")


def write_output(content: str, path: Path | str) -> Path:
    """Write ``content`` to ``path``, creating parent directories."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content, encoding="utf-8")
    return target


__all__ = ["OUTPUT_FORMATS", "serialize", "serialize_json", "serialize_yaml", "write_output"]
