"""Serialize a Document to YAML or JSON."""

import json
from pathlib import Path
from typing import Any

import yaml

from route_reader.model import Document


def to_dict(document: Document) -> dict[str, Any]:
    """Plain OpenAPI dict: aliased keys, no unset or default-valued fields."""
    return document.model_dump(by_alias=True, exclude_none=True, exclude_defaults=True, mode="json")


def dump(document: Document, fmt: str = "yaml") -> str:
    data = to_dict(document)
    if fmt == "json":
        return json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)


def detect_format(file_path: Path | None) -> str:
    """Pick the output format from a file suffix. Returns 'json' or 'yaml'."""
    if file_path is not None and file_path.suffix.lower() == ".json":
        return "json"
    return "yaml"
