"""Reader settings, optionally loaded from a YAML file."""

from pathlib import Path

import yaml
from pydantic import BaseModel


class ReaderConfig(BaseModel):
    """Defaults applied when declarations leave a field out."""

    openapi_version: str = "3.0.1"
    title: str = "API"
    version: str = "1.0.0"
    description: str | None = None
    default_media_type: str = "application/json"
    wildcard_media_type: str = "*/*"
    default_response_description: str = "default response"


def load_config(file_path: Path | None) -> ReaderConfig:
    """Load a ReaderConfig from YAML. Missing or empty files give the defaults."""
    if file_path is None or not file_path.exists():
        return ReaderConfig()
    data = yaml.safe_load(file_path.read_text(encoding="utf-8"))
    return ReaderConfig(**(data or {}))
