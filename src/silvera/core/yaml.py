from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import yaml

from silvera.errors import ConfigParseError

def parse_mapping(text: str, path: Path | None = None) -> Dict[str, Any]:
    """
    Parse a YAML config document.
    - empty document -> {}
    - top-level must be a mapping
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigParseError(path, f"invalid YAML: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigParseError(path, "top-level must be a mapping")
    return data

def read_mapping(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigParseError(path, f"cannot read: {e}") from e
    return parse_mapping(text, path)

def dump_mapping(data: Dict[str, Any]) -> str:
    return yaml.safe_dump(
        data,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
        width=88,
    )
