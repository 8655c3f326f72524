from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, TypeVar

from silvera.core.yaml import dump_mapping, read_mapping
from silvera.errors import ConfigParseError
from silvera.logging import get_logger

log = get_logger()

@dataclass(frozen=True)
class Extensions:
    """Markup engine capabilities; keys match the `extensions:` section."""
    tables: bool = True
    strikethrough: bool = True
    autolinks: bool = True
    task_list: bool = False
    definition_list: bool = False
    footnotes: bool = False
    typographer: bool = False
    wikilink: bool = True
    mathjax: bool = False
    table_of_contents: bool = False

@dataclass(frozen=True)
class ParserOptions:
    custom_heading_attrs: bool = True
    auto_heading_id: bool = False

@dataclass(frozen=True)
class RendererOptions:
    hard_wraps: bool = False
    xhtml: bool = True
    unsafe_rendering: bool = False

@dataclass(frozen=True)
class Config:
    """
    One build configuration.

    The defaults are exactly what `silvera init` writes, and `Config()` is the
    parent of the workspace's root config. A root config that sets only a few
    keys therefore keeps tables, strikethrough, autolinks and wikilinks on.
    """

    outdir: Path = Path("build")
    template: Path = Path("template.html")
    extensions: Extensions = field(default_factory=Extensions)
    parser_options: ParserOptions = field(default_factory=ParserOptions)
    renderer_options: RendererOptions = field(default_factory=RendererOptions)
    addons: Tuple[str, ...] = ()
    hook_timeout: Optional[float] = None  # seconds per addon process; None waits forever

_SECTIONS = ("extensions", "parser_options", "renderer_options")

S = TypeVar("S", Extensions, ParserOptions, RendererOptions)

def _overlay_section(parent: S, patch: Any, name: str, path: Optional[Path]) -> S:
    if patch is None:
        return parent
    if not isinstance(patch, Mapping):
        raise ConfigParseError(path, f"'{name}' must be a mapping")

    known = {f.name for f in fields(parent)}
    update: Dict[str, bool] = {}
    for key, value in patch.items():
        if key not in known:
            log.warning(f"Unknown key '{name}.{key}' in {path or 'config'} (ignored)")
            continue
        if not isinstance(value, bool):
            raise ConfigParseError(path, f"'{name}.{key}' must be true or false, got {value!r}")
        update[key] = value
    return replace(parent, **update)

def _parse_path(value: Any, key: str, path: Optional[Path]) -> Path:
    if not isinstance(value, str) or not value.strip():
        raise ConfigParseError(path, f"'{key}' must be a non-empty string")
    return Path(value)

def _parse_addons(value: Any, path: Optional[Path]) -> Tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(a, str) and a for a in value):
        raise ConfigParseError(path, "'addons' must be a list of addon names")
    return tuple(value)

def _parse_timeout(value: Any, path: Optional[Path]) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigParseError(path, f"'hook_timeout' must be a positive number or null, got {value!r}")
    return float(value)

def overlay(parent: Config, patch: Mapping[str, Any], path: Optional[Path] = None) -> Config:
    """
    Structural merge of a parsed config mapping onto `parent`.

    Only keys present in `patch` change; everything else (including unset keys
    inside the nested sections) keeps the parent's value. `addons` is replaced
    as a whole list.
    """
    update: Dict[str, Any] = {}

    for key, value in patch.items():
        if key in _SECTIONS:
            update[key] = _overlay_section(getattr(parent, key), value, key, path)
        elif key == "outdir" or key == "template":
            update[key] = _parse_path(value, key, path)
        elif key == "addons":
            update[key] = _parse_addons(value, path)
        elif key == "hook_timeout":
            update[key] = _parse_timeout(value, path)
        else:
            log.warning(f"Unknown key '{key}' in {path or 'config'} (ignored)")

    return replace(parent, **update)

def load_config(path: Path, parent: Config) -> Config:
    """Read a config file, using `parent` as the base for every unset field."""
    conf = overlay(parent, read_mapping(path), path)
    log.info(f"Read config file at {path}")
    return conf

def config_to_mapping(conf: Config) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "outdir": conf.outdir.as_posix(),
        "template": conf.template.as_posix(),
    }
    for name in _SECTIONS:
        section = getattr(conf, name)
        data[name] = {f.name: getattr(section, f.name) for f in fields(section)}
    data["addons"] = list(conf.addons)
    data["hook_timeout"] = conf.hook_timeout
    return data

def dump_config(conf: Config) -> str:
    return dump_mapping(config_to_mapping(conf))
