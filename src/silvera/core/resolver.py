from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterator, Optional

from silvera.config import Config
from silvera.logging import get_logger

log = get_logger()

class ConfigIndex:
    """
    Local configs keyed by the absolute directory they apply to.

    Filled during the same traversal that queries it; lookups return the
    nearest registered ancestor of a path, or the global config.
    """

    def __init__(self, source_root: Path, global_config: Config) -> None:
        self.source_root = Path(source_root)
        self.global_config = global_config
        self._local: Dict[Path, Config] = {}

    def register(self, directory: Path, conf: Config) -> None:
        self._local[Path(directory)] = conf

    def get(self, directory: Path) -> Optional[Config]:
        return self._local.get(Path(directory))

def _ancestors(start: Path, root: Path) -> Iterator[Path]:
    # leaf first, stopping short of root; nothing for paths outside root
    if root not in start.parents:
        return
    d = start
    while d != root:
        yield d
        d = d.parent

def resolve(index: ConfigIndex, path: Path, *, is_dir: Optional[bool] = None) -> Config:
    """
    Most specific config for `path` (a file resolves through its directory).

    The source root itself is never looked up: it builds with the global config.

    `is_dir` skips the stat when the caller already knows the entry type.
    """
    p = Path(path)
    if is_dir is None:
        is_dir = p.is_dir()
    directory = p if is_dir else p.parent

    for d in _ancestors(directory, index.source_root):
        conf = index.get(d)
        if conf is not None:
            log.debug(f"Using local conf for {d}")
            return conf
    return index.global_config
