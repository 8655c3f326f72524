from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Tuple

def ensure_dir(p: Path) -> None:
    p.mkdir(parents=True, exist_ok=True)

def walk_tree(
    root: Path,
    onerror: Optional[Callable[[OSError], None]] = None,
) -> Iterator[Tuple[Path, List[str], List[str]]]:
    """
    Top-down walk, names sorted for a stable build order.

    Callers may prune the yielded `dirnames` list in place to skip subtrees.
    """
    for dirpath, dirnames, filenames in os.walk(root, topdown=True, onerror=onerror):
        dirnames.sort()
        filenames.sort()
        yield Path(dirpath), dirnames, filenames

def relpath_under(root: Path, p: Path) -> Path:
    return p.relative_to(root)

def read_text_utf8(p: Path) -> str:
    data = p.read_bytes()
    return data.decode("utf-8")

def write_text_utf8(p: Path, s: str) -> None:
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(s, encoding="utf-8", newline="\n")

def copy_file(src: Path, dst: Path) -> None:
    dst.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(src, dst)
