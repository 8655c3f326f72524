from __future__ import annotations

from pathlib import Path
from typing import Optional


class SilveraError(Exception):
    """Base class for every error raised by a silvera build."""

    fatal = True


class ConfigParseError(SilveraError):
    def __init__(self, path: Optional[Path], reason: str) -> None:
        self.path = path
        self.reason = reason
        where = f"{path}: " if path is not None else ""
        super().__init__(f"Malformed config {where}{reason}")


class FileSystemError(SilveraError):
    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(f"Cannot prepare {path}: {reason}")


class EnumerationError(SilveraError):
    fatal = False

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(f"Cannot enumerate {path}: {reason}")


class DocumentProcessingError(SilveraError):
    fatal = False

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(f"Failed to process {path}: {reason}")


class HookExecutionError(SilveraError):
    def __init__(self, command: list[str], reason: str, output: str = "") -> None:
        self.command = command
        self.output = output
        super().__init__(f"Addon hook failed: {' '.join(command)}: {reason}")
