from __future__ import annotations

import subprocess
import sys
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional, Protocol, Sequence

from silvera.config import Config
from silvera.errors import HookExecutionError
from silvera.logging import get_logger

log = get_logger()

class HookPhase(str, Enum):
    """Build phases; the value is the filename prefix of the phase's scripts."""

    PRE_BUILD = "prh__"
    PRE_DOCUMENT = "prf__"
    POST_DOCUMENT = "pof__"
    POST_BUILD = "poh__"

    @property
    def prefix(self) -> str:
        return self.value

@dataclass(frozen=True)
class HookResult:
    addon: str
    script: Path
    output: str

class AddonHook(Protocol):
    def run_phase(
        self, conf: Config, phase: HookPhase, args: Sequence[str] = ()
    ) -> List[HookResult]:
        ...

# interpreters keyed by script suffix; the script path becomes their first argument
INTERPRETERS = {
    ".py": sys.executable or "python",
    ".sh": "bash",
}

def command_for(script: Path, args: Sequence[str]) -> List[str]:
    interpreter = INTERPRETERS.get(script.suffix)
    if interpreter is None:
        return [str(script), *args]
    return [interpreter, str(script), *args]

class SubprocessHookRunner:
    """
    Runs addon scripts as child processes, one at a time.

    For every addon named in the config (in list order), every regular file in
    `<addon_dir>/<addon>/` whose name starts with the phase prefix is executed,
    in filename order. Any failure is fatal to the build.
    """

    def __init__(self, addon_dir: Path, cwd: Optional[Path] = None) -> None:
        self.addon_dir = Path(addon_dir)
        self.cwd = cwd

    def discover(self, addon: str, phase: HookPhase) -> List[Path]:
        root = self.addon_dir / addon
        try:
            entries = sorted(root.iterdir(), key=lambda p: p.name)
        except OSError as e:
            raise HookExecutionError([str(root)], f"cannot list addon '{addon}': {e}") from e
        return [p for p in entries if p.name.startswith(phase.prefix) and p.is_file()]

    def run_script(self, script: Path, args: Sequence[str], timeout: Optional[float]) -> str:
        cmd = command_for(script, args)
        try:
            proc = subprocess.run(
                cmd,
                cwd=self.cwd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise HookExecutionError(cmd, f"timed out after {timeout:g}s") from e
        except OSError as e:
            raise HookExecutionError(cmd, f"cannot spawn: {e}") from e

        if proc.returncode != 0:
            raise HookExecutionError(
                cmd,
                f"exit status {proc.returncode}: {proc.stderr.strip()}",
                output=proc.stdout,
            )
        return proc.stdout

    def run_phase(
        self, conf: Config, phase: HookPhase, args: Sequence[str] = ()
    ) -> List[HookResult]:
        results: List[HookResult] = []
        for addon in conf.addons:
            for script in self.discover(addon, phase):
                out = self.run_script(script, args, conf.hook_timeout)
                log.debug(f"Ran addon: {script}")
                if out:
                    log.debug(f"ADDON_OUT:\n{out}")
                results.append(HookResult(addon=addon, script=script, output=out))
        return results
