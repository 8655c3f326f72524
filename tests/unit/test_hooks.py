import stat
import sys
from pathlib import Path

import pytest

from silvera.config import Config
from silvera.errors import HookExecutionError
from silvera.stages.hooks import HookPhase, SubprocessHookRunner, command_for

def _script(path: Path, text: str, executable: bool = False) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    if executable:
        path.chmod(path.stat().st_mode | stat.S_IXUSR)
    return path

def test_command_for_dispatches_on_suffix() -> None:
    assert command_for(Path("/a/prh__x.py"), ["1"]) == [sys.executable, "/a/prh__x.py", "1"]
    assert command_for(Path("/a/prh__x.sh"), []) == ["bash", "/a/prh__x.sh"]
    assert command_for(Path("/a/prh__x"), ["1", "2"]) == ["/a/prh__x", "1", "2"]

def test_phase_prefixes() -> None:
    assert [p.prefix for p in HookPhase] == ["prh__", "prf__", "pof__", "poh__"]

def test_runs_matching_scripts_in_addon_then_name_order(tmp_path: Path) -> None:
    addons = tmp_path / "addons"
    log = tmp_path / "log.txt"
    _script(addons / "first" / "pof__b.sh", f'echo "first-b $1" >> "{log}"\n')
    _script(
        addons / "first" / "pof__a.py",
        "import sys\n"
        f"with open({str(log)!r}, 'a') as f:\n"
        "    f.write('first-a ' + sys.argv[1] + '\\n')\n",
    )
    _script(addons / "first" / "prf__ignored.sh", f'echo ignored >> "{log}"\n')
    _script(addons / "second" / "pof__run", f'#!/bin/sh\necho "second $1" >> "{log}"\n', executable=True)

    runner = SubprocessHookRunner(addons, cwd=tmp_path)
    conf = Config(addons=("first", "second"))
    results = runner.run_phase(conf, HookPhase.POST_DOCUMENT, ["/out/page.html"])

    assert [r.script.name for r in results] == ["pof__a.py", "pof__b.sh", "pof__run"]
    assert log.read_text(encoding="utf-8").splitlines() == [
        "first-a /out/page.html",
        "first-b /out/page.html",
        "second /out/page.html",
    ]

def test_output_is_captured(tmp_path: Path) -> None:
    addons = tmp_path / "addons"
    _script(addons / "echo" / "prh__hello.sh", "echo hello from addon\n")

    results = SubprocessHookRunner(addons).run_phase(Config(addons=("echo",)), HookPhase.PRE_BUILD)

    assert len(results) == 1
    assert results[0].addon == "echo"
    assert results[0].output.strip() == "hello from addon"

def test_no_addons_runs_nothing(tmp_path: Path) -> None:
    assert SubprocessHookRunner(tmp_path / "missing").run_phase(Config(), HookPhase.POST_BUILD) == []

def test_non_zero_exit_is_fatal(tmp_path: Path) -> None:
    addons = tmp_path / "addons"
    _script(addons / "bad" / "poh__fail.sh", "echo oops >&2\nexit 3\n")

    with pytest.raises(HookExecutionError) as exc:
        SubprocessHookRunner(addons).run_phase(Config(addons=("bad",)), HookPhase.POST_BUILD)
    assert "exit status 3" in str(exc.value)
    assert "oops" in str(exc.value)

def test_missing_addon_directory_is_fatal(tmp_path: Path) -> None:
    (tmp_path / "addons").mkdir()
    with pytest.raises(HookExecutionError):
        SubprocessHookRunner(tmp_path / "addons").run_phase(Config(addons=("ghost",)), HookPhase.PRE_BUILD)

def test_unspawnable_script_is_fatal(tmp_path: Path) -> None:
    addons = tmp_path / "addons"
    # not executable and no known interpreter
    _script(addons / "x" / "prh__plain", "#!/bin/sh\necho hi\n")

    with pytest.raises(HookExecutionError) as exc:
        SubprocessHookRunner(addons).run_phase(Config(addons=("x",)), HookPhase.PRE_BUILD)
    assert "cannot spawn" in str(exc.value)

def test_timeout_is_fatal(tmp_path: Path) -> None:
    addons = tmp_path / "addons"
    _script(addons / "slow" / "prh__sleep.py", "import time\ntime.sleep(10)\n")

    conf = Config(addons=("slow",), hook_timeout=0.5)
    with pytest.raises(HookExecutionError) as exc:
        SubprocessHookRunner(addons).run_phase(conf, HookPhase.PRE_BUILD)
    assert "timed out" in str(exc.value)
