import logging
from pathlib import Path

import pytest

from silvera.cli import main
from silvera.config import Config, load_config
from silvera.context import BuildContext
from silvera.logging import get_logger, set_verbose
from silvera.pipeline.init import default_config

def _snapshot(root: Path) -> dict:
    return {
        p.relative_to(root).as_posix(): p.read_bytes() if p.is_file() else None
        for p in sorted(root.rglob("*"))
    }

def test_init_creates_workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)

    assert main(["init"]) == 0

    for name in ("addons", "build", "src"):
        assert (tmp_path / name).is_dir()
    assert (tmp_path / "template.html").is_file()
    assert load_config(tmp_path / "silvera.conf", Config(outdir=Path("x"))) == default_config()

def test_init_twice_changes_nothing(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    assert main(["init"]) == 0
    (tmp_path / "template.html").write_text("custom {{ Body }}", encoding="utf-8")
    before = _snapshot(tmp_path)

    assert main(["init"]) == 0

    assert _snapshot(tmp_path) == before

def test_build_command(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    main(["init"])
    (tmp_path / "src" / "a").mkdir()
    (tmp_path / "src" / "a" / "index.md").write_text("# Hello\n", encoding="utf-8")

    assert main(["build"]) == 0

    assert "Hello" in (tmp_path / "build" / "a" / "index.html").read_text(encoding="utf-8")

def test_build_without_workspace_fails(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    assert main(["build"]) == 1

def test_build_with_failing_addon_fails(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    main(["init"])
    (tmp_path / "silvera.conf").write_text("addons: [missing]\n", encoding="utf-8")

    assert main(["build"]) == 1

def test_missing_command(capsys: pytest.CaptureFixture) -> None:
    assert main([]) == 2
    assert "Command missing!" in capsys.readouterr().err

def test_unknown_command() -> None:
    with pytest.raises(SystemExit) as exc:
        main(["deploy"])
    assert exc.value.code == 2

def test_context_layout(tmp_path: Path) -> None:
    ctx = BuildContext.for_workspace(tmp_path)
    assert ctx.config_file == ctx.workspace / "silvera.conf"
    assert ctx.local_config_file(ctx.source_dir / "b") == ctx.source_dir / "b" / ".slv" / "silvera.conf"
    assert ctx.workspace_path(Path("build")) == ctx.workspace / "build"
    assert ctx.workspace_path(Path("/abs/out")) == Path("/abs/out")

@pytest.mark.parametrize("argv", [["-v", "init"], ["init", "-v"], ["init", "--verbose"]])
def test_verbose_flag_before_or_after_command(
    argv: list, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    try:
        assert main(argv) == 0
        assert get_logger().level == logging.DEBUG
    finally:
        set_verbose(False)

def test_without_verbose_flag_logs_at_info(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    set_verbose(True)

    assert main(["init"]) == 0

    assert get_logger().level == logging.INFO
