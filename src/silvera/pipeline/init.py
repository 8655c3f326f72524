from __future__ import annotations

from pathlib import Path

from silvera.config import Config, dump_config
from silvera.context import TEMPLATE_NAME, BuildContext
from silvera.errors import FileSystemError
from silvera.io.fs import ensure_dir, write_text_utf8
from silvera.logging import get_logger
from silvera.stages.embed import DEFAULT_TEMPLATE

log = get_logger()

def default_config() -> Config:
    return Config(outdir=Path("build"), template=Path(TEMPLATE_NAME))

def init_workspace(ctx: BuildContext) -> None:
    """
    Turn `ctx.workspace` into a silvera workspace.

    A workspace that already has a root config is left untouched.
    """
    if ctx.config_file.exists():
        log.info("This directory already appears to be a silvera workspace. Nothing changed.")
        return

    conf = default_config()
    template = ctx.workspace_path(conf.template)
    try:
        write_text_utf8(ctx.config_file, dump_config(conf))
        if not template.exists():
            write_text_utf8(template, DEFAULT_TEMPLATE)
        for d in (ctx.source_dir, ctx.workspace_path(conf.outdir), ctx.addon_dir):
            ensure_dir(d)
    except OSError as e:
        raise FileSystemError(Path(e.filename or ctx.workspace), str(e)) from e

    log.info(f"Initialized new silvera workspace at {ctx.workspace}")
