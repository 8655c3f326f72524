from __future__ import annotations

import argparse
import sys
from pathlib import Path

from silvera.context import BuildContext
from silvera.errors import SilveraError
from silvera.logging import get_logger, set_verbose
from silvera.pipeline.build import build
from silvera.pipeline.init import init_workspace

log = get_logger()

def build_parser() -> argparse.ArgumentParser:
    # -v is accepted before or after the verb; SUPPRESS keeps a subparser from resetting it
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "-v", "--verbose", action="store_true", default=argparse.SUPPRESS,
        help="Debug logging, including addon output",
    )

    p = argparse.ArgumentParser(prog="silvera", description="Build a static site from Markdown")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging, including addon output")
    sub = p.add_subparsers(dest="cmd", metavar="command")
    sub.add_parser("init", parents=[common], help="Initialize a new silvera workspace")
    sub.add_parser("build", parents=[common], help="Build the files from ./src")
    return p

def cmd_init(ctx: BuildContext) -> int:
    init_workspace(ctx)
    return 0

def cmd_build(ctx: BuildContext) -> int:
    stats = build(ctx)
    log.info(
        "done: directories=%d documents=%d copied=%d skipped=%d enumeration_errors=%d processing_errors=%d",
        stats.directories, stats.documents, stats.copied, stats.skipped,
        stats.enumeration_errors, stats.processing_errors,
    )
    return 0

COMMANDS = {
    "init": cmd_init,
    "build": cmd_build,
}

def main(argv=None) -> int:
    p = build_parser()
    args = p.parse_args(argv)
    set_verbose(bool(args.verbose))

    if args.cmd is None:
        print("Command missing!", file=sys.stderr)
        p.print_usage(sys.stderr)
        return 2

    ctx = BuildContext.for_workspace(Path.cwd())
    try:
        return COMMANDS[args.cmd](ctx)
    except SilveraError as e:
        log.error(str(e))
        return 1
