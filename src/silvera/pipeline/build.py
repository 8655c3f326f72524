from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from jinja2 import TemplateError

from silvera.config import Config, load_config
from silvera.context import BuildContext
from silvera.core.resolver import ConfigIndex, resolve
from silvera.errors import DocumentProcessingError, EnumerationError, FileSystemError
from silvera.io.fs import copy_file, ensure_dir, read_text_utf8, relpath_under, walk_tree, write_text_utf8
from silvera.logging import get_logger
from silvera.stages.embed import embed_html
from silvera.stages.hooks import AddonHook, HookPhase, SubprocessHookRunner
from silvera.stages.render import render_markdown

log = get_logger()

MARKDOWN_SUFFIX = ".md"
HTML_SUFFIX = ".html"

@dataclass(frozen=True)
class BuildStats:
    directories: int
    documents: int
    copied: int
    skipped: int
    enumeration_errors: int
    processing_errors: int

@dataclass(frozen=True)
class BuildEntry:
    source: Path
    is_dir: bool
    rel: Path
    config: Config
    output: Path

    @property
    def rel_str(self) -> str:
        return self.rel.as_posix()

class BuildOrchestrator:
    """
    One build = one pass over `src/`.

    Init loads the global config and runs pre-build hooks, Walking renders or
    copies every entry, Done runs post-build hooks. Errors on a single entry
    are logged and counted; config and hook errors abort the build.
    """

    def __init__(self, ctx: BuildContext, hooks: Optional[AddonHook] = None) -> None:
        self.ctx = ctx
        self.hooks: AddonHook = hooks or SubprocessHookRunner(ctx.addon_dir, cwd=ctx.workspace)

        self._directories = 0
        self._documents = 0
        self._copied = 0
        self._skipped = 0
        self._enumeration_errors = 0
        self._processing_errors = 0

    # ---- Init ----

    def setup(self) -> ConfigIndex:
        # the defaults are the parent of the global config
        conf = load_config(self.ctx.config_file, Config())
        outdir = self.ctx.workspace_path(conf.outdir)
        try:
            ensure_dir(outdir)
        except OSError as e:
            raise FileSystemError(outdir, str(e)) from e
        return ConfigIndex(self.ctx.source_dir, conf)

    # ---- Walking ----

    def _on_walk_error(self, err: OSError) -> None:
        path = Path(err.filename) if err.filename else self.ctx.source_dir
        e = EnumerationError(path, err.strerror or str(err))
        log.error(f"Err: {e}")
        self._enumeration_errors += 1

    def register_local_config(self, index: ConfigIndex, directory: Path) -> None:
        conf_path = self.ctx.local_config_file(directory)
        if not conf_path.is_file():
            return
        if directory == self.ctx.source_dir:
            # the source root always builds with the global config
            log.warning(f"Ignoring {conf_path}: put root settings in {self.ctx.config_file}")
            return
        index.register(directory, load_config(conf_path, index.global_config))

    def entry_for(self, index: ConfigIndex, path: Path, is_dir: bool) -> BuildEntry:
        rel = relpath_under(self.ctx.source_dir, path)
        conf = resolve(index, path, is_dir=is_dir)
        out = self.ctx.workspace_path(conf.outdir) / rel
        if not is_dir and path.suffix == MARKDOWN_SUFFIX:
            out = out.with_suffix(HTML_SUFFIX)
        return BuildEntry(source=path, is_dir=is_dir, rel=rel, config=conf, output=out)

    def mirror_directory(self, entry: BuildEntry) -> None:
        try:
            ensure_dir(entry.output)
        except OSError as e:
            raise DocumentProcessingError(entry.source, str(e)) from e
        self._directories += 1

    def process_document(self, entry: BuildEntry) -> None:
        conf = entry.config

        self.hooks.run_phase(conf, HookPhase.PRE_DOCUMENT, [str(entry.source)])

        try:
            md_text = read_text_utf8(entry.source)
            body = render_markdown(md_text, conf)
            page = embed_html(body, entry.rel_str, self.ctx.workspace_path(conf.template))
            write_text_utf8(entry.output, page)
        except (OSError, UnicodeDecodeError, TemplateError, ValueError) as e:
            raise DocumentProcessingError(entry.source, str(e)) from e

        log.info(f"built: {entry.rel_str} -> {entry.output}")
        self._documents += 1

        self.hooks.run_phase(conf, HookPhase.POST_DOCUMENT, [str(entry.output)])

    def copy_opaque(self, entry: BuildEntry) -> None:
        try:
            copy_file(entry.source, entry.output)
        except OSError as e:
            raise DocumentProcessingError(entry.source, str(e)) from e
        log.info(f"clone: {entry.rel_str} -> {entry.output}")
        self._copied += 1

    def _process(self, entry: BuildEntry) -> None:
        try:
            if entry.is_dir:
                self.mirror_directory(entry)
            elif entry.source.suffix == MARKDOWN_SUFFIX:
                self.process_document(entry)
            else:
                self.copy_opaque(entry)
        except DocumentProcessingError as e:
            # one broken file must not stop the rest of the site
            log.error(f"Err: {e}")
            self._processing_errors += 1

    def walk(self, index: ConfigIndex) -> None:
        hidden = self.ctx.hidden_dir
        for dirpath, dirnames, filenames in walk_tree(self.ctx.source_dir, onerror=self._on_walk_error):
            # overrides apply to every entry of this directory, so load them first
            if hidden in dirnames:
                self.register_local_config(index, dirpath)

            kept: List[str] = []
            for name in dirnames:
                if name.startswith("."):
                    self._skipped += 1
                    continue
                kept.append(name)
            dirnames[:] = kept

            if dirpath != self.ctx.source_dir:
                self._process(self.entry_for(index, dirpath, is_dir=True))

            for name in filenames:
                if name.startswith("."):
                    self._skipped += 1
                    continue
                self._process(self.entry_for(index, dirpath / name, is_dir=False))

    # ---- Done ----

    def run(self) -> BuildStats:
        index = self.setup()
        conf = index.global_config
        self.hooks.run_phase(conf, HookPhase.PRE_BUILD, [])
        self.walk(index)
        self.hooks.run_phase(conf, HookPhase.POST_BUILD, [])
        return self.stats()

    def stats(self) -> BuildStats:
        return BuildStats(
            directories=self._directories,
            documents=self._documents,
            copied=self._copied,
            skipped=self._skipped,
            enumeration_errors=self._enumeration_errors,
            processing_errors=self._processing_errors,
        )

def build(ctx: BuildContext, hooks: Optional[AddonHook] = None) -> BuildStats:
    return BuildOrchestrator(ctx, hooks).run()
