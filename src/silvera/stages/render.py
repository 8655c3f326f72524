from __future__ import annotations

from functools import lru_cache

from markdown_it import MarkdownIt
from mdit_py_plugins.anchors import anchors_plugin
from mdit_py_plugins.attrs import attrs_block_plugin, attrs_plugin
from mdit_py_plugins.deflist import deflist_plugin
from mdit_py_plugins.dollarmath import dollarmath_plugin
from mdit_py_plugins.footnote import footnote_plugin
from mdit_py_plugins.tasklists import tasklists_plugin

from silvera.config import Config, Extensions, ParserOptions, RendererOptions
from silvera.core.markdown import toc_plugin, wikilink_plugin

@lru_cache(maxsize=32)
def build_engine(
    ext: Extensions,
    po: ParserOptions,
    ro: RendererOptions,
) -> MarkdownIt:
    """
    A markdown-it instance with exactly the capabilities switched on in config.

    Starts from the strict CommonMark preset, so every GFM-style rule is off
    unless its flag is set.
    """
    md = MarkdownIt(
        "commonmark",
        {
            "html": ro.unsafe_rendering,
            "xhtmlOut": ro.xhtml,
            "breaks": ro.hard_wraps,
            "linkify": ext.autolinks,
            "typographer": ext.typographer,
        },
    )

    if ext.tables:
        md.enable("table")
    if ext.strikethrough:
        md.enable("strikethrough")
    if ext.autolinks:
        md.enable("linkify")
    if ext.typographer:
        md.enable(["replacements", "smartquotes"])
    if ext.task_list:
        md.use(tasklists_plugin)
    if ext.definition_list:
        md.use(deflist_plugin)
    if ext.footnotes:
        md.use(footnote_plugin)
    if ext.mathjax:
        md.use(dollarmath_plugin)
    if ext.wikilink:
        md.use(wikilink_plugin)

    if po.custom_heading_attrs:
        md.use(attrs_plugin)
        md.use(attrs_block_plugin)
    # a table of contents needs link targets, so it turns heading ids on
    if po.auto_heading_id or ext.table_of_contents:
        md.use(anchors_plugin, min_level=1, max_level=6)
    if ext.table_of_contents:
        md.use(toc_plugin)

    return md

def render_markdown(text: str, conf: Config) -> str:
    md = build_engine(conf.extensions, conf.parser_options, conf.renderer_options)
    return md.render(text)
