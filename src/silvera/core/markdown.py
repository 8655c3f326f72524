from __future__ import annotations

from typing import List, Optional, Tuple
from urllib.parse import quote

from markdown_it import MarkdownIt
from markdown_it.common.utils import escapeHtml
from markdown_it.rules_core import StateCore
from markdown_it.rules_inline import StateInline
from markdown_it.token import Token

def wikilink_href(target: str) -> str:
    """
    `[[Page]]` -> `Page.html`, `[[Page#sec]]` -> `Page.html#sec`, `[[#sec]]` -> `#sec`.
    """
    page, _, fragment = target.strip().partition("#")
    href = f"{quote(page.strip(), safe='/')}.html" if page.strip() else ""
    if fragment:
        href += "#" + quote(fragment.strip(), safe="")
    return href

def _wikilink_rule(state: StateInline, silent: bool) -> bool:
    start = state.pos
    if not state.src.startswith("[[", start):
        return False
    end = state.src.find("]]", start + 2)
    if end < 0:
        return False
    inner = state.src[start + 2 : end]
    if not inner.strip() or "\n" in inner or "[" in inner:
        return False

    if not silent:
        target, _, label = inner.partition("|")
        open_ = state.push("wikilink_open", "a", 1)
        open_.attrSet("href", wikilink_href(target))
        text = state.push("text", "", 0)
        text.content = (label or target).strip()
        state.push("wikilink_close", "a", -1)

    state.pos = end + 2
    return True

def wikilink_plugin(md: MarkdownIt) -> None:
    md.inline.ruler.before("link", "wikilink", _wikilink_rule)

def _heading_text(inline: Token) -> str:
    parts = [
        child.content
        for child in (inline.children or [])
        if child.type in ("text", "code_inline")
    ]
    return "".join(parts).strip() or inline.content.strip()

def collect_headings(tokens: List[Token]) -> List[Tuple[int, Optional[str], str]]:
    """(level, id, text) for every heading, in document order."""
    out: List[Tuple[int, Optional[str], str]] = []
    for i, tok in enumerate(tokens):
        if tok.type != "heading_open" or i + 1 >= len(tokens):
            continue
        anchor = tok.attrGet("id")
        out.append((int(tok.tag[1:]), str(anchor) if anchor is not None else None, _heading_text(tokens[i + 1])))
    return out

def render_toc(headings: List[Tuple[int, Optional[str], str]]) -> str:
    lines = ['<nav class="toc">', "<ul>"]
    for level, anchor, text in headings:
        label = escapeHtml(text)
        if anchor:
            label = f'<a href="#{escapeHtml(anchor)}">{label}</a>'
        lines.append(f'<li class="toc-h{level}">{label}</li>')
    lines += ["</ul>", "</nav>", ""]
    return "\n".join(lines)

def _toc_rule(state: StateCore) -> None:
    headings = collect_headings(state.tokens)
    if not headings:
        return
    token = Token("html_block", "", 0)
    token.content = render_toc(headings)
    token.block = True
    state.tokens.insert(0, token)

def toc_plugin(md: MarkdownIt) -> None:
    # must run after whichever rule assigns heading ids
    md.core.ruler.push("toc", _toc_rule)
