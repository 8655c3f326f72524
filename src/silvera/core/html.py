from __future__ import annotations

import lxml.html
from lxml.etree import ParserError

def first_heading(html: str) -> str:
    """Text of the first <h1> in an HTML fragment, or "" if there is none."""
    if "<h1" not in html:
        return ""
    try:
        root = lxml.html.fragment_fromstring(html, create_parent="div")
    except ParserError:
        return ""
    found = root.xpath("//h1")
    if not found:
        return ""
    return found[0].text_content().strip()
