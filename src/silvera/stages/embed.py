from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template

from silvera.core.html import first_heading

DEFAULT_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<title>{{ Title }}</title>
</head>
<body>
{{ Body }}
</body>
</html>
"""

@lru_cache(maxsize=8)
def _environment(template_dir: Path) -> Environment:
    # Body is already HTML; nothing gets escaped
    return Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=False,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )

def load_template(path: Path) -> Template:
    return _environment(path.parent).get_template(path.name)

def embed_html(body: str, rel_path: str, template_path: Path) -> str:
    """Substitute Title, Body and Path into the template file."""
    tmpl = load_template(template_path)
    return tmpl.render(Title=first_heading(body), Body=body, Path=rel_path)
