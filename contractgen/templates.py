# contractgen/templates.py

from pathlib import Path
from typing import Tuple

import markdown


MARKDOWN_SUFFIXES = (".md", ".markdown")


def markdown_to_html(md_text: str) -> str:
    # Placeholders ({{Name}}) pass through markdown untouched
    return markdown.markdown(md_text or "", extensions=["tables"])


def load_template(path: str) -> Tuple[str, str]:
    """
    Read a template file and return (template_id, html).

    The id is the file stem. Markdown files are converted to HTML; anything
    else is returned as-is.
    """
    p = Path(path)
    text = p.read_text(encoding="utf-8")
    if p.suffix.lower() in MARKDOWN_SUFFIXES:
        text = markdown_to_html(text)
    return p.stem, text
