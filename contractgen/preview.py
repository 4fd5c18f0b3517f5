# contractgen/preview.py

from typing import Any, Dict, List, Mapping, Optional

from bs4 import BeautifulSoup

from contractgen.formatting import contract_file_name
from contractgen.merge import TemplateMerger
from contractgen.resolver import FieldResolver


EXCERPT_CHARS = 160

BLOCK_TAGS = [
    "p", "div", "br", "li", "ul", "ol", "table", "tr", "td", "th",
    "h1", "h2", "h3", "h4", "h5", "h6",
]


# ============================================================
# helpers
# ============================================================

def html_to_text(html: str) -> str:
    """Collapse rendered HTML to single-spaced plain text."""
    if not html:
        return ""
    soup = BeautifulSoup(html, "html.parser")
    # Keep inline markup (<strong>label</strong>: value) joined, split blocks
    for tag in soup.find_all(BLOCK_TAGS):
        tag.insert_after(" ")
    return " ".join(soup.get_text().split())


def _excerpt(text: str, limit: int = EXCERPT_CHARS) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - 1].rstrip() + "…"


def provider_name(record: Optional[Mapping[str, Any]]) -> str:
    name = FieldResolver(record).value("name", "")
    return str(name).strip() if name is not None else ""


# ============================================================
# preview row construction
# ============================================================

def build_preview_rows(
    records: List[Dict[str, Any]],
    template_id: str,
    template_text: str,
    merger: TemplateMerger,
    *,
    contract_year: str,
    run_date: str,
) -> List[Dict[str, Any]]:
    """
    Merge every record without writing anything.

    Returns list of dicts with keys:
        index
        name
        file_name
        unresolved      (placeholder names with no mapping/block)
        excerpt         (plain-text start of the merged document)
    """

    out: List[Dict[str, Any]] = []

    for idx, record in enumerate(records):
        name = provider_name(record) or f"Provider {idx + 1}"
        result = merger.merge(template_id, template_text, record)

        out.append(
            {
                "index": idx,
                "name": name,
                "file_name": contract_file_name(contract_year, name, run_date),
                "unresolved": list(result.unresolved),
                "excerpt": _excerpt(html_to_text(result.content)),
            }
        )

    return out
