# contractgen/generator.py

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

from contractgen.formatting import contract_file_name, normalize_smart_quotes
from contractgen.merge import TemplateMerger
from contractgen.preview import provider_name

logger = logging.getLogger(__name__)

DOCUMENT_STYLE = """<style>
body, p, span, td, th, div, h1, h2, h3, h4, h5, h6 {
  font-family: Aptos, Arial, sans-serif !important;
  font-size: 11pt !important;
}
h1 { font-size: 16pt !important; font-weight: bold !important; }
h2, h3, h4, h5, h6 { font-size: 13pt !important; font-weight: bold !important; }
b, strong { font-weight: bold !important; }
</style>"""


# ============================================================
# helpers
# ============================================================

def _wrap_document(body_html: str) -> str:
    return f"<html><head><meta charset='utf-8'>{DOCUMENT_STYLE}</head><body>{body_html}</body></html>"


def _unique_path(dest_dir: Path, file_name: str) -> Path:
    path = dest_dir / file_name
    counter = 1
    while path.exists():
        path = dest_dir / f"{Path(file_name).stem} ({counter}){Path(file_name).suffix}"
        counter += 1
    return path


@dataclass
class GenerationSummary:
    created: int = 0
    files: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"created": self.created, "files": self.files, "warnings": self.warnings}


# ============================================================
# public API
# ============================================================

def generate_documents(
    records: List[Dict[str, Any]],
    template_id: str,
    template_text: str,
    merger: TemplateMerger,
    *,
    output_dir: str,
    contract_year: str,
    run_date: str,
    dry_run: bool = False,
) -> GenerationSummary:
    """
    Merge the template for every record and write one HTML document each.

    Unresolved placeholders are reported per provider in ``warnings`` and
    never stop the run.
    """

    summary = GenerationSummary()
    dest = Path(output_dir)
    if not dry_run:
        dest.mkdir(parents=True, exist_ok=True)

    for idx, record in enumerate(records):
        name = provider_name(record) or f"Provider {idx + 1}"
        result = merger.merge(template_id, template_text, record)

        for w in result.warnings:
            summary.warnings.append(f"{name}: {w}")

        if dry_run:
            summary.created += 1
            continue

        path = _unique_path(dest, contract_file_name(contract_year, name, run_date))
        path.write_text(_wrap_document(normalize_smart_quotes(result.content)), encoding="utf-8")
        logger.debug("Wrote %s", path)

        summary.files.append(str(path))
        summary.created += 1

    logger.info("Generated %d document(s) for template %s", summary.created, template_id)
    return summary
