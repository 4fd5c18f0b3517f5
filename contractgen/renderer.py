# contractgen/renderer.py
"""
HTML fragments for collected dynamic-block items.

Every renderer takes the ordered item list and returns markup meant to be
inserted into a document as-is; labels and values are not escaped.
An empty item list always renders as "".
"""

from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

from contractgen.collector import collect_block
from contractgen.models import DynamicBlock, Item, OutputType
from contractgen.resolver import FieldResolver
from contractgen.settings import DEFAULT_VALUE_HEADER

LABEL_HEADER = "Activity"


# ============================================================
# per-format renderers
# ============================================================

def _render_bullets(items: Sequence[Item], value_header: str) -> str:
    rows = "".join(
        f'<li style="margin: 2px 0; font-size: 11pt; line-height: 1.4;">'
        f"<strong>{item.label}</strong>: {item.value}</li>"
        for item in items
    )
    return f'<ul style="margin: 10px 0; padding-left: 20px; font-size: 11pt; list-style-type: disc;">{rows}</ul>'


def _render_list(items: Sequence[Item], value_header: str) -> str:
    # Same output as bullets for now
    return _render_bullets(items, value_header)


def _render_table(items: Sequence[Item], value_header: str) -> str:
    cell = "border: 1px solid #ddd; padding: 6px 8px;"
    head = f"{cell} background: #f5f5f5; font-size: 11pt; text-align: left;"
    rows = "".join(
        f'<tr><td style="{cell} font-weight: bold; width: 60%; font-size: 11pt;">{item.label}</td>'
        f'<td style="{cell} width: 40%; font-size: 11pt;">{item.value}</td></tr>'
        for item in items
    )
    return (
        '<table style="width: 100%; max-width: 400px; border-collapse: collapse; margin: 10px 0; font-size: 11pt;">'
        f'<thead><tr><th style="{head} width: 60%;">{LABEL_HEADER}</th>'
        f'<th style="{head} width: 40%;">{value_header}</th></tr></thead>'
        f"<tbody>{rows}</tbody>"
        "</table>"
    )


def _render_table_no_borders(items: Sequence[Item], value_header: str) -> str:
    cell = "padding: 1px 4px; font-size: 11pt; line-height: 1.0;"
    head = "padding: 4px 8px; background: #f5f5f5; font-size: 11pt; text-align: left; line-height: 1.2;"
    rows = "".join(
        f'<tr><td style="{cell} font-weight: bold; width: 60%;">{item.label}</td>'
        f'<td style="{cell} width: 40%;">{item.value}</td></tr>'
        for item in items
    )
    return (
        '<div style="margin: 6px 0;">'
        '<table style="width: 100%; max-width: 400px; margin: 0; font-size: 11pt; line-height: 1.0; border-spacing: 0;">'
        f'<thead><tr><th style="{head} width: 60%;">{LABEL_HEADER}</th>'
        f'<th style="{head} width: 40%;">{value_header}</th></tr></thead>'
        f"<tbody>{rows}</tbody>"
        "</table></div>"
    )


def _render_paragraph(items: Sequence[Item], value_header: str) -> str:
    text = ", ".join(f"<strong>{item.label}</strong>: {item.value}" for item in items)
    return f'<p style="margin: 10px 0; line-height: 1.4; font-size: 11pt;">{text}</p>'


RENDERERS: Dict[OutputType, Callable[[Sequence[Item], str], str]] = {
    OutputType.BULLETS: _render_bullets,
    OutputType.LIST: _render_list,
    OutputType.TABLE: _render_table,
    OutputType.TABLE_NO_BORDERS: _render_table_no_borders,
    OutputType.PARAGRAPH: _render_paragraph,
}


# ============================================================
# public API
# ============================================================

def render(
    items: Sequence[Item],
    output_type: Union[OutputType, str, None] = OutputType.BULLETS,
    *,
    value_header: str = DEFAULT_VALUE_HEADER,
) -> str:
    """Render items in the requested format; unknown formats fall back to bullets."""
    if not items:
        return ""
    kind = OutputType.parse(output_type) or OutputType.BULLETS
    return RENDERERS[kind](list(items), value_header)


def render_block(
    block: DynamicBlock,
    record: Optional[Mapping[str, Any]],
    *,
    value_header: str = DEFAULT_VALUE_HEADER,
    resolver: Optional[FieldResolver] = None,
) -> str:
    items: List[Item] = collect_block(block, record, resolver=resolver)
    return render(items, block.output_type, value_header=value_header)
