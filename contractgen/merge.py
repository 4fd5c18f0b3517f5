# contractgen/merge.py

import logging
import re
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

from contractgen.errors import BlockNotFound
from contractgen.formatting import format_currency, is_money_field
from contractgen.models import MappingType, PlaceholderMapping
from contractgen.renderer import render_block
from contractgen.resolver import FieldResolver
from contractgen.settings import DEFAULT_VALUE_HEADER, EXTENSION_KEY, MONEY_HINTS
from contractgen.stores import BlockStore, MappingRegistry

logger = logging.getLogger(__name__)

PLACEHOLDER_RE = re.compile(r"\{\{\s*([^{}\s][^{}]*?)\s*\}\}")


@dataclass
class MergeResult:
    content: str
    unresolved: List[str] = field(default_factory=list)

    @property
    def warnings(self) -> List[str]:
        return [f"Unresolved placeholder: {name}" for name in self.unresolved]


def placeholders(text: str) -> List[str]:
    """Distinct placeholder names in order of first appearance."""
    seen: List[str] = []
    for m in PLACEHOLDER_RE.finditer(text or ""):
        name = m.group(1)
        if name not in seen:
            seen.append(name)
    return seen


class TemplateMerger:
    """
    Substitutes template placeholders for one record at a time.

    Each ``{{ name }}`` is looked up in the mapping registry for the
    template:
    - field mapping: the resolved column value (money columns as currency)
    - dynamic mapping: the referenced block, collected and rendered
    - no mapping: empty string, and the name is reported as unresolved

    Substitution is a single pass over the original template text, so
    ``{{...}}`` appearing inside substituted values is left alone.
    """

    def __init__(
        self,
        blocks: BlockStore,
        mappings: MappingRegistry,
        *,
        extension_key: str = EXTENSION_KEY,
        money_hints=MONEY_HINTS,
        value_header: str = DEFAULT_VALUE_HEADER,
    ):
        self.blocks = blocks
        self.mappings = mappings
        self.extension_key = extension_key
        self.money_hints = tuple(money_hints)
        self.value_header = value_header

    # -------------------------
    # Value formatting
    # -------------------------

    def format_field_value(self, column: str, value: Any) -> str:
        if value is None:
            return ""
        if is_money_field(column, self.money_hints):
            return format_currency(value)
        return str(value)

    # -------------------------
    # Placeholder resolution
    # -------------------------

    def _resolve_mapping(self, mapping: PlaceholderMapping, resolver: FieldResolver) -> Optional[str]:
        if mapping.type == MappingType.FIELD:
            res = resolver.resolve(mapping.column or "")
            return self.format_field_value(mapping.column or "", res.value) if res.found else ""

        try:
            block = self.blocks.get(mapping.block_id or "")
        except BlockNotFound:
            logger.warning("Placeholder %r maps to missing block %r", mapping.placeholder, mapping.block_id)
            return None
        return render_block(block, resolver.record, value_header=self.value_header, resolver=resolver)

    def merge(self, template_id: str, text: str, record: Optional[Mapping[str, Any]]) -> MergeResult:
        if not text:
            return MergeResult(content=text or "")

        resolver = FieldResolver(record, extension_key=self.extension_key)
        unresolved: List[str] = []

        def _sub(match):
            name = match.group(1)
            mapping = self.mappings.get(template_id, name)
            value = self._resolve_mapping(mapping, resolver) if mapping is not None else None
            if value is None:
                if name not in unresolved:
                    unresolved.append(name)
                return ""
            return value

        content = PLACEHOLDER_RE.sub(_sub, text)
        if unresolved:
            logger.info("Template %s: %d unresolved placeholder(s): %s", template_id, len(unresolved), ", ".join(unresolved))
        return MergeResult(content=content, unresolved=unresolved)
