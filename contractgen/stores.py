# contractgen/stores.py

from typing import Any, Dict, Iterable, List, Optional

from contractgen.errors import BlockNotFound, PlaceholderConflict
from contractgen.models import DynamicBlock, PlaceholderMapping


class BlockStore:
    """
    In-memory dynamic block definitions keyed by id.

    Placeholders are unique across the store: adding a block whose
    placeholder already belongs to another block raises
    PlaceholderConflict instead of letting the last one loaded win.
    """

    def __init__(self, blocks: Optional[Iterable[DynamicBlock]] = None):
        self._blocks: Dict[str, DynamicBlock] = {}
        for b in blocks or ():
            self.add(b)

    @classmethod
    def from_dicts(cls, data: Iterable[Dict[str, Any]]) -> "BlockStore":
        return cls(DynamicBlock.from_dict(d) for d in data or ())

    def add(self, block: DynamicBlock) -> DynamicBlock:
        if not block.id:
            raise ValueError("Dynamic block must have an id")
        if block.placeholder:
            owner = self.find_by_placeholder(block.placeholder)
            if owner is not None and owner.id != block.id:
                raise PlaceholderConflict(block.placeholder, owner.id, block.id)
        self._blocks[block.id] = block
        return block

    def remove(self, block_id: str) -> None:
        if self._blocks.pop(block_id, None) is None:
            raise BlockNotFound(block_id)

    def get(self, block_id: str) -> DynamicBlock:
        try:
            return self._blocks[block_id]
        except KeyError:
            raise BlockNotFound(block_id) from None

    def list(self) -> List[DynamicBlock]:
        return list(self._blocks.values())

    def find_by_placeholder(self, placeholder: str) -> Optional[DynamicBlock]:
        key = (placeholder or "").strip()
        for b in self._blocks.values():
            if b.placeholder.strip() == key:
                return b
        return None

    def __contains__(self, block_id: str) -> bool:
        return block_id in self._blocks

    def __len__(self) -> int:
        return len(self._blocks)


class MappingRegistry:
    """Placeholder mappings per template id."""

    def __init__(self):
        self._mappings: Dict[str, Dict[str, PlaceholderMapping]] = {}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MappingRegistry":
        """
        Build from ``{templateId: [mapping, ...]}`` or
        ``{templateId: {"mappings": [mapping, ...]}}``.
        """
        registry = cls()
        for template_id, entries in (data or {}).items():
            if isinstance(entries, dict):
                entries = entries.get("mappings", [])
            for entry in entries or ():
                if not isinstance(entry, dict):
                    continue
                mapping = PlaceholderMapping.from_dict(entry)
                if mapping is not None:
                    registry.set(template_id, mapping)
        return registry

    def set(self, template_id: str, mapping: PlaceholderMapping) -> None:
        self._mappings.setdefault(template_id, {})[mapping.placeholder] = mapping

    def set_field(self, template_id: str, placeholder: str, column: str) -> PlaceholderMapping:
        mapping = self.get(template_id, placeholder)
        if mapping is None:
            mapping = PlaceholderMapping.field(placeholder, column)
            self.set(template_id, mapping)
        else:
            mapping.switch_to_field(column)
        return mapping

    def set_dynamic(self, template_id: str, placeholder: str, block_id: str) -> PlaceholderMapping:
        mapping = self.get(template_id, placeholder)
        if mapping is None:
            mapping = PlaceholderMapping.dynamic(placeholder, block_id)
            self.set(template_id, mapping)
        else:
            mapping.switch_to_dynamic(block_id)
        return mapping

    def get(self, template_id: str, placeholder: str) -> Optional[PlaceholderMapping]:
        return self._mappings.get(template_id, {}).get(placeholder)

    def clear(self, template_id: str, placeholder: Optional[str] = None) -> None:
        if placeholder is None:
            self._mappings.pop(template_id, None)
        else:
            self._mappings.get(template_id, {}).pop(placeholder, None)

    def for_template(self, template_id: str) -> List[PlaceholderMapping]:
        return list(self._mappings.get(template_id, {}).values())
