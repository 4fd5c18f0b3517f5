# contractgen/models.py

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

MAPPING_DYNAMIC_PREFIX = "dynamic:"

OPERATORS = (">", ">=", "=", "!=", "<", "<=")


class OutputType(str, Enum):
    BULLETS = "bullets"
    TABLE = "table"
    TABLE_NO_BORDERS = "table-no-borders"
    PARAGRAPH = "paragraph"
    # Rendered the same as BULLETS today; kept separate so saved blocks keep their choice.
    LIST = "list"

    @classmethod
    def parse(cls, value: Any) -> Optional["OutputType"]:
        """Return the matching member, or None for unknown/empty values."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip())
        except ValueError:
            return None


class MappingType(str, Enum):
    FIELD = "field"
    DYNAMIC = "dynamic"


@dataclass
class Condition:
    field: str = ""
    operator: str = ">"
    value: str = "0"
    label: str = ""

    @property
    def is_active(self) -> bool:
        return bool(self.field) and bool(self.label)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Condition":
        return cls(
            field=str(data.get("field") or ""),
            operator=str(data.get("operator") or ""),
            value="" if data.get("value") is None else str(data.get("value")),
            label=str(data.get("label") or ""),
        )

    def to_dict(self) -> Dict[str, str]:
        return {"field": self.field, "operator": self.operator, "value": self.value, "label": self.label}


@dataclass
class AlwaysIncludeItem:
    label: str = ""
    value_field: str = ""

    @property
    def is_active(self) -> bool:
        return bool(self.label) and bool(self.value_field)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AlwaysIncludeItem":
        return cls(
            label=str(data.get("label") or ""),
            value_field=str(data.get("valueField") or data.get("value_field") or ""),
        )

    def to_dict(self) -> Dict[str, str]:
        return {"label": self.label, "valueField": self.value_field}


@dataclass(frozen=True)
class Item:
    label: str
    value: str

    def to_dict(self) -> Dict[str, str]:
        return {"label": self.label, "value": self.value}


def _json_list(raw: Any) -> List[Dict[str, Any]]:
    # Persisted blocks store their rule lists as JSON strings
    if isinstance(raw, str):
        try:
            raw = json.loads(raw or "[]")
        except ValueError:
            return []
    if not isinstance(raw, list):
        return []
    return [r for r in raw if isinstance(r, dict)]


@dataclass
class DynamicBlock:
    """
    Named, reusable set of rules plus an output format.

    ``format`` is a free-form template string kept for the authoring UI;
    rendering does not read it.
    """

    id: str
    name: str = ""
    placeholder: str = ""
    output_type: str = OutputType.BULLETS.value
    format: str = ""
    conditions: List[Condition] = field(default_factory=list)
    always_include: List[AlwaysIncludeItem] = field(default_factory=list)
    description: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DynamicBlock":
        return cls(
            id=str(data.get("id") or ""),
            name=str(data.get("name") or ""),
            placeholder=str(data.get("placeholder") or "").strip().strip("{}").strip(),
            output_type=str(data.get("outputType") or data.get("output_type") or OutputType.BULLETS.value),
            format=str(data.get("format") or ""),
            conditions=[Condition.from_dict(c) for c in _json_list(data.get("conditions"))],
            always_include=[
                AlwaysIncludeItem.from_dict(a)
                for a in _json_list(data.get("alwaysInclude", data.get("always_include")))
            ],
            description=str(data.get("description") or ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "placeholder": self.placeholder,
            "outputType": self.output_type,
            "format": self.format,
            "conditions": [c.to_dict() for c in self.conditions],
            "alwaysInclude": [a.to_dict() for a in self.always_include],
        }


@dataclass
class PlaceholderMapping:
    """Exactly one of ``column`` / ``block_id`` is set, matching ``type``."""

    placeholder: str
    type: MappingType = MappingType.FIELD
    column: Optional[str] = None
    block_id: Optional[str] = None

    @classmethod
    def field(cls, placeholder: str, column: str) -> "PlaceholderMapping":
        return cls(placeholder=placeholder, type=MappingType.FIELD, column=column)

    @classmethod
    def dynamic(cls, placeholder: str, block_id: str) -> "PlaceholderMapping":
        return cls(placeholder=placeholder, type=MappingType.DYNAMIC, block_id=block_id)

    def switch_to_field(self, column: str) -> None:
        self.type = MappingType.FIELD
        self.column = column
        self.block_id = None

    def switch_to_dynamic(self, block_id: str) -> None:
        self.type = MappingType.DYNAMIC
        self.block_id = block_id
        self.column = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Optional["PlaceholderMapping"]:
        """
        Accepts either the explicit shape::

            {"placeholder": "X", "type": "dynamic", "blockId": "b1"}

        or the stored field-mapping shape where dynamic blocks are encoded
        as ``mappedColumn = "dynamic:<blockId>"``. Returns None when the
        entry maps to nothing.
        """
        placeholder = str(data.get("placeholder") or "").strip().strip("{}").strip()
        if not placeholder:
            return None

        kind = str(data.get("type") or data.get("mappingType") or "").strip().lower()
        column = data.get("column") or data.get("mappedColumn")
        block_id = data.get("blockId") or data.get("mappedDynamicBlock")

        if column and str(column).startswith(MAPPING_DYNAMIC_PREFIX):
            block_id = str(column)[len(MAPPING_DYNAMIC_PREFIX):]
            kind = MappingType.DYNAMIC.value

        if kind == MappingType.DYNAMIC.value and block_id:
            return cls.dynamic(placeholder, str(block_id))
        if column:
            return cls.field(placeholder, str(column))
        return None

    def to_dict(self) -> Dict[str, Any]:
        if self.type == MappingType.DYNAMIC:
            return {"placeholder": self.placeholder, "type": self.type.value, "blockId": self.block_id}
        return {"placeholder": self.placeholder, "type": self.type.value, "column": self.column}
