# contractgen/resolver.py

import json
import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, List, Mapping, Optional, Tuple

from contractgen.settings import EXTENSION_KEY

logger = logging.getLogger(__name__)

SOURCE_RECORD = "record"
SOURCE_EXTENSION = "extension"

_FTE_ANY_CASE = re.compile(r"fte$", flags=re.IGNORECASE)
_FTE_UPPER = re.compile(r"FTE$")
_FTE_TITLE = re.compile(r"Fte$")


@dataclass(frozen=True)
class Resolution:
    found: bool
    value: Any = None
    matched_name: Optional[str] = None
    source: Optional[str] = None


NOT_FOUND = Resolution(found=False)


@dataclass(frozen=True)
class FieldAliases:
    """
    Candidate key spellings for one logical field name.

    ``extension`` is tried against the parsed extension blob and ``record``
    against the top-level record, after the exact top-level lookup.
    """

    name: str
    extension: Tuple[str, ...]
    record: Tuple[str, ...]


def _unique(names) -> Tuple[str, ...]:
    seen = []
    for n in names:
        if n and n not in seen:
            seen.append(n)
    return tuple(seen)


@lru_cache(maxsize=2048)
def field_aliases(field_name: str) -> FieldAliases:
    """
    Build the alias table for ``field_name``.

    Extension blob, in order:
        exact, first letter upper-cased, trailing fte/Fte/FTE -> FTE,
        trailing Fte -> FTE
    Top-level record, in order:
        lower-cased, trailing FTE -> Fte, FTE stripped, Fte stripped
    """
    name = field_name or ""

    extension = _unique([
        name,
        name[:1].upper() + name[1:],
        _FTE_ANY_CASE.sub("FTE", name),
        _FTE_TITLE.sub("FTE", name),
    ])

    record = _unique([
        name.lower(),
        _FTE_UPPER.sub("Fte", name),
        _FTE_UPPER.sub("", name),
        _FTE_TITLE.sub("", name),
    ])
    # The exact name was already tried by the first lookup
    record = tuple(r for r in record if r != name)

    return FieldAliases(name=name, extension=extension, record=record)


def parse_extension_fields(raw: Any) -> Dict[str, Any]:
    """
    Parse an extension blob into a mapping.

    Strings are decoded as JSON; mappings are used as-is. Anything that
    does not yield a JSON object is treated as no extension data.
    """
    if raw is None or raw == "":
        return {}
    if isinstance(raw, Mapping):
        return dict(raw)
    if isinstance(raw, (str, bytes)):
        try:
            parsed = json.loads(raw)
        except ValueError as e:
            logger.debug("Ignoring malformed extension fields: %s", e)
            return {}
        if isinstance(parsed, dict):
            return parsed
        logger.debug("Ignoring extension fields that are not an object: %r", type(parsed).__name__)
    return {}


class FieldResolver:
    """
    Looks up logical field names in one record.

    Resolution order, first hit wins:
    1. Exact top-level key with a non-null value
    2. Extension blob aliases (see ``field_aliases``)
    3. Top-level record aliases
    4. Not found

    Extension aliases come before the top-level heuristics so a value that
    is explicitly present in the extension data always wins over a guess.
    Null values count as absent at every step.
    """

    def __init__(self, record: Optional[Mapping[str, Any]], extension_key: str = EXTENSION_KEY):
        self.record = record or {}
        self.extension_key = extension_key
        self._extension: Optional[Dict[str, Any]] = None

    @property
    def extension(self) -> Dict[str, Any]:
        if self._extension is None:
            self._extension = parse_extension_fields(self.record.get(self.extension_key))
        return self._extension

    def resolve(self, field_name: str) -> Resolution:
        if not field_name:
            return NOT_FOUND

        value = self.record.get(field_name)
        if value is not None:
            return Resolution(True, value, field_name, SOURCE_RECORD)

        aliases = field_aliases(field_name)

        if self.record.get(self.extension_key) is not None:
            ext = self.extension
            for variant in aliases.extension:
                if ext.get(variant) is not None:
                    logger.debug("Resolved %r via extension field %r", field_name, variant)
                    return Resolution(True, ext[variant], variant, SOURCE_EXTENSION)

        for variant in aliases.record:
            if self.record.get(variant) is not None:
                logger.debug("Resolved %r via record field %r", field_name, variant)
                return Resolution(True, self.record[variant], variant, SOURCE_RECORD)

        logger.debug("Field %r not found in record", field_name)
        return NOT_FOUND

    def value(self, field_name: str, default: Any = None) -> Any:
        res = self.resolve(field_name)
        return res.value if res.found else default

    def available_fields(self) -> List[str]:
        """Top-level names (minus the extension key) followed by extension names."""
        names = [k for k in self.record.keys() if k != self.extension_key]
        names.extend(k for k in self.extension.keys() if k not in names)
        return names


def resolve(record: Optional[Mapping[str, Any]], field_name: str) -> Resolution:
    return FieldResolver(record).resolve(field_name)


def available_fields(record: Optional[Mapping[str, Any]]) -> List[str]:
    return FieldResolver(record).available_fields()
