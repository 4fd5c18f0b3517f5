# contractgen/collector.py

import logging
from typing import Any, Iterable, List, Mapping, Optional

from contractgen.evaluator import evaluate
from contractgen.formatting import format_display_value
from contractgen.models import AlwaysIncludeItem, Condition, DynamicBlock, Item
from contractgen.resolver import FieldResolver

logger = logging.getLogger(__name__)


def collect(
    conditions: Iterable[Condition],
    always_include: Iterable[AlwaysIncludeItem],
    record: Optional[Mapping[str, Any]],
    resolver: Optional[FieldResolver] = None,
) -> List[Item]:
    """
    Build the ordered (label, value) rows for one record.

    Conditional items come first in authoring order, then always-include
    items in authoring order. An empty list means "no content".
    """
    resolver = resolver or FieldResolver(record)
    items: List[Item] = []

    for condition in conditions or ():
        if not condition.is_active:
            continue
        if not evaluate(condition, resolver):
            continue
        res = resolver.resolve(condition.field)
        if res.found and res.value is not None:
            items.append(Item(condition.label, format_display_value(res.value)))

    for entry in always_include or ():
        if not entry.is_active:
            continue
        res = resolver.resolve(entry.value_field)
        if res.found and res.value is not None:
            items.append(Item(entry.label, format_display_value(res.value)))
        else:
            logger.debug("Always-include field %r has no value", entry.value_field)

    return items


def collect_block(block: DynamicBlock, record: Optional[Mapping[str, Any]], resolver: Optional[FieldResolver] = None) -> List[Item]:
    return collect(block.conditions, block.always_include, record, resolver=resolver)
