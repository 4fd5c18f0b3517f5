# contractgen/evaluator.py

import math
import operator
import re
from typing import Any, Mapping, Optional, Union

from contractgen.models import Condition
from contractgen.resolver import FieldResolver

_COMPARATORS = {
    ">": operator.gt,
    ">=": operator.ge,
    "=": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
}

# Plain decimal or scientific notation, no underscores or named values
_NUMERIC_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def to_number(value: Any) -> Optional[float]:
    """
    Coerce a record value to a finite float.

    ints and floats pass through, numeric strings are parsed after
    trimming. Booleans, other types, NaN, infinities, ints too large
    for a float and strings outside plain decimal notation give None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        text = value.strip()
        if not _NUMERIC_RE.fullmatch(text):
            return None
        value = text
    elif not isinstance(value, (int, float)):
        return None
    try:
        num = float(value)
    except (OverflowError, ValueError):
        return None
    return num if math.isfinite(num) else None


def evaluate(
    condition: Condition,
    record: Union[Mapping[str, Any], FieldResolver, None],
) -> bool:
    """
    True when the condition's field resolves to a number that satisfies
    ``<value> <operator> <comparison>``. Missing fields, non-numeric
    values and unknown operators all evaluate to False.
    """
    compare = _COMPARATORS.get((condition.operator or "").strip())
    if compare is None:
        return False

    threshold = to_number(condition.value)
    if threshold is None:
        return False

    resolver = record if isinstance(record, FieldResolver) else FieldResolver(record)
    res = resolver.resolve(condition.field)
    if not res.found:
        return False

    num = to_number(res.value)
    if num is None:
        return False

    return compare(num, threshold)
