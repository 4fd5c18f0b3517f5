# contractgen/formatting.py

import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Any, Iterable

_NON_NUMERIC = re.compile(r"[^0-9.\-]")
_WHITESPACE = re.compile(r"\s+")

_SMART_CHARS = (
    ("\u201c", "\""),
    ("\u201d", "\""),
    ("\u2018", "'"),
    ("\u2019", "'"),
    ("\u2013", "-"),
    ("\u2014", "--"),
    ("\u2026", "..."),
    ("\u00a0", " "),
    ("\u2022", "-"),
)


def _quantize(d: Decimal, exp: Decimal) -> Decimal:
    # Room for every integer digit plus the requested fraction digits
    t = d.as_tuple()
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, len(t.digits) + abs(t.exponent) + 4)
        return d.quantize(exp, rounding=ROUND_HALF_UP)


def format_grouped_number(num: Any) -> str:
    """en-US style grouping, at most three fraction digits: 280000 -> '280,000'."""
    if isinstance(num, int) and not isinstance(num, bool):
        return f"{num:,}"
    d = Decimal(str(num))
    if not d.is_finite():
        return str(num)
    d = _quantize(d, Decimal("0.001"))
    text = f"{d:,.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def format_display_value(value: Any) -> str:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return format_grouped_number(value)
    return str(value)


def format_currency(value: Any) -> str:
    """
    Whole-dollar USD: 280000 -> '$280,000', '-1500.5' -> '-$1,501'.

    Strings are stripped of everything but digits, '.' and '-' first; when
    nothing numeric is left the original value is returned as a string.
    """
    if isinstance(value, bool):
        return str(value)
    try:
        if isinstance(value, (int, float)):
            d = Decimal(str(value))
        else:
            d = Decimal(_NON_NUMERIC.sub("", str(value)))
    except InvalidOperation:
        return str(value)
    if not d.is_finite():
        return str(value)

    d = _quantize(d, Decimal("1"))
    sign = "-" if d < 0 else ""
    return f"{sign}${abs(d):,.0f}"


def is_money_field(column: str, hints: Iterable[str]) -> bool:
    col = (column or "").lower()
    return any(h in col for h in hints)


def normalize_smart_quotes(text: str) -> str:
    """Replace typographic quotes, dashes, ellipses and bullets with ASCII."""
    if not text:
        return text or ""
    for src, dst in _SMART_CHARS:
        text = text.replace(src, dst)
    return text


def contract_file_name(contract_year: str, provider_name: str, run_date: str, ext: str = "html") -> str:
    safe_provider = _WHITESPACE.sub("", provider_name or "")
    return f"{contract_year}_{safe_provider}_ScheduleA_{run_date}.{ext}"
