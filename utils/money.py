"""Money helpers for budget totals (Brazilian reais)."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

_CENTS = Decimal("0.01")


def to_decimal(value: Any) -> Decimal:
    """Exact decimal for a number or a form string such as ``"1.234,56"``.

    Floats go through ``str`` so ``0.1`` becomes ``Decimal("0.1")``.
    """
    if isinstance(value, Decimal):
        return value
    if value is None or value == "":
        return Decimal("0")
    if isinstance(value, str) and "," in value:
        value = value.replace(".", "").replace(",", ".")
    try:
        return Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError(f"Not a number: {value!r}") from None


def format_brl(value: Any) -> str:
    """``R$ 1.234,56``: dot for thousands, comma for cents."""
    amount = to_decimal(value).quantize(_CENTS, rounding=ROUND_HALF_UP)
    integer, cents = f"{abs(amount):.2f}".split(".")
    groups = f"{int(integer):,}".replace(",", ".")
    sign = "-" if amount < 0 else ""
    return f"{sign}R$ {groups},{cents}"
