"""Money coercion and display helpers shared by every financial computation."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from floorline.config import settings

ZERO = Decimal("0")
CENT = Decimal("0.01")


def to_money(value: Any) -> Decimal:
    """Coerce a raw amount into a ``Decimal``.

    ``None``, blanks, non-numeric strings, NaN and infinities all become zero
    so a half-filled quote never breaks a summary.
    """
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        result = Decimal(repr(value))
    elif isinstance(value, str):
        text = value.strip().replace(",", "").lstrip("$")
        if not text:
            return ZERO
        try:
            result = Decimal(text)
        except InvalidOperation:
            return ZERO
    else:
        return ZERO

    if not result.is_finite():
        return ZERO
    return result


def quantize(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def format_currency(value: Any) -> str:
    amount = quantize(to_money(value))
    sign = "-" if amount < 0 else ""
    return f"{sign}{settings.CURRENCY_SYMBOL}{abs(amount):.2f}"
