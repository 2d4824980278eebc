"""Currency helpers shared by order models and checkout."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")


def to_money(value: object) -> Decimal:
    """Coerce a DB/JSON number into a two-place Decimal.

    Floats go through str() first so 4.99 stays 4.99 instead of picking up
    binary noise.
    """
    if isinstance(value, bool):
        raise ValueError("boolean is not a monetary amount")
    if isinstance(value, float):
        value = str(value)
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def money_json(value: Decimal) -> float:
    """JSON representation of an amount: a plain number, e.g. 9.98."""
    return float(value)


__all__ = ["CENT", "to_money", "money_json"]
