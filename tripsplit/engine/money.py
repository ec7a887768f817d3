"""
Decimal helpers shared by the settlement engine.
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional

# Tolerance for "settled" balances and share-sum checks, in ledger units.
EPSILON = Decimal("0.01")
CENT = Decimal("0.01")
ZERO = Decimal(0)


def to_decimal(value: Any) -> Optional[Decimal]:
    """
    Coerce a user supplied number to Decimal.

    Floats go through str() so 0.1 stays 0.1. Returns None for anything
    that is missing, non-numeric, NaN or infinite.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return None
    if not result.is_finite():
        return None
    return result


def round_money(value: Decimal) -> Decimal:
    """Round to 2 decimal places, half away from zero."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)
