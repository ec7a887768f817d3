"""
Conversion of expense amounts into the ledger currency.
"""
import logging
from decimal import Decimal
from typing import Any, Optional

from tripsplit.engine.money import to_decimal
from tripsplit.engine.outcomes import EngineIssue, NormalizedAmount

logger = logging.getLogger(__name__)

ONE = Decimal(1)


def same_currency(currency: Optional[str], ledger_currency: Optional[str]) -> bool:
    return (currency or "").strip().upper() == (ledger_currency or "").strip().upper()


def parse_rate(conversion_rate: Any) -> Optional[Decimal]:
    """Return the rate as a positive Decimal, or None if it can't be trusted."""
    rate = to_decimal(conversion_rate)
    if rate is None or rate <= 0:
        return None
    return rate


def normalize(amount: Any, currency: str, ledger_currency: str, conversion_rate: Any = None) -> NormalizedAmount:
    """
    Convert ``amount`` from ``currency`` into ``ledger_currency``.

    The rate is whatever was recorded on the expense (1 unit of currency =
    rate ledger units). A missing or invalid rate falls back to 1 and the
    result is marked unreliable rather than failing.
    """
    value = to_decimal(amount)
    if value is None:
        logger.warning("Cannot normalize non-numeric amount %r", amount)
        return NormalizedAmount(amount=Decimal(0), rate=ONE, reliable=False, issue=EngineIssue.INVALID_AMOUNT)

    if same_currency(currency, ledger_currency):
        return NormalizedAmount(amount=value, rate=ONE)

    rate = parse_rate(conversion_rate)
    if rate is None:
        logger.warning(
            "Invalid conversion rate %r for %s -> %s, using 1",
            conversion_rate, currency, ledger_currency
        )
        return NormalizedAmount(amount=value, rate=ONE, reliable=False, issue=EngineIssue.UNRELIABLE_RATE)

    return NormalizedAmount(amount=value * rate, rate=rate)
