"""
Foreign exchange service for currency conversion.

Rates are resolved once, when an expense is saved, and then stored on the
expense so that later settlements do not move with the market.
"""
from decimal import Decimal
from typing import Optional
import httpx
import logging
from tripsplit.core.config import settings
from tripsplit.engine import parse_rate
from tripsplit.engine.currency import same_currency

logger = logging.getLogger(__name__)


def get_ledger_currency() -> str:
    """Default ledger currency for new events (DEFAULT_LEDGER_CURRENCY, else EUR)."""
    ledger_currency = settings.DEFAULT_LEDGER_CURRENCY
    return ledger_currency.upper() if ledger_currency else 'EUR'


def fetch_exchange_rate_from_api(currency: str, ledger_currency: str) -> Decimal:
    """
    Fetch the latest exchange rate from ExchangeRate-API v6.
    Returns rate to the ledger currency (1 unit of currency = rate ledger_currency).

    API Documentation: https://www.exchangerate-api.com/docs/latest-rates

    Raises:
        ValueError: if the API key is missing or the API call fails
    """
    currency_upper = currency.upper()
    ledger_upper = ledger_currency.upper()

    if currency_upper == ledger_upper:
        return Decimal("1")

    if not settings.FX_API_KEY:
        logger.error("FX_API_KEY is not configured. Please set it in .env file.")
        raise ValueError("FX_API_KEY is required for ExchangeRate-API")

    api_url = f"{settings.FX_API_URL}/{settings.FX_API_KEY}/latest/{currency_upper}"
    logger.info(f"Fetching latest exchange rate from ExchangeRate-API for {currency_upper}")

    try:
        response = httpx.get(api_url, timeout=settings.FX_TIMEOUT_SECONDS)
        response.raise_for_status()
        data = response.json()
    except httpx.HTTPStatusError as e:
        logger.error(f"HTTP error with ExchangeRate-API: {e.response.status_code} - {e.response.text}")
        raise ValueError(f"ExchangeRate-API HTTP error: {e.response.status_code}")
    except httpx.HTTPError as e:
        # Network errors, timeouts
        logger.error(f"HTTP error with ExchangeRate-API: {e}")
        raise ValueError(f"ExchangeRate-API network error: {str(e)}")

    if settings.DEBUG:
        logger.debug(f"ExchangeRate-API response: {data}")

    if data.get("result") != "success":
        error_msg = data.get("error-type", "Unknown error")
        logger.error(f"ExchangeRate-API returned error: {error_msg}")
        raise ValueError(f"ExchangeRate-API error: {error_msg}")

    # Response format: {"conversion_rates": {"USD": 1, "EUR": 0.92, ...}} with the requested currency as base
    conversion_rates = data.get("conversion_rates", {})
    ledger_rate = conversion_rates.get(ledger_upper)
    if ledger_rate is None:
        logger.error(f"{ledger_upper} not found in conversion_rates")
        raise ValueError(f"{ledger_upper} rate not available in API response")

    rate = parse_rate(ledger_rate)
    if rate is None:
        logger.error(f"Invalid rate: {ledger_rate}")
        raise ValueError(f"Invalid exchange rate: {ledger_rate}")

    logger.info(f"Fetched rate from ExchangeRate-API: {currency_upper} = {rate} {ledger_upper}")
    return rate


def resolve_conversion_rate(
    currency: str,
    ledger_currency: str,
    explicit_rate: Optional[Decimal] = None
) -> Optional[Decimal]:
    """
    Decide the rate to store on a new expense.

    Returns 1 for the ledger currency itself, the caller's rate if it is
    valid, otherwise the API rate. Returns None when no rate is available;
    the expense is then settled at 1 and flagged as unreliable.
    """
    if same_currency(currency, ledger_currency):
        return Decimal("1")

    if explicit_rate is not None:
        rate = parse_rate(explicit_rate)
        if rate is None:
            logger.warning(f"Ignoring invalid conversion rate {explicit_rate} for {currency}")
        return rate

    try:
        return fetch_exchange_rate_from_api(currency, ledger_currency)
    except ValueError as e:
        logger.warning(f"No exchange rate for {currency} -> {ledger_currency}: {e}")
        return None
