"""
Foreign exchange rates routes.
"""
from fastapi import APIRouter, HTTPException, status
from tripsplit.schemas.exchange_rate import ExchangeRateResponse
from tripsplit.services.fx_service import fetch_exchange_rate_from_api, get_ledger_currency

router = APIRouter(prefix="/fx-rates", tags=["fx-rates"])


@router.get("/latest", response_model=ExchangeRateResponse)
async def get_latest_exchange_rate(
    currency: str = "USD",
    ledger_currency: str = None
):
    """Get today's rate for converting a currency into a ledger currency.
    
    Args:
        currency: Currency code (default: USD)
        ledger_currency: Target currency (default: DEFAULT_LEDGER_CURRENCY)
    """
    ledger_currency = (ledger_currency or get_ledger_currency()).upper()
    
    try:
        rate = fetch_exchange_rate_from_api(currency, ledger_currency)
    except ValueError as e:
        # API key missing or API error
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Failed to fetch exchange rate: {str(e)}"
        )
    
    return ExchangeRateResponse(
        currency=currency.upper(),
        ledger_currency=ledger_currency,
        rate=rate
    )
