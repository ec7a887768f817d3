"""
Pydantic schemas for exchange rate lookups.
"""
from pydantic import BaseModel
from decimal import Decimal


class ExchangeRateResponse(BaseModel):
    """Schema for exchange rate response."""
    currency: str
    ledger_currency: str
    rate: Decimal  # 1 currency = rate ledger_currency
