"""
Pydantic schemas for the settlement report.
"""
from pydantic import BaseModel
from typing import List, Optional
from decimal import Decimal


class Transfer(BaseModel):
    """Schema for a single transfer in settlement."""
    from_participant_id: int
    from_name: str
    to_participant_id: int
    to_name: str
    amount: Decimal  # Transfer amount in the event's ledger currency
    currency: str


class BalanceEntry(BaseModel):
    """Net position of one participant."""
    participant_id: int
    display_name: str
    paid: Decimal
    owed: Decimal
    balance: Decimal  # Positive = is owed money, negative = owes money


class SettlementReport(BaseModel):
    """Schema for settlement report."""
    event_id: int
    ledger_currency: str
    total_expenses: Decimal
    participant_count: int
    balances: List[BalanceEntry]
    transfers: List[Transfer]
    viewer_id: Optional[int] = None
    your_transfers: List[Transfer] = []
    other_transfers: List[Transfer] = []
    unreliable_expense_ids: List[int] = []  # Expenses settled with a fallback rate of 1
    fallback_expense_ids: List[int] = []  # Expenses without shares, split by policy
    mismatched_expense_ids: List[int] = []  # Shares differ from the amount; payer credited with the shares
