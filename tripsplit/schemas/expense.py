"""
Pydantic schemas for Expense entity.
"""
from pydantic import BaseModel, Field, field_validator
from typing import Dict, List, Optional
from datetime import datetime
from decimal import Decimal
from tripsplit.engine import SplitMethod
from tripsplit.models.expense import ExpenseCategory


class ExpenseCreate(BaseModel):
    """Schema for expense creation."""
    amount: Decimal = Field(gt=0)
    currency: str
    paid_by_id: int
    description: Optional[str] = None
    category: ExpenseCategory = ExpenseCategory.GENERAL
    participant_ids: List[int]  # Participants who share this expense
    split_method: SplitMethod = SplitMethod.EQUAL
    shares: Dict[int, Decimal] = {}  # Manual shares, read for locked participants only
    locked_ids: List[int] = []
    conversion_rate: Optional[Decimal] = None  # 1 currency = rate ledger currency; looked up if omitted
    
    @field_validator("currency")
    @classmethod
    def upper_currency(cls, v):
        return v.strip().upper()


class ExpenseUpdate(BaseModel):
    """Schema for expense update. Currency and rate are fixed at creation."""
    amount: Optional[Decimal] = Field(default=None, gt=0)
    paid_by_id: Optional[int] = None
    description: Optional[str] = None
    category: Optional[ExpenseCategory] = None
    participant_ids: Optional[List[int]] = None
    split_method: Optional[SplitMethod] = None
    shares: Dict[int, Decimal] = {}
    locked_ids: List[int] = []


class ExpenseShareResponse(BaseModel):
    """Schema for one participant's share."""
    participant_id: int
    display_name: str
    share_amount: Decimal  # In the expense currency
    share_amount_ledger: Decimal  # In the event's ledger currency


class ExpenseResponse(BaseModel):
    """Schema for expense response."""
    id: int
    event_id: int
    paid_by_id: int
    paid_by_name: str
    description: Optional[str] = None
    amount: Decimal
    currency: str
    conversion_rate: Optional[Decimal] = None
    amount_ledger: Decimal
    ledger_currency: str
    rate_reliable: bool
    category: ExpenseCategory
    split_method: SplitMethod
    shares: List[ExpenseShareResponse] = []
    share_mismatch: bool = False  # Advisory: shares differ from amount by more than 0.01
    created_at: datetime
    updated_at: datetime
