"""
Expense model for tracking spending.
"""
from sqlalchemy import Column, String, Numeric, ForeignKey, Integer, Text, Boolean, Enum as SQLEnum
from sqlalchemy.orm import relationship
from tripsplit.db.base import BaseModel
import enum


class ExpenseCategory(str, enum.Enum):
    """Expense category enumeration."""
    PLACE = "place"
    GENERAL = "general"


class Expense(BaseModel):
    """Expense model representing a single spending event."""
    __tablename__ = "expenses"
    
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    paid_by_id = Column(Integer, ForeignKey("participants.id"), nullable=False, index=True)
    description = Column(Text, nullable=True)
    amount = Column(Numeric(15, 2), nullable=False)
    currency = Column(String(3), nullable=False)
    # Rate to the event's ledger currency, fixed when the expense is saved.
    # NULL means no rate could be resolved; settlement then treats it as 1.
    conversion_rate = Column(Numeric(15, 6), nullable=True)
    amount_ledger = Column(Numeric(15, 6), nullable=False)
    rate_reliable = Column(Boolean, default=True, nullable=False)
    category = Column(SQLEnum(ExpenseCategory), default=ExpenseCategory.GENERAL, nullable=False)
    split_method = Column(String(10), default="equal", nullable=False)
    
    # Relationships
    event = relationship("Event", back_populates="expenses")
    paid_by = relationship("Participant", foreign_keys=[paid_by_id])
    shares = relationship(
        "ExpenseShare", back_populates="expense", cascade="all, delete-orphan", order_by="ExpenseShare.id"
    )


class ExpenseShare(BaseModel):
    """One participant's portion of an expense, in the expense currency."""
    __tablename__ = "expense_shares"
    
    expense_id = Column(Integer, ForeignKey("expenses.id"), nullable=False, index=True)
    participant_id = Column(Integer, ForeignKey("participants.id"), nullable=False, index=True)
    share_amount = Column(Numeric(15, 6), nullable=False)
    
    # Relationships
    expense = relationship("Expense", back_populates="shares")
    participant = relationship("Participant", back_populates="shares")
