"""Models package - Import all models for SQLAlchemy registration."""
from tripsplit.models.event import Event, Participant
from tripsplit.models.expense import Expense, ExpenseShare, ExpenseCategory

__all__ = [
    "Event",
    "Participant",
    "Expense",
    "ExpenseShare",
    "ExpenseCategory",
]
