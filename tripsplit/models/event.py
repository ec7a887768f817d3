"""
Event and participant models.
"""
from sqlalchemy import Column, String, ForeignKey, Integer
from sqlalchemy.orm import relationship
from tripsplit.db.base import BaseModel
from tripsplit.core.utils import display_name


class Event(BaseModel):
    """A group event whose expenses are settled in one ledger currency."""
    __tablename__ = "events"
    
    name = Column(String(200), nullable=False)
    ledger_currency = Column(String(3), nullable=False, default="EUR")
    
    # Relationships
    participants = relationship(
        "Participant", back_populates="event", cascade="all, delete-orphan", order_by="Participant.id"
    )
    expenses = relationship(
        "Expense", back_populates="event", cascade="all, delete-orphan", order_by="Expense.id"
    )


class Participant(BaseModel):
    """Member of an event. The id is stable; the display name is derived."""
    __tablename__ = "participants"
    
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    email = Column(String(200), nullable=True)
    
    # Relationships
    event = relationship("Event", back_populates="participants")
    shares = relationship("ExpenseShare", back_populates="participant")
    
    @property
    def display_name(self) -> str:
        return display_name(self.first_name, self.last_name, self.email)
