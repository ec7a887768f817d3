"""
Pydantic schemas for Event and Participant entities.
"""
from pydantic import BaseModel, field_validator
from typing import List, Optional
from datetime import datetime


class EventBase(BaseModel):
    """Base event schema."""
    name: str
    ledger_currency: Optional[str] = None  # Defaults to DEFAULT_LEDGER_CURRENCY
    
    @field_validator("ledger_currency")
    @classmethod
    def upper_currency(cls, v):
        return v.strip().upper() if v else v


class EventCreate(EventBase):
    """Schema for event creation."""
    pass


class ParticipantCreate(BaseModel):
    """Schema for adding a participant to an event."""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None


class ParticipantResponse(BaseModel):
    """Schema for participant response."""
    id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    display_name: str
    
    class Config:
        from_attributes = True


class EventResponse(BaseModel):
    """Schema for event response."""
    id: int
    name: str
    ledger_currency: str
    created_at: datetime
    updated_at: datetime
    
    class Config:
        from_attributes = True


class EventDetailResponse(EventResponse):
    """Schema for detailed event response with participants."""
    participants: List[ParticipantResponse] = []
