"""
Event and participant routes.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from tripsplit.db.session import get_db
from tripsplit.models.event import Event, Participant
from tripsplit.schemas.event import (
    EventCreate, EventResponse, EventDetailResponse,
    ParticipantCreate, ParticipantResponse
)
from tripsplit.services.fx_service import get_ledger_currency

router = APIRouter(prefix="/events", tags=["events"])


def get_event_or_404(event_id: int, db: Session) -> Event:
    """Load an event or raise 404."""
    event = db.query(Event).filter(Event.id == event_id).first()
    if not event:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Event not found"
        )
    return event


@router.post("", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    event_data: EventCreate,
    db: Session = Depends(get_db)
):
    """Create a new event."""
    new_event = Event(
        name=event_data.name,
        ledger_currency=event_data.ledger_currency or get_ledger_currency()
    )
    db.add(new_event)
    db.commit()
    db.refresh(new_event)
    
    return new_event


@router.get("/{event_id}", response_model=EventDetailResponse)
async def get_event(
    event_id: int,
    db: Session = Depends(get_db)
):
    """Get event details with participants."""
    return get_event_or_404(event_id, db)


@router.post("/{event_id}/participants", response_model=ParticipantResponse, status_code=status.HTTP_201_CREATED)
async def add_participant(
    event_id: int,
    participant_data: ParticipantCreate,
    db: Session = Depends(get_db)
):
    """Add a participant to an event."""
    get_event_or_404(event_id, db)
    
    participant = Participant(
        event_id=event_id,
        first_name=participant_data.first_name,
        last_name=participant_data.last_name,
        email=participant_data.email
    )
    db.add(participant)
    db.commit()
    db.refresh(participant)
    
    return participant
