"""
Settlement report routes.
"""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from tripsplit.core.utils import format_error
from tripsplit.db.session import get_db
from tripsplit.schemas.settlement import SettlementReport
from tripsplit.services.settlement_service import SettlementError, calculate_settlement
from tripsplit.api.routes.events import get_event_or_404

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/settlement", tags=["settlement"])


@router.get("/{event_id}", response_model=SettlementReport)
async def get_settlement(
    event_id: int,
    viewer_id: Optional[int] = None,
    db: Session = Depends(get_db)
):
    """
    Calculate who owes whom for an event.
    
    Pass viewer_id to split the transfers into the viewer's own and
    everyone else's.
    """
    get_event_or_404(event_id, db)
    
    try:
        return calculate_settlement(event_id, db, viewer_id=viewer_id)
    except SettlementError as e:
        # Never report an inconsistent ledger as "nothing to settle"
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=format_error(str(e), {"issue": e.issue.value})
        )
