"""
Pydantic schemas for the live share allocation preview.
"""
from pydantic import BaseModel
from typing import Dict, List, Optional
from decimal import Decimal
from tripsplit.engine import EngineIssue, SplitMethod


class AllocationPreviewRequest(BaseModel):
    """Current state of an expense form."""
    total_amount: Optional[Decimal] = None  # May be empty while the user is typing
    participant_ids: List[str] = []
    method: SplitMethod = SplitMethod.EQUAL
    shares: Dict[str, Decimal] = {}
    locked_ids: List[str] = []
    # Participants at the time the locks were made; locks are dropped if this differs
    previous_participant_ids: Optional[List[str]] = None


class AllocationEditRequest(BaseModel):
    """A manual edit of one participant's share."""
    total_amount: Optional[Decimal] = None
    participant_ids: List[str]
    shares: Dict[str, Decimal] = {}
    locked_ids: List[str] = []
    participant_id: str
    new_share: Optional[Decimal] = None


class AllocationResponse(BaseModel):
    """Allocated shares and the lock set to send back on the next edit."""
    shares: Dict[str, Decimal]
    locked_ids: List[str]
    total: Decimal
    allocated: Decimal
    difference: Decimal
    mismatch: bool
    issue: Optional[EngineIssue] = None
