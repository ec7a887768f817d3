"""
Live share allocation routes, called while an expense form is edited.

These endpoints are stateless: the client sends the current form state,
including its lock set, and gets the new shares and lock set back.
"""
from fastapi import APIRouter
from tripsplit.engine import AllocationResult, allocate, carry_locks, edit_share
from tripsplit.schemas.allocation import AllocationEditRequest, AllocationPreviewRequest, AllocationResponse

router = APIRouter(prefix="/allocations", tags=["allocations"])


def to_response(result: AllocationResult, participant_ids) -> AllocationResponse:
    return AllocationResponse(
        shares=result.shares,
        locked_ids=[pid for pid in participant_ids if pid in result.locked_ids],
        total=result.total,
        allocated=result.allocated,
        difference=result.difference,
        mismatch=result.mismatch,
        issue=result.issue
    )


@router.post("/preview", response_model=AllocationResponse)
async def preview_allocation(request: AllocationPreviewRequest):
    """Recalculate shares after the amount, participants or method changed."""
    locked_ids = request.locked_ids
    if request.previous_participant_ids is not None:
        locked_ids = carry_locks(
            locked_ids, request.previous_participant_ids, request.participant_ids, request.method
        )
    
    result = allocate(
        request.total_amount,
        request.participant_ids,
        request.method,
        request.shares,
        locked_ids
    )
    return to_response(result, request.participant_ids)


@router.post("/edit", response_model=AllocationResponse)
async def edit_allocation(request: AllocationEditRequest):
    """Apply a manual edit to one share and redistribute the rest."""
    result = edit_share(
        request.total_amount,
        request.participant_ids,
        request.shares,
        request.locked_ids,
        request.participant_id,
        request.new_share
    )
    return to_response(result, request.participant_ids)
