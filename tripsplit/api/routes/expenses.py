"""
Expense management routes.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session, selectinload
from typing import List

from tripsplit.db.session import get_db
from tripsplit.engine import SplitMethod, share_mismatch
from tripsplit.models.expense import Expense, ExpenseShare
from tripsplit.schemas.expense import ExpenseCreate, ExpenseResponse, ExpenseShareResponse, ExpenseUpdate
from tripsplit.services import expense_service
from tripsplit.api.routes.events import get_event_or_404

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/expenses", tags=["expenses"])


def build_expense_response(expense: Expense) -> ExpenseResponse:
    """Build the API view of an expense, with shares in both currencies."""
    ledger_rate = expense.conversion_rate if expense.conversion_rate is not None else 1
    share_responses = [
        ExpenseShareResponse(
            participant_id=share.participant_id,
            display_name=share.participant.display_name,
            share_amount=share.share_amount,
            share_amount_ledger=share.share_amount * ledger_rate
        )
        for share in expense.shares
    ]

    return ExpenseResponse(
        id=expense.id,
        event_id=expense.event_id,
        paid_by_id=expense.paid_by_id,
        paid_by_name=expense.paid_by.display_name,
        description=expense.description,
        amount=expense.amount,
        currency=expense.currency,
        conversion_rate=expense.conversion_rate,
        amount_ledger=expense.amount_ledger,
        ledger_currency=expense.event.ledger_currency,
        rate_reliable=expense.rate_reliable,
        category=expense.category,
        split_method=SplitMethod(expense.split_method),
        shares=share_responses,
        share_mismatch=share_mismatch(
            {share.participant_id: share.share_amount for share in expense.shares}, expense.amount
        ),
        created_at=expense.created_at,
        updated_at=expense.updated_at
    )


def get_expense_or_404(event_id: int, expense_id: int, db: Session) -> Expense:
    expense = db.query(Expense).filter(
        Expense.id == expense_id,
        Expense.event_id == event_id
    ).first()
    if not expense:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Expense not found"
        )
    return expense


@router.get("/{event_id}", response_model=List[ExpenseResponse])
async def get_expenses(
    event_id: int,
    db: Session = Depends(get_db)
):
    """Get all expenses of an event, oldest first."""
    get_event_or_404(event_id, db)

    expenses = db.query(Expense).options(
        selectinload(Expense.paid_by),
        selectinload(Expense.shares).selectinload(ExpenseShare.participant)
    ).filter(
        Expense.event_id == event_id
    ).order_by(Expense.id).all()

    return [build_expense_response(expense) for expense in expenses]


@router.post("/{event_id}", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
async def create_expense(
    event_id: int,
    expense_data: ExpenseCreate,
    db: Session = Depends(get_db)
):
    """Create a new expense and split it between its participants."""
    event = get_event_or_404(event_id, db)

    try:
        expense = expense_service.create_expense_with_shares(event, expense_data, db)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    if not expense.rate_reliable:
        logger.warning(f"Expense {expense.id} saved without a usable conversion rate")

    return build_expense_response(expense)


@router.put("/{event_id}/{expense_id}", response_model=ExpenseResponse)
async def update_expense(
    event_id: int,
    expense_id: int,
    expense_data: ExpenseUpdate,
    db: Session = Depends(get_db)
):
    """Update an expense and recalculate its shares."""
    expense = get_expense_or_404(event_id, expense_id, db)

    try:
        expense = expense_service.update_expense(expense, expense_data, db)
    except ValueError as e:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return build_expense_response(expense)


@router.delete("/{event_id}/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_expense(
    event_id: int,
    expense_id: int,
    db: Session = Depends(get_db)
):
    """Delete an expense."""
    expense = get_expense_or_404(event_id, expense_id, db)
    expense_service.delete_expense(expense, db)
