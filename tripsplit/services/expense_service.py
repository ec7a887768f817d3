"""
Expense service for expense-related business logic.
"""
from sqlalchemy.orm import Session
from decimal import Decimal
from typing import Dict, List, Optional
import logging
from tripsplit.engine import AllocationResult, SplitMethod, allocate, carry_locks, normalize
from tripsplit.models.event import Event
from tripsplit.models.expense import Expense, ExpenseShare
from tripsplit.schemas.expense import ExpenseCreate, ExpenseUpdate
from tripsplit.services.fx_service import resolve_conversion_rate

logger = logging.getLogger(__name__)


def _check_participants(event: Event, participant_ids: List[int], paid_by_id: int):
    """Ensure the payer and every sharer belong to the event."""
    roster = {p.id for p in event.participants}
    if paid_by_id not in roster:
        raise ValueError(f"Participant {paid_by_id} is not part of this event")
    unknown = [pid for pid in participant_ids if pid not in roster]
    if unknown:
        raise ValueError(f"Participants {unknown} are not part of this event")
    if not participant_ids:
        raise ValueError("At least one participant is required")


def calculate_shares(
    amount: Decimal,
    participant_ids: List[int],
    split_method: SplitMethod,
    shares: Optional[Dict[int, Decimal]] = None,
    locked_ids: Optional[List[int]] = None
) -> AllocationResult:
    """Run the share allocator on database ids."""
    return allocate(
        amount,
        [str(pid) for pid in participant_ids],
        split_method,
        {str(pid): value for pid, value in (shares or {}).items()},
        [str(pid) for pid in (locked_ids or [])]
    )


def _replace_shares(expense: Expense, allocation: AllocationResult):
    expense.shares.clear()
    for participant_id, share_amount in allocation.shares.items():
        expense.shares.append(ExpenseShare(
            participant_id=int(participant_id),
            share_amount=share_amount
        ))
    if allocation.mismatch:
        logger.info(
            f"Expense {expense.id}: shares total {allocation.allocated}, amount is {allocation.total}"
        )


def create_expense_with_shares(event: Event, expense_data: ExpenseCreate, db: Session) -> Expense:
    """Create an expense, fix its conversion rate and calculate shares."""
    participant_ids = list(dict.fromkeys(expense_data.participant_ids))
    _check_participants(event, participant_ids, expense_data.paid_by_id)

    rate = resolve_conversion_rate(
        expense_data.currency, event.ledger_currency, expense_data.conversion_rate
    )
    normalized = normalize(expense_data.amount, expense_data.currency, event.ledger_currency, rate)

    allocation = calculate_shares(
        expense_data.amount,
        participant_ids,
        expense_data.split_method,
        expense_data.shares,
        expense_data.locked_ids
    )
    if not allocation.is_valid:
        raise ValueError(f"Cannot split expense: {allocation.issue.value}")

    expense = Expense(
        event_id=event.id,
        paid_by_id=expense_data.paid_by_id,
        description=expense_data.description,
        amount=expense_data.amount,
        currency=expense_data.currency,
        conversion_rate=normalized.rate if normalized.reliable else None,
        amount_ledger=normalized.amount,
        rate_reliable=normalized.reliable,
        category=expense_data.category,
        split_method=expense_data.split_method.value
    )
    db.add(expense)
    db.flush()

    _replace_shares(expense, allocation)

    db.commit()
    db.refresh(expense)

    return expense


def update_expense(expense: Expense, expense_data: ExpenseUpdate, db: Session) -> Expense:
    """
    Update an expense and recompute its shares.

    The stored conversion rate is reused so the ledger amount stays
    consistent with what was recorded at creation time.
    """
    if expense_data.description is not None:
        expense.description = expense_data.description
    if expense_data.category is not None:
        expense.category = expense_data.category

    paid_by_id = expense_data.paid_by_id if expense_data.paid_by_id is not None else expense.paid_by_id
    previous_ids = [share.participant_id for share in expense.shares]
    if expense_data.participant_ids is not None:
        participant_ids = list(dict.fromkeys(expense_data.participant_ids))
    elif previous_ids:
        participant_ids = previous_ids
    else:
        # Expense without share rows: fall back to the whole event
        participant_ids = [p.id for p in expense.event.participants]
    _check_participants(expense.event, participant_ids, paid_by_id)
    expense.paid_by_id = paid_by_id

    if expense_data.amount is not None:
        expense.amount = expense_data.amount
        normalized = normalize(
            expense.amount, expense.currency, expense.event.ledger_currency, expense.conversion_rate
        )
        expense.amount_ledger = normalized.amount

    split_method = expense_data.split_method or SplitMethod(expense.split_method)
    locked_ids = carry_locks(
        expense_data.locked_ids, previous_ids or participant_ids, participant_ids, split_method
    )
    current_shares = {share.participant_id: share.share_amount for share in expense.shares}
    current_shares.update(expense_data.shares)

    allocation = calculate_shares(
        expense.amount, participant_ids, split_method, current_shares, locked_ids
    )
    if not allocation.is_valid:
        raise ValueError(f"Cannot split expense: {allocation.issue.value}")

    expense.split_method = split_method.value
    _replace_shares(expense, allocation)

    db.commit()
    db.refresh(expense)

    return expense


def delete_expense(expense: Expense, db: Session):
    """Delete an expense and its shares."""
    db.delete(expense)
    db.commit()
