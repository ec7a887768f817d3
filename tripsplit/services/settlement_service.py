"""
Settlement service: builds the settlement report for one event.

Expenses are loaded into plain engine values first, so the engine never
sees ORM objects and the calculation runs on a consistent snapshot.
"""
from sqlalchemy.orm import Session, selectinload
from decimal import Decimal
from typing import List, Optional, Tuple
import logging
from tripsplit.core.config import settings
from tripsplit.engine import (
    EngineIssue, ExpenseEntry, SplitMethod, aggregate, allocate, normalize, settle, share_mismatch, summarize
)
from tripsplit.engine.money import ZERO, round_money
from tripsplit.models.event import Event
from tripsplit.models.expense import Expense
from tripsplit.schemas.settlement import BalanceEntry, SettlementReport, Transfer

logger = logging.getLogger(__name__)

POLICY_ALL_PARTICIPANTS = "all_participants"


class SettlementError(ValueError):
    """Raised when an event's balances are inconsistent and cannot be settled."""

    def __init__(self, issue: EngineIssue, message: str):
        super().__init__(message)
        self.issue = issue


def fallback_shares(
    expense_id: int,
    amount: Decimal,
    payer_id: str,
    roster: List[str],
    policy: str
) -> Tuple[Tuple[str, Decimal], ...]:
    """
    Shares for an expense that has no share rows.

    ``all_participants`` splits equally across the event roster, ``payer``
    charges the whole amount to whoever paid.
    """
    if policy == POLICY_ALL_PARTICIPANTS and roster:
        allocation = allocate(amount, roster, SplitMethod.EQUAL)
        if allocation.is_valid:
            return tuple(allocation.shares.items())
    logger.debug(f"Expense {expense_id} charged to payer {payer_id}")
    return ((payer_id, amount),)


def build_entries(
    event: Event,
    policy: Optional[str] = None
) -> Tuple[List[ExpenseEntry], List[int], List[int], List[int]]:
    """
    Convert an event's expenses into ledger-currency entries.

    When the stored shares of an expense do not add up to its amount, the
    payer is credited with the shares only, so every entry stays balanced
    and the rest of the amount is left with the payer.

    Returns:
        (entries, unreliable_expense_ids, fallback_expense_ids,
        mismatched_expense_ids)
    """
    policy = policy or settings.MISSING_SHARES_POLICY
    roster = [str(p.id) for p in event.participants]
    entries = []
    unreliable = []
    fallback = []
    mismatched = []

    for expense in event.expenses:
        normalized = normalize(expense.amount, expense.currency, event.ledger_currency, expense.conversion_rate)
        if not normalized.reliable:
            unreliable.append(expense.id)

        payer_id = str(expense.paid_by_id)
        credited = normalized.amount
        if expense.shares:
            # Shares are stored in the expense currency
            shares = tuple(
                (str(share.participant_id), share.share_amount * normalized.rate)
                for share in expense.shares
            )
            stored = {share.participant_id: share.share_amount for share in expense.shares}
            if share_mismatch(stored, expense.amount):
                mismatched.append(expense.id)
                credited = sum((amount for _, amount in shares), ZERO)
                logger.info(f"Expense {expense.id}: shares do not match the amount, crediting {credited}")
        else:
            fallback.append(expense.id)
            shares = fallback_shares(expense.id, normalized.amount, payer_id, roster, policy)

        entries.append(ExpenseEntry(
            expense_id=str(expense.id),
            payer_id=payer_id,
            amount=credited,
            shares=shares
        ))

    return entries, unreliable, fallback, mismatched


def calculate_settlement(event_id: int, db: Session, viewer_id: Optional[int] = None) -> SettlementReport:
    """
    Calculate balances and transfers for an event.

    Raises:
        ValueError: if the event does not exist
        SettlementError: if the balances cannot be settled
    """
    event = db.query(Event).options(
        selectinload(Event.participants),
        selectinload(Event.expenses).selectinload(Expense.shares)
    ).filter(Event.id == event_id).first()
    if not event:
        raise ValueError("Event not found")

    entries, unreliable, fallback, mismatched = build_entries(event)
    roster = [str(p.id) for p in event.participants]

    balances = aggregate(entries, roster)
    outcome = settle(balances, currency=event.ledger_currency)
    if not outcome.ok:
        logger.error(f"Settlement for event {event_id} failed: {outcome.issue.value}")
        raise SettlementError(outcome.issue, f"Event {event_id} balances are inconsistent: {outcome.issue.value}")

    names = {str(p.id): p.display_name for p in event.participants}

    def name_of(participant_id: str) -> str:
        return names.get(participant_id, participant_id)

    balance_entries = [
        BalanceEntry(
            participant_id=int(summary.participant_id),
            display_name=name_of(summary.participant_id),
            paid=round_money(summary.paid),
            owed=round_money(summary.owed),
            balance=round_money(balances.get(summary.participant_id, ZERO))
        )
        for summary in summarize(entries, roster)
    ]

    transfers = [
        Transfer(
            from_participant_id=int(tx.from_id),
            from_name=name_of(tx.from_id),
            to_participant_id=int(tx.to_id),
            to_name=name_of(tx.to_id),
            amount=tx.amount,
            currency=tx.currency
        )
        for tx in outcome.transactions
    ]

    your_transfers = []
    other_transfers = []
    if viewer_id is not None:
        for transfer in transfers:
            if viewer_id in (transfer.from_participant_id, transfer.to_participant_id):
                your_transfers.append(transfer)
            else:
                other_transfers.append(transfer)

    total = sum((expense.amount_ledger for expense in event.expenses), ZERO)
    logger.info(f"Event {event_id}: {len(entries)} expenses, {len(transfers)} transfers")

    return SettlementReport(
        event_id=event.id,
        ledger_currency=event.ledger_currency,
        total_expenses=round_money(total),
        participant_count=len(balances),
        balances=balance_entries,
        transfers=transfers,
        viewer_id=viewer_id,
        your_transfers=your_transfers,
        other_transfers=other_transfers,
        unreliable_expense_ids=unreliable,
        fallback_expense_ids=fallback,
        mismatched_expense_ids=mismatched
    )
