"""
Net balance aggregation over all expenses of one event.
"""
import logging
from decimal import Decimal
from typing import Dict, Iterable, List

from tripsplit.engine.money import ZERO
from tripsplit.engine.outcomes import ExpenseEntry, ParticipantSummary

logger = logging.getLogger(__name__)


def aggregate(entries: Iterable[ExpenseEntry], participant_ids: Iterable[str] = ()) -> Dict[str, Decimal]:
    """
    Fold expenses into one signed balance per participant.

    Positive balance = the group owes them, negative = they owe the group.
    The payer is credited the full ledger amount and every share holder
    (payer included) is debited their share. Everyone in
    ``participant_ids`` appears in the result, even with no activity.
    """
    balances: Dict[str, Decimal] = {pid: ZERO for pid in participant_ids}
    known = set(balances)

    for entry in entries:
        _credit(balances, known, entry.payer_id, entry.amount, entry.expense_id)
        for participant_id, share in entry.shares:
            _credit(balances, known, participant_id, -share, entry.expense_id)

    return balances


def _credit(balances: Dict[str, Decimal], known: set, participant_id: str, amount: Decimal, expense_id: str):
    if participant_id not in balances:
        if known:
            logger.warning(
                "Expense %s references participant %s outside the event roster",
                expense_id, participant_id
            )
        balances[participant_id] = ZERO
    balances[participant_id] += amount


def summarize(entries: Iterable[ExpenseEntry], participant_ids: Iterable[str] = ()) -> List[ParticipantSummary]:
    """Total paid and total owed per participant, in roster order."""
    paid: Dict[str, Decimal] = {pid: ZERO for pid in participant_ids}
    owed: Dict[str, Decimal] = dict(paid)

    for entry in entries:
        paid.setdefault(entry.payer_id, ZERO)
        owed.setdefault(entry.payer_id, ZERO)
        paid[entry.payer_id] += entry.amount
        for participant_id, share in entry.shares:
            paid.setdefault(participant_id, ZERO)
            owed.setdefault(participant_id, ZERO)
            owed[participant_id] += share

    return [
        ParticipantSummary(participant_id=pid, paid=paid[pid], owed=owed[pid])
        for pid in paid
    ]
