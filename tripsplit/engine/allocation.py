"""
Share allocation for a single expense.

Two policies are supported. ``equal`` divides the amount evenly between all
participants. ``manual`` keeps the shares a user typed in ("locked" shares)
and spreads whatever is left evenly over everyone else.

The lock set is session state owned by the caller: it is passed in and the
updated set is handed back in the result, so allocation stays a pure
function.
"""
import enum
import logging
from decimal import Decimal
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional

from tripsplit.engine.money import EPSILON, ZERO, to_decimal
from tripsplit.engine.outcomes import AllocationResult, EngineIssue

logger = logging.getLogger(__name__)


class SplitMethod(str, enum.Enum):
    """How an expense is divided between its participants."""
    EQUAL = "equal"
    MANUAL = "manual"


def _unique(participant_ids: Iterable[str]) -> List[str]:
    # Preserve caller order; it drives deterministic output.
    return list(dict.fromkeys(participant_ids))


def _parse_method(method: Any) -> Optional[SplitMethod]:
    try:
        return SplitMethod(method)
    except ValueError:
        logger.warning("Unknown split method %r", method)
        return None


def share_mismatch(shares: Mapping[str, Any], total: Any, epsilon: Decimal = EPSILON) -> bool:
    """Return True if the shares differ from the total by more than epsilon."""
    expected = to_decimal(total) or ZERO
    allocated = sum((to_decimal(v) or ZERO for v in shares.values()), ZERO)
    return abs(allocated - expected) > epsilon


def allocate(
    total_amount: Any,
    participant_ids: Iterable[str],
    method: SplitMethod = SplitMethod.EQUAL,
    existing_shares: Optional[Mapping[str, Any]] = None,
    locked_ids: Optional[Iterable[str]] = None,
) -> AllocationResult:
    """
    Split ``total_amount`` between ``participant_ids``.

    Args:
        total_amount: Expense amount, must be > 0.
        participant_ids: Participants sharing the expense, in display order.
        method: ``equal`` or ``manual``.
        existing_shares: Current shares; only read for locked participants
            under the manual policy.
        locked_ids: Participants whose share must be kept verbatim.

    Returns:
        AllocationResult. Invalid input yields empty shares and an
        INVALID_AMOUNT, NO_PARTICIPANTS or INVALID_METHOD issue instead of
        an exception.
    """
    participants = _unique(participant_ids)
    locked = frozenset(pid for pid in (locked_ids or ()) if pid in participants)
    total = to_decimal(total_amount)

    method = _parse_method(method)
    if method is None:
        return AllocationResult(shares={}, locked_ids=locked, total=total or ZERO, issue=EngineIssue.INVALID_METHOD)

    if total is None or total <= 0:
        return AllocationResult(shares={}, locked_ids=locked, total=ZERO, issue=EngineIssue.INVALID_AMOUNT)
    if not participants:
        return AllocationResult(shares={}, locked_ids=frozenset(), total=total, issue=EngineIssue.NO_PARTICIPANTS)

    shares: Dict[str, Decimal] = {}

    if method == SplitMethod.EQUAL:
        # No remainder correction: 100 / 3 stays 33.333...
        share_per_person = total / len(participants)
        for pid in participants:
            shares[pid] = share_per_person
        locked = frozenset()
    else:
        existing = existing_shares or {}
        remaining = total
        unlocked = []
        for pid in participants:
            if pid in locked:
                value = to_decimal(existing.get(pid)) or ZERO
                shares[pid] = value
                remaining -= value
            else:
                unlocked.append(pid)

        if unlocked:
            share_per_unlocked = remaining / len(unlocked) if remaining > 0 else ZERO
            for pid in unlocked:
                shares[pid] = share_per_unlocked

    issue = None
    if share_mismatch(shares, total):
        logger.debug("Allocated %s of %s across %d participants", sum(shares.values(), ZERO), total, len(shares))
        issue = EngineIssue.SHARE_SUM_MISMATCH

    return AllocationResult(shares=shares, locked_ids=locked, total=total, issue=issue)


def edit_share(
    total_amount: Any,
    participant_ids: Iterable[str],
    shares: Mapping[str, Any],
    locked_ids: Iterable[str],
    participant_id: str,
    new_share: Any,
) -> AllocationResult:
    """
    Apply a manual edit to one participant's share.

    The edited participant joins the lock set and the rest of the amount is
    redistributed among participants that are still unlocked. Negative or
    unparsable input counts as 0.
    """
    participants = _unique(participant_ids)
    if participant_id not in participants:
        return allocate(total_amount, participants, SplitMethod.MANUAL, shares, locked_ids)

    value = to_decimal(new_share)
    if value is None or value < 0:
        value = ZERO

    updated = dict(shares)
    updated[participant_id] = value
    locked = set(locked_ids or ())
    locked.add(participant_id)
    return allocate(total_amount, participants, SplitMethod.MANUAL, updated, locked)


def carry_locks(
    locked_ids: Iterable[str],
    previous_participant_ids: Iterable[str],
    participant_ids: Iterable[str],
    method: SplitMethod,
) -> FrozenSet[str]:
    """
    Work out which locks survive a change to the expense form.

    Locks are cleared when the participant set changes or when the split
    goes back to ``equal``.
    """
    if _parse_method(method) in (None, SplitMethod.EQUAL):
        return frozenset()
    current = set(participant_ids)
    if set(previous_participant_ids) != current:
        return frozenset()
    return frozenset(pid for pid in locked_ids if pid in current)
