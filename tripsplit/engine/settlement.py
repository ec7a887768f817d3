"""
Settlement generation: turn net balances into a short list of transfers.

Uses a greedy algorithm. On every step the largest creditor is paid by the
largest debtor as much as one of them can take, which clears at least one
of the two. This is not guaranteed to give the globally smallest number of
transfers, but it is deterministic and never needs more than n - 1 of them.
"""
import logging
from decimal import ROUND_FLOOR, Decimal
from typing import Dict, Iterable, List, Mapping, Optional

from tripsplit.engine.money import CENT, EPSILON, ZERO, round_money, to_decimal
from tripsplit.engine.outcomes import EngineIssue, SettlementOutcome, SettlementTransaction

logger = logging.getLogger(__name__)


def settle(
    balances: Mapping[str, object],
    currency: Optional[str] = None,
    epsilon: Decimal = EPSILON,
    max_iterations: Optional[int] = None,
) -> SettlementOutcome:
    """
    Generate transfers that bring every balance to (about) zero.

    Balances are first rounded to whole cents in a way that keeps their
    sum, so every transfer is an exact cent amount and each participant
    ends within one cent of zero.

    Args:
        balances: participant id -> net balance (positive = is owed money).
            Iteration order decides ties.
        currency: Ledger currency stamped on every transaction.
        epsilon: Residues smaller than this are treated as settled.
        max_iterations: Safety bound, defaults to 2 x participant count.

    Returns:
        SettlementOutcome. ``ok`` is False when the balances do not sum to
        zero or the safety bound is hit; in that case no transactions are
        returned. ``residual`` is what each participant is left with after
        paying the transactions.
    """
    original: Dict[str, Decimal] = {pid: to_decimal(value) or ZERO for pid, value in balances.items()}
    count = len(original)
    if count == 0:
        return SettlementOutcome()

    imbalance = sum(original.values(), ZERO)
    if abs(imbalance) > epsilon * max(1, count):
        logger.warning("Balances do not sum to zero (off by %s), refusing to settle", imbalance)
        return SettlementOutcome(issue=EngineIssue.UNBALANCED_LEDGER, residual=original)

    if max_iterations is None:
        max_iterations = 2 * count

    working = _to_cents(original)
    transactions: List[SettlementTransaction] = []
    while True:
        creditor, credit = _largest(working, 1)
        debtor, debt = _largest(working, -1)

        if credit < epsilon or debt < epsilon:
            break

        if len(transactions) >= max_iterations:
            logger.error("Settlement exceeded %d iterations, balances are inconsistent", max_iterations)
            return SettlementOutcome(issue=EngineIssue.ITERATION_LIMIT, residual=original)

        amount = round_money(min(credit, debt))
        logger.debug("Settlement step: %s pays %s to %s", debtor, amount, creditor)
        transactions.append(SettlementTransaction(
            from_id=debtor,
            to_id=creditor,
            amount=amount,
            currency=currency
        ))
        working[creditor] -= amount
        working[debtor] += amount

    return SettlementOutcome(
        transactions=tuple(transactions),
        residual=apply_transactions(original, transactions)
    )


def _to_cents(balances: Dict[str, Decimal]) -> Dict[str, Decimal]:
    """
    Round every balance to a whole cent while keeping the rounded total.

    Balances are floored, then the cents still missing from the half-up
    rounded total go to the largest remainders (first in input order on
    ties). Each result is within one cent of its input.
    """
    floors = {pid: value.quantize(CENT, rounding=ROUND_FLOOR) for pid, value in balances.items()}
    target = round_money(sum(balances.values(), ZERO))
    missing = int((target - sum(floors.values(), ZERO)) / CENT)

    order = sorted(balances, key=lambda pid: balances[pid] - floors[pid], reverse=True)
    for pid in order[:max(0, missing)]:
        floors[pid] += CENT
    return floors


def _largest(balances: Dict[str, Decimal], sign: int):
    """Return (id, magnitude) of the largest balance with the given sign."""
    best_id = None
    best = ZERO
    for pid, value in balances.items():
        magnitude = value * sign
        # Strict comparison keeps the first of equal balances.
        if magnitude > best:
            best = magnitude
            best_id = pid
    return best_id, best


def apply_transactions(
    balances: Mapping[str, object],
    transactions: Iterable[SettlementTransaction],
) -> Dict[str, Decimal]:
    """
    Return the balances left after every transaction has been paid.

    Paying moves the debtor's balance up and the creditor's down.
    """
    residual = {pid: to_decimal(value) or ZERO for pid, value in balances.items()}
    for tx in transactions:
        residual[tx.from_id] = residual.get(tx.from_id, ZERO) + tx.amount
        residual[tx.to_id] = residual.get(tx.to_id, ZERO) - tx.amount
    return residual
