"""
Result values returned by the settlement engine.

The engine never raises across its boundary. Every operation returns one of
these frozen values, and problems are reported as EngineIssue codes so the
caller can decide whether to warn, block or display them.
"""
import enum
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, FrozenSet, Optional, Tuple

from tripsplit.engine.money import ZERO


class EngineIssue(str, enum.Enum):
    """Issue codes surfaced by engine operations."""
    INVALID_AMOUNT = "invalid_amount"
    NO_PARTICIPANTS = "no_participants"
    SHARE_SUM_MISMATCH = "share_sum_mismatch"
    UNRELIABLE_RATE = "unreliable_rate"
    INVALID_METHOD = "invalid_method"
    UNBALANCED_LEDGER = "unbalanced_ledger"
    ITERATION_LIMIT = "iteration_limit"


# Issues that make a settlement unusable, as opposed to advisory flags.
INTEGRITY_ISSUES = frozenset({EngineIssue.UNBALANCED_LEDGER, EngineIssue.ITERATION_LIMIT})


@dataclass(frozen=True)
class AllocationResult:
    """Shares for one expense plus the lock set to carry into the next edit."""
    shares: Dict[str, Decimal]
    locked_ids: FrozenSet[str] = frozenset()
    total: Decimal = ZERO
    issue: Optional[EngineIssue] = None

    @property
    def allocated(self) -> Decimal:
        return sum(self.shares.values(), ZERO)

    @property
    def difference(self) -> Decimal:
        """Allocated minus expected; positive means over-allocated."""
        return self.allocated - self.total

    @property
    def mismatch(self) -> bool:
        return self.issue == EngineIssue.SHARE_SUM_MISMATCH

    @property
    def is_valid(self) -> bool:
        return self.issue not in (EngineIssue.INVALID_AMOUNT, EngineIssue.NO_PARTICIPANTS, EngineIssue.INVALID_METHOD)


@dataclass(frozen=True)
class NormalizedAmount:
    """An expense amount expressed in the ledger currency."""
    amount: Decimal
    rate: Decimal
    reliable: bool = True
    issue: Optional[EngineIssue] = None


@dataclass(frozen=True)
class ExpenseEntry:
    """One expense as seen by the balance aggregator (ledger currency)."""
    expense_id: str
    payer_id: str
    amount: Decimal
    shares: Tuple[Tuple[str, Decimal], ...] = ()


@dataclass(frozen=True)
class ParticipantSummary:
    participant_id: str
    paid: Decimal
    owed: Decimal

    @property
    def net(self) -> Decimal:
        return self.paid - self.owed


@dataclass(frozen=True)
class SettlementTransaction:
    """A proposed transfer from a debtor to a creditor."""
    from_id: str
    to_id: str
    amount: Decimal
    currency: Optional[str] = None

    def involves(self, participant_id: str) -> bool:
        return participant_id in (self.from_id, self.to_id)


@dataclass(frozen=True)
class SettlementOutcome:
    """
    Result of settle().

    An empty ``transactions`` tuple with ``ok`` True means nothing is owed.
    When ``ok`` is False the ledger is inconsistent and the transactions
    must not be shown as a settlement.
    """
    transactions: Tuple[SettlementTransaction, ...] = ()
    issue: Optional[EngineIssue] = None
    residual: Dict[str, Decimal] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.issue not in INTEGRITY_ISSUES
