"""Settlement & share computation engine."""
from tripsplit.engine.allocation import SplitMethod, allocate, carry_locks, edit_share, share_mismatch
from tripsplit.engine.balances import aggregate, summarize
from tripsplit.engine.currency import normalize, parse_rate
from tripsplit.engine.outcomes import (
    AllocationResult,
    EngineIssue,
    ExpenseEntry,
    NormalizedAmount,
    ParticipantSummary,
    SettlementOutcome,
    SettlementTransaction,
)
from tripsplit.engine.settlement import apply_transactions, settle

__all__ = [
    "SplitMethod",
    "allocate",
    "carry_locks",
    "edit_share",
    "share_mismatch",
    "aggregate",
    "summarize",
    "normalize",
    "parse_rate",
    "AllocationResult",
    "EngineIssue",
    "ExpenseEntry",
    "NormalizedAmount",
    "ParticipantSummary",
    "SettlementOutcome",
    "SettlementTransaction",
    "apply_transactions",
    "settle",
]
