"""
Tests for settlement generation.
"""
import random
from decimal import Decimal

import pytest

from tripsplit.engine import EngineIssue, SettlementTransaction, apply_transactions, settle


def as_tuples(outcome):
    return [(tx.from_id, tx.to_id, tx.amount) for tx in outcome.transactions]


def test_end_to_end_settlement():
    """C pays A 40, then B pays A 10."""
    balances = {"A": Decimal(50), "B": Decimal(-10), "C": Decimal(-40)}
    outcome = settle(balances, currency="EUR")
    assert outcome.ok
    assert as_tuples(outcome) == [("C", "A", Decimal("40.00")), ("B", "A", Decimal("10.00"))]
    assert all(tx.currency == "EUR" for tx in outcome.transactions)

    residual = apply_transactions(balances, outcome.transactions)
    assert all(abs(v) <= Decimal("0.01") for v in residual.values())


def test_input_is_not_mutated():
    balances = {"A": Decimal(5), "B": Decimal(-5)}
    settle(balances)
    assert balances == {"A": Decimal(5), "B": Decimal(-5)}


def test_nothing_to_settle():
    assert settle({}).transactions == ()
    outcome = settle({"A": Decimal(0), "B": Decimal(0)})
    assert outcome.ok
    assert outcome.transactions == ()


def test_residue_below_epsilon_is_ignored():
    outcome = settle({"A": Decimal("0.004"), "B": Decimal("-0.004")})
    assert outcome.ok
    assert outcome.transactions == ()


def test_ties_follow_input_order():
    balances = {"A": Decimal(10), "B": Decimal(10), "C": Decimal(-10), "D": Decimal(-10)}
    outcome = settle(balances)
    assert as_tuples(outcome) == [("C", "A", Decimal("10.00")), ("D", "B", Decimal("10.00"))]


def test_amounts_are_rounded_half_up():
    outcome = settle({"A": Decimal("33.335"), "B": Decimal("-33.335")})
    assert as_tuples(outcome) == [("B", "A", Decimal("33.34"))]


def test_unbalanced_ledger_is_an_error():
    outcome = settle({"A": Decimal(10), "B": Decimal(-5)})
    assert not outcome.ok
    assert outcome.issue == EngineIssue.UNBALANCED_LEDGER
    assert outcome.transactions == ()


def test_small_imbalance_is_tolerated():
    outcome = settle({"A": Decimal("10.01"), "B": Decimal("-10")})
    assert outcome.ok
    assert as_tuples(outcome) == [("B", "A", Decimal("10.00"))]


def test_iteration_bound_is_an_error():
    balances = {"A": Decimal(50), "B": Decimal(-10), "C": Decimal(-40)}
    outcome = settle(balances, max_iterations=1)
    assert not outcome.ok
    assert outcome.issue == EngineIssue.ITERATION_LIMIT
    assert outcome.transactions == ()


@pytest.mark.parametrize("seed", range(20))
def test_settlement_zeroes_balances_with_few_transfers(seed):
    rng = random.Random(seed)
    count = rng.randint(2, 12)
    balances = {f"p{i}": Decimal(rng.randint(-50000, 50000)) / 100 for i in range(count - 1)}
    balances[f"p{count - 1}"] = -sum(balances.values())

    outcome = settle(balances)
    assert outcome.ok

    nonzero = sum(1 for v in balances.values() if v != 0)
    assert len(outcome.transactions) <= max(0, nonzero - 1)

    residual = apply_transactions(balances, outcome.transactions)
    assert all(abs(v) <= Decimal("0.01") for v in residual.values())


def test_apply_transactions():
    residual = apply_transactions(
        {"A": Decimal(10), "B": Decimal(-10)},
        [SettlementTransaction("B", "A", Decimal(4))]
    )
    assert residual == {"A": Decimal(6), "B": Decimal(-6)}


def test_transaction_involves():
    tx = SettlementTransaction("B", "A", Decimal(1))
    assert tx.involves("A")
    assert tx.involves("B")
    assert not tx.involves("C")


def test_sub_cent_balances_stay_within_a_cent():
    """Half-cent rounding on several transfers to one creditor does not add up."""
    balances = {
        "A": Decimal("3.015"), "B": Decimal("-1.005"), "C": Decimal("-1.005"), "D": Decimal("-1.005")
    }
    outcome = settle(balances)
    assert outcome.ok
    assert as_tuples(outcome) == [
        ("C", "A", Decimal("1.01")), ("D", "A", Decimal("1.01")), ("B", "A", Decimal("1.00"))
    ]

    residual = apply_transactions(balances, outcome.transactions)
    assert residual == outcome.residual
    assert all(abs(v) <= Decimal("0.01") for v in residual.values())


@pytest.mark.parametrize("seed", range(10))
def test_sub_cent_random_balances_stay_within_a_cent(seed):
    rng = random.Random(seed)
    count = rng.randint(3, 10)
    balances = {f"p{i}": Decimal(rng.randint(-500000, 500000)) / 1000 for i in range(count - 1)}
    balances[f"p{count - 1}"] = -sum(balances.values())

    outcome = settle(balances)
    assert outcome.ok
    assert len(outcome.transactions) <= count - 1

    residual = apply_transactions(balances, outcome.transactions)
    assert all(abs(v) <= Decimal("0.01") for v in residual.values())
