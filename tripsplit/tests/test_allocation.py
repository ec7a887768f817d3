"""
Tests for share allocation.
"""
from decimal import Decimal

import pytest

from tripsplit.engine import EngineIssue, SplitMethod, allocate, carry_locks, edit_share, share_mismatch


def test_equal_split():
    """90 split three ways is 30 each."""
    result = allocate(90, ["A", "B", "C"], SplitMethod.EQUAL, {}, set())
    assert result.shares == {"A": Decimal(30), "B": Decimal(30), "C": Decimal(30)}
    assert result.issue is None
    assert result.is_valid


@pytest.mark.parametrize("amount, count", [(100, 3), ("10.01", 7), ("0.05", 4), ("1234.56", 11)])
def test_equal_split_conserves_amount(amount, count):
    """Equal shares add back up to the amount within a cent."""
    participants = [f"p{i}" for i in range(count)]
    result = allocate(amount, participants, SplitMethod.EQUAL)
    assert abs(sum(result.shares.values()) - Decimal(str(amount))) <= Decimal("0.01")
    assert not result.mismatch


def test_equal_split_has_no_remainder_correction():
    result = allocate(100, ["A", "B", "C"], "equal")
    assert result.shares["A"] == result.shares["B"] == result.shares["C"]
    assert result.shares["A"] == Decimal(100) / 3


def test_equal_split_clears_locks():
    result = allocate(90, ["A", "B", "C"], SplitMethod.EQUAL, {"A": 50}, {"A"})
    assert result.locked_ids == frozenset()


def test_manual_split_keeps_locked_shares():
    """A locked at 50 leaves 25 each for B and C."""
    result = allocate(100, ["A", "B", "C"], SplitMethod.MANUAL, {"A": 50}, {"A"})
    assert result.shares == {"A": Decimal(50), "B": Decimal(25), "C": Decimal(25)}
    assert result.locked_ids == frozenset({"A"})
    assert not result.mismatch


def test_manual_split_ignores_unlocked_existing_shares():
    result = allocate(90, ["A", "B", "C"], SplitMethod.MANUAL, {"A": 10, "B": 70}, set())
    assert result.shares == {"A": Decimal(30), "B": Decimal(30), "C": Decimal(30)}


def test_manual_split_over_allocated_gives_zero_to_unlocked():
    result = allocate(100, ["A", "B", "C"], SplitMethod.MANUAL, {"A": 120}, {"A"})
    assert result.shares == {"A": Decimal(120), "B": Decimal(0), "C": Decimal(0)}
    assert result.mismatch
    assert result.issue == EngineIssue.SHARE_SUM_MISMATCH
    assert result.difference == Decimal(20)


def test_manual_split_all_locked_mismatch_is_not_corrected():
    result = allocate(100, ["A", "B"], SplitMethod.MANUAL, {"A": 30, "B": 30}, {"A", "B"})
    assert result.shares == {"A": Decimal(30), "B": Decimal(30)}
    assert result.mismatch
    assert result.difference == Decimal(-40)


def test_manual_split_locked_without_value_counts_as_zero():
    result = allocate(60, ["A", "B", "C"], SplitMethod.MANUAL, {}, {"A"})
    assert result.shares == {"A": Decimal(0), "B": Decimal(30), "C": Decimal(30)}


def test_locks_outside_participants_are_dropped():
    result = allocate(60, ["A", "B"], SplitMethod.MANUAL, {"Z": 10}, {"Z"})
    assert result.locked_ids == frozenset()
    assert result.shares == {"A": Decimal(30), "B": Decimal(30)}


@pytest.mark.parametrize("amount", [0, -5, None, "", "abc", float("nan")])
def test_invalid_amount_returns_empty_result(amount):
    result = allocate(amount, ["A", "B"], SplitMethod.EQUAL)
    assert result.shares == {}
    assert result.issue == EngineIssue.INVALID_AMOUNT
    assert not result.is_valid


def test_no_participants_returns_empty_result():
    result = allocate(50, [], SplitMethod.EQUAL)
    assert result.shares == {}
    assert result.issue == EngineIssue.NO_PARTICIPANTS


def test_unknown_method_returns_empty_result():
    result = allocate(50, ["A", "B"], "proportional")
    assert result.shares == {}
    assert result.issue == EngineIssue.INVALID_METHOD
    assert not result.is_valid
    assert carry_locks({"A"}, ["A", "B"], ["A", "B"], "proportional") == frozenset()


def test_duplicate_participants_are_counted_once():
    result = allocate(60, ["A", "B", "A"], SplitMethod.EQUAL)
    assert result.shares == {"A": Decimal(30), "B": Decimal(30)}


def test_edit_share_locks_and_redistributes():
    """Each edit locks the participant and only moves unlocked shares."""
    start = allocate(90, ["A", "B", "C"], SplitMethod.MANUAL)
    assert start.shares == {"A": Decimal(30), "B": Decimal(30), "C": Decimal(30)}

    first = edit_share(90, ["A", "B", "C"], start.shares, start.locked_ids, "A", 40)
    assert first.shares == {"A": Decimal(40), "B": Decimal(25), "C": Decimal(25)}
    assert first.locked_ids == frozenset({"A"})

    second = edit_share(90, ["A", "B", "C"], first.shares, first.locked_ids, "B", "20")
    assert second.shares == {"A": Decimal(40), "B": Decimal(20), "C": Decimal(30)}
    assert second.locked_ids == frozenset({"A", "B"})


def test_edit_last_unlocked_share_shows_mismatch():
    shares = {"A": Decimal(40), "B": Decimal(50)}
    result = edit_share(90, ["A", "B"], shares, {"A"}, "B", 10)
    assert result.shares == {"A": Decimal(40), "B": Decimal(10)}
    assert result.mismatch


def test_edit_share_negative_value_counts_as_zero():
    result = edit_share(90, ["A", "B", "C"], {}, set(), "A", -10)
    assert result.shares["A"] == Decimal(0)
    assert result.shares["B"] == Decimal(45)


def test_carry_locks():
    assert carry_locks({"A"}, ["A", "B"], ["B", "A"], SplitMethod.MANUAL) == frozenset({"A"})
    # Adding or removing a participant clears all locks
    assert carry_locks({"A"}, ["A", "B"], ["A", "B", "C"], SplitMethod.MANUAL) == frozenset()
    assert carry_locks({"A"}, ["A", "B"], ["A"], SplitMethod.MANUAL) == frozenset()
    # Going back to equal clears them too
    assert carry_locks({"A"}, ["A", "B"], ["A", "B"], SplitMethod.EQUAL) == frozenset()


def test_share_mismatch():
    assert not share_mismatch({"A": "33.33", "B": "33.33", "C": "33.34"}, 100)
    assert not share_mismatch({"A": "49.99", "B": "50"}, 100)
    assert share_mismatch({"A": "49.98", "B": "50"}, 100)
