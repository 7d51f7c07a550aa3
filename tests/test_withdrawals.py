"""Two-phase withdrawal: request, freeze, cooldown and release."""

import pytest

from pool_ledger.config import DAY
from pool_ledger.errors import (
    AlreadyProcessedError,
    CooldownActiveError,
    FreezePeriodActiveError,
    InsufficientBalanceError,
    InvalidWithdrawalIndexError,
    ValidationError,
)

START = 1_760_000_000
FREEZE = 7 * DAY


def test_request_does_not_reserve_balance(engine, events):
    engine.deposit("alice", 1000)

    event = engine.request_withdrawal("alice", 400, now=START)

    assert event.unlockTime == START + FREEZE
    assert event.participant == "alice"
    assert engine.balance_of("alice") == 1000
    assert engine.total_deposits() == 1000
    request = engine.get_withdrawal_request("alice", 0)
    assert request.amount == 400
    assert request.processed is False
    assert engine.withdrawal_request_count("alice") == 1
    assert events[-1] == event


def test_request_validation(engine):
    engine.deposit("alice", 1000)

    with pytest.raises(ValidationError):
        engine.request_withdrawal("alice", 0, now=START)
    with pytest.raises(InsufficientBalanceError):
        engine.request_withdrawal("alice", 1001, now=START)
    with pytest.raises(InsufficientBalanceError):
        engine.request_withdrawal("nobody", 1, now=START)
    assert engine.withdrawal_request_count("alice") == 0


def test_release_is_gated_by_unlock_time_and_accepted_at_boundary(engine, custody):
    engine.deposit("alice", 1000)
    engine.request_withdrawal("alice", 400, now=START)

    with pytest.raises(FreezePeriodActiveError):
        engine.withdraw_share("alice", 0, now=START + FREEZE - 1)
    assert engine.balance_of("alice") == 1000

    event = engine.withdraw_share("alice", 0, now=START + FREEZE)

    assert event.amount == 400
    assert engine.balance_of("alice") == 600
    assert engine.total_deposits() == 600
    assert engine.get_withdrawal_request("alice", 0).processed is True
    assert engine.last_withdrawal_time("alice") == START + FREEZE
    assert custody.balance() == 600
    assert custody.transfers[-1].direction == "out"
    assert custody.transfers[-1].amount == 400


def test_release_twice_is_rejected(engine):
    engine.deposit("alice", 1000)
    engine.request_withdrawal("alice", 100, now=START)
    engine.withdraw_share("alice", 0, now=START + FREEZE)

    with pytest.raises(AlreadyProcessedError):
        engine.withdraw_share("alice", 0, now=START + FREEZE + 10 * DAY)
    assert engine.balance_of("alice") == 900


def test_cooldown_between_completed_withdrawals(engine):
    engine.deposit("alice", 1000)
    engine.request_withdrawal("alice", 100, now=START)
    engine.request_withdrawal("alice", 100, now=START)
    engine.withdraw_share("alice", 0, now=START + FREEZE)

    with pytest.raises(CooldownActiveError):
        engine.withdraw_share("alice", 1, now=START + FREEZE + DAY - 1)
    assert engine.get_withdrawal_request("alice", 1).processed is False

    engine.withdraw_share("alice", 1, now=START + FREEZE + DAY)
    assert engine.balance_of("alice") == 800


def test_cooldown_is_per_participant(engine):
    engine.deposit("alice", 1000)
    engine.deposit("bob", 1000)
    engine.request_withdrawal("alice", 100, now=START)
    engine.request_withdrawal("bob", 100, now=START)

    engine.withdraw_share("alice", 0, now=START + FREEZE)
    engine.withdraw_share("bob", 0, now=START + FREEZE)

    assert engine.total_deposits() == 1800


def test_invalid_index(engine):
    engine.deposit("alice", 1000)
    engine.request_withdrawal("alice", 100, now=START)

    with pytest.raises(InvalidWithdrawalIndexError):
        engine.withdraw_share("alice", 1, now=START + FREEZE)
    with pytest.raises(InvalidWithdrawalIndexError):
        engine.withdraw_share("bob", 0, now=START + FREEZE)
    with pytest.raises(InvalidWithdrawalIndexError):
        engine.get_withdrawal_request("alice", -1)


def test_release_rechecks_balance_after_loss(engine):
    engine.deposit("alice", 1000)
    engine.request_withdrawal("alice", 1000, now=START)
    engine.distribute_profit("investor", -100, now=START + DAY)

    with pytest.raises(InsufficientBalanceError):
        engine.withdraw_share("alice", 0, now=START + FREEZE)

    assert engine.balance_of("alice") == 900
    assert engine.total_deposits() == 900
    assert engine.get_withdrawal_request("alice", 0).processed is False
    assert engine.last_withdrawal_time("alice") is None


def test_overlapping_requests_cannot_overdraw(engine):
    engine.deposit("alice", 1000)
    engine.request_withdrawal("alice", 1000, now=START)
    engine.request_withdrawal("alice", 1000, now=START)

    engine.withdraw_share("alice", 0, now=START + FREEZE)
    with pytest.raises(InsufficientBalanceError):
        engine.withdraw_share("alice", 1, now=START + FREEZE + DAY)

    assert engine.balance_of("alice") == 0
    assert engine.total_deposits() == 0


def test_full_withdrawal_removes_membership(engine):
    engine.deposit("alice", 500)
    engine.deposit("bob", 500)
    engine.request_withdrawal("alice", 500, now=START)

    engine.withdraw_share("alice", 0, now=START + FREEZE)

    assert engine.participants() == ["bob"]
    assert engine.withdrawal_request_count("alice") == 1


def test_returned_requests_are_copies(engine):
    engine.deposit("alice", 500)
    engine.request_withdrawal("alice", 500, now=START)

    request = engine.get_withdrawal_request("alice", 0)
    request.processed = True

    assert engine.get_withdrawal_request("alice", 0).processed is False


def test_count_unlocking_within_last_days(engine):
    engine.deposit("alice", 5000)
    engine.request_withdrawal("alice", 100, now=START)            # unlocks START + 7d
    engine.request_withdrawal("alice", 100, now=START + 5 * DAY)  # unlocks START + 12d
    engine.request_withdrawal("alice", 100, now=START + 20 * DAY)  # unlocks START + 27d

    now = START + 13 * DAY
    assert engine.count_unlocking_within("alice", 7, now=now) == 2
    assert engine.count_unlocking_within("alice", 3, now=now) == 1
    assert engine.count_unlocking_within("alice", 0, now=now) == 0
    assert engine.count_unlocking_within("bob", 30, now=now) == 0
    with pytest.raises(ValidationError):
        engine.count_unlocking_within("alice", -1, now=now)
