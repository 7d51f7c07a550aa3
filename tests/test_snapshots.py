import pytest

from pool_ledger.engine import SnapshotLog, SNAPSHOT_CAPACITY
from pool_ledger.errors import SnapshotOrderError


def test_snapshot_log_is_bounded_and_evicts_oldest():
    log = SnapshotLog()
    for i in range(SNAPSHOT_CAPACITY + 1):
        log.append(timestamp=i, total_deposits=i * 10)

    assert len(log) == SNAPSHOT_CAPACITY
    timestamps = [s.timestamp for s in log]
    assert 0 not in timestamps
    assert timestamps == list(range(1, SNAPSHOT_CAPACITY + 1))
    assert log[0].timestamp == 1
    assert log.latest().timestamp == SNAPSHOT_CAPACITY


def test_snapshot_log_keeps_order_after_many_wraps():
    log = SnapshotLog(capacity=3)
    for i in range(10):
        log.append(timestamp=i, total_deposits=i)

    assert [s.timestamp for s in log] == [7, 8, 9]
    assert [s.timestamp for s in reversed(log)] == [9, 8, 7]
    assert log[-1].total_deposits == 9


def test_equal_timestamps_allowed_unless_strict():
    log = SnapshotLog()
    log.append(timestamp=10, total_deposits=1)
    log.append(timestamp=10, total_deposits=2)

    with pytest.raises(SnapshotOrderError):
        log.append(timestamp=10, total_deposits=3, strict=True)
    assert len(log) == 2


def test_earlier_timestamp_is_rejected():
    log = SnapshotLog()
    log.append(timestamp=10, total_deposits=1)

    with pytest.raises(SnapshotOrderError):
        log.append(timestamp=9, total_deposits=1)
    assert len(log) == 1


def test_empty_log():
    log = SnapshotLog()
    assert len(log) == 0
    assert log.latest() is None
    assert list(reversed(log)) == []
    with pytest.raises(IndexError):
        log[0]
