"""Fixed-capacity history of total-deposit snapshots."""

from typing import Iterator, Optional

from pool_ledger.errors import SnapshotOrderError
from pool_ledger.models import DepositSnapshot

SNAPSHOT_CAPACITY = 100


class SnapshotLog:
    """
    Ring buffer of DepositSnapshot, oldest evicted first.

    Appends are O(1): ``_head`` points at the oldest entry and the slot
    after the newest is overwritten once the ring is full. Iteration always
    yields entries oldest -> newest.
    """

    def __init__(self, capacity: int = SNAPSHOT_CAPACITY):
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._slots: list[Optional[DepositSnapshot]] = [None] * capacity
        self._head = 0
        self._size = 0

    def __len__(self) -> int:
        return self._size

    def __getitem__(self, index: int) -> DepositSnapshot:
        if index < 0:
            index += self._size
        if not 0 <= index < self._size:
            raise IndexError("snapshot index out of range")
        return self._slots[(self._head + index) % self.capacity]

    def __iter__(self) -> Iterator[DepositSnapshot]:
        for i in range(self._size):
            yield self[i]

    def __reversed__(self) -> Iterator[DepositSnapshot]:
        for i in range(self._size - 1, -1, -1):
            yield self[i]

    def latest(self) -> Optional[DepositSnapshot]:
        return self[-1] if self._size else None

    def check_append(self, timestamp: int, strict: bool = False) -> None:
        """Reject a timestamp that would break ordering (strictly increasing when ``strict``)."""
        latest = self.latest()
        if latest is None:
            return
        if timestamp < latest.timestamp or (strict and timestamp == latest.timestamp):
            raise SnapshotOrderError(
                f"snapshot at {timestamp} does not follow latest snapshot at {latest.timestamp}"
            )

    def append(self, timestamp: int, total_deposits: int, strict: bool = False) -> DepositSnapshot:
        """Record a snapshot, evicting the oldest when the ring is full."""
        self.check_append(timestamp, strict=strict)
        snapshot = DepositSnapshot(timestamp=timestamp, total_deposits=total_deposits)
        tail = (self._head + self._size) % self.capacity
        self._slots[tail] = snapshot
        if self._size < self.capacity:
            self._size += 1
        else:
            self._head = (self._head + 1) % self.capacity
        return snapshot

    def to_list(self) -> list[DepositSnapshot]:
        return list(self)
