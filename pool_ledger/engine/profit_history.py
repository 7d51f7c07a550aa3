"""Ordered history of reported profit and loss."""

from collections import deque
from typing import Iterator, Optional

from pool_ledger.models import ProfitRecord


class ProfitHistory:
    """
    Append-only list of ProfitRecord in timestamp order.

    With ``limit`` set, the history keeps only the newest ``limit`` records;
    with ``limit=None`` it grows without bound.
    """

    def __init__(self, limit: Optional[int] = None):
        if limit is not None and limit <= 0:
            raise ValueError("limit must be positive or None")
        self.limit = limit
        self._records: deque[ProfitRecord] = deque(maxlen=limit)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[ProfitRecord]:
        return iter(self._records)

    def __reversed__(self) -> Iterator[ProfitRecord]:
        return reversed(self._records)

    def append(self, timestamp: int, profit: int) -> ProfitRecord:
        record = ProfitRecord(timestamp=timestamp, profit=profit)
        self._records.append(record)
        return record

    def sum_since(self, start: int, end: Optional[int] = None) -> int:
        """Sum profits with ``start <= timestamp`` (and ``<= end`` when given)."""
        total = 0
        for record in reversed(self._records):
            if record.timestamp < start:
                break
            if end is None or record.timestamp <= end:
                total += record.profit
        return total

    def to_list(self) -> list[ProfitRecord]:
        return list(self._records)
