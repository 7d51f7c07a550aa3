"""Trailing-year annualized return derived from ledger history."""

from dataclasses import dataclass

from pool_ledger.config import DAY
from .profit_history import ProfitHistory
from .snapshots import SnapshotLog

YEAR = 365 * DAY


def _div_toward_zero(numerator: int, denominator: int) -> int:
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator >= 0) == (denominator > 0) else -quotient


@dataclass
class ReturnBreakdown:
    """Intermediate figures of a return-rate evaluation."""
    as_of: int
    window_start: int
    average_deposits: int = 0
    windowed_profit: int = 0
    annual_return_rate: int = 0


class ReturnCalculator:
    """
    Computes ``windowed profit * 100 / time-weighted average deposits`` over
    the trailing 365 days.

    The snapshot walk goes newest -> oldest. The newest snapshot is weighted
    by the time until ``now`` and each older one by the gap to its newer
    neighbour. The first snapshot at or before the window start contributes
    only the part of its segment inside the window, and ends the walk.
    Iterating a reversed sequence means the walk cannot step past the oldest
    entry.
    """

    def __init__(self, snapshots: SnapshotLog, profit_history: ProfitHistory, window: int = YEAR):
        self.snapshots = snapshots
        self.profit_history = profit_history
        self.window = window

    def average_deposits(self, now: int) -> int:
        window_start = now - self.window
        weighted = 0
        elapsed = 0
        segment_end = now
        for snapshot in reversed(self.snapshots):
            if snapshot.timestamp > now:
                continue
            segment_start = max(snapshot.timestamp, window_start)
            if segment_end > segment_start:
                weighted += snapshot.total_deposits * (segment_end - segment_start)
                elapsed += segment_end - segment_start
            if snapshot.timestamp <= window_start:
                break
            segment_end = snapshot.timestamp
        if elapsed == 0:
            return 0
        return weighted // elapsed

    def breakdown(self, now: int, total_deposits: int) -> ReturnBreakdown:
        result = ReturnBreakdown(as_of=now, window_start=now - self.window)
        if len(self.snapshots) == 0 or total_deposits == 0:
            return result
        result.average_deposits = self.average_deposits(now)
        result.windowed_profit = self.profit_history.sum_since(result.window_start, now)
        if result.average_deposits == 0:
            return result
        result.annual_return_rate = _div_toward_zero(
            result.windowed_profit * 100, result.average_deposits
        )
        return result

    def annual_return_rate(self, now: int, total_deposits: int) -> int:
        """Return the trailing-year return as a whole percentage, or 0 without history."""
        return self.breakdown(now, total_deposits).annual_return_rate
