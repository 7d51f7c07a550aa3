"""Report service for return-rate figures."""

from typing import Optional

from pool_ledger.engine import PoolEngine
from pool_ledger.models import ReturnReport


class ReportService:
    """Service for trailing-year return reporting."""

    def __init__(self, engine: PoolEngine):
        self.engine = engine

    def get_return_report(self, now: Optional[int] = None) -> ReturnReport:
        """
        Calculate the annualized return with its intermediate figures.

        Formula: annualReturnRate = windowedProfit * 100 / averageDeposits
        where averageDeposits is the time-weighted snapshot average over the
        trailing 365 days.
        """
        breakdown = self.engine.return_breakdown(now)
        return ReturnReport(
            asOf=breakdown.as_of,
            windowStart=breakdown.window_start,
            averageDeposits=breakdown.average_deposits,
            windowedProfit=breakdown.windowed_profit,
            annualReturnRate=breakdown.annual_return_rate,
            snapshotCount=len(self.engine.state.snapshots),
            profitRecordCount=len(self.engine.state.profit_history),
        )
