"""Pool service for assembling account and pool views."""

from typing import Optional

from pool_ledger.engine import PoolEngine
from pool_ledger.models import AccountSummary, PoolSummary, WithdrawalCount


class PoolService:
    """Service for reading pool state into API response models."""

    def __init__(self, engine: PoolEngine):
        self.engine = engine

    def get_account(self, participant: str) -> AccountSummary:
        """
        Get the balance and withdrawal history of a participant.

        Args:
            participant: Participant identifier

        Returns:
            AccountSummary with balance, membership and every withdrawal request
        """
        engine = self.engine
        return AccountSummary(
            participant=participant,
            balance=engine.balance_of(participant),
            isMember=engine.state.accounts.is_member(participant),
            lastWithdrawalTime=engine.last_withdrawal_time(participant),
            withdrawalRequests=engine.withdrawal_requests(participant),
        )

    def get_summary(self, now: Optional[int] = None) -> PoolSummary:
        """
        Get aggregate pool figures.

        Args:
            now: Evaluation time for the return rate, defaults to the engine clock

        Returns:
            PoolSummary with totals, custody balance, return rate and drift
        """
        engine = self.engine
        return PoolSummary(
            totalDeposits=engine.total_deposits(),
            participantCount=len(engine.participants()),
            custodyBalance=engine.custody_balance(),
            lastProfitDistributionTime=engine.last_profit_distribution_time(),
            annualReturnRate=engine.annual_return_rate(now),
            roundingDrift=engine.rounding_drift(),
            paused=engine.paused,
        )

    def count_unlocking(self, participant: str, days: int, now: Optional[int] = None) -> WithdrawalCount:
        return WithdrawalCount(
            participant=participant,
            days=days,
            count=self.engine.count_unlocking_within(participant, days, now),
        )
