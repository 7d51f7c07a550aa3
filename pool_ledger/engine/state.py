"""The single mutable state object owned by a pool engine."""

from dataclasses import dataclass, field
from typing import Optional

from .accounts import AccountLedger
from .profit_history import ProfitHistory
from .snapshots import SnapshotLog
from .withdrawals import WithdrawalRequestQueue


@dataclass
class PoolParametersState:
    """Tunables consumed by the engine."""
    min_deposit: int
    max_deposit: int
    withdrawal_cooldown: int
    withdrawal_freeze_period: int
    commission_rate: int


@dataclass
class LedgerState:
    """Everything an engine mutates, passed by reference to each component."""
    owner: str
    creator: str
    parameters: PoolParametersState
    accounts: AccountLedger = field(default_factory=AccountLedger)
    snapshots: SnapshotLog = field(default_factory=SnapshotLog)
    profit_history: ProfitHistory = field(default_factory=ProfitHistory)
    withdrawals: WithdrawalRequestQueue = field(default_factory=WithdrawalRequestQueue)
    last_profit_distribution_time: Optional[int] = None
    paused: bool = False

    @property
    def total_deposits(self) -> int:
        return self.accounts.total_deposits

    @property
    def rounding_drift(self) -> int:
        """Total deposits minus the sum of balances."""
        return self.accounts.total_deposits - self.accounts.sum_of_balances()
