from .accounts import AccountLedger, MAX_UINT256
from .snapshots import SnapshotLog, SNAPSHOT_CAPACITY
from .profit_history import ProfitHistory
from .withdrawals import WithdrawalRequestQueue
from .state import LedgerState, PoolParametersState
from .distribution import DistributionEngine, DistributionResult
from .returns import ReturnCalculator, ReturnBreakdown
from .guard import ReentrancyGuard
from .events import EventLog
from .pool import PoolEngine

__all__ = [
    "AccountLedger",
    "MAX_UINT256",
    "SnapshotLog",
    "SNAPSHOT_CAPACITY",
    "ProfitHistory",
    "WithdrawalRequestQueue",
    "LedgerState",
    "PoolParametersState",
    "DistributionEngine",
    "DistributionResult",
    "ReturnCalculator",
    "ReturnBreakdown",
    "ReentrancyGuard",
    "EventLog",
    "PoolEngine",
]
