from .ledger import WithdrawalRequest, ProfitRecord, DepositSnapshot
from .events import (
    EventType,
    Event,
    DepositEvent,
    ProfitDistributedEvent,
    WithdrawalRequestedEvent,
    WithdrawalEvent,
    ParameterChangedEvent,
    RoleChangedEvent,
    PausedEvent,
)
from .pool import (
    DepositBody,
    DistributeProfitBody,
    RequestWithdrawalBody,
    WithdrawShareBody,
    ParameterUpdateBody,
    RoleUpdateBody,
    PoolParameters,
    AccountSummary,
    PoolSummary,
    ReturnReport,
    WithdrawalCount,
)

__all__ = [
    "WithdrawalRequest",
    "ProfitRecord",
    "DepositSnapshot",
    "EventType",
    "Event",
    "DepositEvent",
    "ProfitDistributedEvent",
    "WithdrawalRequestedEvent",
    "WithdrawalEvent",
    "ParameterChangedEvent",
    "RoleChangedEvent",
    "PausedEvent",
    "DepositBody",
    "DistributeProfitBody",
    "RequestWithdrawalBody",
    "WithdrawShareBody",
    "ParameterUpdateBody",
    "RoleUpdateBody",
    "PoolParameters",
    "AccountSummary",
    "PoolSummary",
    "ReturnReport",
    "WithdrawalCount",
]
