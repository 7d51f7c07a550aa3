"""Notifications emitted by the engine for external observers."""

from enum import Enum
from typing import Union

from pydantic import BaseModel, ConfigDict, Field


class EventType(str, Enum):
    """Kinds of notifications."""
    DEPOSIT = "Deposit"
    PROFIT_DISTRIBUTED = "ProfitDistributed"
    WITHDRAWAL_REQUESTED = "WithdrawalRequested"
    WITHDRAWAL = "Withdrawal"
    PARAMETER_CHANGED = "ParameterChanged"
    ROLE_CHANGED = "RoleChanged"
    PAUSED = "Paused"


class DepositEvent(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    type: EventType = EventType.DEPOSIT
    participant: str
    amount: int


class ProfitDistributedEvent(BaseModel):
    """Profit or loss applied to the ledger. Commission and tax are 0 for a loss."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    type: EventType = EventType.PROFIT_DISTRIBUTED
    signedProfit: int = Field(description="Reported profit, negative for a loss")
    commission: int
    creatorTax: int
    timestamp: int


class WithdrawalRequestedEvent(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    type: EventType = EventType.WITHDRAWAL_REQUESTED
    participant: str
    amount: int
    unlockTime: int


class WithdrawalEvent(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    type: EventType = EventType.WITHDRAWAL
    participant: str
    amount: int


class ParameterChangedEvent(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    type: EventType = EventType.PARAMETER_CHANGED
    name: str
    oldValue: int
    newValue: int


class RoleChangedEvent(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    type: EventType = EventType.ROLE_CHANGED
    role: str
    oldHolder: str
    newHolder: str


class PausedEvent(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    type: EventType = EventType.PAUSED
    paused: bool
    caller: str


Event = Union[
    DepositEvent,
    ProfitDistributedEvent,
    WithdrawalRequestedEvent,
    WithdrawalEvent,
    ParameterChangedEvent,
    RoleChangedEvent,
    PausedEvent,
]
