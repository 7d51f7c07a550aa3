"""Request and response models for the pool API."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .ledger import WithdrawalRequest


class DepositBody(BaseModel):
    participant: str
    amount: int


class DistributeProfitBody(BaseModel):
    signedProfit: int = Field(description="Reported profit, negative for a loss")


class RequestWithdrawalBody(BaseModel):
    participant: str
    amount: int


class WithdrawShareBody(BaseModel):
    participant: str
    index: int = Field(ge=0)


class ParameterUpdateBody(BaseModel):
    value: int


class RoleUpdateBody(BaseModel):
    holder: str


class PoolParameters(BaseModel):
    """Tunables currently applied by the engine."""
    model_config = ConfigDict(populate_by_name=True)

    minDeposit: int
    maxDeposit: int
    withdrawalCooldown: int
    withdrawalFreezePeriod: int
    commissionRate: int
    owner: str
    creator: str
    investor: str
    pauser: str
    paused: bool


class AccountSummary(BaseModel):
    """
    Balance and withdrawal state of a single participant.
    """
    model_config = ConfigDict(populate_by_name=True)

    participant: str
    balance: int
    isMember: bool = Field(description="Whether the participant currently holds a positive balance")
    lastWithdrawalTime: Optional[int] = Field(default=None, description="Last completed withdrawal")
    withdrawalRequests: list[WithdrawalRequest] = Field(default_factory=list)


class PoolSummary(BaseModel):
    """
    Aggregate state of the pool.

    ``roundingDrift`` is total deposits minus the sum of balances; it is
    non-zero after profit or loss events whose pro-rata shares truncated.
    """
    model_config = ConfigDict(populate_by_name=True)

    totalDeposits: int
    participantCount: int
    custodyBalance: int
    lastProfitDistributionTime: Optional[int] = None
    annualReturnRate: int
    roundingDrift: int
    paused: bool


class ReturnReport(BaseModel):
    """Trailing-year return figures."""
    model_config = ConfigDict(populate_by_name=True)

    asOf: int = Field(description="Evaluation time (seconds)")
    windowStart: int
    averageDeposits: int
    windowedProfit: int
    annualReturnRate: int = Field(description="Percentage, truncated toward zero")
    snapshotCount: int
    profitRecordCount: int


class WithdrawalCount(BaseModel):
    participant: str
    days: int
    count: int
