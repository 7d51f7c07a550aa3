"""Ledger entities: withdrawal requests, profit records and deposit snapshots."""

from pydantic import BaseModel, ConfigDict, Field


class WithdrawalRequest(BaseModel):
    """
    A time-locked withdrawal request owned by one participant.

    ``processed`` moves from False to True exactly once, when the request is
    released.
    """
    model_config = ConfigDict(populate_by_name=True)

    amount: int = Field(gt=0, description="Requested amount")
    unlock_time: int = Field(alias="unlockTime", description="Earliest release time (seconds)")
    processed: bool = Field(default=False, description="Whether the request was released")

    def is_unlocked(self, now: int) -> bool:
        """Check whether the freeze period has elapsed at ``now``."""
        return now >= self.unlock_time


class ProfitRecord(BaseModel):
    """A reported profit (positive) or loss (negative)."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    timestamp: int = Field(description="Distribution time (seconds)")
    profit: int = Field(description="Signed profit")


class DepositSnapshot(BaseModel):
    """Total deposits at a point in time."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    timestamp: int = Field(description="Snapshot time (seconds)")
    total_deposits: int = Field(alias="totalDeposits", ge=0, description="Total deposits")
