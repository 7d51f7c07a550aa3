"""In-process custody used for local runs and tests."""

import logging
from dataclasses import dataclass

from pool_ledger.errors import InsufficientCustodyError, ValidationError
from .base import Custody

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Transfer:
    """A completed custody movement."""
    direction: str  # "in" or "out"
    participant: str
    amount: int


class InMemoryCustody(Custody):
    """Custody that keeps the asset balance as an integer in memory."""

    def __init__(self, initial_balance: int = 0):
        if initial_balance < 0:
            raise ValidationError("initial custody balance must be non-negative")
        self._balance = initial_balance
        self.transfers: list[Transfer] = []

    def balance(self) -> int:
        return self._balance

    def fund(self, amount: int) -> None:
        """Add assets that arrive outside of deposits, e.g. realized trading profit."""
        if amount <= 0:
            raise ValidationError("funding amount must be positive")
        self._balance += amount
        logger.debug(f"Custody funded with {amount}, balance {self._balance}")

    def collect(self, participant: str, amount: int) -> None:
        self._balance += amount
        self.transfers.append(Transfer("in", participant, amount))

    def release(self, participant: str, amount: int) -> None:
        if amount > self._balance:
            raise InsufficientCustodyError(
                f"custody holds {self._balance}, cannot release {amount}"
            )
        self._balance -= amount
        self.transfers.append(Transfer("out", participant, amount))
