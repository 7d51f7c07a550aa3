"""Per-participant balances and the membership index."""

from typing import Iterator

from pool_ledger.errors import InsufficientBalanceError, TotalOverflowError, ValidationError

MAX_UINT256 = 2**256 - 1


class AccountLedger:
    """
    Balance map plus the set of participants holding a positive balance.

    The balance map is the source of truth. Membership is kept as a dense
    list with an id -> position map so that both iteration and removal are
    O(1) per participant; removal swaps the last member into the freed slot.
    Balances that reach zero stay in the map, since withdrawal history may
    still refer to the participant.
    """

    def __init__(self, max_total: int = MAX_UINT256):
        self.max_total = max_total
        self.total_deposits = 0
        self._balances: dict[str, int] = {}
        self._members: list[str] = []
        self._positions: dict[str, int] = {}

    def balance_of(self, participant: str) -> int:
        return self._balances.get(participant, 0)

    def is_member(self, participant: str) -> bool:
        return participant in self._positions

    def members(self) -> list[str]:
        """Copy of the current membership, safe to iterate while mutating balances."""
        return list(self._members)

    def __iter__(self) -> Iterator[str]:
        return iter(self.members())

    def __len__(self) -> int:
        return len(self._members)

    def known_participants(self) -> list[str]:
        """Every participant that ever held a balance, including emptied ones."""
        return list(self._balances)

    def sum_of_balances(self) -> int:
        return sum(self._balances.values())

    def check_total_increase(self, amount: int) -> None:
        if self.total_deposits + amount > self.max_total:
            raise TotalOverflowError(
                f"total deposits {self.total_deposits} + {amount} exceeds {self.max_total}"
            )

    def credit(self, participant: str, amount: int) -> None:
        """Increase a balance without touching the total."""
        if amount < 0:
            raise ValidationError("credit amount must be non-negative")
        if amount == 0:
            return
        self._balances[participant] = self._balances.get(participant, 0) + amount
        self._add_member(participant)

    def debit(self, participant: str, amount: int) -> None:
        """Decrease a balance without touching the total. Never clamps."""
        if amount < 0:
            raise ValidationError("debit amount must be non-negative")
        balance = self.balance_of(participant)
        if amount > balance:
            raise InsufficientBalanceError(
                f"{participant} holds {balance}, cannot debit {amount}"
            )
        if amount == 0:
            return
        self._balances[participant] = balance - amount

    def deposit(self, participant: str, amount: int) -> None:
        """Credit a deposit to the participant and the total."""
        if amount <= 0:
            raise ValidationError("deposit amount must be positive")
        self.check_total_increase(amount)
        self.credit(participant, amount)
        self.total_deposits += amount

    def withdraw(self, participant: str, amount: int) -> None:
        """Debit a withdrawal from the participant and the total."""
        if amount > self.total_deposits:
            raise InsufficientBalanceError(
                f"total deposits {self.total_deposits} cannot cover {amount}"
            )
        self.debit(participant, amount)
        self.total_deposits -= amount
        self.remove_if_empty(participant)

    def remove_if_empty(self, participant: str) -> bool:
        """Drop the participant from membership when its balance is exactly zero."""
        if self.balance_of(participant) != 0 or participant not in self._positions:
            return False
        position = self._positions.pop(participant)
        last = self._members.pop()
        if last != participant:
            self._members[position] = last
            self._positions[last] = position
        return True

    def _add_member(self, participant: str) -> None:
        if participant in self._positions or self.balance_of(participant) == 0:
            return
        self._positions[participant] = len(self._members)
        self._members.append(participant)
