"""Time-locked, two-phase withdrawal requests."""

from typing import Optional

from pool_ledger.config import DAY
from pool_ledger.errors import (
    AlreadyProcessedError,
    CooldownActiveError,
    FreezePeriodActiveError,
    InsufficientBalanceError,
    InvalidWithdrawalIndexError,
    ValidationError,
)
from pool_ledger.models import WithdrawalRequest


class WithdrawalRequestQueue:
    """
    Per-participant ordered lists of withdrawal requests.

    A request is created unlocked at ``now + freeze_period`` and moves to
    processed once, when it is released. Requesting does not reserve the
    balance: by release time the balance may have been spent by another
    request or reduced by a loss, so release re-checks it.
    """

    def __init__(self):
        self._requests: dict[str, list[WithdrawalRequest]] = {}
        self._last_withdrawal: dict[str, int] = {}

    def count(self, participant: str) -> int:
        return len(self._requests.get(participant, []))

    def requests(self, participant: str) -> list[WithdrawalRequest]:
        return [r.model_copy() for r in self._requests.get(participant, [])]

    def get(self, participant: str, index: int) -> WithdrawalRequest:
        """Get a copy of one request."""
        return self._lookup(participant, index).model_copy()

    def last_withdrawal_time(self, participant: str) -> Optional[int]:
        return self._last_withdrawal.get(participant)

    def check_request(self, amount: int, balance: int) -> None:
        if amount <= 0:
            raise ValidationError("withdrawal amount must be positive")
        if amount > balance:
            raise InsufficientBalanceError(
                f"requested {amount} exceeds balance {balance}"
            )

    def enqueue(
        self,
        participant: str,
        amount: int,
        balance: int,
        now: int,
        freeze_period: int,
    ) -> tuple[int, WithdrawalRequest]:
        """
        Append a new request for the participant.

        Returns:
            Tuple of (index, request copy)
        """
        self.check_request(amount, balance)
        request = WithdrawalRequest(amount=amount, unlock_time=now + freeze_period)
        queue = self._requests.setdefault(participant, [])
        queue.append(request)
        return len(queue) - 1, request.model_copy()

    def check_release(
        self,
        participant: str,
        index: int,
        balance: int,
        now: int,
        cooldown: int,
    ) -> WithdrawalRequest:
        """
        Validate that a request can be released at ``now``.

        The freeze check accepts ``now == unlock_time``. The cooldown only
        applies once the participant has completed a withdrawal.
        """
        request = self._lookup(participant, index)
        if request.processed:
            raise AlreadyProcessedError(f"request {index} of {participant} was already processed")
        if not request.is_unlocked(now):
            raise FreezePeriodActiveError(
                f"request {index} of {participant} unlocks at {request.unlock_time}, now {now}"
            )
        last = self._last_withdrawal.get(participant)
        if last is not None and now < last + cooldown:
            raise CooldownActiveError(
                f"{participant} may withdraw again at {last + cooldown}, now {now}"
            )
        if request.amount > balance:
            raise InsufficientBalanceError(
                f"request {index} of {participant} for {request.amount} exceeds balance {balance}"
            )
        return request.model_copy()

    def mark_processed(self, participant: str, index: int, now: int) -> None:
        request = self._lookup(participant, index)
        if request.processed:
            raise AlreadyProcessedError(f"request {index} of {participant} was already processed")
        request.processed = True
        self._last_withdrawal[participant] = now

    def count_unlocking_within(self, participant: str, days: int, now: int) -> int:
        """Count requests whose unlock time falls in ``[now - days, now]``."""
        if days < 0:
            raise ValidationError("days must be non-negative")
        start = now - days * DAY
        return sum(
            1 for r in self._requests.get(participant, [])
            if start <= r.unlock_time <= now
        )

    def _lookup(self, participant: str, index: int) -> WithdrawalRequest:
        queue = self._requests.get(participant, [])
        if not 0 <= index < len(queue):
            raise InvalidWithdrawalIndexError(
                f"{participant} has no withdrawal request at index {index}"
            )
        return queue[index]
