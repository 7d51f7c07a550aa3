"""Pro-rata distribution of reported profit and loss."""

import logging
from dataclasses import dataclass, field

from pool_ledger.errors import InsufficientBalanceError, ValidationError
from .state import LedgerState

logger = logging.getLogger(__name__)

CREATOR_TAX_RATE = 1


@dataclass
class DistributionResult:
    """
    Outcome of one profit or loss event.

    For a profit, ``commission + creator_tax + profit_to_distribute`` equals
    the profit; ``distributed`` is what the pro-rata pass actually credited,
    which can be less because each share truncates. For a loss,
    ``distributed`` is what the pro-rata pass removed and
    ``owner_shortfall`` what was then taken from the owner.
    """
    signed_profit: int
    timestamp: int
    commission: int = 0
    creator_tax: int = 0
    profit_to_distribute: int = 0
    distributed: int = 0
    owner_shortfall: int = 0
    changes: dict[str, int] = field(default_factory=dict)

    @property
    def undistributed(self) -> int:
        """Profit remainder lost to truncation, or loss not removed from any balance."""
        if self.signed_profit > 0:
            return self.profit_to_distribute - self.distributed
        return -self.signed_profit - self.distributed - self.owner_shortfall


class DistributionEngine:
    """
    Applies profit and loss to a LedgerState.

    ``plan`` computes every balance change without touching the state, so a
    rejected event leaves nothing behind; ``apply`` commits a plan and
    appends the profit record and the deposit snapshot.
    """

    def __init__(self, state: LedgerState):
        self.state = state

    def plan(self, signed_profit: int, now: int) -> DistributionResult:
        accounts = self.state.accounts
        if signed_profit == 0:
            raise ValidationError("profit must be non-zero")
        if accounts.total_deposits == 0:
            raise ValidationError("cannot distribute with zero total deposits")
        self.state.snapshots.check_append(now)

        if signed_profit > 0:
            accounts.check_total_increase(signed_profit)
            return self._plan_profit(signed_profit, now)
        return self._plan_loss(-signed_profit, now)

    def _plan_profit(self, profit: int, now: int) -> DistributionResult:
        accounts = self.state.accounts
        owner, creator = self.state.owner, self.state.creator
        commission = profit * self.state.parameters.commission_rate // 100
        creator_tax = profit * CREATOR_TAX_RATE // 100
        result = DistributionResult(
            signed_profit=profit,
            timestamp=now,
            commission=commission,
            creator_tax=creator_tax,
            profit_to_distribute=profit - commission - creator_tax,
        )

        fee_accounts = {owner, creator}
        base = accounts.total_deposits - sum(accounts.balance_of(a) for a in fee_accounts)
        if base > 0 and result.profit_to_distribute > 0:
            for participant in accounts.members():
                if participant in fee_accounts:
                    continue
                share = result.profit_to_distribute * accounts.balance_of(participant) // base
                if share:
                    result.changes[participant] = result.changes.get(participant, 0) + share
                    result.distributed += share

        for account, amount in ((owner, commission), (creator, creator_tax)):
            if amount:
                result.changes[account] = result.changes.get(account, 0) + amount
        return result

    def _plan_loss(self, loss: int, now: int) -> DistributionResult:
        accounts = self.state.accounts
        total_before = accounts.total_deposits
        if loss > total_before:
            raise InsufficientBalanceError(
                f"loss {loss} exceeds total deposits {total_before}"
            )
        result = DistributionResult(signed_profit=-loss, timestamp=now)

        for participant in accounts.members():
            user_loss = accounts.balance_of(participant) * loss // total_before
            if user_loss:
                result.changes[participant] = -user_loss
                result.distributed += user_loss

        shortfall = loss - result.distributed
        if shortfall > 0:
            owner = self.state.owner
            remaining = accounts.balance_of(owner) + result.changes.get(owner, 0)
            taken = min(shortfall, remaining)
            if taken:
                result.changes[owner] = result.changes.get(owner, 0) - taken
                result.owner_shortfall = taken
        return result

    def apply(self, result: DistributionResult) -> None:
        accounts = self.state.accounts
        for participant, change in result.changes.items():
            if change > 0:
                accounts.credit(participant, change)
            else:
                accounts.debit(participant, -change)
                accounts.remove_if_empty(participant)
        accounts.total_deposits += result.signed_profit

        self.state.last_profit_distribution_time = result.timestamp
        self.state.profit_history.append(result.timestamp, result.signed_profit)
        self.state.snapshots.append(result.timestamp, accounts.total_deposits)

        if result.undistributed:
            logger.info(
                f"Distribution of {result.signed_profit} left {result.undistributed} "
                f"unassigned to balances (rounding drift now {self.state.rounding_drift})"
            )

    def distribute(self, signed_profit: int, now: int) -> DistributionResult:
        """Plan and apply a profit or loss event."""
        result = self.plan(signed_profit, now)
        self.apply(result)
        return result
