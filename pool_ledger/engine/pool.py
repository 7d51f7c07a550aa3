"""Pool engine: the synchronous entry points of the ledger."""

import logging
import time
from typing import Callable, Optional

from pool_ledger.auth import Authorizer, Role, RoleRegistry
from pool_ledger.config import Config
from pool_ledger.custody import Custody, InMemoryCustody
from pool_ledger.errors import (
    InsufficientBalanceError,
    InsufficientCustodyError,
    PausedError,
    UnauthorizedError,
    ValidationError,
)
from pool_ledger.models import (
    DepositEvent,
    DepositSnapshot,
    ParameterChangedEvent,
    PausedEvent,
    PoolParameters,
    ProfitDistributedEvent,
    ProfitRecord,
    RoleChangedEvent,
    WithdrawalEvent,
    WithdrawalRequest,
    WithdrawalRequestedEvent,
)
from .distribution import DistributionEngine
from .events import EventLog
from .guard import ReentrancyGuard
from .profit_history import ProfitHistory
from .returns import ReturnBreakdown, ReturnCalculator
from .state import LedgerState, PoolParametersState

logger = logging.getLogger(__name__)

CREATOR_TAX_HEADROOM = 99


def _system_clock() -> int:
    return int(time.time())


class PoolEngine:
    """
    Participant-balance pool.

    Every mutating method runs under a reentrancy guard, validates fully and
    calls custody before it touches the ledger, so a rejected call leaves
    no trace. Times are integer seconds; ``now`` defaults to the injected
    clock.
    """

    def __init__(
        self,
        config: Config,
        custody: Optional[Custody] = None,
        authorizer: Optional[Authorizer] = None,
        clock: Optional[Callable[[], int]] = None,
    ):
        if config.max_commission_rate > CREATOR_TAX_HEADROOM:
            raise ValidationError("commission ceiling must leave room for the creator tax")
        self.config = config
        self.custody = custody if custody is not None else InMemoryCustody(config.custody_initial_balance)
        self.roles = RoleRegistry(config.owner, config.investor, config.pauser)
        self.authorizer: Authorizer = authorizer if authorizer is not None else self.roles
        self.clock = clock or _system_clock

        parameters = PoolParametersState(
            min_deposit=config.min_deposit,
            max_deposit=config.max_deposit,
            withdrawal_cooldown=config.withdrawal_cooldown,
            withdrawal_freeze_period=config.withdrawal_freeze_period,
            commission_rate=config.commission_rate,
        )
        self._check_parameters(parameters)
        self.state = LedgerState(
            owner=config.owner,
            creator=config.creator,
            parameters=parameters,
            profit_history=ProfitHistory(config.profit_history_limit),
        )
        self.distribution = DistributionEngine(self.state)
        self.returns = ReturnCalculator(self.state.snapshots, self.state.profit_history)
        self.events = EventLog(config.event_log_limit)
        self._guard = ReentrancyGuard()

    # ------------------------------------------------------------------
    # Mutating operations
    # ------------------------------------------------------------------

    def deposit(self, participant: str, amount: int) -> DepositEvent:
        """Pull ``amount`` into custody and credit it to the participant."""
        with self._guard.hold("deposit"):
            self._require_not_paused()
            params = self.state.parameters
            if amount < params.min_deposit or amount > params.max_deposit:
                raise ValidationError(
                    f"deposit {amount} outside [{params.min_deposit}, {params.max_deposit}]"
                )
            self.state.accounts.check_total_increase(amount)

            self.custody.collect(participant, amount)
            self.state.accounts.deposit(participant, amount)

            event = DepositEvent(participant=participant, amount=amount)
            logger.info(f"Deposit of {amount} by {participant}, total {self.state.total_deposits}")
            self.events.emit(event)
            return event

    def distribute_profit(
        self,
        caller: str,
        signed_profit: int,
        now: Optional[int] = None,
    ) -> ProfitDistributedEvent:
        """
        Apply a reported profit (positive) or loss (negative) to every balance.

        Args:
            caller: Must hold the investor role
            signed_profit: Profit, or a negative loss
            now: Distribution time

        Returns:
            The emitted ProfitDistributedEvent
        """
        with self._guard.hold("distribute_profit"):
            self._require_role(caller, Role.INVESTOR)
            self._require_not_paused()
            now = self._now(now)

            result = self.distribution.plan(signed_profit, now)
            if signed_profit > 0:
                available = self.custody.balance()
                if available < signed_profit:
                    raise InsufficientCustodyError(
                        f"custody holds {available}, profit {signed_profit} is not covered"
                    )
            self.distribution.apply(result)

            event = ProfitDistributedEvent(
                signedProfit=signed_profit,
                commission=result.commission,
                creatorTax=result.creator_tax,
                timestamp=now,
            )
            logger.info(
                f"Distributed {signed_profit} (commission {result.commission}, "
                f"creator tax {result.creator_tax}), total {self.state.total_deposits}"
            )
            self.events.emit(event)
            return event

    def request_withdrawal(
        self,
        participant: str,
        amount: int,
        now: Optional[int] = None,
    ) -> WithdrawalRequestedEvent:
        """Queue a withdrawal that unlocks after the freeze period. Nothing is reserved."""
        with self._guard.hold("request_withdrawal"):
            self._require_not_paused()
            now = self._now(now)
            index, request = self.state.withdrawals.enqueue(
                participant,
                amount,
                balance=self.state.accounts.balance_of(participant),
                now=now,
                freeze_period=self.state.parameters.withdrawal_freeze_period,
            )
            event = WithdrawalRequestedEvent(
                participant=participant,
                amount=amount,
                unlockTime=request.unlock_time,
            )
            logger.info(
                f"Withdrawal request #{index} of {amount} by {participant}, unlocks at {request.unlock_time}"
            )
            self.events.emit(event)
            return event

    def withdraw_share(
        self,
        participant: str,
        index: int,
        now: Optional[int] = None,
    ) -> WithdrawalEvent:
        """Release an unlocked withdrawal request and pay it out through custody."""
        with self._guard.hold("withdraw_share"):
            self._require_not_paused()
            now = self._now(now)
            accounts = self.state.accounts
            request = self.state.withdrawals.check_release(
                participant,
                index,
                balance=accounts.balance_of(participant),
                now=now,
                cooldown=self.state.parameters.withdrawal_cooldown,
            )
            if request.amount > accounts.total_deposits:
                raise InsufficientBalanceError(
                    f"total deposits {accounts.total_deposits} cannot cover {request.amount}"
                )
            available = self.custody.balance()
            if available < request.amount:
                raise InsufficientCustodyError(
                    f"custody holds {available}, cannot release {request.amount}"
                )

            self.custody.release(participant, request.amount)
            accounts.withdraw(participant, request.amount)
            self.state.withdrawals.mark_processed(participant, index, now)

            event = WithdrawalEvent(participant=participant, amount=request.amount)
            logger.info(
                f"Withdrawal #{index} of {request.amount} released to {participant}, "
                f"total {accounts.total_deposits}"
            )
            self.events.emit(event)
            return event

    def create_manual_snapshot(self, caller: str, now: Optional[int] = None) -> DepositSnapshot:
        """Record the current total; the timestamp must be newer than the latest snapshot."""
        with self._guard.hold("create_manual_snapshot"):
            self._require_role(caller, Role.OWNER)
            now = self._now(now)
            snapshot = self.state.snapshots.append(now, self.state.total_deposits, strict=True)
            logger.info(f"Manual snapshot at {now}: {snapshot.total_deposits}")
            return snapshot

    # ------------------------------------------------------------------
    # Parameters and roles
    # ------------------------------------------------------------------

    def set_min_deposit(self, caller: str, value: int) -> ParameterChangedEvent:
        return self._set_parameter(caller, "min_deposit", value)

    def set_max_deposit(self, caller: str, value: int) -> ParameterChangedEvent:
        return self._set_parameter(caller, "max_deposit", value)

    def set_withdrawal_cooldown(self, caller: str, value: int) -> ParameterChangedEvent:
        return self._set_parameter(caller, "withdrawal_cooldown", value)

    def set_withdrawal_freeze_period(self, caller: str, value: int) -> ParameterChangedEvent:
        return self._set_parameter(caller, "withdrawal_freeze_period", value)

    def set_commission_rate(self, caller: str, value: int) -> ParameterChangedEvent:
        return self._set_parameter(caller, "commission_rate", value)

    def set_investor(self, caller: str, holder: str) -> RoleChangedEvent:
        return self._set_role(caller, Role.INVESTOR, holder)

    def set_pauser(self, caller: str, holder: str) -> RoleChangedEvent:
        return self._set_role(caller, Role.PAUSER, holder)

    def pause(self, caller: str) -> PausedEvent:
        return self._set_paused(caller, True)

    def unpause(self, caller: str) -> PausedEvent:
        return self._set_paused(caller, False)

    def _set_parameter(self, caller: str, name: str, value: int) -> ParameterChangedEvent:
        with self._guard.hold(f"set_{name}"):
            self._require_role(caller, Role.OWNER)
            params = self.state.parameters
            candidate = PoolParametersState(**{**vars(params), name: value})
            self._check_parameters(candidate)

            old_value = getattr(params, name)
            setattr(params, name, value)
            event = ParameterChangedEvent(name=name, oldValue=old_value, newValue=value)
            logger.info(f"Parameter {name} changed from {old_value} to {value}")
            self.events.emit(event)
            return event

    def _set_role(self, caller: str, role: Role, holder: str) -> RoleChangedEvent:
        with self._guard.hold(f"set_{role.value}"):
            self._require_role(caller, Role.OWNER)
            if self.authorizer is not self.roles:
                raise ValidationError(
                    f"{role.value} is managed by the injected authorizer"
                )
            if not holder:
                raise ValidationError(f"{role.value} holder must not be empty")
            previous = self.roles.assign(role, holder)
            event = RoleChangedEvent(role=role.value, oldHolder=previous, newHolder=holder)
            logger.info(f"Role {role.value} moved from {previous} to {holder}")
            self.events.emit(event)
            return event

    def _set_paused(self, caller: str, paused: bool) -> PausedEvent:
        with self._guard.hold("pause" if paused else "unpause"):
            self._require_role(caller, Role.PAUSER)
            if self.state.paused == paused:
                raise ValidationError("pool is already " + ("paused" if paused else "running"))
            self.state.paused = paused
            event = PausedEvent(paused=paused, caller=caller)
            logger.warning(f"Pool {'paused' if paused else 'unpaused'} by {caller}")
            self.events.emit(event)
            return event

    def _check_parameters(self, params: PoolParametersState) -> None:
        config = self.config
        if params.min_deposit <= 0:
            raise ValidationError("min_deposit must be positive")
        if params.max_deposit < params.min_deposit:
            raise ValidationError("max_deposit must not be below min_deposit")
        if params.max_deposit > config.max_deposit_ceiling:
            raise ValidationError(f"max_deposit exceeds ceiling {config.max_deposit_ceiling}")
        if not 0 <= params.withdrawal_cooldown <= config.max_withdrawal_cooldown:
            raise ValidationError(
                f"withdrawal_cooldown must be within [0, {config.max_withdrawal_cooldown}]"
            )
        if not 0 <= params.withdrawal_freeze_period <= config.max_freeze_period:
            raise ValidationError(
                f"withdrawal_freeze_period must be within [0, {config.max_freeze_period}]"
            )
        if not 0 <= params.commission_rate <= config.max_commission_rate:
            raise ValidationError(
                f"commission_rate must be within [0, {config.max_commission_rate}]"
            )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def owner(self) -> str:
        return self.state.owner

    @property
    def creator(self) -> str:
        return self.state.creator

    @property
    def paused(self) -> bool:
        return self.state.paused

    def balance_of(self, participant: str) -> int:
        return self.state.accounts.balance_of(participant)

    def total_deposits(self) -> int:
        return self.state.total_deposits

    def participants(self) -> list[str]:
        return self.state.accounts.members()

    def get_withdrawal_request(self, participant: str, index: int) -> WithdrawalRequest:
        return self.state.withdrawals.get(participant, index)

    def withdrawal_requests(self, participant: str) -> list[WithdrawalRequest]:
        return self.state.withdrawals.requests(participant)

    def withdrawal_request_count(self, participant: str) -> int:
        return self.state.withdrawals.count(participant)

    def count_unlocking_within(self, participant: str, days: int, now: Optional[int] = None) -> int:
        return self.state.withdrawals.count_unlocking_within(participant, days, self._now(now))

    def last_withdrawal_time(self, participant: str) -> Optional[int]:
        return self.state.withdrawals.last_withdrawal_time(participant)

    def annual_return_rate(self, now: Optional[int] = None) -> int:
        return self.returns.annual_return_rate(self._now(now), self.state.total_deposits)

    def return_breakdown(self, now: Optional[int] = None) -> ReturnBreakdown:
        return self.returns.breakdown(self._now(now), self.state.total_deposits)

    def last_profit_distribution_time(self) -> Optional[int]:
        return self.state.last_profit_distribution_time

    def custody_balance(self) -> int:
        return self.custody.balance()

    def snapshots(self) -> list[DepositSnapshot]:
        return self.state.snapshots.to_list()

    def profit_history(self) -> list[ProfitRecord]:
        return self.state.profit_history.to_list()

    def rounding_drift(self) -> int:
        return self.state.rounding_drift

    def parameters(self) -> PoolParameters:
        params = self.state.parameters
        return PoolParameters(
            minDeposit=params.min_deposit,
            maxDeposit=params.max_deposit,
            withdrawalCooldown=params.withdrawal_cooldown,
            withdrawalFreezePeriod=params.withdrawal_freeze_period,
            commissionRate=params.commission_rate,
            owner=self.state.owner,
            creator=self.state.creator,
            investor=self.roles.holder(Role.INVESTOR),
            pauser=self.roles.holder(Role.PAUSER),
            paused=self.state.paused,
        )

    # ------------------------------------------------------------------

    def _now(self, now: Optional[int]) -> int:
        return self.clock() if now is None else now

    def _require_role(self, caller: str, role: Role) -> None:
        if not self.authorizer(caller, role):
            logger.warning(f"{caller} rejected: {role.value} role required")
            raise UnauthorizedError(f"{caller} does not hold the {role.value} role")

    def _require_not_paused(self) -> None:
        if self.state.paused:
            raise PausedError("pool is paused")

    def close(self) -> None:
        self.custody.close()
