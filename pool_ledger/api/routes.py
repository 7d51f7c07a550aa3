"""API routes for the pool ledger service."""

from enum import Enum
from typing import Optional

from fastapi import APIRouter, Depends, Header, Path, Query

from pool_ledger.engine import PoolEngine
from pool_ledger.models import (
    AccountSummary,
    DepositBody,
    DepositEvent,
    DepositSnapshot,
    DistributeProfitBody,
    ParameterChangedEvent,
    ParameterUpdateBody,
    PausedEvent,
    PoolParameters,
    PoolSummary,
    ProfitDistributedEvent,
    ProfitRecord,
    RequestWithdrawalBody,
    ReturnReport,
    RoleChangedEvent,
    RoleUpdateBody,
    WithdrawalCount,
    WithdrawalEvent,
    WithdrawalRequest,
    WithdrawalRequestedEvent,
    WithdrawShareBody,
)
from pool_ledger.services import PoolService, ReportService
from .dependencies import call_engine, get_engine

router = APIRouter(prefix="/v1")


class ParameterName(str, Enum):
    """Tunables that can be changed through the API."""
    MIN_DEPOSIT = "minDeposit"
    MAX_DEPOSIT = "maxDeposit"
    WITHDRAWAL_COOLDOWN = "withdrawalCooldown"
    WITHDRAWAL_FREEZE_PERIOD = "withdrawalFreezePeriod"
    COMMISSION_RATE = "commissionRate"


class AssignableRole(str, Enum):
    INVESTOR = "investor"
    PAUSER = "pauser"


def now_query():
    return Query(
        None,
        description="Evaluation time in seconds (defaults to the server clock)",
        example=1760659200,
    )


@router.post("/deposits", response_model=DepositEvent)
async def deposit(
    body: DepositBody,
    engine: PoolEngine = Depends(get_engine),
) -> DepositEvent:
    """
    Deposit into the pool.

    Returns: participant, amount
    """
    return await call_engine(engine.deposit, body.participant, body.amount)


@router.post("/distributions", response_model=ProfitDistributedEvent)
async def distribute_profit(
    body: DistributeProfitBody,
    caller: str = Header(..., alias="X-Caller", description="Caller identity (investor)"),
    now: Optional[int] = now_query(),
    engine: PoolEngine = Depends(get_engine),
) -> ProfitDistributedEvent:
    """
    Distribute a reported profit or loss across all balances.

    Returns: signedProfit, commission, creatorTax, timestamp
    """
    return await call_engine(engine.distribute_profit, caller, body.signedProfit, now=now)


@router.post("/withdrawals", response_model=WithdrawalRequestedEvent)
async def request_withdrawal(
    body: RequestWithdrawalBody,
    now: Optional[int] = now_query(),
    engine: PoolEngine = Depends(get_engine),
) -> WithdrawalRequestedEvent:
    """
    Request a time-locked withdrawal.

    Returns: participant, amount, unlockTime
    """
    return await call_engine(engine.request_withdrawal, body.participant, body.amount, now=now)


@router.post("/withdrawals/release", response_model=WithdrawalEvent)
async def withdraw_share(
    body: WithdrawShareBody,
    now: Optional[int] = now_query(),
    engine: PoolEngine = Depends(get_engine),
) -> WithdrawalEvent:
    """
    Release an unlocked withdrawal request.

    Returns: participant, amount
    """
    return await call_engine(engine.withdraw_share, body.participant, body.index, now=now)


@router.post("/snapshots", response_model=DepositSnapshot)
async def create_manual_snapshot(
    caller: str = Header(..., alias="X-Caller", description="Caller identity (owner)"),
    now: Optional[int] = now_query(),
    engine: PoolEngine = Depends(get_engine),
) -> DepositSnapshot:
    """Record a snapshot of total deposits."""
    return await call_engine(engine.create_manual_snapshot, caller, now=now)


@router.put("/parameters/{name}", response_model=ParameterChangedEvent)
async def set_parameter(
    body: ParameterUpdateBody,
    name: ParameterName = Path(..., description="Parameter to change"),
    caller: str = Header(..., alias="X-Caller", description="Caller identity (owner)"),
    engine: PoolEngine = Depends(get_engine),
) -> ParameterChangedEvent:
    """
    Change a pool parameter.

    Returns: name, oldValue, newValue
    """
    setters = {
        ParameterName.MIN_DEPOSIT: engine.set_min_deposit,
        ParameterName.MAX_DEPOSIT: engine.set_max_deposit,
        ParameterName.WITHDRAWAL_COOLDOWN: engine.set_withdrawal_cooldown,
        ParameterName.WITHDRAWAL_FREEZE_PERIOD: engine.set_withdrawal_freeze_period,
        ParameterName.COMMISSION_RATE: engine.set_commission_rate,
    }
    return await call_engine(setters[name], caller, body.value)


@router.put("/roles/{role}", response_model=RoleChangedEvent)
async def set_role(
    body: RoleUpdateBody,
    role: AssignableRole = Path(..., description="Role to reassign"),
    caller: str = Header(..., alias="X-Caller", description="Caller identity (owner)"),
    engine: PoolEngine = Depends(get_engine),
) -> RoleChangedEvent:
    """
    Reassign the investor or pauser role.

    Returns: role, oldHolder, newHolder
    """
    if role == AssignableRole.INVESTOR:
        return await call_engine(engine.set_investor, caller, body.holder)
    return await call_engine(engine.set_pauser, caller, body.holder)


@router.post("/pause", response_model=PausedEvent)
async def pause(
    caller: str = Header(..., alias="X-Caller", description="Caller identity (pauser)"),
    engine: PoolEngine = Depends(get_engine),
) -> PausedEvent:
    return await call_engine(engine.pause, caller)


@router.post("/unpause", response_model=PausedEvent)
async def unpause(
    caller: str = Header(..., alias="X-Caller", description="Caller identity (pauser)"),
    engine: PoolEngine = Depends(get_engine),
) -> PausedEvent:
    return await call_engine(engine.unpause, caller)


@router.get("/accounts/{participant}", response_model=AccountSummary)
async def get_account(
    participant: str = Path(..., description="Participant identifier", example="alice"),
    engine: PoolEngine = Depends(get_engine),
) -> AccountSummary:
    """
    Get a participant's balance and withdrawal requests.

    Returns: participant, balance, isMember, lastWithdrawalTime, withdrawalRequests
    """
    return await call_engine(PoolService(engine).get_account, participant)


@router.get("/accounts/{participant}/withdrawals/count", response_model=WithdrawalCount)
async def count_unlocking_withdrawals(
    participant: str = Path(..., description="Participant identifier"),
    days: int = Query(..., ge=0, description="Look-back window in days", example=30),
    now: Optional[int] = now_query(),
    engine: PoolEngine = Depends(get_engine),
) -> WithdrawalCount:
    """Count the participant's requests that unlocked within the last ``days`` days."""
    return await call_engine(PoolService(engine).count_unlocking, participant, days, now)


@router.get("/accounts/{participant}/withdrawals/{index}", response_model=WithdrawalRequest)
async def get_withdrawal_request(
    participant: str = Path(..., description="Participant identifier"),
    index: int = Path(..., ge=0, description="Request index"),
    engine: PoolEngine = Depends(get_engine),
) -> WithdrawalRequest:
    """
    Get one withdrawal request.

    Returns: amount, unlockTime, processed
    """
    return await call_engine(engine.get_withdrawal_request, participant, index)


@router.get("/pool", response_model=PoolSummary)
async def get_pool_summary(
    now: Optional[int] = now_query(),
    engine: PoolEngine = Depends(get_engine),
) -> PoolSummary:
    """
    Get aggregate pool state.

    Returns: totalDeposits, participantCount, custodyBalance,
    lastProfitDistributionTime, annualReturnRate, roundingDrift, paused
    """
    return await call_engine(PoolService(engine).get_summary, now)


@router.get("/pool/parameters", response_model=PoolParameters)
async def get_parameters(engine: PoolEngine = Depends(get_engine)) -> PoolParameters:
    return await call_engine(engine.parameters)


@router.get("/pool/return", response_model=ReturnReport)
async def get_return_report(
    now: Optional[int] = now_query(),
    engine: PoolEngine = Depends(get_engine),
) -> ReturnReport:
    """
    Get the trailing-year annualized return.

    Returns: annualReturnRate, averageDeposits, windowedProfit, windowStart
    """
    return await call_engine(ReportService(engine).get_return_report, now)


@router.get("/pool/snapshots", response_model=list[DepositSnapshot])
async def get_snapshots(engine: PoolEngine = Depends(get_engine)) -> list[DepositSnapshot]:
    return await call_engine(engine.snapshots)


@router.get("/pool/profits", response_model=list[ProfitRecord])
async def get_profit_history(engine: PoolEngine = Depends(get_engine)) -> list[ProfitRecord]:
    return await call_engine(engine.profit_history)


@router.get("/pool/participants", response_model=list[str])
async def get_participants(engine: PoolEngine = Depends(get_engine)) -> list[str]:
    return await call_engine(engine.participants)
