"""Mapping of ledger rejections to HTTP responses."""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from pool_ledger.errors import (
    AlreadyProcessedError,
    CooldownActiveError,
    CustodyError,
    FreezePeriodActiveError,
    InsufficientBalanceError,
    InsufficientCustodyError,
    InvalidWithdrawalIndexError,
    PausedError,
    PoolLedgerError,
    ReentrancyError,
    SnapshotOrderError,
    TotalOverflowError,
    UnauthorizedError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Checked in order, so subclasses come before their bases
ERROR_STATUS: list[tuple[type[PoolLedgerError], int]] = [
    (ValidationError, 400),
    (InsufficientBalanceError, 400),
    (TotalOverflowError, 400),
    (UnauthorizedError, 403),
    (InvalidWithdrawalIndexError, 404),
    (AlreadyProcessedError, 409),
    (FreezePeriodActiveError, 409),
    (CooldownActiveError, 409),
    (SnapshotOrderError, 409),
    (InsufficientCustodyError, 409),
    (ReentrancyError, 409),
    (PausedError, 423),
    (CustodyError, 502),
]


def status_for(error: PoolLedgerError) -> int:
    for error_type, status in ERROR_STATUS:
        if isinstance(error, error_type):
            return status
    return 400


async def ledger_error_handler(request: Request, exc: PoolLedgerError) -> JSONResponse:
    status = status_for(exc)
    logger.warning(f"{request.method} {request.url.path} rejected ({status}): {exc}")
    return JSONResponse(
        status_code=status,
        content={"error": type(exc).__name__, "detail": str(exc)},
    )
