"""Exceptions raised by the pool ledger engine.

Every rejection is synchronous and covers the whole operation: when one of
these is raised, no balance, history or queue entry has been changed.
"""


class PoolLedgerError(Exception):
    """Base class for all ledger rejections."""


class ValidationError(PoolLedgerError):
    """Invalid input: zero or out-of-bounds amount, bad parameter, empty pool."""


class InsufficientBalanceError(PoolLedgerError):
    """Operation would take a participant balance (or the total) below zero."""


class TotalOverflowError(PoolLedgerError):
    """Operation would push total deposits past the representable maximum."""


class InsufficientCustodyError(PoolLedgerError):
    """Custody does not hold enough of the asset to cover a payout."""


class CustodyError(PoolLedgerError):
    """The custody collaborator failed to move funds."""


class UnauthorizedError(PoolLedgerError):
    """Caller does not hold the role required by a privileged operation."""


class PausedError(PoolLedgerError):
    """Operation attempted while the pool is paused."""


class ReentrancyError(PoolLedgerError):
    """A mutating operation was entered while another one is in flight."""


class SnapshotOrderError(PoolLedgerError):
    """Snapshot timestamp would break the ordering of the snapshot log."""


class WithdrawalError(PoolLedgerError):
    """Base class for withdrawal request rejections."""


class InvalidWithdrawalIndexError(WithdrawalError):
    """No withdrawal request exists at the given index."""


class AlreadyProcessedError(WithdrawalError):
    """Withdrawal request was already released."""


class FreezePeriodActiveError(WithdrawalError):
    """Withdrawal request has not reached its unlock time."""


class CooldownActiveError(WithdrawalError):
    """Participant withdrew too recently."""
