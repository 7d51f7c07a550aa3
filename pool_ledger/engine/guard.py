"""Reentrancy guard for mutating engine operations."""

from contextlib import contextmanager
from typing import Iterator

from pool_ledger.errors import ReentrancyError


class ReentrancyGuard:
    """Exclusive flag held for the duration of one mutating operation."""

    def __init__(self):
        self._entered = False
        self._operation: str | None = None

    @property
    def locked(self) -> bool:
        return self._entered

    @contextmanager
    def hold(self, operation: str) -> Iterator[None]:
        """Acquire the flag for ``operation``; release it on every exit path."""
        if self._entered:
            raise ReentrancyError(
                f"{operation} rejected: {self._operation} is still in progress"
            )
        self._entered = True
        self._operation = operation
        try:
            yield
        finally:
            self._entered = False
            self._operation = None
