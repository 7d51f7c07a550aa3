"""FastAPI dependencies for dependency injection."""

import asyncio
from typing import Callable, TypeVar

from fastapi.concurrency import run_in_threadpool

from pool_ledger.engine import PoolEngine

T = TypeVar("T")

# Global engine instance - initialized at app startup
_engine: PoolEngine | None = None

# One engine call at a time; custody I/O runs in a worker thread
_engine_lock = asyncio.Lock()


def set_engine(engine: PoolEngine | None) -> None:
    """Set the global engine instance."""
    global _engine
    _engine = engine


def get_engine() -> PoolEngine:
    """Get the global engine instance for dependency injection."""
    if _engine is None:
        raise RuntimeError("PoolEngine not initialized. Call set_engine() first.")
    return _engine


async def call_engine(func: Callable[..., T], *args, **kwargs) -> T:
    """
    Run a blocking engine call off the event loop.

    Calls are serialized by a single lock, so the engine still sees one
    operation at a time while other requests (e.g. /health) keep being served.
    """
    async with _engine_lock:
        return await run_in_threadpool(func, *args, **kwargs)
