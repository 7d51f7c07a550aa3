"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from pool_ledger import __version__
from pool_ledger.api import router
from pool_ledger.api.dependencies import set_engine
from pool_ledger.api.errors import ledger_error_handler
from pool_ledger.config import Config
from pool_ledger.custody import Custody, HttpCustody, InMemoryCustody
from pool_ledger.engine import PoolEngine
from pool_ledger.errors import PoolLedgerError

logger = logging.getLogger(__name__)


def create_custody(config: Config) -> Custody:
    """Build the custody collaborator selected by the configuration."""
    if config.custody_url:
        return HttpCustody(api_url=config.custody_url)
    return InMemoryCustody(config.custody_initial_balance)


def create_app(config: Config | None = None, engine: PoolEngine | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Application configuration. If None, loads from environment.
        engine: Pre-built engine. If None, one is built from the configuration.

    Returns:
        Configured FastAPI application
    """
    if config is None:
        config = Config.from_env() if engine is None else engine.config

    if engine is None:
        engine = PoolEngine(config, custody=create_custody(config))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler for startup/shutdown."""
        # Startup
        logger.info("Starting Pool Ledger API")
        if config.custody_url:
            logger.info(f"Using custody service: {config.custody_url}")
        else:
            logger.info("Using in-memory custody")
        logger.info(f"Owner {config.owner}, creator {config.creator}, investor {config.investor}")

        set_engine(engine)

        yield

        # Shutdown
        logger.info("Shutting down...")
        set_engine(None)
        engine.close()

    app = FastAPI(
        title="Pool Ledger API",
        description="Pooled deposits with pro-rata profit distribution and time-locked withdrawals",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_exception_handler(PoolLedgerError, ledger_error_handler)

    # Include API routes
    app.include_router(router)

    # Health check endpoint
    @app.get("/health")
    async def health_check():
        return {"status": "healthy"}

    return app
