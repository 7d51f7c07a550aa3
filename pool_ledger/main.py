"""Application entry point."""

import logging
import uvicorn

from pool_ledger.config import Config
from pool_ledger.app import create_app

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def main():
    """Run the pool ledger service."""
    config = Config.from_env()
    logger.info(
        f"Pool ledger on {config.host}:{config.port} "
        f"(deposits {config.min_deposit}-{config.max_deposit}, "
        f"commission {config.commission_rate}%, "
        f"freeze {config.withdrawal_freeze_period}s, cooldown {config.withdrawal_cooldown}s)"
    )
    app = create_app(config)

    uvicorn.run(
        app,
        host=config.host,
        port=config.port,
        log_level="info",
    )


if __name__ == "__main__":
    main()
