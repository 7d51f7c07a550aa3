"""Application configuration."""

import os
from dataclasses import dataclass
from typing import Optional

DAY = 86400


def _env_int(name: str, default: int) -> int:
    return int(os.getenv(name, str(default)))


def _env_optional_int(name: str) -> Optional[int]:
    value = os.getenv(name)
    if value is None or value == "":
        return None
    return int(value)


@dataclass
class Config:
    """Application configuration loaded from environment variables."""

    # API settings
    host: str = "0.0.0.0"
    port: int = 8000

    # Fixed accounts and initial role holders
    owner: str = "owner"
    creator: str = "creator"
    investor: str = "investor"
    pauser: str = "owner"

    # Tunables consumed by the engine
    min_deposit: int = 100
    max_deposit: int = 10_000
    withdrawal_cooldown: int = DAY
    withdrawal_freeze_period: int = 7 * DAY
    commission_rate: int = 10

    # Ceilings enforced by the parameter setters
    max_deposit_ceiling: int = 10**30
    max_commission_rate: int = 50
    max_withdrawal_cooldown: int = 30 * DAY
    max_freeze_period: int = 90 * DAY

    # Retention: None keeps every profit record
    profit_history_limit: Optional[int] = None
    event_log_limit: int = 1000

    # Custody service; None keeps funds in process memory
    custody_url: Optional[str] = None
    custody_initial_balance: int = 0

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8000")),
            owner=os.getenv("POOL_OWNER", "owner"),
            creator=os.getenv("POOL_CREATOR", "creator"),
            investor=os.getenv("POOL_INVESTOR", "investor"),
            pauser=os.getenv("POOL_PAUSER", os.getenv("POOL_OWNER", "owner")),
            min_deposit=_env_int("POOL_MIN_DEPOSIT", 100),
            max_deposit=_env_int("POOL_MAX_DEPOSIT", 10_000),
            withdrawal_cooldown=_env_int("POOL_WITHDRAWAL_COOLDOWN", DAY),
            withdrawal_freeze_period=_env_int("POOL_WITHDRAWAL_FREEZE_PERIOD", 7 * DAY),
            commission_rate=_env_int("POOL_COMMISSION_RATE", 10),
            max_deposit_ceiling=_env_int("POOL_MAX_DEPOSIT_CEILING", 10**30),
            max_commission_rate=_env_int("POOL_MAX_COMMISSION_RATE", 50),
            max_withdrawal_cooldown=_env_int("POOL_MAX_WITHDRAWAL_COOLDOWN", 30 * DAY),
            max_freeze_period=_env_int("POOL_MAX_FREEZE_PERIOD", 90 * DAY),
            profit_history_limit=_env_optional_int("POOL_PROFIT_HISTORY_LIMIT"),
            event_log_limit=_env_int("POOL_EVENT_LOG_LIMIT", 1000),
            custody_url=os.getenv("POOL_CUSTODY_URL") or None,
            custody_initial_balance=_env_int("POOL_CUSTODY_INITIAL_BALANCE", 0),
        )
