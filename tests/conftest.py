import pytest

from pool_ledger.config import Config, DAY
from pool_ledger.custody import InMemoryCustody
from pool_ledger.engine import PoolEngine

START = 1_760_000_000
FREEZE = 7 * DAY
COOLDOWN = DAY


@pytest.fixture
def config() -> Config:
    return Config(
        owner="owner",
        creator="creator",
        investor="investor",
        pauser="pauser",
        min_deposit=100,
        max_deposit=10_000,
        withdrawal_cooldown=COOLDOWN,
        withdrawal_freeze_period=FREEZE,
        commission_rate=10,
    )


@pytest.fixture
def custody() -> InMemoryCustody:
    return InMemoryCustody()


@pytest.fixture
def engine(config, custody) -> PoolEngine:
    """Engine whose clock is pinned at START; tests pass ``now`` to move time."""
    return PoolEngine(config, custody=custody, clock=lambda: START)


@pytest.fixture
def events(engine) -> list:
    received = []
    engine.events.subscribe(received.append)
    return received
