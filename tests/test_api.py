import threading

import pytest
from fastapi.testclient import TestClient

from pool_ledger.app import create_app
from pool_ledger.config import DAY
from pool_ledger.custody import InMemoryCustody
from pool_ledger.engine import PoolEngine

START = 1_760_000_000
FREEZE = 7 * DAY


@pytest.fixture
def client(engine):
    app = create_app(engine=engine)
    with TestClient(app) as client:
        yield client


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_deposit_and_account(client):
    response = client.post("/v1/deposits", json={"participant": "alice", "amount": 1000})
    assert response.status_code == 200
    assert response.json()["amount"] == 1000

    account = client.get("/v1/accounts/alice").json()
    assert account["balance"] == 1000
    assert account["isMember"] is True
    assert account["withdrawalRequests"] == []


def test_rejections_map_to_status_codes(client):
    assert client.post("/v1/deposits", json={"participant": "alice", "amount": 1}).status_code == 400

    client.post("/v1/deposits", json={"participant": "alice", "amount": 1000})

    missing_caller = client.post("/v1/distributions", json={"signedProfit": 100})
    assert missing_caller.status_code == 422

    wrong_caller = client.post(
        "/v1/distributions", json={"signedProfit": 100}, headers={"X-Caller": "alice"}
    )
    assert wrong_caller.status_code == 403
    assert wrong_caller.json()["error"] == "UnauthorizedError"

    missing = client.get("/v1/accounts/alice/withdrawals/0")
    assert missing.status_code == 404


def test_withdrawal_flow(client):
    client.post("/v1/deposits", json={"participant": "alice", "amount": 1000})

    requested = client.post(
        "/v1/withdrawals", params={"now": START}, json={"participant": "alice", "amount": 300}
    )
    assert requested.json()["unlockTime"] == START + FREEZE

    early = client.post(
        "/v1/withdrawals/release",
        params={"now": START + DAY},
        json={"participant": "alice", "index": 0},
    )
    assert early.status_code == 409
    assert early.json()["error"] == "FreezePeriodActiveError"

    released = client.post(
        "/v1/withdrawals/release",
        params={"now": START + FREEZE},
        json={"participant": "alice", "index": 0},
    )
    assert released.status_code == 200

    request = client.get("/v1/accounts/alice/withdrawals/0").json()
    assert request == {"amount": 300, "unlockTime": START + FREEZE, "processed": True}

    count = client.get(
        "/v1/accounts/alice/withdrawals/count", params={"days": 1, "now": START + FREEZE}
    ).json()
    assert count["count"] == 1


def test_distribution_and_pool_views(client):
    client.post("/v1/deposits", json={"participant": "alice", "amount": 1000})
    response = client.post(
        "/v1/distributions",
        params={"now": START},
        json={"signedProfit": 100},
        headers={"X-Caller": "investor"},
    )
    assert response.json() == {
        "type": "ProfitDistributed",
        "signedProfit": 100,
        "commission": 10,
        "creatorTax": 1,
        "timestamp": START,
    }

    summary = client.get("/v1/pool", params={"now": START + 100 * DAY}).json()
    assert summary["totalDeposits"] == 1100
    assert summary["annualReturnRate"] == 9
    assert summary["roundingDrift"] == 0
    assert summary["participantCount"] == 3

    report = client.get("/v1/pool/return", params={"now": START + 100 * DAY}).json()
    assert report["averageDeposits"] == 1100
    assert report["snapshotCount"] == 1

    snapshots = client.get("/v1/pool/snapshots").json()
    assert snapshots == [{"timestamp": START, "totalDeposits": 1100}]
    assert client.get("/v1/pool/profits").json() == [{"timestamp": START, "profit": 100}]
    assert set(client.get("/v1/pool/participants").json()) == {"alice", "owner", "creator"}


def test_parameters_roles_and_pause(client):
    owner = {"X-Caller": "owner"}

    changed = client.put("/v1/parameters/commissionRate", json={"value": 15}, headers=owner)
    assert changed.json()["newValue"] == 15
    assert client.get("/v1/pool/parameters").json()["commissionRate"] == 15

    too_high = client.put("/v1/parameters/commissionRate", json={"value": 90}, headers=owner)
    assert too_high.status_code == 400

    unknown = client.put("/v1/parameters/nonsense", json={"value": 1}, headers=owner)
    assert unknown.status_code == 422

    role = client.put("/v1/roles/pauser", json={"holder": "guardian"}, headers=owner)
    assert role.json()["newHolder"] == "guardian"

    assert client.post("/v1/pause", headers={"X-Caller": "guardian"}).status_code == 200
    paused = client.post("/v1/deposits", json={"participant": "alice", "amount": 1000})
    assert paused.status_code == 423
    assert client.post("/v1/unpause", headers={"X-Caller": "guardian"}).status_code == 200


def test_manual_snapshot_endpoint(client):
    response = client.post("/v1/snapshots", params={"now": START}, headers={"X-Caller": "owner"})
    assert response.json() == {"timestamp": START, "totalDeposits": 0}

    again = client.post("/v1/snapshots", params={"now": START}, headers={"X-Caller": "owner"})
    assert again.status_code == 409


class SlowCustody(InMemoryCustody):
    """Custody whose collect blocks until the test lets it finish."""

    def __init__(self):
        super().__init__()
        self.entered = threading.Event()
        self.proceed = threading.Event()
        self.finished = False

    def collect(self, participant, amount):
        self.entered.set()
        self.proceed.wait(timeout=5)
        super().collect(participant, amount)
        self.finished = True


def test_slow_custody_does_not_block_other_requests(config):
    custody = SlowCustody()
    engine = PoolEngine(config, custody=custody, clock=lambda: START)

    with TestClient(create_app(engine=engine)) as client:
        worker = threading.Thread(
            target=client.post,
            args=("/v1/deposits",),
            kwargs={"json": {"participant": "alice", "amount": 1000}},
        )
        worker.start()
        assert custody.entered.wait(timeout=5)

        assert client.get("/health").status_code == 200
        assert not custody.finished

        custody.proceed.set()
        worker.join(timeout=5)

    assert custody.finished
    assert engine.balance_of("alice") == 1000
