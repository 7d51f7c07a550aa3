import json

import httpx
import pytest

from pool_ledger.custody import HttpCustody, InMemoryCustody
from pool_ledger.engine import PoolEngine
from pool_ledger.errors import CustodyError, InsufficientCustodyError, ValidationError

START = 1_760_000_000


def test_in_memory_custody_tracks_transfers():
    custody = InMemoryCustody(initial_balance=50)
    custody.collect("alice", 100)
    custody.fund(25)
    custody.release("alice", 60)

    assert custody.balance() == 115
    assert [(t.direction, t.participant, t.amount) for t in custody.transfers] == [
        ("in", "alice", 100),
        ("out", "alice", 60),
    ]


def test_in_memory_custody_rejects_overdraw():
    custody = InMemoryCustody(initial_balance=10)
    with pytest.raises(InsufficientCustodyError):
        custody.release("alice", 11)
    assert custody.balance() == 10
    with pytest.raises(ValidationError):
        custody.fund(0)


class CustodyServiceStub:
    """Minimal custody service behind httpx.MockTransport."""

    def __init__(self, balance=0, fail_first=0, fail_status=429):
        self.balance = balance
        self.fail_first = fail_first
        self.fail_status = fail_status
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append((request.method, request.url.path))
        if self.fail_first > 0:
            self.fail_first -= 1
            return httpx.Response(self.fail_status)
        if request.url.path == "/balance":
            return httpx.Response(200, json={"balance": self.balance})
        body = json.loads(request.content)
        if request.url.path == "/collect":
            self.balance += body["amount"]
            return httpx.Response(200, json={"ok": True})
        if request.url.path == "/release":
            if body["amount"] > self.balance:
                return httpx.Response(409, text="insufficient funds")
            self.balance -= body["amount"]
            return httpx.Response(200, json={"ok": True})
        return httpx.Response(404)


def make_custody(service, **kwargs) -> HttpCustody:
    return HttpCustody(
        "http://custody.test",
        transport=httpx.MockTransport(service),
        retry_delay=0,
        **kwargs,
    )


def test_http_custody_round_trip():
    service = CustodyServiceStub(balance=10)
    custody = make_custody(service)

    custody.collect("alice", 90)
    custody.release("alice", 40)

    assert custody.balance() == 60
    assert service.requests == [
        ("POST", "/collect"),
        ("POST", "/release"),
        ("GET", "/balance"),
    ]
    custody.close()


def test_http_custody_insufficient_funds():
    custody = make_custody(CustodyServiceStub(balance=10))
    with pytest.raises(InsufficientCustodyError):
        custody.release("alice", 11)


def test_http_custody_retries_rate_limit():
    service = CustodyServiceStub(balance=5, fail_first=2)
    custody = make_custody(service)

    assert custody.balance() == 5
    assert len(service.requests) == 3


def test_http_custody_gives_up_after_retries():
    service = CustodyServiceStub(balance=5, fail_first=10)
    custody = make_custody(service, max_retries=2)

    with pytest.raises(CustodyError):
        custody.balance()
    assert len(service.requests) == 3


def test_http_custody_server_error_is_not_retried():
    service = CustodyServiceStub(fail_first=1, fail_status=500)
    custody = make_custody(service)

    with pytest.raises(CustodyError):
        custody.collect("alice", 1)
    assert len(service.requests) == 1


def test_http_custody_timeout():
    attempts = []

    def handler(request):
        attempts.append(request)
        raise httpx.ReadTimeout("timed out", request=request)

    custody = HttpCustody(
        "http://custody.test",
        transport=httpx.MockTransport(handler),
        retry_delay=0,
        max_retries=1,
    )
    with pytest.raises(CustodyError):
        custody.balance()
    assert len(attempts) == 2


class LostResponseService:
    """Custody service that applies the first transfer, then times out before replying."""

    def __init__(self):
        self.balance = 0
        self.applied_keys = set()
        self.keys_seen = []
        self.dropped = False

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == "/balance":
            return httpx.Response(200, json={"balance": self.balance})
        key = request.headers.get("Idempotency-Key")
        self.keys_seen.append(key)
        if key not in self.applied_keys:
            self.applied_keys.add(key)
            self.balance += json.loads(request.content)["amount"]
        if not self.dropped:
            self.dropped = True
            raise httpx.ReadTimeout("response lost", request=request)
        return httpx.Response(200, json={"ok": True})


def test_http_custody_retry_reuses_idempotency_key():
    service = LostResponseService()
    custody = make_custody(service)

    custody.collect("alice", 1000)

    assert len(service.keys_seen) == 2
    assert service.keys_seen[0] is not None
    assert service.keys_seen[0] == service.keys_seen[1]
    assert service.balance == 1000


def test_http_custody_transfers_use_distinct_keys():
    service = CustodyServiceStub(balance=100)
    keys = []

    def handler(request):
        keys.append(request.headers.get("Idempotency-Key"))
        return service(request)

    custody = make_custody(handler)
    custody.collect("alice", 10)
    custody.release("alice", 10)
    custody.balance()

    assert keys[0] and keys[1]
    assert keys[0] != keys[1]
    assert keys[2] is None


def test_deposit_collects_once_when_custody_response_is_lost(config):
    service = LostResponseService()
    engine = PoolEngine(config, custody=make_custody(service), clock=lambda: START)

    engine.deposit("alice", 1000)

    assert engine.total_deposits() == 1000
    assert engine.custody_balance() == 1000
