from __future__ import annotations

from typing import Any, Dict, List

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from api.rate_limit import FixedWindowRateLimiter, RedisRateLimiter, build_rate_limiter
from api.settings import SiteSettings


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class FakePipeline:
    def __init__(self, redis: "FakeRedis"):
        self._redis = redis
        self._ops: List[tuple] = []

    def set(self, name: str, value: int, ex: int = 0, nx: bool = False):
        self._ops.append(("set", name, value, ex, nx))
        return self

    def incr(self, name: str, amount: int = 1):
        self._ops.append(("incr", name, amount))
        return self

    def execute(self) -> List[Any]:
        self._redis.transactions.append(list(self._ops))
        if self._redis.fail_with is not None:
            raise self._redis.fail_with
        results: List[Any] = []
        for op in self._ops:
            if op[0] == "set":
                _, name, value, ex, nx = op
                if nx and name in self._redis.counts:
                    results.append(None)
                    continue
                self._redis.counts[name] = value
                self._redis.expiries[name] = ex
                results.append(True)
            else:
                _, name, amount = op
                self._redis.counts[name] = self._redis.counts.get(name, 0) + amount
                results.append(self._redis.counts[name])
        return results


class FakeRedis:
    def __init__(self, fail_with: Exception | None = None):
        self.counts: Dict[str, int] = {}
        self.expiries: Dict[str, int] = {}
        self.transactions: List[List[tuple]] = []
        self.fail_with = fail_with
        self.pipeline_kwargs: List[dict] = []

    def pipeline(self, transaction: bool = True) -> FakePipeline:
        self.pipeline_kwargs.append({"transaction": transaction})
        return FakePipeline(self)


def test_thirteenth_request_in_window_is_rejected():
    clock = FakeClock()
    limiter = FixedWindowRateLimiter(window_seconds=60, max_requests=12, clock=clock)
    results = [limiter.admit("203.0.113.9") for _ in range(13)]
    assert results[:12] == [True] * 12
    assert results[12] is False


def test_window_resets_after_expiry():
    clock = FakeClock()
    limiter = FixedWindowRateLimiter(window_seconds=60, max_requests=2, clock=clock)
    assert limiter.admit("a") and limiter.admit("a")
    assert limiter.admit("a") is False

    clock.now += 60  # boundary itself still belongs to the old window
    assert limiter.admit("a") is False

    clock.now += 1
    assert limiter.admit("a") is True


def test_identities_are_counted_separately():
    limiter = FixedWindowRateLimiter(window_seconds=60, max_requests=1, clock=FakeClock())
    assert limiter.admit("a") is True
    assert limiter.admit("b") is True
    assert limiter.admit("a") is False


def test_redis_limiter_creates_counter_with_ttl_in_one_transaction():
    fake = FakeRedis()
    limiter = RedisRateLimiter(fake, prefix="facts", window_seconds=60, max_requests=2)
    assert limiter.admit("1.2.3.4") is True
    assert fake.pipeline_kwargs == [{"transaction": True}]
    assert fake.transactions[0] == [
        ("set", "facts:1.2.3.4", 0, 60, True),
        ("incr", "facts:1.2.3.4", 1),
    ]
    assert fake.expiries == {"facts:1.2.3.4": 60}

    assert limiter.admit("1.2.3.4") is True
    assert limiter.admit("1.2.3.4") is False
    assert fake.counts["facts:1.2.3.4"] == 3


def test_failed_transaction_leaves_no_counter_without_ttl(caplog):
    fake = FakeRedis(fail_with=RedisConnectionError("connection reset"))
    limiter = RedisRateLimiter(fake, max_requests=1)
    with caplog.at_level("WARNING"):
        assert limiter.admit("a") is True
        assert limiter.admit("a") is True
    assert fake.counts == {}
    assert fake.expiries == {}
    assert any(r.getMessage() == "rate_limit.redis_error" for r in caplog.records)


def test_expired_identities_are_evicted():
    clock = FakeClock()
    limiter = FixedWindowRateLimiter(window_seconds=60, max_requests=12, clock=clock)
    for i in range(100):
        limiter.admit(f"10.0.0.{i}")
    assert len(limiter._windows) == 100

    clock.now += 61
    assert limiter.admit("10.0.1.1") is True
    assert list(limiter._windows) == ["10.0.1.1"]



def test_build_without_redis_url_is_in_memory():
    cfg = SiteSettings(RATE_LIMIT_WINDOW_SECONDS=30, RATE_LIMIT_MAX_REQUESTS=5)
    limiter = build_rate_limiter(cfg)
    assert isinstance(limiter, FixedWindowRateLimiter)
    assert limiter.window_seconds == 30
    assert limiter.max_requests == 5


def test_build_falls_back_when_redis_unreachable(monkeypatch):
    class _Unreachable:
        def ping(self):
            raise RedisConnectionError("nope")

    monkeypatch.setattr("api.rate_limit.redis.Redis.from_url", lambda *a, **k: _Unreachable())
    cfg = SiteSettings(RATE_LIMIT_REDIS_URL="redis://localhost:6390/0")
    assert isinstance(build_rate_limiter(cfg), FixedWindowRateLimiter)


def test_build_uses_redis_when_reachable(monkeypatch):
    class _Reachable(FakeRedis):
        def ping(self):
            return True

    seen: Dict[str, Any] = {}

    def _from_url(url, **kwargs):
        seen.update(kwargs)
        return _Reachable()

    monkeypatch.setattr("api.rate_limit.redis.Redis.from_url", _from_url)
    cfg = SiteSettings(RATE_LIMIT_REDIS_URL="redis://localhost:6379/0")
    assert isinstance(build_rate_limiter(cfg), RedisRateLimiter)
    # a stalled server must not hang admission
    assert seen["socket_timeout"] == seen["socket_connect_timeout"] == 0.5


def test_invalid_redis_url_is_rejected():
    with pytest.raises(ValueError):
        SiteSettings(RATE_LIMIT_REDIS_URL="localhost:6379")
