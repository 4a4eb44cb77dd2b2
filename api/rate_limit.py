"""Fixed-window rate limiting with pluggable counter stores.

Both limiters count requests per caller identity inside fixed, non-overlapping
windows. Bursts straddling a window boundary can reach twice the ceiling.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Protocol

import redis
from redis.exceptions import RedisError

from api.settings import SiteSettings, get_site_settings


logger = logging.getLogger(__name__)

REDIS_TIMEOUT_SECONDS = 0.5


class RateLimiter(Protocol):
    def admit(self, identity: str) -> bool: ...  # noqa: D401


@dataclass
class _Window:
    start: float
    count: int = 0


class FixedWindowRateLimiter:
    """Process-local limiter for single-instance deployments and tests.

    Read-then-write without a lock: concurrent requests from one identity in
    the same instant may be admitted slightly past the ceiling. Identities
    whose window has elapsed are swept at most once per window.
    """

    def __init__(
        self,
        *,
        window_seconds: float = 60,
        max_requests: int = 12,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.window_seconds = float(window_seconds)
        self.max_requests = int(max_requests)
        self._clock = clock
        self._windows: Dict[str, _Window] = {}
        self._last_sweep = clock()

    def _sweep(self, now: float) -> None:
        if now - self._last_sweep <= self.window_seconds:
            return
        self._last_sweep = now
        expired = [k for k, w in self._windows.items() if now - w.start > self.window_seconds]
        for key in expired:
            self._windows.pop(key, None)

    def admit(self, identity: str) -> bool:
        now = self._clock()
        self._sweep(now)
        window = self._windows.get(identity) or _Window(start=now)
        if now - window.start > self.window_seconds:
            window.start = now
            window.count = 0
        window.count += 1
        self._windows[identity] = window
        return window.count <= self.max_requests


class _RedisPipeline(Protocol):
    def set(self, name: str, value: int, ex: int = ..., nx: bool = ...) -> Any: ...
    def incr(self, name: str, amount: int = 1) -> Any: ...
    def execute(self) -> List[Any]: ...


class _RedisLikeClient(Protocol):
    def pipeline(self, transaction: bool = True) -> _RedisPipeline: ...


class RedisRateLimiter:
    """Redis-backed counter shared across server instances.

    One ``MULTI``/``EXEC`` transaction per request:

    - ``SET key 0 EX <window> NX``: creates the counter with its TTL
    - ``INCR key``: atomic per-identity count, TTL preserved

    A counter therefore never exists without an expiry. When Redis is
    unreachable the request is admitted and the error logged; the gate never
    fails closed on its own bookkeeping.
    """

    def __init__(
        self,
        client: _RedisLikeClient,
        *,
        prefix: str = "ratelimit",
        window_seconds: int = 60,
        max_requests: int = 12,
    ) -> None:
        self._client = client
        self._prefix = prefix
        self.window_seconds = int(window_seconds)
        self.max_requests = int(max_requests)

    def _format(self, identity: str) -> str:
        return f"{self._prefix}:{identity}"

    def admit(self, identity: str) -> bool:
        key = self._format(identity)
        try:
            pipe = self._client.pipeline(transaction=True)
            pipe.set(key, 0, ex=self.window_seconds, nx=True)
            pipe.incr(key)
            _, count = pipe.execute()
        except RedisError as exc:
            logger.warning("rate_limit.redis_error", extra={"error": str(exc)})
            return True
        return int(count) <= self.max_requests


def build_rate_limiter(settings: Optional[SiteSettings] = None) -> RateLimiter:
    """Redis when configured and reachable, otherwise in-memory."""
    cfg = settings or get_site_settings()
    memory = FixedWindowRateLimiter(
        window_seconds=cfg.rate_limit_window_seconds,
        max_requests=cfg.rate_limit_max_requests,
    )
    if not cfg.rate_limit_redis_url:
        logger.info("rate_limit.backend.memory", extra={"reason": "redis_not_configured"})
        return memory

    client = redis.Redis.from_url(
        cfg.rate_limit_redis_url,
        socket_connect_timeout=REDIS_TIMEOUT_SECONDS,
        socket_timeout=REDIS_TIMEOUT_SECONDS,
    )
    try:
        client.ping()
    except RedisError:
        logger.warning("rate_limit.backend.memory", extra={"reason": "redis_ping_failed"})
        return memory
    logger.info("rate_limit.backend.redis")
    return RedisRateLimiter(
        client,
        window_seconds=cfg.rate_limit_window_seconds,
        max_requests=cfg.rate_limit_max_requests,
    )
