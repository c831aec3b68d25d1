"""Sliding-window rate limiting for the moderation gate.

Each key keeps a log of admitted request timestamps covering the last
window; denied requests are not logged, so a client over the limit gets
its budget back as older hits age out. The redis limiter stores the log
in a sorted set and trims, appends and counts it inside one MULTI/EXEC
pipeline, so concurrent workers share a consistent view. The in-memory
limiter keeps the same log in a dict and is only safe inside a single
process.
"""
import time
import uuid
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Dict, Optional

from redis.asyncio import Redis

from app.core.redis import RedisManager

Clock = Callable[[], float]


@dataclass(frozen=True)
class RateLimitResult:
    success: bool
    limit: int
    remaining: int
    reset: int  # epoch milliseconds when the oldest counted hit leaves the window

    def headers(self) -> Dict[str, str]:
        return {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": str(self.reset),
        }


class SlidingWindowRateLimiter(ABC):
    def __init__(self, limit: int, window_seconds: float, clock: Clock = time.time):
        if limit <= 0:
            raise ValueError("limit must be positive")
        self.limit = limit
        self.window_ms = int(window_seconds * 1000)
        self.clock = clock

    def _now_ms(self) -> int:
        return int(self.clock() * 1000)

    def _result(self, success: bool, count: int, oldest_ms: int) -> RateLimitResult:
        return RateLimitResult(
            success=success,
            limit=self.limit,
            remaining=max(0, self.limit - count),
            reset=oldest_ms + self.window_ms,
        )

    @abstractmethod
    async def limit_request(self, identifier: str) -> RateLimitResult:
        ...


class InMemoryRateLimiter(SlidingWindowRateLimiter):
    def __init__(self, limit: int, window_seconds: float, clock: Clock = time.time):
        super().__init__(limit, window_seconds, clock)
        self._hits: Dict[str, Deque[int]] = {}
        self._last_sweep_ms = self._now_ms()

    def _trim(self, hits: Deque[int], now: int) -> None:
        while hits and hits[0] <= now - self.window_ms:
            hits.popleft()

    def _sweep(self, now: int) -> None:
        # at most once per window: drop identifiers whose whole log has expired
        if now - self._last_sweep_ms < self.window_ms:
            return
        self._last_sweep_ms = now
        for identifier in list(self._hits):
            hits = self._hits[identifier]
            self._trim(hits, now)
            if not hits:
                del self._hits[identifier]

    async def limit_request(self, identifier: str) -> RateLimitResult:
        now = self._now_ms()
        self._sweep(now)
        hits = self._hits.setdefault(identifier, deque())
        self._trim(hits, now)
        allowed = len(hits) < self.limit
        if allowed:
            hits.append(now)
        return self._result(allowed, len(hits), hits[0])

    def reset(self) -> None:
        self._hits.clear()


class RedisRateLimiter(SlidingWindowRateLimiter):
    def __init__(
        self,
        limit: int,
        window_seconds: float,
        clock: Clock = time.time,
        client_factory: Callable[[], Redis] = RedisManager.get_client,
        prefix: str = "ratelimit",
    ):
        super().__init__(limit, window_seconds, clock)
        self._client_factory = client_factory
        self.prefix = prefix

    async def limit_request(self, identifier: str) -> RateLimitResult:
        now = self._now_ms()
        key = f"{self.prefix}:{identifier}"
        member = f"{now}-{uuid.uuid4().hex}"
        client = self._client_factory()
        async with client.pipeline(transaction=True) as pipe:
            pipe.zremrangebyscore(key, 0, now - self.window_ms)
            pipe.zadd(key, {member: now})
            pipe.zcard(key)
            pipe.zrange(key, 0, 0, withscores=True)
            pipe.pexpire(key, self.window_ms)
            _, _, count, oldest, _ = await pipe.execute()
        count = int(count)
        allowed = count <= self.limit
        if not allowed:
            # the hit was over budget; take it back out of the log
            await client.zrem(key, member)
            count -= 1
        oldest_ms = int(oldest[0][1]) if oldest else now
        return self._result(allowed, count, oldest_ms)


def build_rate_limiter(
    store: str,
    limit: int,
    window_seconds: float,
    prefix: str,
    clock: Optional[Clock] = None,
) -> SlidingWindowRateLimiter:
    clock = clock or time.time
    if store == "memory":
        return InMemoryRateLimiter(limit, window_seconds, clock)
    return RedisRateLimiter(limit, window_seconds, clock, prefix=prefix)
