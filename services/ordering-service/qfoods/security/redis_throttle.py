"""Redis-backed sliding window throttle for failed logins."""

from __future__ import annotations

import time

from redis.asyncio import Redis


class RedisLoginThrottle:
    """Failure counter shared by every replica, kept in Redis sorted sets."""

    def __init__(
        self,
        client: Redis,
        *,
        max_failures: int,
        window_seconds: int,
        key_prefix: str = "login-failures",
    ) -> None:
        self._client = client
        self._max_failures = max_failures
        self._window_ms = window_seconds * 1000
        self._key_prefix = key_prefix

    def _key(self, key: str) -> str:
        return f"{self._key_prefix}:{key}"

    async def is_blocked(self, key: str) -> bool:
        """Drop expired failures and compare what remains with the limit."""
        now_ms = int(time.time() * 1000)
        redis_key = self._key(key)
        await self._client.zremrangebyscore(redis_key, 0, now_ms - self._window_ms)
        current = await self._client.zcard(redis_key)
        return current >= self._max_failures

    async def record_failure(self, key: str) -> None:
        now_ms = int(time.time() * 1000)
        redis_key = self._key(key)
        seq = await self._client.incr(f"{redis_key}:seq")
        async with self._client.pipeline(transaction=True) as pipe:
            pipe.zadd(redis_key, {f"{now_ms}:{seq}": now_ms})
            pipe.pexpire(redis_key, self._window_ms)
            pipe.pexpire(f"{redis_key}:seq", self._window_ms)
            await pipe.execute()

    async def reset(self, key: str) -> None:
        redis_key = self._key(key)
        await self._client.delete(redis_key, f"{redis_key}:seq")
