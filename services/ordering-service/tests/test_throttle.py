"""Tests for the in-memory and Redis-backed login throttles."""

from __future__ import annotations

import asyncio

import fakeredis
import pytest

from qfoods.security.redis_throttle import RedisLoginThrottle
from qfoods.security.throttle import SlidingWindowLoginThrottle


@pytest.fixture(params=["memory", "redis"])
def make_throttle(request):
    def factory(max_failures: int, window_seconds: int):
        if request.param == "memory":
            return SlidingWindowLoginThrottle(max_failures=max_failures, window_seconds=window_seconds)
        return RedisLoginThrottle(
            fakeredis.FakeAsyncRedis(server=fakeredis.FakeServer()),
            max_failures=max_failures,
            window_seconds=window_seconds,
            key_prefix="test",
        )

    return factory


def test_throttle_allows_until_limit(make_throttle):
    throttle = make_throttle(max_failures=3, window_seconds=60)

    async def scenario():
        states = []
        for _ in range(3):
            states.append(await throttle.is_blocked("alice"))
            await throttle.record_failure("alice")
        states.append(await throttle.is_blocked("alice"))
        return states

    assert asyncio.run(scenario()) == [False, False, False, True]


def test_throttle_keys_are_independent(make_throttle):
    throttle = make_throttle(max_failures=1, window_seconds=60)

    async def scenario():
        await throttle.record_failure("alice")
        return await throttle.is_blocked("alice"), await throttle.is_blocked("bob")

    assert asyncio.run(scenario()) == (True, False)


def test_throttle_reset_clears_failures(make_throttle):
    throttle = make_throttle(max_failures=1, window_seconds=60)

    async def scenario():
        await throttle.record_failure("alice")
        await throttle.reset("alice")
        return await throttle.is_blocked("alice")

    assert asyncio.run(scenario()) is False


def test_throttle_forgets_failures_after_window(make_throttle):
    throttle = make_throttle(max_failures=1, window_seconds=1)

    async def scenario():
        await throttle.record_failure("alice")
        blocked = await throttle.is_blocked("alice")
        await asyncio.sleep(1.1)
        return blocked, await throttle.is_blocked("alice")

    assert asyncio.run(scenario()) == (True, False)


class _Clock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock(monkeypatch):
    fake = _Clock()
    monkeypatch.setattr("qfoods.security.throttle.time.monotonic", fake)
    return fake


def test_memory_throttle_sweeps_expired_keys(clock):
    throttle = SlidingWindowLoginThrottle(max_failures=3, window_seconds=60, max_keys=2)

    async def scenario():
        await throttle.record_failure("user-1")
        await throttle.record_failure("user-2")
        clock.now += 61
        await throttle.record_failure("user-3")
        await throttle.record_failure("user-4")

    asyncio.run(scenario())

    assert set(throttle._failures) == {"user-3", "user-4"}


def test_memory_throttle_stays_bounded_under_fresh_keys(clock):
    throttle = SlidingWindowLoginThrottle(max_failures=3, window_seconds=60, max_keys=2)

    async def scenario():
        for index in range(50):
            await throttle.record_failure(f"random-{index}")
        return await throttle.is_blocked("random-49")

    assert asyncio.run(scenario()) is False
    assert list(throttle._failures) == ["random-48", "random-49"]
