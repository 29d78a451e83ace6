"""In-memory sliding window throttle for failed logins."""

from __future__ import annotations

import time
from collections import defaultdict, deque
from typing import Deque, DefaultDict, Protocol


class LoginThrottle(Protocol):
    async def is_blocked(self, key: str) -> bool: ...

    async def record_failure(self, key: str) -> None: ...

    async def reset(self, key: str) -> None: ...


class SlidingWindowLoginThrottle:
    """Per-process failure counter.

    Mutations never await, so a single event loop needs no extra locking.
    Once more than ``max_keys`` usernames are tracked, expired keys are swept
    and, if that is not enough, the least recently inserted keys are evicted.
    """

    def __init__(self, max_failures: int, window_seconds: int, max_keys: int = 10_000) -> None:
        self._max_failures = max_failures
        self._window = window_seconds
        self._max_keys = max_keys
        self._failures: DefaultDict[str, Deque[float]] = defaultdict(deque)

    def _prune(self, key: str, now: float) -> Deque[float]:
        queue = self._failures[key]
        while queue and now - queue[0] > self._window:
            queue.popleft()
        return queue

    def _sweep(self, now: float) -> None:
        expired = [key for key, queue in self._failures.items() if now - queue[-1] > self._window]
        for key in expired:
            del self._failures[key]
        while len(self._failures) > self._max_keys:
            del self._failures[next(iter(self._failures))]

    async def is_blocked(self, key: str) -> bool:
        """Return ``True`` once the key reached the failure limit inside the window."""
        queue = self._prune(key, time.monotonic())
        blocked = len(queue) >= self._max_failures
        if not queue:
            del self._failures[key]
        return blocked

    async def record_failure(self, key: str) -> None:
        now = time.monotonic()
        self._prune(key, now).append(now)
        if len(self._failures) > self._max_keys:
            self._sweep(now)

    async def reset(self, key: str) -> None:
        self._failures.pop(key, None)
