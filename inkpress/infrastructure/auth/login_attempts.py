# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import time
from collections import deque
from collections.abc import Callable
from threading import Lock
from typing import Protocol

from flask import Request

from inkpress.shared.logging import logger


class AttemptStore(Protocol):
    def hit(self, key: str, now: float, window: float) -> int: ...

    def reset(self, key: str) -> None: ...


class InMemoryAttemptStore(AttemptStore):
    """Process-local sliding window; counts are not shared between workers."""

    def __init__(self) -> None:
        self._attempts: dict[str, deque[float]] = {}
        self._lock = Lock()
        self._last_sweep: float | None = None

    def __len__(self) -> int:
        return len(self._attempts)

    def hit(self, key: str, now: float, window: float) -> int:
        with self._lock:
            if self._last_sweep is None or now - self._last_sweep >= window:
                self._sweep(now, window)
            attempts = self._attempts.get(key)
            if attempts is not None:
                _prune(attempts, now, window)
            if not attempts:
                attempts = self._attempts[key] = deque()
            attempts.append(now)
            return len(attempts)

    def _sweep(self, now: float, window: float) -> None:
        """Forget clients whose every attempt has left the window."""
        for key in list(self._attempts):
            _prune(self._attempts[key], now, window)
            if not self._attempts[key]:
                del self._attempts[key]
        self._last_sweep = now

    def reset(self, key: str) -> None:
        with self._lock:
            self._attempts.pop(key, None)


def _prune(attempts: deque[float], now: float, window: float) -> None:
    while attempts and now - attempts[0] >= window:
        attempts.popleft()


class LoginRateLimiter:
    def __init__(
        self,
        store: AttemptStore,
        *,
        max_attempts: int = 5,
        window_seconds: float = 5 * 60,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._store = store
        self._max_attempts = max(1, int(max_attempts))
        self._window = float(window_seconds)
        self._clock = clock

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    def register_attempt(self, client_id: str) -> bool:
        """Count one attempt and report whether it may proceed."""
        count = self._store.hit(client_id, self._clock(), self._window)
        if count > self._max_attempts:
            logger.warning(
                f"login_attempts: rate limited client={client_id} "
                f"attempts={count} window={self._window:.0f}s"
            )
            return False
        return True

    def reset(self, client_id: str) -> None:
        self._store.reset(client_id)


def client_identity(req: Request, *, trust_proxy: bool) -> str:
    if trust_proxy:
        forwarded = req.headers.get("X-Forwarded-For", "").split(",")[0].strip()
        if forwarded:
            return forwarded
    return req.remote_addr or "unknown"


__all__ = [
    "AttemptStore",
    "InMemoryAttemptStore",
    "LoginRateLimiter",
    "client_identity",
]
