from __future__ import annotations

import math
import time
from dataclasses import dataclass, field
from typing import Callable

from src.domain.exceptions import RateLimitExceeded


@dataclass(frozen=True, slots=True)
class RateLimitDecision:
    limit: int
    remaining: int
    reset_at_s: float
    retry_after_s: int | None = None

    @property
    def allowed(self) -> bool:
        return self.retry_after_s is None


@dataclass(slots=True)
class _Window:
    requests: int
    reset_at_s: float


@dataclass(slots=True)
class RateLimiter:
    """Fixed-window request counter keyed by caller-chosen strings.

    Expired windows are purged lazily, at most once per
    `cleanup_interval_s`, so the map stays bounded by active callers.
    """

    clock: Callable[[], float] = time.time
    cleanup_interval_s: float = 60.0
    _windows: dict[str, _Window] = field(default_factory=dict, init=False, repr=False)
    _last_cleanup_s: float = field(default=0.0, init=False)

    def check(self, key: str, *, limit: int, window_s: float) -> RateLimitDecision:
        now = self.clock()
        self._maybe_cleanup(now)

        window = self._windows.get(key)
        if window is None or now >= window.reset_at_s:
            window = _Window(requests=0, reset_at_s=now + window_s)
            self._windows[key] = window

        if window.requests >= limit:
            return RateLimitDecision(
                limit=limit,
                remaining=0,
                reset_at_s=window.reset_at_s,
                retry_after_s=max(1, math.ceil(window.reset_at_s - now)),
            )

        window.requests += 1
        return RateLimitDecision(
            limit=limit,
            remaining=max(0, limit - window.requests),
            reset_at_s=window.reset_at_s,
        )

    def enforce(self, key: str, *, limit: int, window_s: float) -> RateLimitDecision:
        decision = self.check(key, limit=limit, window_s=window_s)
        if not decision.allowed:
            raise RateLimitExceeded(
                limit=decision.limit,
                reset_at_s=decision.reset_at_s,
                retry_after_s=decision.retry_after_s or 1,
            )
        return decision

    def reset(self, key: str) -> None:
        self._windows.pop(key, None)

    def __len__(self) -> int:
        return len(self._windows)

    def _maybe_cleanup(self, now: float) -> None:
        if now - self._last_cleanup_s < self.cleanup_interval_s:
            return
        self._last_cleanup_s = now
        expired = [k for k, w in self._windows.items() if now >= w.reset_at_s]
        for k in expired:
            del self._windows[k]
