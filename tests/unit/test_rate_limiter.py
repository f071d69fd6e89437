from __future__ import annotations

import pytest

from src.app.services.rate_limiter import RateLimiter
from src.domain.exceptions import RateLimitExceeded


class _Clock:
    def __init__(self, now: float = 1_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.mark.unit
def test_allows_up_to_limit_then_blocks() -> None:
    clock = _Clock()
    limiter = RateLimiter(clock=clock)

    decisions = [limiter.check("k", limit=3, window_s=60) for _ in range(4)]

    assert [d.allowed for d in decisions] == [True, True, True, False]
    assert [d.remaining for d in decisions] == [2, 1, 0, 0]
    assert decisions[-1].retry_after_s == 60
    assert decisions[0].reset_at_s == 1_060.0


@pytest.mark.unit
def test_window_resets_after_expiry() -> None:
    clock = _Clock()
    limiter = RateLimiter(clock=clock)
    for _ in range(2):
        limiter.check("k", limit=2, window_s=10)
    assert not limiter.check("k", limit=2, window_s=10).allowed

    clock.now += 10

    assert limiter.check("k", limit=2, window_s=10).allowed


@pytest.mark.unit
def test_keys_are_independent() -> None:
    limiter = RateLimiter(clock=_Clock())
    limiter.check("a", limit=1, window_s=60)

    assert not limiter.check("a", limit=1, window_s=60).allowed
    assert limiter.check("b", limit=1, window_s=60).allowed


@pytest.mark.unit
def test_enforce_raises_with_retry_after() -> None:
    clock = _Clock()
    limiter = RateLimiter(clock=clock)
    limiter.enforce("k", limit=1, window_s=30)
    clock.now += 12.5

    with pytest.raises(RateLimitExceeded) as excinfo:
        limiter.enforce("k", limit=1, window_s=30)

    assert excinfo.value.retry_after_s == 18
    assert excinfo.value.limit == 1


@pytest.mark.unit
def test_expired_windows_are_purged() -> None:
    clock = _Clock()
    limiter = RateLimiter(clock=clock, cleanup_interval_s=60)
    limiter.check("old", limit=5, window_s=10)
    assert len(limiter) == 1

    clock.now += 120
    limiter.check("new", limit=5, window_s=10)

    assert len(limiter) == 1
