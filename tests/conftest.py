from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

import pytest

from src.app.ports.output import ITickScheduler, ITimerHandle


@dataclass
class _ManualTimer(ITimerHandle):
    interval_s: float
    callback: Callable[[], None]
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


@dataclass
class ManualTickScheduler(ITickScheduler):
    """Timers that only fire when the test says so."""

    timers: list[_ManualTimer] = field(default_factory=list)

    def schedule_periodic(
        self, interval_s: float, callback: Callable[[], None]
    ) -> ITimerHandle:
        timer = _ManualTimer(interval_s=interval_s, callback=callback)
        self.timers.append(timer)
        return timer

    @property
    def active(self) -> list[_ManualTimer]:
        return [t for t in self.timers if not t.cancelled]

    def fire(self, times: int = 1) -> None:
        for _ in range(times):
            for timer in self.active:
                timer.callback()


@dataclass
class FakeClock:
    now_ms: int = 1_700_000_000_000

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, ms: int) -> None:
        self.now_ms += ms


@pytest.fixture
def scheduler() -> ManualTickScheduler:
    return ManualTickScheduler()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def anyio_backend() -> str:
    # The adapters are built on asyncio; don't also run async tests under trio.
    return "asyncio"
