from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Callable

from src.app.ports.output import ITickScheduler, ITimerHandle


@dataclass(slots=True)
class _PeriodicCall(ITimerHandle):
    loop: asyncio.AbstractEventLoop
    interval_s: float
    callback: Callable[[], None]
    _handle: asyncio.TimerHandle | None = field(default=None, init=False, repr=False)
    _cancelled: bool = field(default=False, init=False)

    def arm(self) -> None:
        self._handle = self.loop.call_later(self.interval_s, self._fire)

    def _fire(self) -> None:
        if self._cancelled:
            return
        # Re-arm before running so the callback may cancel the next call.
        self.arm()
        self.callback()

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


class AsyncioTickScheduler(ITickScheduler):
    """Periodic timers on the running asyncio loop.

    Must be called from inside the loop (e.g. an `async def` endpoint).
    """

    def schedule_periodic(
        self, interval_s: float, callback: Callable[[], None]
    ) -> ITimerHandle:
        call = _PeriodicCall(
            loop=asyncio.get_running_loop(), interval_s=interval_s, callback=callback
        )
        call.arm()
        return call
