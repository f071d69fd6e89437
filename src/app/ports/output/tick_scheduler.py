from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable


class ITimerHandle(ABC):
    @abstractmethod
    def cancel(self) -> None:
        """Stop future callbacks. Calling it again is a no-op."""


class ITickScheduler(ABC):
    """Port for periodic timers driving the demo simulator."""

    @abstractmethod
    def schedule_periodic(
        self, interval_s: float, callback: Callable[[], None]
    ) -> ITimerHandle:
        """Invoke `callback` every `interval_s` seconds until cancelled."""
