from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from itertools import islice

from src.app.ports.output import ILocationRepository
from src.domain.models import GpsStatus, LocationFix


@dataclass(slots=True)
class InMemoryLocationRepository(ILocationRepository):
    """Keeps the most recent `history_limit` samples per owner."""

    history_limit: int = 1000
    _fixes: dict[str, deque[LocationFix]] = field(
        default_factory=dict, init=False, repr=False
    )
    _status: dict[str, GpsStatus] = field(default_factory=dict, init=False, repr=False)

    def append(self, *, owner: str, fix: LocationFix) -> None:
        buf = self._fixes.get(owner)
        if buf is None:
            buf = deque(maxlen=self.history_limit)
            self._fixes[owner] = buf
        buf.append(fix)

    def latest(self, *, owner: str) -> LocationFix | None:
        buf = self._fixes.get(owner)
        return buf[-1] if buf else None

    def history(
        self, *, owner: str, limit: int, offset: int = 0
    ) -> tuple[tuple[LocationFix, ...], int]:
        buf = self._fixes.get(owner) or deque()
        page = tuple(islice(buf, max(0, offset), max(0, offset) + max(0, limit)))
        return page, len(buf)

    def get_status(self, *, owner: str) -> GpsStatus | None:
        return self._status.get(owner)

    def set_status(self, *, owner: str, status: GpsStatus) -> None:
        self._status[owner] = status
