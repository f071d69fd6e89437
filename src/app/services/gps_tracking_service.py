from __future__ import annotations

import logging
import time
from dataclasses import dataclass, replace
from typing import Callable

from src.app.ports.output import ILocationRepository
from src.domain.algorithms.trip_stats import check_fix
from src.domain.exceptions import InvalidFix
from src.domain.models import GpsStatus, LocationFix

logger = logging.getLogger(__name__)

MAX_HISTORY_PAGE = 1000


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(slots=True)
class GpsTrackingService:
    """Raw GPS feed per API key: latest sample, paged history, tracking flag."""

    repository: ILocationRepository
    clock: Callable[[], int] = _now_ms

    def record(self, *, owner: str, fix: LocationFix) -> LocationFix:
        outcome = check_fix(fix)
        if not outcome.accepted:
            raise InvalidFix(outcome.value)
        if fix.accuracy_m < 0:
            raise InvalidFix("negative_accuracy")

        self.repository.append(owner=owner, fix=fix)
        self.repository.set_status(
            owner=owner,
            status=GpsStatus(
                is_tracking=True,
                permission="granted",
                last_update_ms=fix.timestamp_ms,
                accuracy_m=fix.accuracy_m,
            ),
        )
        return fix

    def latest(self, *, owner: str) -> LocationFix | None:
        return self.repository.latest(owner=owner)

    def history(
        self, *, owner: str, limit: int = 100, offset: int = 0
    ) -> tuple[tuple[LocationFix, ...], int, int, int]:
        limit = max(1, min(int(limit), MAX_HISTORY_PAGE))
        offset = max(0, int(offset))
        page, total = self.repository.history(owner=owner, limit=limit, offset=offset)
        return page, total, limit, offset

    def status(self, *, owner: str) -> GpsStatus:
        current = self.repository.get_status(owner=owner)
        if current is None:
            return GpsStatus(error="No GPS data available")
        return current

    def start(self, *, owner: str) -> GpsStatus:
        status = GpsStatus(
            is_tracking=True, permission="granted", last_update_ms=self.clock()
        )
        self.repository.set_status(owner=owner, status=status)
        logger.debug("GPS tracking started")
        return status

    def stop(self, *, owner: str) -> GpsStatus:
        current = self.repository.get_status(owner=owner)
        status = replace(current, is_tracking=False) if current else GpsStatus()
        self.repository.set_status(owner=owner, status=status)
        return status
