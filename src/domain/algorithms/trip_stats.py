from __future__ import annotations

import logging
import math
from collections import deque
from enum import Enum

from src.domain.models import LocationFix, TripStats

from .geo_utils import average_speed_mps, haversine_distance_m

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 1000


class FixOutcome(str, Enum):
    ACCEPTED = "accepted"
    NON_FINITE_COORDINATES = "non_finite_coordinates"
    COORDINATES_OUT_OF_RANGE = "coordinates_out_of_range"
    INVALID_TIMESTAMP = "invalid_timestamp"
    OUT_OF_ORDER = "out_of_order"

    @property
    def accepted(self) -> bool:
        return self is FixOutcome.ACCEPTED


def _finite(value: object) -> bool:
    # Real numbers only: numeric strings, bools and None are malformed.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def check_fix(fix: LocationFix, previous: LocationFix | None = None) -> FixOutcome:
    """Validate one sample, optionally against the previously accepted one."""

    if not (_finite(fix.lat) and _finite(fix.lon)):
        return FixOutcome.NON_FINITE_COORDINATES
    if not (-90.0 <= fix.lat <= 90.0 and -180.0 <= fix.lon <= 180.0):
        return FixOutcome.COORDINATES_OUT_OF_RANGE
    if not _finite(fix.timestamp_ms):
        return FixOutcome.INVALID_TIMESTAMP
    if previous is not None and fix.timestamp_ms <= previous.timestamp_ms:
        return FixOutcome.OUT_OF_ORDER
    return FixOutcome.ACCEPTED


def _usable_speed(speed_mps: float | None) -> float | None:
    # Optional field: anything unusable counts as "not reported".
    if speed_mps is None or not _finite(speed_mps) or speed_mps < 0:
        return None
    return float(speed_mps)


class TripStatsAccumulator:
    """Folds a trip's fix stream into running statistics.

    Totals cover every accepted fix since the last `reset()`. The history
    buffer only keeps the most recent `history_limit` fixes; evicting from it
    never rewrites the totals.

    One instance per trip. Calls must be serialized by the owner.
    """

    def __init__(self, history_limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        if history_limit < 1:
            raise ValueError("history_limit must be >= 1")
        self._history: deque[LocationFix] = deque(maxlen=history_limit)
        self.reset()

    def reset(self) -> None:
        self._history.clear()
        self._first: LocationFix | None = None
        self._last: LocationFix | None = None
        self._total_distance_m = 0.0
        self._max_speed_mps = 0.0
        self._point_count = 0

    @property
    def history(self) -> tuple[LocationFix, ...]:
        return tuple(self._history)

    @property
    def first_fix(self) -> LocationFix | None:
        return self._first

    @property
    def last_fix(self) -> LocationFix | None:
        return self._last

    def add_fix(self, fix: LocationFix) -> FixOutcome:
        outcome = check_fix(fix, self._last)
        if not outcome.accepted:
            logger.debug("Dropping fix at t=%s: %s", fix.timestamp_ms, outcome.value)
            return outcome

        speed = _usable_speed(fix.speed_mps)
        prev = self._last
        if prev is None:
            self._first = fix
            self._max_speed_mps = speed if speed is not None else 0.0
        else:
            step_m = haversine_distance_m(prev.lat, prev.lon, fix.lat, fix.lon)
            self._total_distance_m += step_m
            if speed is None:
                speed = average_speed_mps(step_m, fix.timestamp_ms - prev.timestamp_ms)
            self._max_speed_mps = max(self._max_speed_mps, speed)

        self._last = fix
        self._point_count += 1
        self._history.append(fix)
        return outcome

    def snapshot(self, now_ms: int | None = None) -> TripStats:
        """Current statistics.

        Without `now_ms` the duration spans first to last fix. With it, the
        duration runs up to `now_ms` (a live trip still being recorded).
        """

        first = self._first
        last = self._last
        if first is None or last is None:
            return TripStats()

        end_ms = last.timestamp_ms if now_ms is None else max(now_ms, last.timestamp_ms)
        duration_ms = int(end_ms - first.timestamp_ms)
        return TripStats(
            total_distance_m=self._total_distance_m,
            duration_ms=duration_ms,
            average_speed_mps=average_speed_mps(self._total_distance_m, duration_ms),
            max_speed_mps=self._max_speed_mps,
            point_count=self._point_count,
        )
