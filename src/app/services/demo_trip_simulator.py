from __future__ import annotations

import logging
import math
import random
import time
from typing import Callable, Iterable

from src.app.ports.output import ITickScheduler, ITimerHandle
from src.domain.algorithms.geo_utils import haversine_distance_m, initial_bearing_deg
from src.domain.algorithms.route_progress import RouteTimeline, interpolate_segment
from src.domain.models import (
    DemoSimulationState,
    GeoPoint,
    LocationFix,
    RouteSegment,
    SimulationStatus,
)

logger = logging.getLogger(__name__)

FixCallback = Callable[[LocationFix], None]

DEFAULT_TICK_INTERVAL_S = 1.0


def _now_ms() -> int:
    return int(time.time() * 1000)


def _check_multiplier(multiplier: float) -> float:
    if not (math.isfinite(multiplier) and multiplier > 0):
        raise ValueError(f"Speed multiplier must be > 0, got {multiplier}")
    return float(multiplier)


class DemoTripSimulator:
    """Replays a precomputed route as a stream of synthetic location fixes.

    Each timer tick advances simulated time by `tick_interval_s *
    speed_multiplier` and emits one fix interpolated on the current segment.
    Fix speeds come from the segment's speed limit (or the road-type default),
    not from point-to-point deltas. Fix timestamps follow the simulated
    timeline so they are strictly increasing.

    The simulator owns one timer. Callers must stop a previous simulator for
    the same trip before starting another.
    """

    def __init__(
        self,
        segments: Iterable[RouteSegment],
        on_fix: FixCallback,
        *,
        scheduler: ITickScheduler,
        speed_multiplier: float = 1.0,
        tick_interval_s: float = DEFAULT_TICK_INTERVAL_S,
        clock: Callable[[], int] = _now_ms,
        rng: random.Random | None = None,
    ) -> None:
        self._timeline = RouteTimeline.build(segments)
        self._multiplier = _check_multiplier(speed_multiplier)
        if not (math.isfinite(tick_interval_s) and tick_interval_s > 0):
            raise ValueError(f"Tick interval must be > 0, got {tick_interval_s}")

        self._on_fix = on_fix
        self._scheduler = scheduler
        self._tick_interval_s = float(tick_interval_s)
        self._clock = clock
        self._rng = rng or random.Random()

        self._status = SimulationStatus.IDLE
        self._timer: ITimerHandle | None = None
        self._elapsed_s = 0.0
        self._started_at_ms = 0
        self._last_update_ms = clock()
        self._current_speed_mps = 0.0
        self._last_fix: LocationFix | None = None

    @property
    def segments(self) -> tuple[RouteSegment, ...]:
        return self._timeline.segments

    @property
    def elapsed_s(self) -> float:
        """Simulated seconds since start."""

        return self._elapsed_s

    def start(self) -> None:
        if self._status is not SimulationStatus.IDLE:
            raise RuntimeError(f"Simulation cannot start from {self._status.value}")

        now = self._clock()
        self._started_at_ms = now
        self._last_update_ms = now
        self._status = SimulationStatus.RUNNING
        logger.debug(
            "Demo simulation started: %d segments, %.0f m, x%.2f",
            len(self._timeline.segments),
            self._timeline.total_distance_m,
            self._multiplier,
        )

        first = self._timeline.segments[0]
        self._emit(self._synthesize(first.path[0], first.target_speed_mps))
        if self._status is not SimulationStatus.RUNNING:
            # The first fix's consumer already paused or stopped us.
            return
        self._timer = self._scheduler.schedule_periodic(self._tick_interval_s, self.tick)

    def pause(self) -> None:
        if self._status is not SimulationStatus.RUNNING:
            return
        self._last_update_ms = self._clock()
        self._status = SimulationStatus.PAUSED
        self._release_timer()

    def resume(self) -> None:
        if self._status is not SimulationStatus.PAUSED:
            return
        # Restart the cadence from now; the pause itself never advances the route.
        self._last_update_ms = self._clock()
        self._status = SimulationStatus.RUNNING
        self._timer = self._scheduler.schedule_periodic(self._tick_interval_s, self.tick)

    def stop(self) -> None:
        self._release_timer()
        if self._status in (SimulationStatus.FINISHED, SimulationStatus.STOPPED):
            return
        self._status = SimulationStatus.STOPPED
        logger.debug("Demo simulation stopped at %.1f s", self._elapsed_s)

    def set_speed_multiplier(self, multiplier: float) -> None:
        self._multiplier = _check_multiplier(multiplier)

    def tick(self) -> LocationFix | None:
        """Advance one timer step and emit the resulting fix.

        Returns None when the simulation is not running.
        """

        if self._status is not SimulationStatus.RUNNING:
            return None

        self._elapsed_s += self._tick_interval_s * self._multiplier
        self._last_update_ms = self._clock()

        idx, pos = self._timeline.locate(self._elapsed_s)
        if idx >= len(self._timeline.segments):
            fix = self._synthesize(self._timeline.end_point(), 0.0)
            self._status = SimulationStatus.FINISHED
            self._release_timer()
            logger.debug("Demo simulation finished after %.1f s", self._elapsed_s)
        else:
            segment = self._timeline.segments[idx]
            point = interpolate_segment(segment, pos)
            fix = self._synthesize(point, segment.target_speed_mps)

        self._emit(fix)
        return fix

    def progress(self) -> float:
        return self.get_state().progress_pct

    def get_state(self) -> DemoSimulationState:
        idx, pos = self._timeline.locate(self._elapsed_s)
        segments = self._timeline.segments
        target = segments[idx].target_speed_mps if idx < len(segments) else 0.0
        return DemoSimulationState(
            status=self._status,
            current_segment_index=idx,
            position_in_segment=pos,
            current_speed_mps=self._current_speed_mps,
            target_speed_mps=target,
            last_update_ms=self._last_update_ms,
            speed_multiplier=self._multiplier,
            segment_count=len(segments),
        )

    def _release_timer(self) -> None:
        timer, self._timer = self._timer, None
        if timer is not None:
            timer.cancel()

    def _synthesize(self, point: GeoPoint, speed_mps: float) -> LocationFix:
        timestamp_ms = self._started_at_ms + int(round(self._elapsed_s * 1000.0))
        heading: float | None = None
        prev = self._last_fix
        if prev is not None:
            timestamp_ms = max(timestamp_ms, prev.timestamp_ms + 1)
            heading = prev.heading_deg
            if haversine_distance_m(prev.lat, prev.lon, point.lat, point.lon) > 0.0:
                heading = initial_bearing_deg(prev.lat, prev.lon, point.lat, point.lon)

        self._current_speed_mps = speed_mps
        return LocationFix(
            lat=point.lat,
            lon=point.lon,
            timestamp_ms=timestamp_ms,
            accuracy_m=5.0 + self._rng.random() * 5.0,
            speed_mps=speed_mps,
            heading_deg=heading,
            altitude_m=200.0 + self._rng.random() * 100.0,
        )

    def _emit(self, fix: LocationFix) -> None:
        self._last_fix = fix
        try:
            self._on_fix(fix)
        except Exception:
            # A failing consumer must not kill the timer loop.
            logger.exception("Demo fix callback failed")
