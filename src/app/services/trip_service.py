from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Sequence
from uuid import uuid4

from src.app.ports.output import IRouteProvider, ITickScheduler, ITripRepository
from src.domain.algorithms.geo_utils import average_speed_mps
from src.domain.algorithms.trip_stats import (
    DEFAULT_HISTORY_LIMIT,
    FixOutcome,
    TripStatsAccumulator,
)
from src.domain.exceptions import InvalidFix, TripNotFound, TripStateError
from src.domain.models import (
    DemoSimulationState,
    GeoPoint,
    LocationFix,
    RouteSegment,
    SimulationStatus,
    Trip,
    TripStats,
    TripStatus,
    TripTotals,
    TripType,
)

from .demo_trip_simulator import DEFAULT_TICK_INTERVAL_S, DemoTripSimulator

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(slots=True)
class _TripSession:
    owner: str
    accumulator: TripStatsAccumulator
    simulator: DemoTripSimulator | None = None


@dataclass(slots=True)
class TripService:
    """Owns trip records and their per-trip accumulator / simulator.

    Every fix, real or simulated, goes through `_apply_fix`, which feeds the
    trip's accumulator and merges its snapshot back into the record. Each
    trip id maps to exactly one session, so no two producers share an
    accumulator.
    """

    repository: ITripRepository
    scheduler: ITickScheduler
    route_provider: IRouteProvider | None = None
    history_limit: int = DEFAULT_HISTORY_LIMIT
    tick_interval_s: float = DEFAULT_TICK_INTERVAL_S
    clock: Callable[[], int] = _now_ms
    _sessions: dict[str, _TripSession] = field(
        default_factory=dict, init=False, repr=False
    )

    def create_trip(
        self,
        *,
        owner: str,
        name: str,
        notes: str = "",
        trip_type: TripType = TripType.REAL,
    ) -> Trip:
        now = self.clock()
        trip = Trip(
            id=str(uuid4()),
            owner=owner,
            name=name.strip() or f"Trip {time.strftime('%Y-%m-%d')}",
            type=trip_type,
            notes=notes.strip(),
            created_at_ms=now,
            updated_at_ms=now,
        )
        self.repository.add(trip)
        self._prune_sessions(owner)
        self._session(trip)
        return trip

    def get_trip(self, *, owner: str, trip_id: str) -> Trip:
        trip = self.repository.get(owner=owner, trip_id=trip_id)
        if trip is None:
            raise TripNotFound(f"Trip not found: {trip_id}")
        return trip

    def list_trips(self, *, owner: str) -> tuple[Trip, ...]:
        return self.repository.list(owner=owner)

    def start_trip(self, *, owner: str, trip_id: str) -> Trip:
        trip = self.get_trip(owner=owner, trip_id=trip_id)
        if trip.status is not TripStatus.PLANNING:
            raise TripStateError(f"Trip is already {trip.status.value}")
        session = self._session(trip)
        session.accumulator.reset()
        self._transition(trip, TripStatus.ACTIVE)
        trip.start_time_ms = trip.updated_at_ms
        return trip

    def pause_trip(self, *, owner: str, trip_id: str) -> Trip:
        trip = self.get_trip(owner=owner, trip_id=trip_id)
        if trip.status is not TripStatus.ACTIVE:
            raise TripStateError(f"Only active trips can be paused (is {trip.status.value})")
        simulator = self._session(trip).simulator
        if simulator is not None:
            simulator.pause()
        self._transition(trip, TripStatus.PAUSED)
        return trip

    def resume_trip(self, *, owner: str, trip_id: str) -> Trip:
        trip = self.get_trip(owner=owner, trip_id=trip_id)
        if trip.status is not TripStatus.PAUSED:
            raise TripStateError(f"Only paused trips can be resumed (is {trip.status.value})")
        simulator = self._session(trip).simulator
        if simulator is not None:
            simulator.resume()
        self._transition(trip, TripStatus.ACTIVE)
        return trip

    def complete_trip(self, *, owner: str, trip_id: str) -> Trip:
        trip = self.get_trip(owner=owner, trip_id=trip_id)
        self._complete(trip)
        return trip

    def delete_trip(self, *, owner: str, trip_id: str) -> None:
        trip = self.get_trip(owner=owner, trip_id=trip_id)
        session = self._sessions.pop(trip.id, None)
        if session is not None and session.simulator is not None:
            session.simulator.stop()
        self.repository.delete(owner=owner, trip_id=trip_id)

    def add_location(self, *, owner: str, trip_id: str, fix: LocationFix) -> Trip:
        """Record one real fix. Raises `InvalidFix` when the sample is dropped."""

        trip = self.get_trip(owner=owner, trip_id=trip_id)
        if trip.status is not TripStatus.ACTIVE:
            raise TripStateError(f"Trip is {trip.status.value}, not recording")
        if trip.type is TripType.DEMO:
            raise TripStateError("Demo trips are fed by their simulator")

        outcome = self._apply_fix(trip, fix)
        if not outcome.accepted:
            raise InvalidFix(outcome.value)
        return trip

    def route(self, *, owner: str, trip_id: str) -> tuple[LocationFix, ...]:
        trip = self.get_trip(owner=owner, trip_id=trip_id)
        return self._session(trip).accumulator.history

    def current_stats(self, trip: Trip) -> TripStats:
        """Stats for display; a live real trip counts duration up to now."""

        if trip.status is TripStatus.ACTIVE and trip.type is TripType.REAL:
            return self._session(trip).accumulator.snapshot(now_ms=self.clock())
        return trip.stats

    def totals(self, *, owner: str) -> TripTotals:
        trips = self.repository.list(owner=owner)
        if not trips:
            return TripTotals()

        distances = [t.stats.total_distance_m for t in trips]
        total_distance = float(sum(distances))
        total_duration = int(sum(t.stats.duration_ms for t in trips))
        recorded = [d for d in distances if d > 0]
        return TripTotals(
            total_trips=len(trips),
            total_distance_m=total_distance,
            total_duration_ms=total_duration,
            average_speed_mps=average_speed_mps(total_distance, total_duration),
            max_speed_mps=max(t.stats.max_speed_mps for t in trips),
            longest_trip_m=max(recorded, default=0.0),
            shortest_trip_m=min(recorded, default=0.0),
            active_trips=sum(
                1 for t in trips if t.status in (TripStatus.ACTIVE, TripStatus.PAUSED)
            ),
        )

    async def start_demo(
        self,
        *,
        owner: str,
        name: str,
        segments: Sequence[RouteSegment] | None = None,
        start: GeoPoint | None = None,
        end: GeoPoint | None = None,
        speed_multiplier: float = 1.0,
    ) -> Trip:
        """Create a demo trip and start replaying its route.

        Without explicit `segments` the route between `start` and `end` is
        fetched from the routing provider.
        """

        if segments is None:
            if start is None or end is None:
                raise ValueError("Either segments or start and end are required")
            if self.route_provider is None:
                raise RuntimeError("Routing provider not configured")
            segments = await self.route_provider.get_route(start=start, end=end)

        trip = self.create_trip(owner=owner, name=name, trip_type=TripType.DEMO)
        session = self._sessions[trip.id]
        try:
            session.simulator = DemoTripSimulator(
                segments,
                lambda fix: self._on_demo_fix(trip, fix),
                scheduler=self.scheduler,
                speed_multiplier=speed_multiplier,
                tick_interval_s=self.tick_interval_s,
                clock=self.clock,
            )
        except ValueError:
            # InvalidRoute and bad multipliers: the trip never existed.
            self._sessions.pop(trip.id, None)
            self.repository.delete(owner=owner, trip_id=trip.id)
            raise

        self._transition(trip, TripStatus.ACTIVE)
        trip.start_time_ms = trip.updated_at_ms
        session.simulator.start()
        logger.info("Demo trip %s started with %d segments", trip.id, len(segments))
        return trip

    def demo_state(self, *, owner: str, trip_id: str) -> DemoSimulationState:
        return self._simulator(owner=owner, trip_id=trip_id).get_state()

    def set_demo_speed(
        self, *, owner: str, trip_id: str, speed_multiplier: float
    ) -> DemoSimulationState:
        simulator = self._simulator(owner=owner, trip_id=trip_id)
        simulator.set_speed_multiplier(speed_multiplier)
        return simulator.get_state()

    def _simulator(self, *, owner: str, trip_id: str) -> DemoTripSimulator:
        trip = self.get_trip(owner=owner, trip_id=trip_id)
        simulator = self._session(trip).simulator
        if simulator is None:
            raise TripStateError("Trip has no demo simulation")
        return simulator

    def _session(self, trip: Trip) -> _TripSession:
        session = self._sessions.get(trip.id)
        if session is None:
            session = _TripSession(
                owner=trip.owner,
                accumulator=TripStatsAccumulator(history_limit=self.history_limit)
            )
            self._sessions[trip.id] = session
        return session

    def _prune_sessions(self, owner: str) -> None:
        # Drop sessions whose trips the repository evicted.
        live = {t.id for t in self.repository.list(owner=owner)}
        stale = [
            trip_id
            for trip_id, session in self._sessions.items()
            if session.owner == owner and trip_id not in live
        ]
        for trip_id in stale:
            session = self._sessions.pop(trip_id)
            if session.simulator is not None:
                session.simulator.stop()

    def _transition(self, trip: Trip, status: TripStatus) -> None:
        trip.status = status
        trip.updated_at_ms = self.clock()

    def _complete(self, trip: Trip) -> None:
        if trip.status not in (TripStatus.ACTIVE, TripStatus.PAUSED):
            raise TripStateError(f"Trip is {trip.status.value}, cannot complete")
        session = self._session(trip)
        if session.simulator is not None:
            session.simulator.stop()
        trip.stats = session.accumulator.snapshot()
        self._transition(trip, TripStatus.COMPLETED)
        trip.end_time_ms = trip.updated_at_ms

    def _apply_fix(self, trip: Trip, fix: LocationFix) -> FixOutcome:
        accumulator = self._session(trip).accumulator
        outcome = accumulator.add_fix(fix)
        if not outcome.accepted:
            logger.warning("Trip %s dropped fix: %s", trip.id, outcome.value)
            return outcome

        trip.stats = accumulator.snapshot()
        if trip.start_location is None:
            trip.start_location = fix
        trip.end_location = fix
        trip.updated_at_ms = self.clock()
        return outcome

    def _on_demo_fix(self, trip: Trip, fix: LocationFix) -> None:
        self._apply_fix(trip, fix)
        simulator = self._session(trip).simulator
        if (
            simulator is not None
            and simulator.get_state().status is SimulationStatus.FINISHED
            and trip.status in (TripStatus.ACTIVE, TripStatus.PAUSED)
        ):
            self._complete(trip)
            logger.info("Demo trip %s reached its destination", trip.id)
