from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass, field

from src.app.ports.output import ITripRepository
from src.domain.exceptions import TripStateError
from src.domain.models import Trip, TripStatus


@dataclass(slots=True)
class InMemoryTripRepository(ITripRepository):
    """Process-local trip store, bounded per owner.

    When an owner is at `max_trips_per_owner`, the oldest completed trip is
    evicted to make room. If none of the owner's trips is completed the new
    trip is refused.
    """

    max_trips_per_owner: int = 100
    _by_owner: dict[str, OrderedDict[str, Trip]] = field(
        default_factory=dict, init=False, repr=False
    )

    def add(self, trip: Trip) -> None:
        trips = self._by_owner.setdefault(trip.owner, OrderedDict())
        if trip.id not in trips and len(trips) >= self.max_trips_per_owner:
            victim = next(
                (t.id for t in trips.values() if t.status is TripStatus.COMPLETED),
                None,
            )
            if victim is None:
                raise TripStateError(
                    f"Trip limit reached ({self.max_trips_per_owner}); complete a trip first"
                )
            del trips[victim]
        trips[trip.id] = trip

    def get(self, *, owner: str, trip_id: str) -> Trip | None:
        return self._by_owner.get(owner, {}).get(trip_id)

    def list(self, *, owner: str) -> tuple[Trip, ...]:
        return tuple(self._by_owner.get(owner, {}).values())

    def delete(self, *, owner: str, trip_id: str) -> bool:
        trips = self._by_owner.get(owner)
        if not trips or trip_id not in trips:
            return False
        del trips[trip_id]
        return True
