from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .location import LocationFix


class TripStatus(str, Enum):
    PLANNING = "planning"
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"


class TripType(str, Enum):
    REAL = "real"
    DEMO = "demo"


@dataclass(frozen=True, slots=True)
class TripStats:
    """Aggregate over a trip's fix stream, in meters / milliseconds / m/s."""

    total_distance_m: float = 0.0
    duration_ms: int = 0
    average_speed_mps: float = 0.0
    max_speed_mps: float = 0.0
    point_count: int = 0


@dataclass(slots=True)
class Trip:
    """Caller-owned trip record.

    `stats` is replaced wholesale with the accumulator snapshot after each
    accepted fix; it is never edited field by field.
    """

    id: str
    owner: str
    name: str
    type: TripType = TripType.REAL
    status: TripStatus = TripStatus.PLANNING
    notes: str = ""
    start_time_ms: int | None = None
    end_time_ms: int | None = None
    start_location: LocationFix | None = None
    end_location: LocationFix | None = None
    stats: TripStats = field(default_factory=TripStats)
    created_at_ms: int = 0
    updated_at_ms: int = 0


@dataclass(frozen=True, slots=True)
class TripTotals:
    """Aggregate over many trips of one owner."""

    total_trips: int = 0
    total_distance_m: float = 0.0
    total_duration_ms: int = 0
    average_speed_mps: float = 0.0
    max_speed_mps: float = 0.0
    longest_trip_m: float = 0.0
    shortest_trip_m: float = 0.0
    active_trips: int = 0
