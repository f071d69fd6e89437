from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from src.domain.algorithms.units import (
    meters_to_km,
    meters_to_miles,
    mps_to_kmh,
    mps_to_mph,
)
from src.domain.models import (
    DemoSimulationState,
    GeoPoint,
    RoadType,
    RouteSegment,
    Trip,
    TripStats,
    TripTotals,
)

from .common import GeoPointSchema, LocationFixSchema


class TripStatsSchema(BaseModel):
    total_distance_m: float
    total_distance_km: float
    total_distance_mi: float
    duration_ms: int
    average_speed_mps: float
    average_speed_kmh: float
    average_speed_mph: float
    max_speed_mps: float
    max_speed_kmh: float
    max_speed_mph: float
    point_count: int

    @classmethod
    def from_domain(cls, stats: TripStats) -> TripStatsSchema:
        return cls(
            total_distance_m=stats.total_distance_m,
            total_distance_km=meters_to_km(stats.total_distance_m),
            total_distance_mi=meters_to_miles(stats.total_distance_m),
            duration_ms=stats.duration_ms,
            average_speed_mps=stats.average_speed_mps,
            average_speed_kmh=mps_to_kmh(stats.average_speed_mps),
            average_speed_mph=mps_to_mph(stats.average_speed_mps),
            max_speed_mps=stats.max_speed_mps,
            max_speed_kmh=mps_to_kmh(stats.max_speed_mps),
            max_speed_mph=mps_to_mph(stats.max_speed_mps),
            point_count=stats.point_count,
        )


class TripSchema(BaseModel):
    id: str
    name: str
    type: Literal["real", "demo"]
    status: Literal["planning", "active", "paused", "completed"]
    notes: str = ""
    start_time: int | None = None
    end_time: int | None = None
    start_location: LocationFixSchema | None = None
    end_location: LocationFixSchema | None = None
    stats: TripStatsSchema
    created_at: int
    updated_at: int

    @classmethod
    def from_domain(cls, trip: Trip, stats: TripStats | None = None) -> TripSchema:
        return cls(
            id=trip.id,
            name=trip.name,
            type=trip.type.value,
            status=trip.status.value,
            notes=trip.notes,
            start_time=trip.start_time_ms,
            end_time=trip.end_time_ms,
            start_location=(
                LocationFixSchema.from_domain(trip.start_location)
                if trip.start_location
                else None
            ),
            end_location=(
                LocationFixSchema.from_domain(trip.end_location)
                if trip.end_location
                else None
            ),
            stats=TripStatsSchema.from_domain(stats or trip.stats),
            created_at=trip.created_at_ms,
            updated_at=trip.updated_at_ms,
        )


class TripCreateSchema(BaseModel):
    name: str = Field(default="", max_length=200)
    notes: str = Field(default="", max_length=2000)


class TripRouteSchema(BaseModel):
    trip_id: str
    points: list[LocationFixSchema]
    total_points: int


class TripTotalsSchema(BaseModel):
    total_trips: int
    total_distance_m: float
    total_duration_ms: int
    average_speed_mps: float
    average_speed_kmh: float
    max_speed_mps: float
    max_speed_kmh: float
    longest_trip_m: float
    shortest_trip_m: float
    active_trips: int

    @classmethod
    def from_domain(cls, totals: TripTotals) -> TripTotalsSchema:
        return cls(
            total_trips=totals.total_trips,
            total_distance_m=totals.total_distance_m,
            total_duration_ms=totals.total_duration_ms,
            average_speed_mps=totals.average_speed_mps,
            average_speed_kmh=mps_to_kmh(totals.average_speed_mps),
            max_speed_mps=totals.max_speed_mps,
            max_speed_kmh=mps_to_kmh(totals.max_speed_mps),
            longest_trip_m=totals.longest_trip_m,
            shortest_trip_m=totals.shortest_trip_m,
            active_trips=totals.active_trips,
        )


class RouteSegmentSchema(BaseModel):
    coordinates: list[tuple[float, float]] = Field(..., description="[lon, lat] pairs")
    distance_m: float
    duration_s: float
    road_type: Literal["highway", "arterial", "residential", "local", "parking"] = "local"
    speed_limit_mph: float | None = None
    name: str | None = None
    instruction: str | None = None

    def to_domain(self) -> RouteSegment:
        return RouteSegment(
            path=tuple(GeoPoint.from_lon_lat(c) for c in self.coordinates),
            distance_m=self.distance_m,
            duration_s=self.duration_s,
            road_type=RoadType(self.road_type),
            speed_limit_mph=self.speed_limit_mph,
            name=self.name,
            instruction=self.instruction,
        )


class DemoTripRequestSchema(BaseModel):
    name: str = Field(default="Demo trip", max_length=200)
    segments: list[RouteSegmentSchema] | None = None
    start: GeoPointSchema | None = None
    end: GeoPointSchema | None = None
    speed_multiplier: float = 1.0


class SpeedMultiplierSchema(BaseModel):
    speed_multiplier: float


class DemoStateSchema(BaseModel):
    status: Literal["idle", "running", "paused", "finished", "stopped"]
    is_active: bool
    is_paused: bool
    is_finished: bool
    current_segment_index: int
    segment_count: int
    position_in_segment: float
    progress_pct: float
    current_speed_mps: float
    current_speed_mph: float
    target_speed_mps: float
    target_speed_mph: float
    speed_multiplier: float
    last_update: int

    @classmethod
    def from_domain(cls, state: DemoSimulationState) -> DemoStateSchema:
        return cls(
            status=state.status.value,
            is_active=state.is_active,
            is_paused=state.is_paused,
            is_finished=state.is_finished,
            current_segment_index=state.current_segment_index,
            segment_count=state.segment_count,
            position_in_segment=state.position_in_segment,
            progress_pct=state.progress_pct,
            current_speed_mps=state.current_speed_mps,
            current_speed_mph=mps_to_mph(state.current_speed_mps),
            target_speed_mps=state.target_speed_mps,
            target_speed_mph=mps_to_mph(state.target_speed_mps),
            speed_multiplier=state.speed_multiplier,
            last_update=state.last_update_ms,
        )
