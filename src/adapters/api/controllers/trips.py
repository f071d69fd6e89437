from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from src.adapters.api.dependencies import get_trip_service, require
from src.adapters.api.schemas.common import LocationFixInSchema, LocationFixSchema
from src.adapters.api.schemas.trips import (
    TripCreateSchema,
    TripRouteSchema,
    TripSchema,
)
from src.app.services.trip_service import TripService
from src.domain.models import ApiKey, Permission, Trip

router = APIRouter(prefix="/trips", tags=["trips"])

_read = require(Permission.TRIPS_READ, bucket="trips.read", limit=30)
_create = require(Permission.TRIPS_WRITE, bucket="trips.create", limit=10)
_control = require(Permission.TRIPS_WRITE, bucket="trips.control", limit=20)
_location = require(Permission.TRIPS_WRITE, bucket="trips.location", limit=60)


def _to_schema(service: TripService, trip: Trip) -> TripSchema:
    return TripSchema.from_domain(trip, service.current_stats(trip))


@router.post("", response_model=TripSchema, status_code=201)
async def create_trip(
    req: TripCreateSchema,
    api_key: ApiKey = Depends(_create),
    service: TripService = Depends(get_trip_service),
) -> TripSchema:
    trip = service.create_trip(owner=api_key.key, name=req.name, notes=req.notes)
    return _to_schema(service, trip)


@router.get("", response_model=list[TripSchema])
async def list_trips(
    api_key: ApiKey = Depends(_read),
    service: TripService = Depends(get_trip_service),
) -> list[TripSchema]:
    return [_to_schema(service, t) for t in service.list_trips(owner=api_key.key)]


@router.get("/{trip_id}", response_model=TripSchema)
async def get_trip(
    trip_id: str,
    api_key: ApiKey = Depends(_read),
    service: TripService = Depends(get_trip_service),
) -> TripSchema:
    return _to_schema(service, service.get_trip(owner=api_key.key, trip_id=trip_id))


@router.post("/{trip_id}/start", response_model=TripSchema)
async def start_trip(
    trip_id: str,
    api_key: ApiKey = Depends(_control),
    service: TripService = Depends(get_trip_service),
) -> TripSchema:
    return _to_schema(service, service.start_trip(owner=api_key.key, trip_id=trip_id))


@router.post("/{trip_id}/pause", response_model=TripSchema)
async def pause_trip(
    trip_id: str,
    api_key: ApiKey = Depends(_control),
    service: TripService = Depends(get_trip_service),
) -> TripSchema:
    return _to_schema(service, service.pause_trip(owner=api_key.key, trip_id=trip_id))


@router.post("/{trip_id}/resume", response_model=TripSchema)
async def resume_trip(
    trip_id: str,
    api_key: ApiKey = Depends(_control),
    service: TripService = Depends(get_trip_service),
) -> TripSchema:
    return _to_schema(service, service.resume_trip(owner=api_key.key, trip_id=trip_id))


@router.post("/{trip_id}/complete", response_model=TripSchema)
async def complete_trip(
    trip_id: str,
    api_key: ApiKey = Depends(_control),
    service: TripService = Depends(get_trip_service),
) -> TripSchema:
    return _to_schema(
        service, service.complete_trip(owner=api_key.key, trip_id=trip_id)
    )


@router.post("/{trip_id}/location", response_model=TripSchema)
async def add_location(
    trip_id: str,
    req: LocationFixInSchema,
    api_key: ApiKey = Depends(_location),
    service: TripService = Depends(get_trip_service),
) -> TripSchema:
    fix = req.to_domain(default_timestamp_ms=service.clock())
    trip = service.add_location(owner=api_key.key, trip_id=trip_id, fix=fix)
    return _to_schema(service, trip)


@router.get("/{trip_id}/route", response_model=TripRouteSchema)
async def get_trip_route(
    trip_id: str,
    api_key: ApiKey = Depends(_read),
    service: TripService = Depends(get_trip_service),
) -> TripRouteSchema:
    trip = service.get_trip(owner=api_key.key, trip_id=trip_id)
    points = service.route(owner=api_key.key, trip_id=trip_id)
    return TripRouteSchema(
        trip_id=trip_id,
        points=[LocationFixSchema.from_domain(p) for p in points],
        total_points=trip.stats.point_count,
    )


@router.delete("/{trip_id}", status_code=204)
async def delete_trip(
    trip_id: str,
    api_key: ApiKey = Depends(_control),
    service: TripService = Depends(get_trip_service),
) -> Response:
    service.delete_trip(owner=api_key.key, trip_id=trip_id)
    return Response(status_code=204)
