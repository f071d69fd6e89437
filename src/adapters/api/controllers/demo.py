from __future__ import annotations

from fastapi import APIRouter, Depends

from src.adapters.api.dependencies import get_trip_service, require
from src.adapters.api.schemas.trips import (
    DemoStateSchema,
    DemoTripRequestSchema,
    SpeedMultiplierSchema,
    TripSchema,
)
from src.app.services.trip_service import TripService
from src.domain.models import ApiKey, GeoPoint, Permission

router = APIRouter(prefix="/trips", tags=["demo"])

_read = require(Permission.TRIPS_READ, bucket="demo.read", limit=30)
_write = require(Permission.TRIPS_WRITE, bucket="demo.control", limit=20)


@router.post("/demo", response_model=TripSchema, status_code=201)
async def start_demo_trip(
    req: DemoTripRequestSchema,
    api_key: ApiKey = Depends(require(Permission.TRIPS_WRITE, bucket="demo.create", limit=10)),
    service: TripService = Depends(get_trip_service),
) -> TripSchema:
    segments = [s.to_domain() for s in req.segments] if req.segments else None
    trip = await service.start_demo(
        owner=api_key.key,
        name=req.name,
        segments=segments,
        start=GeoPoint(lat=req.start.lat, lon=req.start.lon) if req.start else None,
        end=GeoPoint(lat=req.end.lat, lon=req.end.lon) if req.end else None,
        speed_multiplier=req.speed_multiplier,
    )
    return TripSchema.from_domain(trip)


@router.get("/{trip_id}/demo", response_model=DemoStateSchema)
async def get_demo_state(
    trip_id: str,
    api_key: ApiKey = Depends(_read),
    service: TripService = Depends(get_trip_service),
) -> DemoStateSchema:
    return DemoStateSchema.from_domain(
        service.demo_state(owner=api_key.key, trip_id=trip_id)
    )


@router.post("/{trip_id}/demo/pause", response_model=DemoStateSchema)
async def pause_demo(
    trip_id: str,
    api_key: ApiKey = Depends(_write),
    service: TripService = Depends(get_trip_service),
) -> DemoStateSchema:
    service.pause_trip(owner=api_key.key, trip_id=trip_id)
    return DemoStateSchema.from_domain(
        service.demo_state(owner=api_key.key, trip_id=trip_id)
    )


@router.post("/{trip_id}/demo/resume", response_model=DemoStateSchema)
async def resume_demo(
    trip_id: str,
    api_key: ApiKey = Depends(_write),
    service: TripService = Depends(get_trip_service),
) -> DemoStateSchema:
    service.resume_trip(owner=api_key.key, trip_id=trip_id)
    return DemoStateSchema.from_domain(
        service.demo_state(owner=api_key.key, trip_id=trip_id)
    )


@router.post("/{trip_id}/demo/stop", response_model=TripSchema)
async def stop_demo(
    trip_id: str,
    api_key: ApiKey = Depends(_write),
    service: TripService = Depends(get_trip_service),
) -> TripSchema:
    # Stopping a demo ends its trip with the stats gathered so far.
    service.demo_state(owner=api_key.key, trip_id=trip_id)
    return TripSchema.from_domain(
        service.complete_trip(owner=api_key.key, trip_id=trip_id)
    )


@router.put("/{trip_id}/demo/speed", response_model=DemoStateSchema)
async def set_demo_speed(
    trip_id: str,
    req: SpeedMultiplierSchema,
    api_key: ApiKey = Depends(_write),
    service: TripService = Depends(get_trip_service),
) -> DemoStateSchema:
    return DemoStateSchema.from_domain(
        service.set_demo_speed(
            owner=api_key.key,
            trip_id=trip_id,
            speed_multiplier=req.speed_multiplier,
        )
    )
