from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from src.adapters.api.dependencies import get_gps_service, require
from src.adapters.api.schemas.common import LocationFixInSchema, LocationFixSchema
from src.adapters.api.schemas.gps import GpsHistorySchema, GpsStatusSchema
from src.app.services.gps_tracking_service import MAX_HISTORY_PAGE, GpsTrackingService
from src.domain.models import ApiKey, Permission

router = APIRouter(prefix="/gps", tags=["gps"])


@router.post("/location", response_model=LocationFixSchema, status_code=201)
async def record_location(
    req: LocationFixInSchema,
    api_key: ApiKey = Depends(require(Permission.GPS_READ, bucket="gps.update", limit=60)),
    service: GpsTrackingService = Depends(get_gps_service),
) -> LocationFixSchema:
    fix = req.to_domain(default_timestamp_ms=service.clock())
    return LocationFixSchema.from_domain(service.record(owner=api_key.key, fix=fix))


@router.get("/location", response_model=LocationFixSchema)
async def get_location(
    api_key: ApiKey = Depends(require(Permission.GPS_READ, bucket="gps.location", limit=30)),
    service: GpsTrackingService = Depends(get_gps_service),
) -> LocationFixSchema:
    fix = service.latest(owner=api_key.key)
    if fix is None:
        raise HTTPException(status_code=404, detail="No GPS data available")
    return LocationFixSchema.from_domain(fix)


@router.get("/location/history", response_model=GpsHistorySchema)
async def get_location_history(
    limit: int = Query(default=100, ge=1, le=MAX_HISTORY_PAGE),
    offset: int = Query(default=0, ge=0),
    api_key: ApiKey = Depends(require(Permission.GPS_READ, bucket="gps.history", limit=10)),
    service: GpsTrackingService = Depends(get_gps_service),
) -> GpsHistorySchema:
    page, total, limit, offset = service.history(
        owner=api_key.key, limit=limit, offset=offset
    )
    return GpsHistorySchema(
        locations=[LocationFixSchema.from_domain(f) for f in page],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get("/status", response_model=GpsStatusSchema)
async def get_status(
    api_key: ApiKey = Depends(require(Permission.GPS_READ, bucket="gps.status", limit=30)),
    service: GpsTrackingService = Depends(get_gps_service),
) -> GpsStatusSchema:
    return GpsStatusSchema.from_domain(service.status(owner=api_key.key))


@router.post("/start", response_model=GpsStatusSchema)
async def start_tracking(
    api_key: ApiKey = Depends(require(Permission.GPS_READ, bucket="gps.control", limit=10)),
    service: GpsTrackingService = Depends(get_gps_service),
) -> GpsStatusSchema:
    return GpsStatusSchema.from_domain(service.start(owner=api_key.key))


@router.post("/stop", response_model=GpsStatusSchema)
async def stop_tracking(
    api_key: ApiKey = Depends(require(Permission.GPS_READ, bucket="gps.control", limit=10)),
    service: GpsTrackingService = Depends(get_gps_service),
) -> GpsStatusSchema:
    return GpsStatusSchema.from_domain(service.stop(owner=api_key.key))
