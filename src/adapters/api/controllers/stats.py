from __future__ import annotations

from fastapi import APIRouter, Depends

from src.adapters.api.dependencies import get_trip_service, require
from src.adapters.api.schemas.trips import TripTotalsSchema
from src.app.services.trip_service import TripService
from src.domain.models import ApiKey, Permission

router = APIRouter(tags=["stats"])


@router.get("/stats", response_model=TripTotalsSchema)
async def get_stats(
    api_key: ApiKey = Depends(require(Permission.STATS_READ, bucket="stats", limit=30)),
    service: TripService = Depends(get_trip_service),
) -> TripTotalsSchema:
    return TripTotalsSchema.from_domain(service.totals(owner=api_key.key))
