from __future__ import annotations

from pydantic import BaseModel, Field

from src.domain.algorithms.units import mps_to_kmh, mps_to_mph
from src.domain.models import LocationFix


class GeoPointSchema(BaseModel):
    lat: float = Field(..., ge=-90.0, le=90.0)
    lon: float = Field(..., ge=-180.0, le=180.0)


class LocationFixInSchema(BaseModel):
    latitude: float
    longitude: float
    accuracy: float = Field(default=0.0, ge=0.0, description="meters")
    speed: float | None = Field(default=None, description="m/s")
    heading: float | None = None
    altitude: float | None = None
    timestamp: int | None = Field(default=None, description="ms since epoch")

    def to_domain(self, *, default_timestamp_ms: int) -> LocationFix:
        return LocationFix(
            lat=self.latitude,
            lon=self.longitude,
            timestamp_ms=self.timestamp if self.timestamp is not None else default_timestamp_ms,
            accuracy_m=self.accuracy,
            speed_mps=self.speed,
            heading_deg=self.heading,
            altitude_m=self.altitude,
        )


class LocationFixSchema(BaseModel):
    latitude: float
    longitude: float
    timestamp: int
    accuracy_m: float
    speed_mps: float | None = None
    speed_kmh: float | None = None
    speed_mph: float | None = None
    heading: float | None = None
    altitude_m: float | None = None

    @classmethod
    def from_domain(cls, fix: LocationFix) -> LocationFixSchema:
        speed = fix.speed_mps
        return cls(
            latitude=fix.lat,
            longitude=fix.lon,
            timestamp=int(fix.timestamp_ms),
            accuracy_m=fix.accuracy_m,
            speed_mps=speed,
            speed_kmh=mps_to_kmh(speed) if speed is not None else None,
            speed_mph=mps_to_mph(speed) if speed is not None else None,
            heading=fix.heading_deg,
            altitude_m=fix.altitude_m,
        )
