from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class GeoPoint:
    lat: float
    lon: float

    def __post_init__(self) -> None:
        if not (math.isfinite(self.lat) and -90.0 <= self.lat <= 90.0):
            raise ValueError(f"Invalid latitude: {self.lat}")
        if not (math.isfinite(self.lon) and -180.0 <= self.lon <= 180.0):
            raise ValueError(f"Invalid longitude: {self.lon}")

    @classmethod
    def from_lon_lat(cls, pair: tuple[float, float]) -> GeoPoint:
        """Build from a GeoJSON-style (lon, lat) pair."""

        lon, lat = pair
        return cls(lat=float(lat), lon=float(lon))

    def as_lon_lat(self) -> tuple[float, float]:
        return (self.lon, self.lat)
