from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from src.domain.algorithms.units import mph_to_mps

from .geo import GeoPoint


class RoadType(str, Enum):
    HIGHWAY = "highway"
    ARTERIAL = "arterial"
    RESIDENTIAL = "residential"
    LOCAL = "local"
    PARKING = "parking"


# Policy constants (mph), used when a segment carries no explicit limit.
DEFAULT_SPEED_LIMITS_MPH: dict[RoadType, float] = {
    RoadType.HIGHWAY: 65.0,
    RoadType.ARTERIAL: 45.0,
    RoadType.RESIDENTIAL: 25.0,
    RoadType.LOCAL: 25.0,
    RoadType.PARKING: 10.0,
}


@dataclass(frozen=True, slots=True)
class RouteSegment:
    """One leg of a precomputed route.

    `path` is ordered along the direction of travel. Validation is left to
    the simulator so a bad route surfaces as a single `InvalidRoute`.
    """

    path: tuple[GeoPoint, ...]
    distance_m: float
    duration_s: float
    road_type: RoadType = RoadType.LOCAL
    speed_limit_mph: float | None = None
    name: str | None = None
    instruction: str | None = None

    @property
    def implied_speed_mps(self) -> float:
        return self.distance_m / self.duration_s

    @property
    def effective_speed_limit_mph(self) -> float:
        if self.speed_limit_mph is not None:
            return self.speed_limit_mph
        return DEFAULT_SPEED_LIMITS_MPH[self.road_type]

    @property
    def target_speed_mps(self) -> float:
        return mph_to_mps(self.effective_speed_limit_mph)
