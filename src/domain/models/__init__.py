from .api_key import ApiKey, Permission
from .geo import GeoPoint
from .location import GpsStatus, LocationFix
from .route import DEFAULT_SPEED_LIMITS_MPH, RoadType, RouteSegment
from .simulation import DemoSimulationState, SimulationStatus
from .trip import Trip, TripStats, TripStatus, TripTotals, TripType

__all__ = [
    "DEFAULT_SPEED_LIMITS_MPH",
    "ApiKey",
    "DemoSimulationState",
    "GeoPoint",
    "GpsStatus",
    "LocationFix",
    "Permission",
    "RoadType",
    "RouteSegment",
    "SimulationStatus",
    "Trip",
    "TripStats",
    "TripStatus",
    "TripTotals",
    "TripType",
]
