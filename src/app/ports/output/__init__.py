from .api_key_repository import IApiKeyRepository
from .location_repository import ILocationRepository
from .route_provider import IRouteProvider
from .tick_scheduler import ITickScheduler, ITimerHandle
from .trip_repository import ITripRepository

__all__ = [
    "IApiKeyRepository",
    "ILocationRepository",
    "IRouteProvider",
    "ITickScheduler",
    "ITimerHandle",
    "ITripRepository",
]
