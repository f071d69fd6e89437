from .in_memory_api_key_repository import InMemoryApiKeyRepository
from .in_memory_location_repository import InMemoryLocationRepository
from .in_memory_trip_repository import InMemoryTripRepository

__all__ = [
    "InMemoryApiKeyRepository",
    "InMemoryLocationRepository",
    "InMemoryTripRepository",
]
