from .access import (
    AccessError,
    AuthenticationError,
    PermissionDenied,
    RateLimitExceeded,
)
from .routing import RouteProviderError, RoutingError
from .tracking import (
    InvalidFix,
    InvalidRoute,
    TrackingError,
    TripNotFound,
    TripStateError,
)

__all__ = [
    "AccessError",
    "AuthenticationError",
    "InvalidFix",
    "InvalidRoute",
    "PermissionDenied",
    "RateLimitExceeded",
    "RouteProviderError",
    "RoutingError",
    "TrackingError",
    "TripNotFound",
    "TripStateError",
]
