class RoutingError(Exception):
    """Base exception for route lookup failures."""


class RouteProviderError(RoutingError):
    """Raised when the upstream routing provider fails or answers garbage."""
