class TrackingError(Exception):
    """Base exception for trip tracking failures."""


class InvalidFix(TrackingError, ValueError):
    """Raised when a location sample is rejected (bad coordinates, out of order)."""

    def __init__(self, reason: str, message: str | None = None) -> None:
        super().__init__(message or f"Location fix rejected: {reason}")
        self.reason = reason


class InvalidRoute(TrackingError, ValueError):
    """Raised when a route cannot be simulated."""


class TripNotFound(TrackingError):
    """Raised when a trip id is unknown for the requesting key."""


class TripStateError(TrackingError):
    """Raised when an operation does not fit the trip's current status."""
