class AccessError(Exception):
    """Base exception for API key access failures."""


class AuthenticationError(AccessError):
    """Raised when an API key is missing, unknown or inactive."""


class PermissionDenied(AccessError):
    """Raised when a valid key lacks the permission an endpoint needs."""


class RateLimitExceeded(AccessError):
    def __init__(self, *, limit: int, reset_at_s: float, retry_after_s: int) -> None:
        super().__init__(f"Rate limit of {limit} requests exceeded")
        self.limit = limit
        self.reset_at_s = reset_at_s
        self.retry_after_s = retry_after_s
