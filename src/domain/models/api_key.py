from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Permission(str, Enum):
    GPS_READ = "gps:read"
    TRIPS_READ = "trips:read"
    TRIPS_WRITE = "trips:write"
    STATS_READ = "stats:read"
    ADMIN = "admin"


@dataclass(slots=True)
class ApiKey:
    key: str
    name: str
    permissions: frozenset[Permission] = field(default_factory=frozenset)
    rate_limit_per_min: int = 100
    active: bool = True
    created_at_ms: int = 0
    last_used_ms: int | None = None
    request_count: int = 0
    error_count: int = 0

    def allows(self, permission: Permission) -> bool:
        # Admin keys carry every permission.
        return permission in self.permissions or Permission.ADMIN in self.permissions
