from __future__ import annotations

from pydantic import BaseModel

from src.domain.models import GpsStatus

from .common import LocationFixSchema


class GpsHistorySchema(BaseModel):
    locations: list[LocationFixSchema]
    total: int
    limit: int
    offset: int


class GpsStatusSchema(BaseModel):
    is_tracking: bool
    permission: str
    last_update: int | None = None
    accuracy: float | None = None
    error: str | None = None

    @classmethod
    def from_domain(cls, status: GpsStatus) -> GpsStatusSchema:
        return cls(
            is_tracking=status.is_tracking,
            permission=status.permission,
            last_update=status.last_update_ms,
            accuracy=status.accuracy_m,
            error=status.error,
        )
