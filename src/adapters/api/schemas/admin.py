from __future__ import annotations

from pydantic import BaseModel, Field

from src.app.services.api_key_service import mask_key
from src.domain.models import ApiKey, Permission


class ApiKeySchema(BaseModel):
    key: str
    name: str
    permissions: list[str]
    rate_limit: int
    active: bool
    created_at: int
    last_used: int | None = None
    requests: int = 0
    errors: int = 0

    @classmethod
    def from_domain(cls, api_key: ApiKey, *, masked: bool = True) -> ApiKeySchema:
        return cls(
            key=mask_key(api_key.key) if masked else api_key.key,
            name=api_key.name,
            permissions=sorted(p.value for p in api_key.permissions),
            rate_limit=api_key.rate_limit_per_min,
            active=api_key.active,
            created_at=api_key.created_at_ms,
            last_used=api_key.last_used_ms,
            requests=api_key.request_count,
            errors=api_key.error_count,
        )


class ApiKeyCreateSchema(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    permissions: list[Permission] = Field(default_factory=lambda: [Permission.GPS_READ])
    rate_limit: int = Field(default=100, ge=1, le=100_000)


class ApiKeyActiveSchema(BaseModel):
    active: bool
