from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Iterable
from uuid import uuid4

from src.app.ports.output import IApiKeyRepository
from src.domain.exceptions import AuthenticationError, PermissionDenied
from src.domain.models import ApiKey, Permission

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


def mask_key(key: str) -> str:
    if len(key) <= 8:
        return "****"
    return f"{key[:4]}****{key[-4:]}"


@dataclass(slots=True)
class ApiKeyService:
    """Issues, validates and tracks usage of API keys."""

    repository: IApiKeyRepository
    clock: Callable[[], int] = _now_ms

    def authenticate(self, key: str | None) -> ApiKey:
        if not key:
            raise AuthenticationError(
                "API key required. Provide it via Authorization header, "
                "X-API-Key header, or apiKey query parameter."
            )
        api_key = self.repository.get(key)
        if api_key is None:
            raise AuthenticationError("Invalid API key")
        if not api_key.active:
            raise AuthenticationError("API key is disabled")
        return api_key

    def authorize(self, api_key: ApiKey, permission: Permission) -> None:
        if not api_key.allows(permission):
            raise PermissionDenied(f"Permission '{permission.value}' required")

    def record_usage(self, api_key: ApiKey, *, error: bool = False) -> None:
        api_key.request_count += 1
        if error:
            api_key.error_count += 1
        api_key.last_used_ms = self.clock()

    def create_key(
        self,
        *,
        name: str,
        permissions: Iterable[Permission],
        rate_limit_per_min: int = 100,
    ) -> ApiKey:
        api_key = ApiKey(
            key=f"gps_{uuid4().hex}",
            name=name,
            permissions=frozenset(permissions),
            rate_limit_per_min=rate_limit_per_min,
            created_at_ms=self.clock(),
        )
        self.repository.put(api_key)
        logger.info("Issued API key %s (%s)", mask_key(api_key.key), name)
        return api_key

    def set_active(self, key: str, active: bool) -> ApiKey | None:
        api_key = self.repository.get(key)
        if api_key is not None:
            api_key.active = active
        return api_key

    def revoke(self, key: str) -> bool:
        deleted = self.repository.delete(key)
        if deleted:
            logger.info("Revoked API key %s", mask_key(key))
        return deleted

    def list_keys(self) -> tuple[ApiKey, ...]:
        return self.repository.list()
