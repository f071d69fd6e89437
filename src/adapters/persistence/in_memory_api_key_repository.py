from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from src.app.ports.output import IApiKeyRepository
from src.domain.models import ApiKey


@dataclass(slots=True)
class InMemoryApiKeyRepository(IApiKeyRepository):
    seed: Iterable[ApiKey] = ()
    _keys: dict[str, ApiKey] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        for api_key in self.seed:
            self._keys[api_key.key] = api_key

    def get(self, key: str) -> ApiKey | None:
        return self._keys.get(key)

    def put(self, api_key: ApiKey) -> None:
        self._keys[api_key.key] = api_key

    def delete(self, key: str) -> bool:
        return self._keys.pop(key, None) is not None

    def list(self) -> tuple[ApiKey, ...]:
        return tuple(self._keys.values())
