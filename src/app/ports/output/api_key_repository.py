from __future__ import annotations

from abc import ABC, abstractmethod

from src.domain.models import ApiKey


class IApiKeyRepository(ABC):
    @abstractmethod
    def get(self, key: str) -> ApiKey | None:
        raise NotImplementedError

    @abstractmethod
    def put(self, api_key: ApiKey) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete(self, key: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def list(self) -> tuple[ApiKey, ...]:
        raise NotImplementedError
