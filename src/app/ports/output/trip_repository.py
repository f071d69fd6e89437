from __future__ import annotations

from abc import ABC, abstractmethod

from src.domain.models import Trip


class ITripRepository(ABC):
    """Storage port for trip records, partitioned by owning API key."""

    @abstractmethod
    def add(self, trip: Trip) -> None:
        raise NotImplementedError

    @abstractmethod
    def get(self, *, owner: str, trip_id: str) -> Trip | None:
        raise NotImplementedError

    @abstractmethod
    def list(self, *, owner: str) -> tuple[Trip, ...]:
        raise NotImplementedError

    @abstractmethod
    def delete(self, *, owner: str, trip_id: str) -> bool:
        raise NotImplementedError
