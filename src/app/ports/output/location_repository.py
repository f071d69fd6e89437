from __future__ import annotations

from abc import ABC, abstractmethod

from src.domain.models import GpsStatus, LocationFix


class ILocationRepository(ABC):
    """Storage port for raw GPS samples and tracking status per API key."""

    @abstractmethod
    def append(self, *, owner: str, fix: LocationFix) -> None:
        raise NotImplementedError

    @abstractmethod
    def latest(self, *, owner: str) -> LocationFix | None:
        raise NotImplementedError

    @abstractmethod
    def history(
        self, *, owner: str, limit: int, offset: int = 0
    ) -> tuple[tuple[LocationFix, ...], int]:
        """Return a page of samples (oldest first) and the total retained."""

    @abstractmethod
    def get_status(self, *, owner: str) -> GpsStatus | None:
        raise NotImplementedError

    @abstractmethod
    def set_status(self, *, owner: str, status: GpsStatus) -> None:
        raise NotImplementedError
