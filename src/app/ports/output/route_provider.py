from __future__ import annotations

from abc import ABC, abstractmethod

from src.domain.models import GeoPoint, RouteSegment


class IRouteProvider(ABC):
    """Port for fetching a drivable route as simulator segments."""

    @abstractmethod
    async def get_route(
        self, *, start: GeoPoint, end: GeoPoint
    ) -> tuple[RouteSegment, ...]:
        raise NotImplementedError
