from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from fastapi import Depends, Request, Response

from src.adapters.config import TrackerRuntimeConfig
from src.adapters.persistence import (
    InMemoryApiKeyRepository,
    InMemoryLocationRepository,
    InMemoryTripRepository,
)
from src.adapters.routing.openrouteservice_provider import OpenRouteServiceProvider
from src.adapters.scheduling.asyncio_tick_scheduler import AsyncioTickScheduler
from src.app.ports.output import IRouteProvider, ITickScheduler
from src.app.services.api_key_service import ApiKeyService
from src.app.services.gps_tracking_service import GpsTrackingService
from src.app.services.rate_limiter import RateLimitDecision, RateLimiter
from src.app.services.trip_service import TripService
from src.domain.models import ApiKey, Permission


@dataclass(slots=True)
class ServiceContainer:
    """Process-wide services shared by every request (lives on `app.state`)."""

    config: TrackerRuntimeConfig
    trips: TripService
    gps: GpsTrackingService
    api_keys: ApiKeyService
    rate_limiter: RateLimiter

    @staticmethod
    def build(
        config: TrackerRuntimeConfig,
        *,
        scheduler: ITickScheduler | None = None,
        route_provider: IRouteProvider | None = None,
    ) -> "ServiceContainer":
        trips = TripService(
            repository=InMemoryTripRepository(
                max_trips_per_owner=config.max_trips_per_key
            ),
            scheduler=scheduler or AsyncioTickScheduler(),
            route_provider=route_provider or OpenRouteServiceProvider(),
            history_limit=config.history_limit,
            tick_interval_s=config.tick_interval_s,
        )
        return ServiceContainer(
            config=config,
            trips=trips,
            gps=GpsTrackingService(
                repository=InMemoryLocationRepository(history_limit=config.history_limit)
            ),
            api_keys=ApiKeyService(
                repository=InMemoryApiKeyRepository(seed=config.api_keys)
            ),
            rate_limiter=RateLimiter(),
        )


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


def get_trip_service(
    container: ServiceContainer = Depends(get_container),
) -> TripService:
    return container.trips


def get_gps_service(
    container: ServiceContainer = Depends(get_container),
) -> GpsTrackingService:
    return container.gps


def get_api_key_service(
    container: ServiceContainer = Depends(get_container),
) -> ApiKeyService:
    return container.api_keys


def extract_api_key(request: Request) -> str | None:
    """Key from `Authorization: Bearer`, `X-API-Key`, or `?apiKey=`."""

    auth = request.headers.get("authorization") or ""
    if auth.lower().startswith("bearer "):
        return auth[7:].strip() or None
    return request.headers.get("x-api-key") or request.query_params.get("apiKey")


def _set_rate_limit_headers(response: Response, decision: RateLimitDecision) -> None:
    response.headers["X-RateLimit-Limit"] = str(decision.limit)
    response.headers["X-RateLimit-Remaining"] = str(decision.remaining)
    response.headers["X-RateLimit-Reset"] = str(int(decision.reset_at_s))


def require(
    permission: Permission, *, bucket: str, limit: int
) -> Callable[..., ApiKey]:
    """Dependency: authenticate, rate limit, then check `permission`.

    Each key gets its overall per-window budget plus a per-endpoint budget
    named by `bucket`; the tighter of the two is reported in the headers.
    """

    def dependency(
        request: Request,
        response: Response,
        container: ServiceContainer = Depends(get_container),
    ) -> ApiKey:
        api_key = container.api_keys.authenticate(extract_api_key(request))
        window_s = container.config.rate_limit_window_s
        limiter = container.rate_limiter

        try:
            overall = limiter.enforce(
                api_key.key, limit=api_key.rate_limit_per_min, window_s=window_s
            )
            endpoint = limiter.enforce(
                f"{api_key.key}:{bucket}", limit=limit, window_s=window_s
            )
            container.api_keys.authorize(api_key, permission)
        except Exception:
            container.api_keys.record_usage(api_key, error=True)
            raise

        container.api_keys.record_usage(api_key)
        _set_rate_limit_headers(
            response, endpoint if endpoint.remaining <= overall.remaining else overall
        )
        return api_key

    return dependency
