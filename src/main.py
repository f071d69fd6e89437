from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from src.adapters.api.controllers.admin import router as admin_router
from src.adapters.api.controllers.demo import router as demo_router
from src.adapters.api.controllers.gps import router as gps_router
from src.adapters.api.controllers.stats import router as stats_router
from src.adapters.api.controllers.trips import router as trips_router
from src.adapters.api.dependencies import ServiceContainer
from src.adapters.config import TrackerRuntimeConfig
from src.app.ports.output import IRouteProvider, ITickScheduler
from src.domain.exceptions import (
    AuthenticationError,
    InvalidFix,
    InvalidRoute,
    PermissionDenied,
    RateLimitExceeded,
    RouteProviderError,
    TripNotFound,
    TripStateError,
)

_STATUS_BY_ERROR: tuple[tuple[type[Exception], int], ...] = (
    (AuthenticationError, 401),
    (PermissionDenied, 403),
    (TripNotFound, 404),
    (TripStateError, 409),
    (InvalidFix, 422),
    (InvalidRoute, 422),
    (ValueError, 422),
    (RouteProviderError, 502),
)


def create_app(
    config: TrackerRuntimeConfig | None = None,
    *,
    scheduler: ITickScheduler | None = None,
    route_provider: IRouteProvider | None = None,
) -> FastAPI:
    config = config or TrackerRuntimeConfig.from_env()

    app = FastAPI(title="Trip Tracker")
    app.state.container = ServiceContainer.build(
        config, scheduler=scheduler, route_provider=route_provider
    )

    # /trips/demo must be matched before /trips/{trip_id}.
    app.include_router(demo_router)
    app.include_router(trips_router)
    app.include_router(gps_router)
    app.include_router(stats_router)
    app.include_router(admin_router)

    for exc_type, status_code in _STATUS_BY_ERROR:
        app.add_exception_handler(exc_type, _status_handler(status_code))

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
        return JSONResponse(
            status_code=429,
            content={"detail": str(exc), "retry_after": exc.retry_after_s},
            headers={
                "Retry-After": str(exc.retry_after_s),
                "X-RateLimit-Limit": str(exc.limit),
                "X-RateLimit-Remaining": "0",
                "X-RateLimit-Reset": str(int(exc.reset_at_s)),
            },
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Ensure API errors are JSON so clients can always parse them.

        Starlette's default 500 handler returns plain text, which API
        consumers then fail to decode.
        """

        logging.getLogger("uvicorn.error").exception(
            "Unhandled exception", extra={"path": str(request.url.path)}
        )

        if config.reveal_errors or isinstance(exc, RuntimeError):
            detail = str(exc) or exc.__class__.__name__
        else:
            detail = "Internal Server Error"

        return JSONResponse(status_code=500, content={"detail": detail})

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


def _status_handler(status_code: int):
    async def handler(request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(
            status_code=status_code, content={"detail": str(exc) or exc.__class__.__name__}
        )

    return handler


app = create_app()
