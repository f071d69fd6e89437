from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from typing import Any

import httpx

from src.app.ports.output import IRouteProvider
from src.domain.algorithms.geo_utils import point_distance_m
from src.domain.algorithms.units import mph_to_mps
from src.domain.exceptions import RouteProviderError
from src.domain.models import DEFAULT_SPEED_LIMITS_MPH, GeoPoint, RoadType, RouteSegment

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openrouteservice.org"

_ROAD_KEYWORDS: tuple[tuple[RoadType, tuple[str, ...]], ...] = (
    (RoadType.HIGHWAY, ("highway", "freeway", "interstate")),
    (RoadType.ARTERIAL, ("boulevard", "avenue", "main")),
    (RoadType.RESIDENTIAL, ("street", "drive", "lane", "court")),
    (RoadType.PARKING, ("parking",)),
)


def classify_road_type(text: str | None) -> RoadType:
    """Coarse road class from a turn instruction or street name."""

    words = set(re.findall(r"[a-z0-9]+", (text or "").lower()))
    for road_type, keywords in _ROAD_KEYWORDS:
        if words.intersection(keywords):
            return road_type
    return RoadType.LOCAL


def straight_line_route(start: GeoPoint, end: GeoPoint) -> tuple[RouteSegment, ...]:
    """Single residential segment between two points."""

    distance_m = point_distance_m(start, end)
    speed_mps = mph_to_mps(DEFAULT_SPEED_LIMITS_MPH[RoadType.RESIDENTIAL])
    return (
        RouteSegment(
            path=(start, end),
            distance_m=distance_m,
            duration_s=distance_m / speed_mps,
            road_type=RoadType.RESIDENTIAL,
            instruction="Head to destination",
        ),
    )


def _segments_from_geojson(payload: dict[str, Any]) -> tuple[RouteSegment, ...]:
    features = payload.get("features") or []
    if not features:
        raise RouteProviderError("Routing response has no route")

    feature = features[0]
    coords = (feature.get("geometry") or {}).get("coordinates") or []
    path = tuple(GeoPoint.from_lon_lat((float(c[0]), float(c[1]))) for c in coords)
    if len(path) < 2:
        raise RouteProviderError("Routing response geometry is too short")

    props = feature.get("properties") or {}
    out: list[RouteSegment] = []
    for section in props.get("segments") or []:
        for step in section.get("steps") or []:
            distance = float(step.get("distance") or 0.0)
            duration = float(step.get("duration") or 0.0)
            way_points = step.get("way_points") or []
            if distance <= 0 or duration <= 0 or len(way_points) != 2:
                continue  # arrival markers and zero-length maneuvers

            i, j = int(way_points[0]), int(way_points[1])
            step_path = path[i : j + 1]
            if len(step_path) < 2:
                continue

            label = step.get("instruction") or step.get("name")
            out.append(
                RouteSegment(
                    path=step_path,
                    distance_m=distance,
                    duration_s=duration,
                    road_type=classify_road_type(label),
                    name=(step.get("name") or None),
                    instruction=(step.get("instruction") or None),
                )
            )

    if out:
        return tuple(out)

    summary = props.get("summary") or {}
    distance = float(summary.get("distance") or 0.0)
    duration = float(summary.get("duration") or 0.0)
    if distance <= 0 or duration <= 0:
        raise RouteProviderError("Routing response has no usable steps")
    return (
        RouteSegment(
            path=path,
            distance_m=distance,
            duration_s=duration,
            road_type=RoadType.LOCAL,
        ),
    )


@dataclass(slots=True)
class OpenRouteServiceProvider(IRouteProvider):
    """Driving directions from OpenRouteService, split into per-step segments.

    Env vars:
      - ORS_API_KEY: API key; without it every lookup uses the fallback
      - ORS_BASE_URL: override the service URL (default public endpoint)
      - ORS_TIMEOUT_S: request timeout (default 10)

    With `fallback_on_error` set, failures are logged and a straight-line
    route is returned instead of raising `RouteProviderError`.
    """

    api_key: str | None = None
    base_url: str | None = None
    timeout_s: float = 10.0
    fallback_on_error: bool = True
    transport: httpx.AsyncBaseTransport | None = None

    def __post_init__(self) -> None:
        if self.api_key is None:
            self.api_key = os.getenv("ORS_API_KEY") or None
        if self.base_url is None:
            self.base_url = os.getenv("ORS_BASE_URL", DEFAULT_BASE_URL)
        if os.getenv("ORS_TIMEOUT_S"):
            self.timeout_s = float(os.environ["ORS_TIMEOUT_S"])

    async def get_route(
        self, *, start: GeoPoint, end: GeoPoint
    ) -> tuple[RouteSegment, ...]:
        try:
            return await self._fetch(start=start, end=end)
        except (
            httpx.HTTPError,
            RouteProviderError,
            ValueError,
            KeyError,
            TypeError,
            IndexError,
        ) as exc:
            if not self.fallback_on_error:
                if isinstance(exc, RouteProviderError):
                    raise
                raise RouteProviderError(f"Routing request failed: {exc}") from exc
            logger.warning("Routing lookup failed, using straight line: %s", exc)
            return straight_line_route(start, end)

    async def _fetch(self, *, start: GeoPoint, end: GeoPoint) -> tuple[RouteSegment, ...]:
        if not self.api_key:
            raise RouteProviderError("ORS_API_KEY not configured")

        url = f"{(self.base_url or DEFAULT_BASE_URL).rstrip('/')}/v2/directions/driving-car/geojson"
        body = {"coordinates": [list(start.as_lon_lat()), list(end.as_lon_lat())]}
        headers = {"Authorization": self.api_key, "Accept": "application/geo+json"}

        async with httpx.AsyncClient(
            timeout=self.timeout_s, transport=self.transport
        ) as client:
            resp = await client.post(url, json=body, headers=headers)
            resp.raise_for_status()
            payload = resp.json()

        return _segments_from_geojson(payload)
