from __future__ import annotations

import math
from bisect import bisect_right
from dataclasses import dataclass
from typing import Iterable

from src.domain.exceptions import InvalidRoute
from src.domain.models import GeoPoint, RouteSegment


def _positive(value: float | None) -> bool:
    return value is not None and math.isfinite(value) and value > 0


def validate_route(segments: Iterable[RouteSegment]) -> tuple[RouteSegment, ...]:
    route = tuple(segments)
    if not route:
        raise InvalidRoute("Route has no segments")

    for i, seg in enumerate(route):
        if len(seg.path) < 2:
            raise InvalidRoute(f"Segment {i} needs at least 2 coordinates")
        if not _positive(seg.distance_m):
            raise InvalidRoute(f"Segment {i} has non-positive distance: {seg.distance_m}")
        if not _positive(seg.duration_s):
            raise InvalidRoute(f"Segment {i} has non-positive duration: {seg.duration_s}")
        if seg.speed_limit_mph is not None and not _positive(seg.speed_limit_mph):
            raise InvalidRoute(
                f"Segment {i} has non-positive speed limit: {seg.speed_limit_mph}"
            )
    return route


@dataclass(frozen=True, slots=True)
class RouteTimeline:
    """Maps simulated elapsed seconds onto (segment index, fraction).

    Positions are derived from the cumulative elapsed time rather than
    stepped per tick, so overshoot past a segment end always lands in the
    next segment.
    """

    segments: tuple[RouteSegment, ...]
    ends_s: tuple[float, ...]

    @classmethod
    def build(cls, segments: Iterable[RouteSegment]) -> RouteTimeline:
        route = validate_route(segments)
        ends: list[float] = []
        total = 0.0
        for seg in route:
            total += float(seg.duration_s)
            ends.append(total)
        return cls(segments=route, ends_s=tuple(ends))

    @property
    def total_duration_s(self) -> float:
        return self.ends_s[-1]

    @property
    def total_distance_m(self) -> float:
        return float(sum(seg.distance_m for seg in self.segments))

    def locate(self, elapsed_s: float) -> tuple[int, float]:
        if elapsed_s >= self.ends_s[-1]:
            return len(self.segments), 0.0
        elapsed_s = max(0.0, elapsed_s)

        idx = bisect_right(self.ends_s, elapsed_s)
        start_s = self.ends_s[idx - 1] if idx > 0 else 0.0
        pos = (elapsed_s - start_s) / self.segments[idx].duration_s
        if pos >= 1.0:
            pos = math.nextafter(1.0, 0.0)
        return idx, pos

    def distance_at(self, elapsed_s: float) -> float:
        """Route distance covered after `elapsed_s` simulated seconds."""

        idx, pos = self.locate(elapsed_s)
        done = sum(seg.distance_m for seg in self.segments[:idx])
        if idx < len(self.segments):
            done += pos * self.segments[idx].distance_m
        return float(done)

    def end_point(self) -> GeoPoint:
        return self.segments[-1].path[-1]


def interpolate_segment(segment: RouteSegment, position: float) -> GeoPoint:
    """Linear interpolation between the path vertices around `position`.

    The fraction is spread evenly over vertex indices, not over geodesic
    length.
    """

    pts = segment.path
    scaled = max(0.0, min(1.0, position)) * (len(pts) - 1)
    i = min(int(scaled), len(pts) - 2)
    t = scaled - i

    a = pts[i]
    b = pts[i + 1]
    return GeoPoint(lat=a.lat + (b.lat - a.lat) * t, lon=a.lon + (b.lon - a.lon) * t)
