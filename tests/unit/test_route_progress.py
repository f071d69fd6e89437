from __future__ import annotations

import math

import pytest

from src.domain.algorithms.route_progress import (
    RouteTimeline,
    interpolate_segment,
    validate_route,
)
from src.domain.exceptions import InvalidRoute
from src.domain.models import GeoPoint, RoadType, RouteSegment


def _segment(
    *points: tuple[float, float],
    distance_m: float = 100.0,
    duration_s: float = 10.0,
    road_type: RoadType = RoadType.LOCAL,
    speed_limit_mph: float | None = None,
) -> RouteSegment:
    return RouteSegment(
        path=tuple(GeoPoint(lat=lat, lon=lon) for lat, lon in points),
        distance_m=distance_m,
        duration_s=duration_s,
        road_type=road_type,
        speed_limit_mph=speed_limit_mph,
    )


def test_empty_route_is_invalid() -> None:
    with pytest.raises(InvalidRoute):
        validate_route([])


@pytest.mark.parametrize(
    "segment",
    [
        _segment((0.0, 0.0)),
        _segment((0.0, 0.0), (0.0, 0.001), distance_m=0.0),
        _segment((0.0, 0.0), (0.0, 0.001), duration_s=0.0),
        _segment((0.0, 0.0), (0.0, 0.001), duration_s=-3.0),
        _segment((0.0, 0.0), (0.0, 0.001), duration_s=math.nan),
        _segment((0.0, 0.0), (0.0, 0.001), speed_limit_mph=0.0),
    ],
)
def test_malformed_segment_is_invalid(segment: RouteSegment) -> None:
    ok = _segment((0.0, 0.0), (0.0, 0.001))
    with pytest.raises(InvalidRoute):
        RouteTimeline.build([ok, segment])


def test_invalid_route_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        validate_route([])


def test_locate_within_first_segment() -> None:
    timeline = RouteTimeline.build(
        [_segment((0.0, 0.0), (0.0, 0.001), duration_s=10.0)]
    )
    assert timeline.locate(0.0) == (0, 0.0)
    assert timeline.locate(2.5) == (0, 0.25)


def test_overshoot_carries_into_next_segment() -> None:
    timeline = RouteTimeline.build(
        [
            _segment((0.0, 0.0), (0.0, 0.001), duration_s=10.0),
            _segment((0.0, 0.001), (0.0, 0.002), duration_s=4.0),
        ]
    )
    assert timeline.locate(10.0) == (1, 0.0)
    assert timeline.locate(12.0) == (1, 0.5)
    assert timeline.total_duration_s == 14.0


def test_locate_past_end_reports_finished() -> None:
    timeline = RouteTimeline.build([_segment((0.0, 0.0), (0.0, 0.001))])
    assert timeline.locate(10.0) == (1, 0.0)
    assert timeline.locate(1_000.0) == (1, 0.0)


def test_distance_at_follows_timeline() -> None:
    timeline = RouteTimeline.build(
        [
            _segment((0.0, 0.0), (0.0, 0.001), distance_m=100.0, duration_s=10.0),
            _segment((0.0, 0.001), (0.0, 0.002), distance_m=50.0, duration_s=10.0),
        ]
    )
    assert timeline.total_distance_m == 150.0
    assert timeline.distance_at(5.0) == pytest.approx(50.0)
    assert timeline.distance_at(15.0) == pytest.approx(125.0)
    assert timeline.distance_at(30.0) == pytest.approx(150.0)


def test_interpolation_spreads_over_vertex_indices() -> None:
    seg = _segment((0.0, 0.0), (0.0, 1.0), (0.0, 3.0))

    assert interpolate_segment(seg, 0.0) == GeoPoint(lat=0.0, lon=0.0)
    assert interpolate_segment(seg, 0.5) == GeoPoint(lat=0.0, lon=1.0)
    assert interpolate_segment(seg, 0.75).lon == pytest.approx(2.0)
    assert interpolate_segment(seg, 1.0) == GeoPoint(lat=0.0, lon=3.0)


def test_target_speed_uses_limit_or_road_default() -> None:
    highway = _segment((0.0, 0.0), (0.0, 0.001), road_type=RoadType.HIGHWAY)
    limited = _segment((0.0, 0.0), (0.0, 0.001), speed_limit_mph=30.0)

    assert highway.effective_speed_limit_mph == 65.0
    assert highway.target_speed_mps == pytest.approx(65.0 * 0.44704)
    assert limited.target_speed_mps == pytest.approx(30.0 * 0.44704)
