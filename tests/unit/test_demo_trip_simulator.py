from __future__ import annotations

import logging
import math
import random

import pytest

from src.app.services.demo_trip_simulator import DemoTripSimulator
from src.domain.algorithms.route_progress import RouteTimeline
from src.domain.algorithms.units import mph_to_mps
from src.domain.exceptions import InvalidRoute
from src.domain.models import GeoPoint, LocationFix, RoadType, RouteSegment, SimulationStatus


def _route() -> list[RouteSegment]:
    return [
        RouteSegment(
            path=(GeoPoint(lat=0.0, lon=0.0), GeoPoint(lat=0.0, lon=0.001)),
            distance_m=111.0,
            duration_s=10.0,
            road_type=RoadType.HIGHWAY,
        ),
        RouteSegment(
            path=(GeoPoint(lat=0.0, lon=0.001), GeoPoint(lat=0.0, lon=0.002)),
            distance_m=111.0,
            duration_s=4.0,
            road_type=RoadType.RESIDENTIAL,
        ),
    ]


def _simulator(scheduler, clock, fixes: list[LocationFix], **kwargs) -> DemoTripSimulator:
    return DemoTripSimulator(
        _route(),
        fixes.append,
        scheduler=scheduler,
        clock=clock,
        rng=random.Random(7),
        **kwargs,
    )


def test_start_emits_first_point_and_arms_one_timer(scheduler, clock) -> None:
    fixes: list[LocationFix] = []
    sim = _simulator(scheduler, clock, fixes)

    sim.start()

    assert len(fixes) == 1
    assert (fixes[0].lat, fixes[0].lon) == (0.0, 0.0)
    assert fixes[0].speed_mps == pytest.approx(mph_to_mps(65.0))
    assert len(scheduler.active) == 1
    assert scheduler.active[0].interval_s == 1.0
    assert sim.get_state().status is SimulationStatus.RUNNING


def test_start_twice_is_rejected(scheduler, clock) -> None:
    sim = _simulator(scheduler, clock, [])
    sim.start()
    with pytest.raises(RuntimeError):
        sim.start()


def test_overshoot_carries_into_next_segment(scheduler, clock) -> None:
    fixes: list[LocationFix] = []
    sim = _simulator(scheduler, clock, fixes, speed_multiplier=3.0)
    sim.start()

    scheduler.fire(4)  # 12 simulated seconds, segment 0 lasts 10

    state = sim.get_state()
    assert state.current_segment_index == 1
    assert state.position_in_segment == pytest.approx(0.5)
    assert fixes[-1].lon == pytest.approx(0.0015)
    assert fixes[-1].speed_mps == pytest.approx(mph_to_mps(25.0))


def test_pause_suppresses_ticks_and_resume_continues(scheduler, clock) -> None:
    fixes: list[LocationFix] = []
    sim = _simulator(scheduler, clock, fixes)
    sim.start()
    scheduler.fire(3)

    sim.pause()
    paused = sim.get_state()
    assert paused.is_paused
    assert scheduler.active == []
    assert sim.tick() is None

    clock.advance(600_000)  # a long pause must not cause a jump
    sim.resume()
    assert sim.get_state().last_update_ms == clock.now_ms
    assert sim.get_state().position_in_segment == paused.position_in_segment

    scheduler.fire()
    assert sim.elapsed_s == pytest.approx(4.0)
    assert sim.get_state().position_in_segment == pytest.approx(0.4)
    assert len(fixes) == 5


def test_finishes_with_single_final_fix(scheduler, clock) -> None:
    fixes: list[LocationFix] = []
    sim = _simulator(scheduler, clock, fixes)
    sim.start()

    scheduler.fire(14)

    final = fixes[-1]
    assert (final.lat, final.lon) == (0.0, 0.002)
    assert final.speed_mps == 0.0
    assert len(fixes) == 15

    state = sim.get_state()
    assert state.status is SimulationStatus.FINISHED
    assert state.is_finished
    assert state.progress_pct == 100.0
    assert scheduler.active == []

    assert sim.tick() is None
    assert len(fixes) == 15


def test_fix_stream_is_monotonic_and_finite(scheduler, clock) -> None:
    fixes: list[LocationFix] = []
    sim = _simulator(scheduler, clock, fixes, speed_multiplier=0.7)
    sim.start()
    scheduler.fire(40)

    stamps = [f.timestamp_ms for f in fixes]
    assert all(b > a for a, b in zip(stamps, stamps[1:]))
    for f in fixes:
        assert math.isfinite(f.lat) and math.isfinite(f.lon)
        assert math.isfinite(f.speed_mps)
        assert 5.0 <= f.accuracy_m <= 10.0
        assert 200.0 <= f.altitude_m <= 300.0
    # Travelling east along the equator.
    assert fixes[1].heading_deg == pytest.approx(90.0)


def test_speed_multiplier_changes_advance_rate(scheduler, clock) -> None:
    sim = _simulator(scheduler, clock, [])
    sim.start()
    scheduler.fire()
    sim.set_speed_multiplier(2.5)
    scheduler.fire()

    assert sim.elapsed_s == pytest.approx(3.5)
    assert sim.get_state().speed_multiplier == 2.5


@pytest.mark.parametrize("multiplier", [0.0, -1.0, math.nan, math.inf])
def test_invalid_speed_multiplier_is_rejected(scheduler, clock, multiplier: float) -> None:
    sim = _simulator(scheduler, clock, [])
    with pytest.raises(ValueError):
        sim.set_speed_multiplier(multiplier)
    assert sim.get_state().speed_multiplier == 1.0


def test_stop_is_idempotent(scheduler, clock) -> None:
    sim = _simulator(scheduler, clock, [])
    sim.start()

    sim.stop()
    sim.stop()

    assert sim.get_state().status is SimulationStatus.STOPPED
    assert scheduler.active == []
    assert sim.tick() is None


def test_empty_route_fails_construction(scheduler) -> None:
    with pytest.raises(InvalidRoute):
        DemoTripSimulator([], lambda fix: None, scheduler=scheduler)


def test_failing_callback_does_not_stop_simulation(scheduler, clock, caplog) -> None:
    def _boom(fix: LocationFix) -> None:
        raise RuntimeError("consumer down")

    sim = DemoTripSimulator(_route(), _boom, scheduler=scheduler, clock=clock)
    with caplog.at_level(logging.ERROR):
        sim.start()
        assert sim.tick() is not None

    assert sim.get_state().status is SimulationStatus.RUNNING
    assert "Demo fix callback failed" in caplog.text


def test_ten_times_speed_crosses_into_second_segment(scheduler, clock) -> None:
    segments = [
        RouteSegment(
            path=(GeoPoint(lat=0.0, lon=0.0), GeoPoint(lat=0.0, lon=0.009)),
            distance_m=1000.0,
            duration_s=60.0,
        ),
        RouteSegment(
            path=(GeoPoint(lat=0.0, lon=0.009), GeoPoint(lat=0.0, lon=0.027)),
            distance_m=2000.0,
            duration_s=120.0,
        ),
    ]
    sim = DemoTripSimulator(
        segments, lambda fix: None, scheduler=scheduler, clock=clock, speed_multiplier=10.0
    )
    sim.start()

    scheduler.fire(6)
    state = sim.get_state()
    assert (state.current_segment_index, state.position_in_segment) == (1, 0.0)

    scheduler.fire()
    state = sim.get_state()
    assert state.current_segment_index == 1
    assert state.position_in_segment == pytest.approx(10.0 / 120.0)

    timeline = RouteTimeline.build(segments)
    assert timeline.distance_at(60.0) == pytest.approx(1000.0)
    assert timeline.distance_at(59.999) == pytest.approx(1000.0, abs=0.1)
    assert timeline.distance_at(70.0) == pytest.approx(1000.0 + 2000.0 / 12.0)


def test_stop_from_first_fix_callback_leaves_no_timer(scheduler, clock) -> None:
    sim: DemoTripSimulator | None = None

    def _stop_on_first(fix: LocationFix) -> None:
        sim.stop()

    sim = DemoTripSimulator(_route(), _stop_on_first, scheduler=scheduler, clock=clock)
    sim.start()

    assert sim.get_state().status is SimulationStatus.STOPPED
    assert scheduler.active == []


def test_pause_from_first_fix_callback_arms_on_resume(scheduler, clock) -> None:
    sim: DemoTripSimulator | None = None

    def _pause_on_first(fix: LocationFix) -> None:
        sim.pause()

    sim = DemoTripSimulator(_route(), _pause_on_first, scheduler=scheduler, clock=clock)
    sim.start()
    assert scheduler.active == []

    sim.resume()
    assert len(scheduler.active) == 1
