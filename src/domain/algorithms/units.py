"""Unit conversions for the presentation boundary.

Internal math is meters, m/s and milliseconds throughout.
"""

from __future__ import annotations

MPS_PER_MPH = 0.44704
METERS_PER_MILE = 1609.344


def mph_to_mps(mph: float) -> float:
    return mph * MPS_PER_MPH


def mps_to_mph(mps: float) -> float:
    return mps / MPS_PER_MPH


def mps_to_kmh(mps: float) -> float:
    return mps * 3.6


def meters_to_km(meters: float) -> float:
    return meters / 1000.0


def meters_to_miles(meters: float) -> float:
    return meters / METERS_PER_MILE
