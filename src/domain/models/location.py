from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class LocationFix:
    """One GPS sample.

    Speeds are m/s, timestamps are milliseconds since epoch. No validation
    happens here: malformed samples must reach the accumulator so it can
    report them instead of the caller crashing on construction.
    """

    lat: float
    lon: float
    timestamp_ms: int
    accuracy_m: float = 0.0
    speed_mps: float | None = None
    heading_deg: float | None = None
    altitude_m: float | None = None


@dataclass(frozen=True, slots=True)
class GpsStatus:
    is_tracking: bool = False
    permission: str = "unknown"  # granted | denied | prompt | unknown
    last_update_ms: int | None = None
    accuracy_m: float | None = None
    error: str | None = None
