from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from src.domain.models import ApiKey, Permission

logger = logging.getLogger(__name__)


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    return int(raw) if raw else default


def _env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    return float(raw) if raw else default


def parse_api_keys(raw: str | None) -> tuple[ApiKey, ...]:
    """Parse seed keys from 'key|name|perm1,perm2|rate_limit;...'.

    Name, permissions and rate limit are optional. Malformed entries and
    unknown permissions are skipped with a warning.
    """

    out: list[ApiKey] = []
    for entry in (raw or "").split(";"):
        entry = entry.strip()
        if not entry:
            continue
        parts = [p.strip() for p in entry.split("|")]
        key = parts[0]
        if not key:
            continue
        name = parts[1] if len(parts) > 1 and parts[1] else "Seed Key"

        permissions: set[Permission] = set()
        if len(parts) > 2 and parts[2]:
            for raw_perm in parts[2].split(","):
                raw_perm = raw_perm.strip()
                try:
                    permissions.add(Permission(raw_perm))
                except ValueError:
                    logger.warning("Ignoring unknown permission %r for key %s", raw_perm, name)
        else:
            permissions = {
                Permission.GPS_READ,
                Permission.TRIPS_READ,
                Permission.TRIPS_WRITE,
                Permission.STATS_READ,
            }

        rate_limit = 100
        if len(parts) > 3 and parts[3]:
            try:
                rate_limit = int(parts[3])
            except ValueError:
                logger.warning("Ignoring bad rate limit %r for key %s", parts[3], name)

        out.append(
            ApiKey(
                key=key,
                name=name,
                permissions=frozenset(permissions),
                rate_limit_per_min=rate_limit,
            )
        )
    return tuple(out)


@dataclass(frozen=True, slots=True)
class TrackerRuntimeConfig:
    history_limit: int = 1000
    tick_interval_s: float = 1.0
    max_trips_per_key: int = 100
    rate_limit_window_s: float = 60.0
    reveal_errors: bool = False
    api_keys: tuple[ApiKey, ...] = ()

    @staticmethod
    def from_env() -> "TrackerRuntimeConfig":
        api_keys = parse_api_keys(os.getenv("TRIPTRACKER_API_KEYS"))
        if not api_keys:
            logger.warning("TRIPTRACKER_API_KEYS is empty; every request will be rejected")

        return TrackerRuntimeConfig(
            history_limit=_env_int("TRIPTRACKER_HISTORY_LIMIT", 1000),
            tick_interval_s=_env_float("TRIPTRACKER_TICK_INTERVAL_S", 1.0),
            max_trips_per_key=_env_int("TRIPTRACKER_MAX_TRIPS_PER_KEY", 100),
            rate_limit_window_s=_env_float("TRIPTRACKER_RATE_LIMIT_WINDOW_S", 60.0),
            reveal_errors=_env_bool("TRIPTRACKER_REVEAL_ERRORS", False),
            api_keys=api_keys,
        )
