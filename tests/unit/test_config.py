from __future__ import annotations

import pytest

from src.adapters.config import TrackerRuntimeConfig, parse_api_keys
from src.domain.models import Permission


@pytest.mark.unit
def test_parse_api_keys_full_and_default_entries() -> None:
    keys = parse_api_keys(
        "abc123|Phone|gps:read,trips:write|50; def456 ;ghi789|Admin|admin"
    )

    assert [k.key for k in keys] == ["abc123", "def456", "ghi789"]
    assert keys[0].name == "Phone"
    assert keys[0].permissions == {Permission.GPS_READ, Permission.TRIPS_WRITE}
    assert keys[0].rate_limit_per_min == 50
    assert Permission.STATS_READ in keys[1].permissions
    assert Permission.ADMIN not in keys[1].permissions
    assert keys[2].permissions == {Permission.ADMIN}
    assert keys[2].rate_limit_per_min == 100


@pytest.mark.unit
def test_parse_api_keys_skips_unknown_permissions() -> None:
    (key,) = parse_api_keys("k|n|gps:read,teleport|oops")
    assert key.permissions == {Permission.GPS_READ}
    assert key.rate_limit_per_min == 100


@pytest.mark.unit
def test_parse_api_keys_empty() -> None:
    assert parse_api_keys(None) == ()
    assert parse_api_keys(" ; ") == ()


@pytest.mark.unit
def test_config_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TRIPTRACKER_HISTORY_LIMIT", "250")
    monkeypatch.setenv("TRIPTRACKER_TICK_INTERVAL_S", "0.5")
    monkeypatch.setenv("TRIPTRACKER_MAX_TRIPS_PER_KEY", "7")
    monkeypatch.setenv("TRIPTRACKER_RATE_LIMIT_WINDOW_S", "30")
    monkeypatch.setenv("TRIPTRACKER_REVEAL_ERRORS", "yes")
    monkeypatch.setenv("TRIPTRACKER_API_KEYS", "k1|One")

    cfg = TrackerRuntimeConfig.from_env()

    assert cfg.history_limit == 250
    assert cfg.tick_interval_s == 0.5
    assert cfg.max_trips_per_key == 7
    assert cfg.rate_limit_window_s == 30.0
    assert cfg.reveal_errors is True
    assert [k.name for k in cfg.api_keys] == ["One"]


@pytest.mark.unit
def test_config_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "TRIPTRACKER_HISTORY_LIMIT",
        "TRIPTRACKER_TICK_INTERVAL_S",
        "TRIPTRACKER_REVEAL_ERRORS",
        "TRIPTRACKER_API_KEYS",
    ):
        monkeypatch.delenv(name, raising=False)

    cfg = TrackerRuntimeConfig.from_env()

    assert cfg.history_limit == 1000
    assert cfg.tick_interval_s == 1.0
    assert cfg.reveal_errors is False
    assert cfg.api_keys == ()
