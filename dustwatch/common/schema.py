"""Minimal strict schemas for YAML config validation."""

from __future__ import annotations

from dustwatch.common.errors import ConfigError

TIERING_MODES = ("global", "per_group")


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    if not isinstance(obj, dict):
        raise ConfigError(f"{ctx} must be a mapping")
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def _assert_number(value, ctx: str, *, minimum: float, maximum: float) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{ctx} must be a number")
    if not minimum <= value <= maximum:
        raise ConfigError(f"{ctx} out of range [{minimum}, {maximum}]: {value}")


def _assert_count(value, ctx: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{ctx} must be an integer")
    if value < 1:
        raise ConfigError(f"{ctx} must be at least 1")


def validate_locations_config(cfg: dict, *, allow_unknown: bool = False) -> dict:
    _assert_required_keys(cfg, {"groups", "locations"}, "locations config")
    _assert_no_unknown_keys(cfg, {"groups", "locations"}, "locations config", allow_unknown)

    groups = cfg["groups"]
    if not isinstance(groups, list) or not groups:
        raise ConfigError("groups must be a non-empty list")
    if len(set(groups)) != len(groups):
        raise ConfigError("groups must not contain duplicates")

    locations = cfg["locations"]
    if not isinstance(locations, list):
        raise ConfigError("locations must be a list")

    known = {"id", "name", "lat", "lon", "group"}
    ids: list[str] = []
    for idx, loc in enumerate(locations):
        ctx = f"locations[{idx}]"
        _assert_required_keys(loc, known, ctx)
        _assert_no_unknown_keys(loc, known, ctx, allow_unknown)
        _assert_number(loc["lat"], f"{ctx}.lat", minimum=-90, maximum=90)
        _assert_number(loc["lon"], f"{ctx}.lon", minimum=-180, maximum=180)
        if loc["group"] not in groups:
            raise ConfigError(f"Unknown group in {ctx}: {loc['group']}")
        ids.append(str(loc["id"]))

    dupes = {loc_id for loc_id in ids if ids.count(loc_id) > 1}
    if dupes:
        raise ConfigError(f"Duplicate location ids: {', '.join(sorted(dupes))}")

    return cfg


def validate_sources_config(cfg: dict, *, allow_unknown: bool = False) -> dict:
    top_required = {"forecast", "air_quality", "http", "polling", "tiering"}
    _assert_required_keys(cfg, top_required, "sources config")
    _assert_no_unknown_keys(cfg, top_required, "sources config", allow_unknown)

    _assert_required_keys(cfg["forecast"], {"endpoint", "timezone"}, "forecast")
    _assert_required_keys(cfg["air_quality"], {"endpoint", "timezone"}, "air_quality")
    _assert_required_keys(
        cfg["http"],
        {"connect_timeout", "read_timeout", "rate_per_sec", "max_workers"},
        "http",
    )
    _assert_required_keys(cfg["polling"], {"interval_seconds", "horizon"}, "polling")
    _assert_required_keys(cfg["tiering"], {"mode"}, "tiering")

    for key in ("connect_timeout", "read_timeout", "rate_per_sec"):
        _assert_number(cfg["http"][key], f"http.{key}", minimum=0, maximum=float("inf"))
    _assert_number(cfg["polling"]["interval_seconds"], "polling.interval_seconds", minimum=0, maximum=float("inf"))
    _assert_count(cfg["http"]["max_workers"], "http.max_workers")
    _assert_count(cfg["polling"]["horizon"], "polling.horizon")
    if cfg["tiering"]["mode"] not in TIERING_MODES:
        raise ConfigError(f"Unsupported tiering mode: {cfg['tiering']['mode']}")

    return cfg
