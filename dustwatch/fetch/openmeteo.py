"""Open-Meteo forecast and air-quality retrieval for a single location."""

from __future__ import annotations

import math
from concurrent.futures import ThreadPoolExecutor

from dustwatch.common.constants import (
    AIR_QUALITY_ENDPOINT,
    AIR_QUALITY_HOURLY_FIELDS,
    FORECAST_ENDPOINT,
    FORECAST_HOURLY_FIELDS,
)
from dustwatch.common.http import HttpClient
from dustwatch.common.models import FetchOk, HourlySeries, Location, Observation

# Provider variable name -> observation field.
FORECAST_FIELD_MAP = {
    "windspeed_10m": "wind",
    "winddirection_10m": "direction",
    "relativehumidity_2m": "rh",
}
AIR_QUALITY_FIELD_MAP = {
    "pm10": "pm10",
    "dust": "dust",
}


def _safe_float(value: object) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _hourly_block(payload: dict) -> dict:
    hourly = payload.get("hourly")
    return hourly if isinstance(hourly, dict) else {}


def _values(hourly: dict, name: str) -> tuple[float | None, ...]:
    raw = hourly.get(name)
    if not isinstance(raw, list):
        return ()
    return tuple(_safe_float(value) for value in raw)


def _times(hourly: dict) -> tuple[str, ...]:
    raw = hourly.get("time")
    if not isinstance(raw, list):
        return ()
    return tuple(str(value) for value in raw)


def build_forecast_params(location: Location, source_config: dict | None = None) -> dict:
    source_config = source_config or {}
    params = {
        "latitude": location.lat,
        "longitude": location.lon,
        "hourly": ",".join(FORECAST_HOURLY_FIELDS),
        "timezone": source_config.get("timezone", "auto"),
    }
    if source_config.get("wind_speed_unit"):
        params["wind_speed_unit"] = source_config["wind_speed_unit"]
    return params


def build_air_quality_params(location: Location, source_config: dict | None = None) -> dict:
    source_config = source_config or {}
    return {
        "latitude": location.lat,
        "longitude": location.lon,
        "hourly": ",".join(AIR_QUALITY_HOURLY_FIELDS),
        "timezone": source_config.get("timezone", "auto"),
    }


def current_index(time_values: tuple[str, ...]) -> int:
    """Index of the reading treated as current: the last hour the provider returned."""
    return len(time_values) - 1 if time_values else 0


def parse_payloads(forecast_payload: dict, air_quality_payload: dict) -> tuple[HourlySeries, int, Observation]:
    forecast = _hourly_block(forecast_payload)
    air_quality = _hourly_block(air_quality_payload)

    fields = {
        field: _values(forecast, name) for name, field in FORECAST_FIELD_MAP.items()
    }
    fields.update(
        {field: _values(air_quality, name) for name, field in AIR_QUALITY_FIELD_MAP.items()}
    )
    hourly = HourlySeries(time=_times(forecast), **fields)

    # The forecast clock drives both sources.
    idx = current_index(hourly.time)
    observation = Observation(
        wind=hourly.value_at("wind", idx),
        direction=hourly.value_at("direction", idx),
        rh=hourly.value_at("rh", idx),
        pm10=hourly.value_at("pm10", idx),
        dust=hourly.value_at("dust", idx),
    )
    return hourly, idx, observation


def fetch_location(location: Location, client: HttpClient, sources: dict | None = None) -> FetchOk:
    """Fetch both observation sets for ``location``.

    Any transport, status or JSON failure propagates as ``FetchError``; a
    field the provider left out only becomes ``None`` on the observation.
    """
    sources = sources or {}
    forecast_cfg = sources.get("forecast", {})
    air_quality_cfg = sources.get("air_quality", {})

    # Both requests are in flight together; either failure fails the location.
    with ThreadPoolExecutor(max_workers=2, thread_name_prefix=f"dustwatch-{location.id}") as executor:
        forecast_future = executor.submit(
            client.get_json,
            forecast_cfg.get("endpoint", FORECAST_ENDPOINT),
            params=build_forecast_params(location, forecast_cfg),
        )
        air_quality_future = executor.submit(
            client.get_json,
            air_quality_cfg.get("endpoint", AIR_QUALITY_ENDPOINT),
            params=build_air_quality_params(location, air_quality_cfg),
        )
        forecast_payload = forecast_future.result()
        air_quality_payload = air_quality_future.result()

    hourly, idx, observation = parse_payloads(forecast_payload, air_quality_payload)
    return FetchOk(location=location, observation=observation, hourly=hourly, index=idx)
