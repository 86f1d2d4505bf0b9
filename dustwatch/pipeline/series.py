"""Trailing window of scored hourly points per location."""

from __future__ import annotations

from dustwatch.common.constants import SERIES_HORIZON
from dustwatch.common.models import HourlySeries, Observation, SeriesPoint
from dustwatch.common.scoring import risk_score, round_half_up


def window_bounds(index: int, horizon: int = SERIES_HORIZON) -> range:
    return range(max(0, index - horizon + 1), index + 1)


def _value_or_current(hourly: HourlySeries, name: str, k: int, current: Observation) -> float | None:
    value = hourly.value_at(name, k)
    if value is None:
        return getattr(current, name)
    return value


def build_series(
    hourly: HourlySeries,
    index: int,
    current: Observation,
    horizon: int = SERIES_HORIZON,
) -> list[SeriesPoint]:
    points: list[SeriesPoint] = []
    for k in window_bounds(index, horizon):
        # risk_score applies its own defaults when the current value is also absent.
        score = risk_score(
            wind=_value_or_current(hourly, "wind", k, current),
            pm10=_value_or_current(hourly, "pm10", k, current),
            dust=_value_or_current(hourly, "dust", k, current),
            rh=_value_or_current(hourly, "rh", k, current),
        )
        label = hourly.time_at(k)
        points.append(SeriesPoint(t=label if label is not None else str(k), score=round_half_up(score, 2)))
    return points
