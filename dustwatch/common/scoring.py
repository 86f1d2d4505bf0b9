"""Composite dust storm risk scoring."""

from __future__ import annotations

import math

WIND_CEILING_MS = 30.0
PM10_CEILING = 150.0
DUST_CEILING = 200.0

DEFAULT_WIND = 0.0
DEFAULT_PM10 = 0.0
DEFAULT_DUST = 0.0
DEFAULT_RH = 50.0

# Particulate load dominates, dryness contributes least.
WEIGHT_PM10 = 1.1
WEIGHT_DUST = 1.1
WEIGHT_WIND = 0.8
WEIGHT_DRYNESS = 0.6

MAX_SCORE = WEIGHT_PM10 + WEIGHT_DUST + WEIGHT_WIND + WEIGHT_DRYNESS


def clamp(value: float, *, minimum: float, maximum: float) -> float:
    return max(minimum, min(maximum, value))


def clamp01(value: float) -> float:
    return clamp(value, minimum=0.0, maximum=1.0)


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with ties going up, unlike the builtin's round-half-to-even."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def normalise_components(
    wind: float | None,
    pm10: float | None,
    dust: float | None,
    rh: float | None,
) -> dict[str, float]:
    wind = DEFAULT_WIND if wind is None else wind
    pm10 = DEFAULT_PM10 if pm10 is None else pm10
    dust = DEFAULT_DUST if dust is None else dust
    rh = DEFAULT_RH if rh is None else rh
    return {
        "wind": clamp01(wind / WIND_CEILING_MS),
        "pm10": clamp01(pm10 / PM10_CEILING),
        "dust": clamp01(dust / DUST_CEILING),
        "dryness": clamp01(1 - rh / 100),
    }


def risk_score(
    wind: float | None = None,
    pm10: float | None = None,
    dust: float | None = None,
    rh: float | None = None,
) -> float:
    parts = normalise_components(wind, pm10, dust, rh)
    return (
        WEIGHT_PM10 * parts["pm10"]
        + WEIGHT_DUST * parts["dust"]
        + WEIGHT_WIND * parts["wind"]
        + WEIGHT_DRYNESS * parts["dryness"]
    )
