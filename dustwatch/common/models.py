"""Data models used across the pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Union


@dataclass(frozen=True)
class Location:
    id: str
    name: str
    lat: float
    lon: float
    group: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Observation:
    wind: float | None = None
    direction: float | None = None
    rh: float | None = None
    pm10: float | None = None
    dust: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class HourlySeries:
    """Raw hourly arrays as returned by the providers.

    Field lists are not guaranteed to be as long as ``time`` and may hold
    ``None`` where the provider had no value.
    """

    time: tuple[str, ...] = ()
    wind: tuple[float | None, ...] = ()
    direction: tuple[float | None, ...] = ()
    rh: tuple[float | None, ...] = ()
    pm10: tuple[float | None, ...] = ()
    dust: tuple[float | None, ...] = ()

    def value_at(self, name: str, index: int) -> float | None:
        values = getattr(self, name)
        if 0 <= index < len(values):
            return values[index]
        return None

    def time_at(self, index: int) -> str | None:
        if 0 <= index < len(self.time):
            return self.time[index]
        return None


@dataclass(frozen=True)
class FetchOk:
    location: Location
    observation: Observation
    hourly: HourlySeries
    index: int


@dataclass(frozen=True)
class FetchFailed:
    location: Location
    reason: str
    error_code: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.location.id, "reason": self.reason, "error_code": self.error_code}


FetchResult = Union[FetchOk, FetchFailed]


@dataclass(frozen=True)
class SeriesPoint:
    t: str
    score: float

    def to_dict(self) -> dict[str, Any]:
        return {"t": self.t, "score": self.score}


@dataclass(frozen=True)
class ScoredLocation:
    id: str
    name: str
    lat: float
    lon: float
    group: str
    wind: float | None
    direction: float | None
    pm10: float | None
    dust: float | None
    rh: float | None
    score: float
    risk: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class CycleResult:
    locations: tuple[ScoredLocation, ...] = ()
    series: Mapping[str, tuple[SeriesPoint, ...]] = field(default_factory=lambda: MappingProxyType({}))
    failed: tuple[FetchFailed, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.series, MappingProxyType):
            object.__setattr__(self, "series", MappingProxyType(dict(self.series)))

    @property
    def is_empty(self) -> bool:
        return not self.locations


@dataclass(frozen=True)
class Snapshot:
    sequence: int
    cycle_id: str
    updated_at: str
    result: CycleResult
