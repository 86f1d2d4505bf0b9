"""One polling cycle: fetch, score, tier and assemble."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from dustwatch.common.constants import SERIES_HORIZON
from dustwatch.common.http import HttpClient
from dustwatch.common.logging import log_event
from dustwatch.common.models import CycleResult, FetchOk, ScoredLocation, SeriesPoint
from dustwatch.common.registry import LocationRegistry
from dustwatch.common.scoring import risk_score, round_half_up
from dustwatch.common.time_utils import elapsed_ms
from dustwatch.fetch.runner import failed, fetch_all, successful
from dustwatch.pipeline.series import build_series
from dustwatch.pipeline.tiering import TieringMode, assign_tiers


@dataclass(frozen=True)
class _Scored:
    fetched: FetchOk
    score: float
    series: list[SeriesPoint]


def score_fetch(fetched: FetchOk, horizon: int = SERIES_HORIZON) -> _Scored:
    obs = fetched.observation
    score = round_half_up(risk_score(wind=obs.wind, pm10=obs.pm10, dust=obs.dust, rh=obs.rh), 2)
    series = build_series(fetched.hourly, fetched.index, obs, horizon)
    return _Scored(fetched=fetched, score=score, series=series)


def assemble(
    fetched: list[FetchOk],
    *,
    tiering_mode: TieringMode | str = TieringMode.GLOBAL,
    horizon: int = SERIES_HORIZON,
) -> tuple[tuple[ScoredLocation, ...], dict[str, tuple[SeriesPoint, ...]]]:
    scored = [score_fetch(item, horizon) for item in fetched]
    tiers = assign_tiers(
        scored,
        score_of=lambda s: s.score,
        group_of=lambda s: s.fetched.location.group,
        mode=tiering_mode,
    )

    records: list[ScoredLocation] = []
    series: dict[str, tuple[SeriesPoint, ...]] = {}
    for item, tier in zip(scored, tiers):
        location = item.fetched.location
        obs = item.fetched.observation
        records.append(
            ScoredLocation(
                id=location.id,
                name=location.name,
                lat=location.lat,
                lon=location.lon,
                group=location.group,
                wind=obs.wind,
                direction=obs.direction,
                pm10=obs.pm10,
                dust=obs.dust,
                rh=obs.rh,
                score=item.score,
                risk=tier,
            )
        )
        series[location.id] = tuple(item.series)
    return tuple(records), series


def run_cycle(
    registry: LocationRegistry,
    client: HttpClient,
    sources: dict | None = None,
    *,
    tiering_mode: TieringMode | str = TieringMode.GLOBAL,
    max_workers: int = 16,
    horizon: int = SERIES_HORIZON,
    logger: logging.Logger | None = None,
    cycle_id: str | None = None,
) -> CycleResult:
    started = time.monotonic()
    if logger is not None:
        log_event(
            logger,
            "cycle start",
            cycle_id=cycle_id,
            stage="cycle",
            event="CYCLE_START",
            status="ok",
            rows_in=len(registry),
        )

    results = fetch_all(
        registry.locations,
        client,
        sources,
        max_workers=max_workers,
        logger=logger,
        cycle_id=cycle_id,
    )
    ok = successful(results)
    failures = tuple(failed(results))

    # fetch_all keeps registry order, so tier tie-breaks are reproducible.
    records, series = assemble(ok, tiering_mode=tiering_mode, horizon=horizon)
    result = CycleResult(locations=records, series=series, failed=failures)

    if logger is not None:
        log_event(
            logger,
            "cycle end",
            cycle_id=cycle_id,
            stage="cycle",
            event="CYCLE_END",
            status="ok" if not failures else "partial",
            duration_ms=elapsed_ms(started),
            rows_in=len(registry),
            rows_out=len(records),
        )
    return result
