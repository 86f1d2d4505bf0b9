"""Concurrent per-location fetch with fail-soft semantics."""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable

from dustwatch.common.errors import PipelineError
from dustwatch.common.http import HttpClient
from dustwatch.common.logging import log_event
from dustwatch.common.models import FetchFailed, FetchOk, FetchResult, Location
from dustwatch.common.time_utils import elapsed_ms
from dustwatch.fetch.openmeteo import fetch_location


def _fetch_one(
    location: Location,
    client: HttpClient,
    sources: dict,
    logger: logging.Logger | None,
    cycle_id: str | None,
) -> FetchResult:
    started = time.monotonic()
    try:
        result: FetchResult = fetch_location(location, client, sources)
    except PipelineError as exc:
        result = FetchFailed(location=location, reason=str(exc), error_code=exc.error_code)
    except Exception as exc:
        result = FetchFailed(location=location, reason=repr(exc), error_code="UNEXPECTED_ERROR")

    if logger is not None:
        if isinstance(result, FetchOk):
            log_event(
                logger,
                f"fetched {location.name}",
                cycle_id=cycle_id,
                stage="fetch",
                location=location.id,
                source="open-meteo",
                event="FETCH_OK",
                status="ok",
                duration_ms=elapsed_ms(started),
                rows_out=len(result.hourly.time),
            )
        else:
            log_event(
                logger,
                f"fetch failed for {location.name}: {result.reason}",
                cycle_id=cycle_id,
                stage="fetch",
                location=location.id,
                source="open-meteo",
                event="FETCH_FAIL",
                status="error",
                duration_ms=elapsed_ms(started),
                error_code=result.error_code,
            )
    return result


def fetch_all(
    locations: Iterable[Location],
    client: HttpClient,
    sources: dict | None = None,
    *,
    max_workers: int = 16,
    logger: logging.Logger | None = None,
    cycle_id: str | None = None,
) -> list[FetchResult]:
    """Fetch every location concurrently and wait for all of them to settle.

    Results come back in input order whatever order the requests finish in,
    and every location yields exactly one ``FetchOk`` or ``FetchFailed``.
    """
    locations = list(locations)
    if not locations:
        return []

    sources = sources or {}
    workers = max(1, min(max_workers, len(locations)))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="dustwatch-fetch") as executor:
        futures = [
            executor.submit(_fetch_one, location, client, sources, logger, cycle_id)
            for location in locations
        ]
        return [future.result() for future in futures]


def successful(results: Iterable[FetchResult]) -> list[FetchOk]:
    return [result for result in results if isinstance(result, FetchOk)]


def failed(results: Iterable[FetchResult]) -> list[FetchFailed]:
    return [result for result in results if isinstance(result, FetchFailed)]
