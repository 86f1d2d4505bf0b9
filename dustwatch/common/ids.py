"""Run and cycle identifier helpers."""

from __future__ import annotations

from datetime import datetime, timezone


def generate_run_id() -> str:
    now = datetime.now(tz=timezone.utc)
    return now.strftime("run-%Y%m%dT%H%M%S%fZ")


def generate_cycle_id(sequence: int) -> str:
    now = datetime.now(tz=timezone.utc)
    # Sortable by wall clock first, sequence breaks same-microsecond ties.
    return now.strftime(f"cycle-%Y%m%dT%H%M%S%fZ-{sequence:06d}")
