"""Output contract for the presentation layer."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from dustwatch.common.constants import GLOBAL_GROUP, RISK_HIGH
from dustwatch.common.fs import write_csv, write_json
from dustwatch.common.models import CycleResult, ScoredLocation, Snapshot

LOCATION_HEADERS = [
    "id",
    "region",
    "lat",
    "lon",
    "group",
    "wind",
    "direction",
    "pm10",
    "dust",
    "rh",
    "risk",
    "score",
]


def location_record(location: ScoredLocation) -> dict:
    # "region" carries the display name the map popups show.
    return {
        "id": location.id,
        "region": location.name,
        "lat": location.lat,
        "lon": location.lon,
        "group": location.group,
        "wind": location.wind,
        "direction": location.direction,
        "pm10": location.pm10,
        "dust": location.dust,
        "rh": location.rh,
        "risk": location.risk,
        "score": location.score,
    }


def build_output_payload(result: CycleResult) -> dict:
    return {
        "locations": [location_record(location) for location in result.locations],
        "series": {
            location_id: [point.to_dict() for point in points]
            for location_id, points in result.series.items()
        },
    }


def select_group(records: Iterable[dict], group: str) -> list[dict]:
    if group == GLOBAL_GROUP:
        return list(records)
    return [record for record in records if record["group"] == group]


def active_alerts(records: Iterable[dict]) -> list[dict]:
    return [record for record in records if record["risk"] == RISK_HIGH]


def _serialize_row(row: dict) -> dict:
    return {key: "" if row.get(key) is None else row[key] for key in LOCATION_HEADERS}


def write_snapshot(data_dir: Path, snapshot: Snapshot) -> Path:
    out_path = data_dir / "out" / "snapshot.json"
    payload = build_output_payload(snapshot.result)
    payload["cycle_id"] = snapshot.cycle_id
    payload["sequence"] = snapshot.sequence
    payload["updated_at"] = snapshot.updated_at
    write_json(out_path, payload)
    return out_path


def write_locations_csv(data_dir: Path, result: CycleResult) -> Path:
    out_path = data_dir / "out" / "locations.csv"
    rows = [_serialize_row(location_record(location)) for location in result.locations]
    write_csv(out_path, LOCATION_HEADERS, rows)
    return out_path
