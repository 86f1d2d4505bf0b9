"""Cycle summary report."""

from __future__ import annotations

from collections import Counter
from pathlib import Path

from dustwatch.common.constants import RISK_TIERS
from dustwatch.common.fs import write_json
from dustwatch.common.models import Snapshot


def build_cycle_summary(snapshot: Snapshot, *, total_locations: int | None = None) -> dict:
    result = snapshot.result
    tier_counts = Counter(location.risk for location in result.locations)
    group_counts = Counter(location.group for location in result.locations)

    if result.is_empty:
        status = "empty"
    elif result.failed:
        status = "partial"
    else:
        status = "success"

    if total_locations is None:
        total_locations = len(result.locations) + len(result.failed)

    return {
        "cycle_id": snapshot.cycle_id,
        "sequence": snapshot.sequence,
        "updated_at": snapshot.updated_at,
        "status": status,
        "totals": {
            "locations": total_locations,
            "scored": len(result.locations),
            "failed": len(result.failed),
        },
        "tiers": {tier: tier_counts.get(tier, 0) for tier in RISK_TIERS},
        "groups": dict(sorted(group_counts.items())),
        "failed_locations": [failure.to_dict() for failure in result.failed],
    }


def write_cycle_summary(data_dir: Path, snapshot: Snapshot, *, total_locations: int | None = None) -> Path:
    summary_path = data_dir / "out" / "reports" / "cycle_summary.json"
    write_json(summary_path, build_cycle_summary(snapshot, total_locations=total_locations))
    return summary_path
