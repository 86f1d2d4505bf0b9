from __future__ import annotations

import json
import random
import time
from pathlib import Path

import pytest

from dustwatch.cli import parse_args, run_command
from dustwatch.common.constants import AIR_QUALITY_ENDPOINT


class ShuffledLatencyClient:
    """Same payloads every run, but responses arrive in a different order."""

    def __init__(self, seed: int):
        self.rng = random.Random(seed)

    def get_json(self, url: str, *, params=None, **_kwargs):
        time.sleep(self.rng.random() / 500)
        # Coarse values so several cities share a score and tie-breaks matter.
        bucket = int(abs(params["latitude"])) % 4
        times = [f"2026-10-18T{h:02d}:00" for h in range(6)]
        if url == AIR_QUALITY_ENDPOINT:
            return {"hourly": {"time": times, "pm10": [bucket * 30.0] * 6, "dust": [bucket * 40.0] * 6}}
        return {
            "hourly": {
                "time": times,
                "windspeed_10m": [bucket * 5.0] * 6,
                "winddirection_10m": [90.0] * 6,
                "relativehumidity_2m": [40.0] * 6,
            }
        }

    def close(self):
        return None


def _run_once(data_dir: Path, seed: int) -> dict:
    args = parse_args(["fetch", "--config-dir", "config", "--data-dir", str(data_dir), "--run-id", f"run-{seed}"])
    assert run_command(args, http_client=ShuffledLatencyClient(seed)) == 0
    payload = json.loads((data_dir / "out" / "snapshot.json").read_text(encoding="utf-8"))
    for volatile in ("cycle_id", "updated_at", "sequence"):
        payload.pop(volatile)
    return payload


@pytest.mark.regression
def test_outputs_are_stable_for_same_inputs(tmp_path: Path):
    first = tmp_path / "first"
    second = tmp_path / "second"

    assert _run_once(first, seed=1) == _run_once(second, seed=2)
    assert (first / "out" / "locations.csv").read_bytes() == (second / "out" / "locations.csv").read_bytes()
