import json
import logging
from pathlib import Path

from dustwatch.common.fs import read_json, write_json
from dustwatch.common.ids import generate_cycle_id, generate_run_id
from dustwatch.common.logging import JsonLineFormatter, build_logger, log_event
from dustwatch.common.time_utils import utc_timestamp_iso


def test_generate_ids_prefix_and_order():
    assert generate_run_id().startswith("run-")
    first = generate_cycle_id(1)
    second = generate_cycle_id(2)
    assert first.startswith("cycle-")
    assert first.endswith("-000001")
    assert first < second


def test_utc_timestamp_iso_has_offset():
    assert utc_timestamp_iso().endswith("+00:00")


def test_write_json_replaces_whole_file(tmp_path: Path):
    path = tmp_path / "out" / "snapshot.json"
    write_json(path, {"b": 1, "a": [1, 2]})
    write_json(path, {"c": 3})

    assert read_json(path) == {"c": 3}
    assert [p.name for p in path.parent.iterdir()] == ["snapshot.json"]


def test_json_line_formatter_emits_stable_fields():
    record = logging.LogRecord("dustwatch.test", logging.INFO, __file__, 1, "fetched %s", ("Cairo",), None)
    record.location = "cairo"
    record.event = "FETCH_OK"

    payload = json.loads(JsonLineFormatter().format(record))

    assert payload["message"] == "fetched Cairo"
    assert payload["location"] == "cairo"
    assert payload["event"] == "FETCH_OK"
    assert payload["cycle_id"] is None
    assert "error_code" in payload


def test_build_logger_writes_run_meta_file(tmp_path: Path):
    logger = build_logger("run-test", data_dir=tmp_path, level="DEBUG")
    log_event(logger, "fetch failed", event="FETCH_FAIL", status="error", error_code="HTTP_ERROR")
    for handler in logger.handlers:
        handler.flush()

    lines = (tmp_path / "run_meta" / "run-test.log.jsonl").read_text(encoding="utf-8").splitlines()
    assert json.loads(lines[-1])["error_code"] == "HTTP_ERROR"
