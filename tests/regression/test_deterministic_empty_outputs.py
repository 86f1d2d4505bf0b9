import pytest

from dustwatch.common.models import CycleResult
from dustwatch.common.registry import LocationRegistry
from dustwatch.pipeline.aggregate import assemble, run_cycle
from dustwatch.pipeline.export import build_output_payload


class NoCallsClient:
    def get_json(self, url: str, **_kwargs):
        raise AssertionError(f"unexpected request to {url}")

    def close(self):
        return None


@pytest.mark.regression
def test_empty_registry_produces_empty_contract():
    result = run_cycle(LocationRegistry([], ["Middle East"]), NoCallsClient())

    assert result == CycleResult()
    assert build_output_payload(result) == {"locations": [], "series": {}}


@pytest.mark.regression
def test_no_successful_fetches_assemble_to_empty_collections():
    records, series = assemble([])
    assert records == ()
    assert series == {}
