import pytest

from dustwatch.common.errors import ConfigError
from dustwatch.common.schema import validate_locations_config, validate_sources_config


def _locations(**overrides):
    loc = {"id": "cairo", "name": "Cairo", "lat": 30.04, "lon": 31.23, "group": "North Africa"}
    loc.update(overrides)
    return {"groups": ["North Africa"], "locations": [loc]}


def _sources():
    return {
        "forecast": {"endpoint": "https://f.test", "timezone": "auto"},
        "air_quality": {"endpoint": "https://aq.test", "timezone": "auto"},
        "http": {"connect_timeout": 1, "read_timeout": 1, "rate_per_sec": 1, "max_workers": 1},
        "polling": {"interval_seconds": 60, "horizon": 12},
        "tiering": {"mode": "global"},
    }


def test_validate_locations_accepts_minimal_config():
    cfg = _locations()
    assert validate_locations_config(cfg) is cfg


def test_validate_locations_rejects_duplicate_ids():
    cfg = _locations()
    cfg["locations"].append(dict(cfg["locations"][0]))
    with pytest.raises(ConfigError, match="Duplicate location ids"):
        validate_locations_config(cfg)


def test_validate_locations_rejects_unknown_group():
    with pytest.raises(ConfigError, match="Unknown group"):
        validate_locations_config(_locations(group="Sahara"))


def test_validate_locations_rejects_bad_coordinates():
    with pytest.raises(ConfigError):
        validate_locations_config(_locations(lat=95.0))
    with pytest.raises(ConfigError):
        validate_locations_config(_locations(lon="east"))


def test_validate_locations_unknown_keys_respect_allow_unknown():
    cfg = _locations(population=10_000_000)
    with pytest.raises(ConfigError, match="Unknown keys"):
        validate_locations_config(cfg)
    assert validate_locations_config(cfg, allow_unknown=True) is cfg


def test_validate_locations_missing_keys():
    with pytest.raises(ConfigError, match="Missing keys"):
        validate_locations_config({"groups": ["X"]})


def test_validate_sources_accepts_both_tiering_modes():
    cfg = _sources()
    assert validate_sources_config(cfg) is cfg
    cfg["tiering"]["mode"] = "per_group"
    assert validate_sources_config(cfg) is cfg


def test_validate_sources_rejects_unknown_tiering_mode():
    cfg = _sources()
    cfg["tiering"]["mode"] = "absolute"
    with pytest.raises(ConfigError, match="tiering mode"):
        validate_sources_config(cfg)


def test_validate_sources_rejects_zero_workers():
    cfg = _sources()
    cfg["http"]["max_workers"] = 0
    with pytest.raises(ConfigError):
        validate_sources_config(cfg)


@pytest.mark.parametrize(
    ("section", "key", "value"),
    [
        ("http", "max_workers", "many"),
        ("http", "max_workers", 2.5),
        ("polling", "horizon", "twelve"),
        ("polling", "horizon", True),
        ("http", "read_timeout", "slow"),
        ("polling", "interval_seconds", None),
    ],
)
def test_validate_sources_rejects_non_numeric_settings(section, key, value):
    cfg = _sources()
    cfg[section][key] = value
    with pytest.raises(ConfigError, match=f"{section}.{key}"):
        validate_sources_config(cfg)
