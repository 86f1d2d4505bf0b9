"""Configuration loading and validation."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from dustwatch.common.errors import ConfigError
from dustwatch.common.fs import read_yaml
from dustwatch.common.schema import validate_locations_config, validate_sources_config


@dataclass(frozen=True)
class ConfigBundle:
    locations: dict
    sources: dict


def _deep_merge(base: Any, overlay: Any) -> Any:
    if isinstance(base, dict) and isinstance(overlay, dict):
        merged = dict(base)
        for key, value in overlay.items():
            if key in merged:
                merged[key] = _deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged
    return overlay


def _load_yaml_with_overlay(path: Path, overlay_path: Path | None) -> dict:
    if not path.exists():
        raise ConfigError(f"Missing config file: {path}")
    base = read_yaml(path)
    if overlay_path is None or not overlay_path.exists():
        return base
    overlay = read_yaml(overlay_path)
    if overlay is None:
        return base
    if not isinstance(overlay, dict):
        raise ConfigError(f"Overlay config must be a mapping: {overlay_path}")
    return _deep_merge(base, overlay)


def load_all_configs(
    config_dir: Path,
    *,
    allow_unknown: bool = False,
    overlay_config_dir: Path | None = None,
) -> ConfigBundle:
    def overlay_for(name: str) -> Path | None:
        if overlay_config_dir is None:
            return None
        return overlay_config_dir / name

    locations = validate_locations_config(
        _load_yaml_with_overlay(config_dir / "locations.yml", overlay_for("locations.yml")),
        allow_unknown=allow_unknown,
    )
    sources = validate_sources_config(
        _load_yaml_with_overlay(config_dir / "sources.yml", overlay_for("sources.yml")),
        allow_unknown=allow_unknown,
    )
    return ConfigBundle(locations=locations, sources=sources)
