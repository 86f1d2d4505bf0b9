"""Static catalog of monitored locations."""

from __future__ import annotations

from typing import Iterator

from dustwatch.common.models import Location


class LocationRegistry:
    """Ordered, read-only collection of locations keyed by id."""

    def __init__(self, locations: list[Location], groups: list[str]) -> None:
        self._locations = tuple(locations)
        self._groups = tuple(groups)
        self._by_id = {location.id: location for location in self._locations}

    @property
    def locations(self) -> tuple[Location, ...]:
        return self._locations

    @property
    def groups(self) -> tuple[str, ...]:
        return self._groups

    def __iter__(self) -> Iterator[Location]:
        return iter(self._locations)

    def __len__(self) -> int:
        return len(self._locations)

    def __contains__(self, location_id: object) -> bool:
        return location_id in self._by_id

    def get(self, location_id: str) -> Location:
        return self._by_id[location_id]

    def in_group(self, group: str) -> tuple[Location, ...]:
        return tuple(location for location in self._locations if location.group == group)


def build_registry(locations_config: dict) -> LocationRegistry:
    """Build a registry from a validated ``locations.yml`` payload."""
    locations = [
        Location(
            id=str(raw["id"]),
            name=str(raw["name"]),
            lat=float(raw["lat"]),
            lon=float(raw["lon"]),
            group=str(raw["group"]),
        )
        for raw in locations_config["locations"]
    ]
    return LocationRegistry(locations, list(locations_config["groups"]))
