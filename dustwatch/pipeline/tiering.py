"""Rank-based risk tiers.

Tiers are relative: the top 30% of locations by score are High and the next
40% are Medium, however mild the absolute scores are. ``GLOBAL`` ranks the
whole cycle together; ``PER_GROUP`` ranks each region on its own so the worst
cities of a quiet region still stand out.
"""

from __future__ import annotations

import enum
from collections import OrderedDict
from typing import Callable, Sequence, TypeVar

from dustwatch.common.constants import RISK_HIGH, RISK_LOW, RISK_MEDIUM
from dustwatch.common.scoring import round_half_up

T = TypeVar("T")

HIGH_FRACTION = 0.3
MEDIUM_FRACTION = 0.4


class TieringMode(str, enum.Enum):
    GLOBAL = "global"
    PER_GROUP = "per_group"

    @classmethod
    def parse(cls, value: "str | TieringMode") -> "TieringMode":
        if isinstance(value, cls):
            return value
        return cls(str(value).replace("-", "_"))


def tier_cuts(count: int, *, high_fraction: float = HIGH_FRACTION, medium_fraction: float = MEDIUM_FRACTION) -> tuple[int, int]:
    high_cut = max(1, int(round_half_up(count * high_fraction)))
    medium_cut = max(1, int(round_half_up(count * medium_fraction)))
    return high_cut, medium_cut


def tier_by_rank(
    items: Sequence[T],
    score_of: Callable[[T], float],
    *,
    high_fraction: float = HIGH_FRACTION,
    medium_fraction: float = MEDIUM_FRACTION,
) -> list[str]:
    """Return one tier per item, aligned with ``items``.

    Equal scores keep their input order in the ranking, so whichever comes
    first wins a boundary slot.
    """
    if not items:
        return []
    high_cut, medium_cut = tier_cuts(len(items), high_fraction=high_fraction, medium_fraction=medium_fraction)
    ranked = sorted(range(len(items)), key=lambda i: -score_of(items[i]))

    tiers = [RISK_LOW] * len(items)
    for rank, i in enumerate(ranked):
        if rank < high_cut:
            tiers[i] = RISK_HIGH
        elif rank < high_cut + medium_cut:
            tiers[i] = RISK_MEDIUM
    return tiers


def tier_by_rank_per_group(
    items: Sequence[T],
    score_of: Callable[[T], float],
    group_of: Callable[[T], str],
    **fractions: float,
) -> list[str]:
    positions: "OrderedDict[str, list[int]]" = OrderedDict()
    for i, item in enumerate(items):
        positions.setdefault(group_of(item), []).append(i)

    tiers = [RISK_LOW] * len(items)
    for indices in positions.values():
        members = [items[i] for i in indices]
        for i, tier in zip(indices, tier_by_rank(members, score_of, **fractions)):
            tiers[i] = tier
    return tiers


def assign_tiers(
    items: Sequence[T],
    score_of: Callable[[T], float],
    group_of: Callable[[T], str],
    mode: "TieringMode | str" = TieringMode.GLOBAL,
) -> list[str]:
    if TieringMode.parse(mode) is TieringMode.PER_GROUP:
        return tier_by_rank_per_group(items, score_of, group_of)
    return tier_by_rank(items, score_of)
