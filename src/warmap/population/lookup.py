"""Nearest-year population resolution per state."""

from __future__ import annotations

import math
from bisect import bisect_left
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from warmap.models import PopulationRecord


class PopulationLookup:
    """Per-state population series, each sorted by year ascending.

    Build one per population dataset and reuse it across queries; build a new
    one whenever the dataset is replaced.
    """

    def __init__(self, records: Iterable[PopulationRecord]):
        grouped: Dict[str, List[PopulationRecord]] = defaultdict(list)
        for record in records:
            grouped[record.state].append(record)
        self._series: Dict[str, Tuple[Tuple[int, ...], Tuple[int, ...]]] = {}
        for state, rows in grouped.items():
            rows.sort(key=lambda row: row.year)
            self._series[state] = (
                tuple(row.year for row in rows),
                tuple(row.population for row in rows),
            )

    def __contains__(self, state: str) -> bool:
        return state in self._series

    def states(self) -> List[str]:
        return sorted(self._series)

    def years(self, state: str) -> Sequence[int]:
        return self._series.get(state, ((), ()))[0]

    def closest(self, state: str, target_year: int | float) -> Optional[int]:
        """Population at the year nearest ``target_year``; the earlier year wins ties."""

        series = self._series.get(state)
        if not series:
            return None
        years, populations = series
        index = bisect_left(years, target_year)
        if index == len(years):
            return populations[bisect_left(years, years[-1])]
        if index == 0:
            return populations[0]
        after = index
        before = bisect_left(years, years[index - 1])
        if abs(years[after] - target_year) < abs(years[before] - target_year):
            return populations[after]
        return populations[before]


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def target_year(min_year: int, max_year: int, decade: Optional[int] = None) -> int:
    """Year used for population matching: decade midpoint, else the filter midpoint."""

    if decade is not None:
        return decade + 5
    return round_half_up((min_year + max_year) / 2)
