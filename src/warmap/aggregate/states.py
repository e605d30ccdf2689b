"""Domestic aggregation: career WAR grouped by birth state."""

from __future__ import annotations

import logging
from collections import OrderedDict
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Literal, Optional, Sequence, Union

from warmap.filters import Filters, filter_players
from warmap.models import GeographyUnit, PlayerRecord, PopulationRecord
from warmap.population import PopulationLookup, target_year
from warmap.reference import find_state


logger = logging.getLogger(__name__)

WAR_PRECISION = 3
StateMetric = Literal["total_war", "war_per_million"]


@dataclass(frozen=True)
class StateAggregate:
    state: GeographyUnit
    total_war: float
    player_count: int
    war_per_million: Optional[float]
    players: tuple[PlayerRecord, ...]

    @property
    def fips(self) -> str:
        return self.state.key


def round_war(value: float, places: int = WAR_PRECISION) -> float:
    """Round half away from zero on the decimal text of ``value``."""

    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def sort_players(players: Iterable[PlayerRecord]) -> List[PlayerRecord]:
    """WAR descending; equal WAR falls back to player id ascending."""

    return sorted(players, key=lambda player: (-player.war_career, player.player_id))


def war_per_million(total_war: float, population: Optional[int]) -> Optional[float]:
    if population is None or population <= 0:
        return None
    return total_war / (population / 1_000_000)


def aggregate_by_state(
    players: Sequence[PlayerRecord],
    populations: Union[PopulationLookup, Iterable[PopulationRecord]],
    filters: Filters,
    *,
    target_decade: Optional[int] = None,
) -> List[StateAggregate]:
    """Group filtered players by FIPS code, ordered by total WAR descending.

    ``target_decade`` restricts this one query to a decade (and moves the
    population year to its midpoint) without touching ``filters``.
    """

    decade = target_decade if target_decade is not None else filters.selected_decade
    filtered = filter_players(players, filters.with_decade(decade))
    lookup = populations if isinstance(populations, PopulationLookup) else PopulationLookup(populations)
    year = target_year(filters.min_year, filters.max_year, target_decade)

    groups: "OrderedDict[str, tuple[GeographyUnit, list[PlayerRecord]]]" = OrderedDict()
    totals: dict[str, float] = {}
    for player in filtered:
        state = find_state(player.birth_state_raw)
        if state is None:
            continue
        groups.setdefault(state.key, (state, []))[1].append(player)
        totals[state.key] = totals.get(state.key, 0.0) + player.war_career

    ranked: List[tuple[float, StateAggregate]] = []
    for fips, (state, members) in groups.items():
        total = totals[fips]
        population = lookup.closest(state.code or "", year)
        per_million = war_per_million(total, population)
        ranked.append(
            (
                total,
                StateAggregate(
                    state=state,
                    total_war=round_war(total),
                    player_count=len(members),
                    war_per_million=None if per_million is None else round_war(per_million),
                    players=tuple(sort_players(members)),
                ),
            )
        )

    # Order on the unrounded totals; rounding only applies to the reported values.
    ranked.sort(key=lambda pair: -pair[0])
    aggregates = [aggregate for _, aggregate in ranked]
    logger.debug(
        "Aggregated %d players into %d states (population year %d)",
        len(filtered),
        len(aggregates),
        year,
    )
    return aggregates


def rank_state_aggregates(
    aggregates: Sequence[StateAggregate], metric: StateMetric = "total_war"
) -> List[StateAggregate]:
    """Order for display: per-capita rankings drop states without a population match."""

    if metric == "war_per_million":
        with_metric = [aggregate for aggregate in aggregates if aggregate.war_per_million is not None]
        return sorted(with_metric, key=lambda aggregate: -(aggregate.war_per_million or 0.0))
    if metric != "total_war":
        raise ValueError(f"Unsupported metric {metric!r}")
    return sorted(aggregates, key=lambda aggregate: -aggregate.total_war)


__all__ = [
    "StateAggregate",
    "StateMetric",
    "WAR_PRECISION",
    "aggregate_by_state",
    "rank_state_aggregates",
    "round_war",
    "sort_players",
    "war_per_million",
]
