"""International aggregation: career WAR grouped by birth country."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence

from warmap.filters import Filters, filter_international_players
from warmap.models import GeographyUnit, InternationalPlayerRecord
from warmap.reference import COUNTRY_INDEX
from warmap.reference.countries import country_unit

from .states import round_war


@dataclass(frozen=True)
class CountryAggregate:
    country: str
    total_war: float
    player_count: int
    average_war: float
    players: tuple[InternationalPlayerRecord, ...]
    unit: GeographyUnit

    @property
    def feature_name(self) -> str | None:
        return self.unit.feature_name


@dataclass(frozen=True)
class InternationalDatasetSummary:
    player_count: int
    country_count: int
    total_war: float


def _country_unit(name: str) -> GeographyUnit:
    return COUNTRY_INDEX.resolve(name) or country_unit(name)


def aggregate_by_country(
    players: Iterable[InternationalPlayerRecord],
    filters: Filters | None = None,
    *,
    target_decade: int | None = None,
) -> List[CountryAggregate]:
    """Group filtered players by country; total WAR descending, then name ascending."""

    filters = filters or Filters.unbounded()
    decade = target_decade if target_decade is not None else filters.selected_decade
    filtered = filter_international_players(players, filters.with_decade(decade))

    groups: Dict[str, List[InternationalPlayerRecord]] = {}
    for player in filtered:
        groups.setdefault(player.birth_country, []).append(player)

    aggregates: List[CountryAggregate] = []
    for country, members in groups.items():
        ordered = sorted(members, key=lambda player: (-player.war_career, player.player_id))
        total = sum(player.war_career for player in ordered)
        aggregates.append(
            CountryAggregate(
                country=country,
                total_war=round_war(total),
                player_count=len(ordered),
                average_war=round_war(total / len(ordered)),
                players=tuple(ordered),
                unit=_country_unit(country),
            )
        )

    aggregates.sort(key=lambda aggregate: (-aggregate.total_war, aggregate.country))
    return aggregates


def war_extent(players: Sequence[InternationalPlayerRecord]) -> tuple[float, float]:
    if not players:
        return 0.0, 0.0
    values = [player.war_career for player in players]
    return min(values), max(values)


def summarize_international_dataset(
    players: Sequence[InternationalPlayerRecord],
) -> InternationalDatasetSummary:
    return InternationalDatasetSummary(
        player_count=len(players),
        country_count=len({player.birth_country for player in players}),
        total_war=round_war(sum(player.war_career for player in players), 1),
    )


__all__ = [
    "CountryAggregate",
    "InternationalDatasetSummary",
    "aggregate_by_country",
    "summarize_international_dataset",
    "war_extent",
]
