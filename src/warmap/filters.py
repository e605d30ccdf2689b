"""Filter policy shared by the state and country views."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Iterable, List, Optional, Sequence, Union

from warmap.models import InternationalPlayerRecord, PlayerRecord
from warmap.reference import find_state

ALL_LEAGUES = "all"
DEFAULT_MIN_YEAR = 1850

AnyPlayer = Union[PlayerRecord, InternationalPlayerRecord]


@dataclass(frozen=True)
class Filters:
    """Active query constraints.

    ``selected_decade`` of ``None`` means every decade. ``league`` is carried
    for forward compatibility; records have no league yet, so it never
    excludes anything.
    """

    min_year: int = DEFAULT_MIN_YEAR
    max_year: int = field(default_factory=lambda: date.today().year)
    min_war: float = 0.0
    selected_decade: Optional[int] = None
    league: str = ALL_LEAGUES

    @classmethod
    def unbounded(cls, *, min_war: float = 0.0) -> "Filters":
        """No year bounds; used by views that never expose a year range."""

        return cls(min_year=0, max_year=9999, min_war=min_war)

    def with_decade(self, decade: Optional[int]) -> "Filters":
        return replace(self, selected_decade=decade)

    def with_year_extent(self, extent: Optional[tuple[int, int]], *, default: "Filters") -> "Filters":
        if extent is None:
            return replace(self, min_year=default.min_year, max_year=default.max_year)
        return replace(self, min_year=extent[0], max_year=extent[1])


def passes_league(player: AnyPlayer, league: str) -> bool:
    return True


def passes_filters(player: AnyPlayer, filters: Filters, *, require_state: bool = False) -> bool:
    if player.birth_year < filters.min_year or player.birth_year > filters.max_year:
        return False
    if player.war_career < filters.min_war:
        return False
    if filters.selected_decade is not None and player.birth_decade != filters.selected_decade:
        return False
    if not passes_league(player, filters.league):
        return False
    if require_state:
        return find_state(getattr(player, "birth_state_raw", None)) is not None
    return True


def filter_players(players: Iterable[PlayerRecord], filters: Filters) -> List[PlayerRecord]:
    """Domestic filter: also drops records whose birth state does not resolve."""

    return [player for player in players if passes_filters(player, filters, require_state=True)]


def filter_international_players(
    players: Iterable[InternationalPlayerRecord], filters: Filters
) -> List[InternationalPlayerRecord]:
    return [player for player in players if passes_filters(player, filters)]


def list_decades(players: Iterable[AnyPlayer]) -> List[int]:
    return sorted({player.birth_decade for player in players})


def player_year_extent(players: Sequence[AnyPlayer]) -> Optional[tuple[int, int]]:
    if not players:
        return None
    years = [player.birth_year for player in players]
    return min(years), max(years)


__all__ = [
    "ALL_LEAGUES",
    "DEFAULT_MIN_YEAR",
    "Filters",
    "filter_international_players",
    "filter_players",
    "list_decades",
    "passes_filters",
    "passes_league",
    "player_year_extent",
]
