"""Snapshot store tying datasets, filters and the local cache together."""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field, replace
from typing import Callable, List, Optional, Sequence

from warmap.aggregate import (
    CountryAggregate,
    StateAggregate,
    StateMetric,
    aggregate_by_country,
    aggregate_by_state,
    rank_state_aggregates,
)
from warmap.config import PLAYERS_STORAGE_KEY, POPULATION_STORAGE_KEY, Settings, get_settings
from warmap.filters import Filters, list_decades, player_year_extent
from warmap.ingest import (
    parse_international_players_csv,
    parse_players_csv,
    parse_population_csv,
)
from warmap.models import (
    DataValidationSummary,
    InternationalPlayerRecord,
    InternationalValidation,
    PlayerRecord,
    PlayerValidation,
    PopulationRecord,
    PopulationValidation,
)
from warmap.persistence import CsvCache
from warmap.population import PopulationLookup
from warmap.reference import CountryResolver
from warmap.sources import BundledDatasets, DatasetLoader, SourceUnavailableError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Snapshot:
    """Immutable view of everything an aggregation depends on."""

    players: tuple[PlayerRecord, ...] = ()
    international_players: tuple[InternationalPlayerRecord, ...] = ()
    populations: tuple[PopulationRecord, ...] = ()
    filters: Filters = field(default_factory=Filters)
    international_filters: Filters = field(default_factory=Filters.unbounded)
    validation: DataValidationSummary = field(default_factory=DataValidationSummary)
    version: int = 0


class DataStore:
    """Holds the current :class:`Snapshot` and replaces it on every change.

    Loads take a ticket from :meth:`begin_load`; a result whose ticket has been
    superseded by a later load is dropped instead of overwriting newer data.
    """

    def __init__(
        self,
        *,
        cache: CsvCache | None = None,
        settings: Settings | None = None,
        restore: bool = True,
    ):
        self.settings = settings or get_settings()
        self.cache = cache
        self.resolver = CountryResolver(strict=self.settings.strict_countries)
        self.default_filters = Filters(
            min_year=self.settings.default_min_year,
            max_year=self.settings.default_max_year,
        )
        self._snapshot = Snapshot(filters=self.default_filters)
        self._lookup = PopulationLookup(())
        self._lookup_source: tuple[PopulationRecord, ...] = ()
        self._tickets = itertools.count(1)
        self._latest_ticket = 0
        self.error: Optional[str] = None
        if restore and cache is not None:
            self.restore_from_cache()

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    @property
    def population_lookup(self) -> PopulationLookup:
        populations = self._snapshot.populations
        if populations is not self._lookup_source:
            self._lookup = PopulationLookup(populations)
            self._lookup_source = populations
        return self._lookup

    def _commit(self, **changes) -> Snapshot:
        self._snapshot = replace(self._snapshot, version=self._snapshot.version + 1, **changes)
        return self._snapshot

    # -- loading -----------------------------------------------------------

    def begin_load(self) -> int:
        ticket = next(self._tickets)
        self._latest_ticket = ticket
        self.error = None
        return ticket

    def is_current(self, ticket: int) -> bool:
        return ticket == self._latest_ticket

    def restore_from_cache(self) -> None:
        if self.cache is None:
            return
        players_text = self.cache.get(PLAYERS_STORAGE_KEY)
        if players_text:
            self.load_players_text(players_text, persist=False)
        population_text = self.cache.get(POPULATION_STORAGE_KEY)
        if population_text:
            self.load_population_text(population_text, persist=False)

    def _set_players(self, players: Sequence[PlayerRecord], summary: PlayerValidation) -> None:
        filters = self._snapshot.filters.with_year_extent(
            player_year_extent(players), default=self.default_filters
        )
        self._commit(
            players=tuple(players),
            filters=filters,
            validation=replace(self._snapshot.validation, players=summary),
        )

    def load_players_text(self, text: str, *, persist: bool = True) -> PlayerValidation:
        self.begin_load()
        players, summary = parse_players_csv(text)
        self._set_players(players, summary)
        if persist and self.cache is not None:
            self.cache.set(PLAYERS_STORAGE_KEY, text)
        return summary

    def load_population_text(self, text: str, *, persist: bool = True) -> PopulationValidation:
        self.begin_load()
        populations, summary = parse_population_csv(text)
        self._commit(
            populations=tuple(populations),
            validation=replace(self._snapshot.validation, populations=summary),
        )
        if persist and self.cache is not None:
            self.cache.set(POPULATION_STORAGE_KEY, text)
        return summary

    def load_international_text(self, text: str) -> InternationalValidation:
        self.begin_load()
        players, summary = parse_international_players_csv(text, resolver=self.resolver)
        self._commit(
            international_players=tuple(players),
            validation=replace(self._snapshot.validation, international=summary),
        )
        return summary

    def apply_bundled(self, datasets: BundledDatasets) -> Snapshot:
        self.begin_load()
        filters = self._snapshot.filters.with_year_extent(
            player_year_extent(datasets.players), default=self.default_filters
        )
        return self._commit(
            players=tuple(datasets.players),
            international_players=tuple(datasets.international_players),
            populations=tuple(datasets.populations),
            filters=filters,
            validation=datasets.validation,
        )

    async def load_sample(self, loader: DatasetLoader) -> bool:
        """Fetch and apply the sample CSVs; returns ``False`` if superseded."""

        ticket = self.begin_load()
        try:
            texts = await loader.load_sample()
        except SourceUnavailableError as exc:
            if self.is_current(ticket):
                self.error = str(exc)
            raise
        if not self.is_current(ticket):
            logger.info("Discarding superseded sample load %d", ticket)
            return False
        self.load_players_text(texts.players_text)
        self.load_population_text(texts.population_text)
        return True

    async def load_bundled(self, loader: DatasetLoader) -> bool:
        ticket = self.begin_load()
        try:
            datasets = await loader.load_bundled(resolver=self.resolver)
        except SourceUnavailableError as exc:
            if self.is_current(ticket):
                self.error = str(exc)
            raise
        if not self.is_current(ticket):
            logger.info("Discarding superseded bundled load %d", ticket)
            return False
        self.apply_bundled(datasets)
        return True

    def clear(self) -> None:
        if self.cache is not None:
            self.cache.clear(PLAYERS_STORAGE_KEY)
            self.cache.clear(POPULATION_STORAGE_KEY)
        self.error = None
        self._commit(
            players=(),
            international_players=(),
            populations=(),
            filters=self.default_filters,
            international_filters=Filters.unbounded(),
            validation=DataValidationSummary(),
        )

    # -- filters and queries -----------------------------------------------

    def set_filters(self, updater: Callable[[Filters], Filters]) -> Filters:
        filters = updater(self._snapshot.filters)
        self._commit(filters=filters)
        return filters

    def set_international_filters(self, updater: Callable[[Filters], Filters]) -> Filters:
        filters = updater(self._snapshot.international_filters)
        self._commit(international_filters=filters)
        return filters

    def state_aggregates(
        self, *, metric: StateMetric = "total_war", decade: Optional[int] = None
    ) -> List[StateAggregate]:
        snapshot = self._snapshot
        if not snapshot.players:
            return []
        aggregates = aggregate_by_state(
            snapshot.players,
            self.population_lookup,
            snapshot.filters,
            target_decade=decade,
        )
        return rank_state_aggregates(aggregates, metric)

    def country_aggregates(self, *, decade: Optional[int] = None) -> List[CountryAggregate]:
        snapshot = self._snapshot
        return aggregate_by_country(
            snapshot.international_players,
            snapshot.international_filters,
            target_decade=decade,
        )

    def decades(self) -> List[int]:
        return list_decades(self._snapshot.players)

    def international_decades(self) -> List[int]:
        return list_decades(self._snapshot.international_players)


__all__ = ["DataStore", "Snapshot"]
