"""Aggregation engine for the state and country views."""

from .countries import (
    CountryAggregate,
    InternationalDatasetSummary,
    aggregate_by_country,
    summarize_international_dataset,
    war_extent,
)
from .export import (
    AggregateExportError,
    export_country_aggregates_to_csv,
    export_state_aggregates_to_csv,
)
from .states import (
    WAR_PRECISION,
    StateAggregate,
    StateMetric,
    aggregate_by_state,
    rank_state_aggregates,
    round_war,
    sort_players,
    war_per_million,
)

__all__ = [
    "AggregateExportError",
    "CountryAggregate",
    "InternationalDatasetSummary",
    "StateAggregate",
    "StateMetric",
    "WAR_PRECISION",
    "aggregate_by_country",
    "aggregate_by_state",
    "export_country_aggregates_to_csv",
    "export_state_aggregates_to_csv",
    "rank_state_aggregates",
    "round_war",
    "sort_players",
    "summarize_international_dataset",
    "war_extent",
]
