"""CSV export helpers for ranked aggregates."""

from __future__ import annotations

import csv
from io import StringIO
from typing import Sequence

from .countries import CountryAggregate
from .states import StateAggregate


class AggregateExportError(RuntimeError):
    """Raised when aggregates cannot be written in the requested layout."""


STATE_HEADERS = (
    "rank",
    "state",
    "postal",
    "fips",
    "total_war",
    "player_count",
    "war_per_million",
    "top_player",
)

COUNTRY_HEADERS = (
    "rank",
    "country",
    "code",
    "map_feature",
    "total_war",
    "player_count",
    "average_war",
    "top_player",
)


def _format_optional(value: float | None) -> str:
    return "" if value is None else f"{value:.3f}"


def export_state_aggregates_to_csv(
    aggregates: Sequence[StateAggregate], *, limit: int | None = None
) -> str:
    """Render state aggregates as CSV, one row per state in the given order."""

    if limit is not None and limit < 0:
        raise AggregateExportError("limit must be non-negative")
    rows = aggregates if limit is None else aggregates[:limit]

    buffer = StringIO()
    writer = csv.writer(buffer)
    writer.writerow(STATE_HEADERS)
    for rank, aggregate in enumerate(rows, start=1):
        top = aggregate.players[0].full_name if aggregate.players else ""
        writer.writerow(
            [
                rank,
                aggregate.state.name,
                aggregate.state.code or "",
                aggregate.fips,
                f"{aggregate.total_war:.3f}",
                aggregate.player_count,
                _format_optional(aggregate.war_per_million),
                top,
            ]
        )
    return buffer.getvalue()


def export_country_aggregates_to_csv(
    aggregates: Sequence[CountryAggregate], *, limit: int | None = None
) -> str:
    if limit is not None and limit < 0:
        raise AggregateExportError("limit must be non-negative")
    rows = aggregates if limit is None else aggregates[:limit]

    buffer = StringIO()
    writer = csv.writer(buffer)
    writer.writerow(COUNTRY_HEADERS)
    for rank, aggregate in enumerate(rows, start=1):
        top = aggregate.players[0].full_name if aggregate.players else ""
        writer.writerow(
            [
                rank,
                aggregate.country,
                aggregate.unit.code or "",
                aggregate.feature_name or "",
                f"{aggregate.total_war:.3f}",
                aggregate.player_count,
                f"{aggregate.average_war:.3f}",
                top,
            ]
        )
    return buffer.getvalue()


__all__ = [
    "AggregateExportError",
    "export_country_aggregates_to_csv",
    "export_state_aggregates_to_csv",
]
