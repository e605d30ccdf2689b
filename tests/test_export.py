import csv
from io import StringIO

import pytest

from warmap.aggregate import (
    AggregateExportError,
    aggregate_by_country,
    aggregate_by_state,
    export_country_aggregates_to_csv,
    export_state_aggregates_to_csv,
)
from warmap.filters import Filters
from warmap.models import InternationalPlayerRecord, PlayerRecord, PopulationRecord


def _rows(text):
    return list(csv.DictReader(StringIO(text)))


def test_state_export_rows_follow_rank_order():
    players = [
        PlayerRecord(player_id="a", full_name="Alpha", birth_year=1950, birth_state_raw="CA", war_career=10.0),
        PlayerRecord(player_id="b", full_name="Beta", birth_year=1950, birth_state_raw="GA", war_career=20.0),
    ]
    populations = [PopulationRecord(state="GA", year=1950, population=4_000_000)]
    aggregates = aggregate_by_state(players, populations, Filters(min_year=1900, max_year=2000))

    rows = _rows(export_state_aggregates_to_csv(aggregates))

    assert [row["postal"] for row in rows] == ["GA", "CA"]
    assert rows[0]["rank"] == "1"
    assert rows[0]["fips"] == "13"
    assert rows[0]["total_war"] == "20.000"
    assert rows[0]["war_per_million"] == "5.000"
    assert rows[0]["top_player"] == "Beta"
    assert rows[1]["war_per_million"] == ""


def test_country_export_and_limit():
    players = [
        InternationalPlayerRecord(
            player_id="k", full_name="Kid", birth_year=1980, birth_country="Curacao", war_career=7.5
        ),
        InternationalPlayerRecord(
            player_id="p", full_name="Pete", birth_year=1980, birth_country="Panama", war_career=9.0
        ),
    ]
    aggregates = aggregate_by_country(players)

    rows = _rows(export_country_aggregates_to_csv(aggregates, limit=1))

    assert len(rows) == 1
    assert rows[0]["country"] == "Panama"
    assert rows[0]["average_war"] == "9.000"

    curacao = _rows(export_country_aggregates_to_csv(aggregates))[1]
    assert curacao["code"] == "CUW"
    assert curacao["map_feature"] == ""


def test_negative_limit_is_rejected():
    with pytest.raises(AggregateExportError):
        export_state_aggregates_to_csv([], limit=-1)
    with pytest.raises(AggregateExportError):
        export_country_aggregates_to_csv([], limit=-1)


def test_empty_export_has_header_only():
    assert _rows(export_state_aggregates_to_csv([])) == []
