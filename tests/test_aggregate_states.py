import pytest

from warmap.aggregate import aggregate_by_state, rank_state_aggregates, round_war, war_per_million
from warmap.filters import Filters, filter_players
from warmap.models import PlayerRecord, PopulationRecord
from warmap.population import PopulationLookup
from warmap.reference import STATE_FIPS_CODES, find_state


def _player(player_id, state, year, war):
    return PlayerRecord(
        player_id=player_id,
        full_name=player_id.title(),
        birth_year=year,
        birth_state_raw=state,
        war_career=war,
    )


WIDE = Filters(min_year=1900, max_year=2000, min_war=-100.0)


def test_single_state_total_and_player_order():
    players = [_player("a", "CA", 1950, 10.0), _player("b", "CA", 1965, -2.0)]

    aggregates = aggregate_by_state(players, [], WIDE)

    assert len(aggregates) == 1
    california = aggregates[0]
    assert california.state.name == "California"
    assert california.fips == "06"
    assert california.total_war == 8.0
    assert california.player_count == 2
    assert [player.player_id for player in california.players] == ["a", "b"]
    assert california.war_per_million is None


def test_equal_war_players_sort_by_id():
    players = [_player("zz", "TX", 1950, 5.0), _player("aa", "Texas", 1951, 5.0)]

    (texas,) = aggregate_by_state(players, [], WIDE)

    assert [player.player_id for player in texas.players] == ["aa", "zz"]


def test_totals_match_filtered_players_per_state():
    players = [
        _player("a", "CA", 1950, 0.1),
        _player("b", "ca", 1960, 0.2),
        _player("c", "New York", 1970, 3.3),
        _player("d", "NY", 1899, 50.0),
        _player("e", "Puerto Rico", 1950, 70.0),
        _player("f", "OH", 1980, -0.4),
    ]
    filters = Filters(min_year=1900, max_year=2000, min_war=-1.0)

    aggregates = aggregate_by_state(players, [], filters)
    filtered = filter_players(players, filters)

    assert {aggregate.fips for aggregate in aggregates} <= set(STATE_FIPS_CODES)
    for aggregate in aggregates:
        expected = sum(
            player.war_career for player in filtered if find_state(player.birth_state_raw).key == aggregate.fips
        )
        assert aggregate.total_war == pytest.approx(round(expected, 3))
    assert sum(aggregate.player_count for aggregate in aggregates) == 4


def test_states_sorted_by_total_war():
    players = [
        _player("a", "OH", 1950, 1.0),
        _player("b", "GA", 1950, 9.0),
        _player("c", "NJ", 1950, 4.0),
    ]

    aggregates = aggregate_by_state(players, [], WIDE)

    assert [aggregate.state.code for aggregate in aggregates] == ["GA", "NJ", "OH"]


def test_war_per_million_uses_nearest_population_year():
    players = [_player("a", "CA", 1950, 10.0), _player("b", "GA", 1950, 5.0)]
    populations = [
        PopulationRecord(state="CA", year=1950, population=10_000_000),
        PopulationRecord(state="CA", year=1970, population=20_000_000),
    ]
    filters = Filters(min_year=1950, max_year=1960, min_war=-100.0)

    aggregates = aggregate_by_state(players, PopulationLookup(populations), filters)
    by_state = {aggregate.state.code: aggregate for aggregate in aggregates}

    assert by_state["CA"].war_per_million == 1.0
    assert by_state["GA"].war_per_million is None


def test_decade_override_moves_population_year_without_touching_filters():
    players = [_player("a", "CA", 1965, 10.0), _player("b", "CA", 1950, 3.0)]
    populations = [
        PopulationRecord(state="CA", year=1950, population=10_000_000),
        PopulationRecord(state="CA", year=1970, population=20_000_000),
    ]

    (california,) = aggregate_by_state(players, populations, WIDE, target_decade=1960)

    assert california.player_count == 1
    assert california.war_per_million == 0.5
    assert WIDE.selected_decade is None


def test_zero_population_gives_null_metric():
    assert war_per_million(5.0, 0) is None
    assert war_per_million(5.0, None) is None
    assert war_per_million(5.0, 2_000_000) == 2.5


def test_values_are_rounded_to_three_places():
    players = [_player("a", "CA", 1950, 0.1), _player("b", "CA", 1950, 0.2), _player("c", "CA", 1950, 1 / 3)]
    populations = [PopulationRecord(state="CA", year=1950, population=3_000_000)]

    (california,) = aggregate_by_state(players, populations, WIDE)

    assert california.total_war == 0.633
    assert california.war_per_million == 0.211


def test_rank_by_per_capita_drops_null_metrics():
    players = [
        _player("a", "CA", 1950, 30.0),
        _player("b", "GA", 1950, 5.0),
        _player("c", "NJ", 1950, 10.0),
    ]
    populations = [
        PopulationRecord(state="CA", year=1950, population=30_000_000),
        PopulationRecord(state="NJ", year=1950, population=5_000_000),
    ]
    aggregates = aggregate_by_state(players, populations, WIDE)

    ranked = rank_state_aggregates(aggregates, "war_per_million")

    assert [aggregate.state.code for aggregate in ranked] == ["NJ", "CA"]
    assert [aggregate.state.code for aggregate in rank_state_aggregates(aggregates, "total_war")] == [
        "CA",
        "NJ",
        "GA",
    ]


def test_rank_rejects_unknown_metric():
    with pytest.raises(ValueError):
        rank_state_aggregates([], "average_war")  # type: ignore[arg-type]


def test_empty_players_yield_no_aggregates():
    assert aggregate_by_state([], [], WIDE) == []


def test_states_order_on_unrounded_totals():
    players = [_player("t", "TX", 1950, 1.0001), _player("c", "CA", 1950, 1.0004)]

    aggregates = aggregate_by_state(players, [], WIDE)

    assert [aggregate.state.code for aggregate in aggregates] == ["CA", "TX"]
    assert [aggregate.total_war for aggregate in aggregates] == [1.0, 1.0]
    assert [a.state.code for a in rank_state_aggregates(aggregates, "total_war")] == ["CA", "TX"]


def test_reported_values_round_half_up():
    players = [_player("a", "CA", 1950, 0.0625)]
    populations = [PopulationRecord(state="CA", year=1950, population=1_000_000)]

    (california,) = aggregate_by_state(players, populations, WIDE)

    assert california.total_war == 0.063
    assert california.war_per_million == 0.063
    assert round_war(-0.0625) == -0.063
    assert round_war(2.25, 1) == 2.3
