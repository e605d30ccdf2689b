"""Input adapters that normalize raw player and population data."""

from .fields import INTERNATIONAL_FIELDS, PLAYER_FIELDS, POPULATION_FIELDS, parse_number
from .players import (
    international_players_to_csv,
    load_international_players_csv,
    load_players_csv,
    parse_international_players_csv,
    parse_international_players_json,
    parse_players_csv,
    parse_players_json,
    players_to_csv,
    rows_to_international_players,
    rows_to_players,
)
from .population import (
    load_population_csv,
    parse_population_csv,
    parse_population_json,
    population_to_csv,
    rows_to_population,
    sort_population,
)

__all__ = [
    "INTERNATIONAL_FIELDS",
    "PLAYER_FIELDS",
    "POPULATION_FIELDS",
    "parse_number",
    "international_players_to_csv",
    "load_international_players_csv",
    "load_players_csv",
    "parse_international_players_csv",
    "parse_international_players_json",
    "parse_players_csv",
    "parse_players_json",
    "players_to_csv",
    "rows_to_international_players",
    "rows_to_players",
    "load_population_csv",
    "parse_population_csv",
    "parse_population_json",
    "population_to_csv",
    "rows_to_population",
    "sort_population",
]
