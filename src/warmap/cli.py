"""Command-line interface for ranking birthplaces by career WAR."""

from __future__ import annotations

import argparse
import json
import logging
from dataclasses import asdict
from pathlib import Path

from warmap.aggregate import (
    aggregate_by_country,
    aggregate_by_state,
    export_country_aggregates_to_csv,
    export_state_aggregates_to_csv,
    rank_state_aggregates,
)
from warmap.config import get_settings
from warmap.config_loader import ColumnProfile
from warmap.filters import Filters, player_year_extent
from warmap.ingest import (
    load_international_players_csv,
    load_players_csv,
    load_population_csv,
)
from warmap.models import DataValidationSummary
from warmap.reference import CountryResolver


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Rank birth states or countries by career WAR")
    parser.add_argument("players", type=Path, help="Path to players CSV")
    parser.add_argument("--population", type=Path, default=None, help="Optional state population CSV")
    parser.add_argument(
        "--international",
        action="store_true",
        help="Treat the players file as international (birth country) records",
    )
    parser.add_argument(
        "--metric",
        choices=("total_war", "war_per_million"),
        default="total_war",
        help="Ranking metric for the state view",
    )
    parser.add_argument("--decade", type=int, default=None, help="Only players born in this decade")
    parser.add_argument("--min-year", type=int, default=None, help="Earliest birth year (inclusive)")
    parser.add_argument("--max-year", type=int, default=None, help="Latest birth year (inclusive)")
    parser.add_argument("--min-war", type=float, default=0.0, help="Minimum career WAR")
    parser.add_argument(
        "--players-column",
        action="append",
        default=[],
        help="Extra header names for a player field (e.g., birth_state=Born In|State)",
    )
    parser.add_argument(
        "--population-column",
        action="append",
        default=[],
        help="Extra header names for a population field (e.g., population=Residents)",
    )
    parser.add_argument("--load-profile", type=Path, help="Load column profile JSON", default=None)
    parser.add_argument("--save-profile", type=Path, help="Save column profile JSON", default=None)
    parser.add_argument("--limit", type=int, default=None, help="Only write the top N rows")
    parser.add_argument("--output", type=Path, default=Path("war_by_birthplace.csv"), help="Output CSV path")
    parser.add_argument(
        "--report",
        type=Path,
        default=None,
        help="Optional path to write the validation summary JSON",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log parse details")
    return parser.parse_args(argv)


def _parse_columns(entries: list[str]) -> dict[str, list[str]]:
    columns: dict[str, list[str]] = {}
    for entry in entries:
        if "=" not in entry:
            raise SystemExit(f"Invalid column entry '{entry}', expected field=Header|Other Header")
        key, value = entry.split("=", 1)
        columns.setdefault(key.strip(), []).extend(
            part.strip() for part in value.split("|") if part.strip()
        )
    return columns


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)
    settings = get_settings()

    players_columns = _parse_columns(args.players_column)
    population_columns = _parse_columns(args.population_column)
    if args.load_profile:
        profile = ColumnProfile.load(args.load_profile)
        players_columns = profile.players | players_columns
        population_columns = profile.population | population_columns
    if args.save_profile:
        ColumnProfile(players_columns, population_columns).save(args.save_profile)
        print(f"Saved column profile to {args.save_profile}")

    if not args.players.exists():
        raise SystemExit(f"players file {args.players} not found")

    if args.international:
        resolver = CountryResolver(strict=settings.strict_countries)
        players, summary = load_international_players_csv(
            args.players, resolver=resolver, columns=players_columns or None
        )
        validation = DataValidationSummary(international=summary)
        filters = Filters.unbounded(min_war=args.min_war)
        if args.min_year is not None or args.max_year is not None:
            filters = Filters(
                min_year=args.min_year if args.min_year is not None else filters.min_year,
                max_year=args.max_year if args.max_year is not None else filters.max_year,
                min_war=args.min_war,
            )
        aggregates = aggregate_by_country(players, filters, target_decade=args.decade)
        print(
            f"Accepted {summary.accepted}/{summary.row_count} players "
            f"({summary.rejected} rejected) across {len(aggregates)} countries"
        )
        content = export_country_aggregates_to_csv(aggregates, limit=args.limit)
    else:
        players, summary = load_players_csv(args.players, columns=players_columns or None)
        populations = []
        population_summary = None
        if args.population:
            if not args.population.exists():
                raise SystemExit(f"population file {args.population} not found")
            populations, population_summary = load_population_csv(
                args.population, columns=population_columns or None
            )
        validation = DataValidationSummary(
            players=summary,
            populations=population_summary or DataValidationSummary().populations,
        )
        extent = player_year_extent(players) or (settings.default_min_year, settings.default_max_year)
        filters = Filters(
            min_year=args.min_year if args.min_year is not None else extent[0],
            max_year=args.max_year if args.max_year is not None else extent[1],
            min_war=args.min_war,
        )
        if filters.min_year > filters.max_year:
            raise SystemExit("--min-year must not exceed --max-year")
        aggregates = rank_state_aggregates(
            aggregate_by_state(players, populations, filters, target_decade=args.decade),
            args.metric,
        )
        print(
            f"Accepted {summary.accepted}/{summary.row_count} players "
            f"({summary.rejected} rejected, {summary.missing_state} unknown state) "
            f"across {len(aggregates)} states"
        )
        if args.metric == "war_per_million" and not populations:
            print("No population data supplied; per-capita ranking is empty")
        content = export_state_aggregates_to_csv(aggregates, limit=args.limit)

    args.output.write_text(content, encoding="utf-8")
    print(f"Wrote rankings to {args.output}")

    if args.report:
        args.report.write_text(json.dumps(asdict(validation), indent=2), encoding="utf-8")
        print(f"Wrote validation report to {args.report}")


if __name__ == "__main__":
    main()
