"""Helpers to load player CSV/JSON data and emit canonical records."""

from __future__ import annotations

import csv
import logging
from io import StringIO
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

from warmap.models import (
    InternationalPlayerRecord,
    InternationalValidation,
    PlayerRecord,
    PlayerValidation,
)
from warmap.reference import CountryResolver, find_state

from .fields import (
    INTERNATIONAL_FIELDS,
    PLAYER_FIELDS,
    FieldTable,
    merge_fields,
    parse_number,
    parse_year,
    pick,
    pick_non_empty,
    read_csv_rows,
)


logger = logging.getLogger(__name__)

PLAYER_CSV_HEADER = ("player_id", "full_name", "birth_state", "birth_year", "war_career")
INTERNATIONAL_CSV_HEADER = (
    "player_id",
    "full_name",
    "birth_year",
    "birth_country",
    "birth_country_raw",
    "birth_city",
    "war_career",
)


def _display_name(row: Mapping[str, Any], fields: FieldTable, player_id: str) -> str:
    full_name = pick_non_empty(row, fields["full_name"])
    if full_name:
        return full_name
    parts = [
        pick_non_empty(row, fields["first_name"]) or "",
        pick_non_empty(row, fields["last_name"]) or "",
    ]
    joined = " ".join(part for part in parts if part)
    return joined or pick_non_empty(row, fields["given_name"]) or player_id


def _core_fields(
    row: Mapping[str, Any], fields: FieldTable
) -> Optional[Tuple[str, int, float]]:
    player_id = pick(row, fields["player_id"])
    birth_year = parse_year(pick(row, fields["birth_year"]))
    war = parse_number(pick(row, fields["war"]))
    if not player_id or birth_year is None or war is None:
        return None
    return player_id, birth_year, war


def rows_to_players(
    rows: Iterable[Mapping[str, Any]],
    *,
    columns: Mapping[str, Sequence[str]] | None = None,
) -> Tuple[List[PlayerRecord], PlayerValidation]:
    """Build domestic records; unresolvable states are counted apart from bad rows."""

    fields = merge_fields(PLAYER_FIELDS, columns)
    records: List[PlayerRecord] = []
    row_count = 0
    rejected = 0
    missing_state = 0
    for row in rows:
        row_count += 1
        core = _core_fields(row, fields)
        if core is None:
            rejected += 1
            continue
        player_id, birth_year, war = core
        birth_state_raw = pick(row, fields["birth_state"]) or ""
        if find_state(birth_state_raw) is None:
            logger.debug("Player %s has unrecognised birth state %r", player_id, birth_state_raw)
            missing_state += 1
            continue
        records.append(
            PlayerRecord(
                player_id=player_id,
                full_name=_display_name(row, fields, player_id),
                birth_year=birth_year,
                birth_state_raw=birth_state_raw,
                war_career=war,
            )
        )

    summary = PlayerValidation(
        row_count=row_count,
        accepted=len(records),
        rejected=rejected,
        missing_state=missing_state,
    )
    logger.info(
        "Parsed players: %d rows, %d accepted, %d rejected, %d missing state",
        summary.row_count,
        summary.accepted,
        summary.rejected,
        summary.missing_state,
    )
    return records, summary


def rows_to_international_players(
    rows: Iterable[Mapping[str, Any]],
    *,
    resolver: CountryResolver | None = None,
    columns: Mapping[str, Sequence[str]] | None = None,
) -> Tuple[List[InternationalPlayerRecord], InternationalValidation]:
    """Build international records; rows without a resolvable country are rejected."""

    resolver = resolver or CountryResolver()
    fields = merge_fields(INTERNATIONAL_FIELDS, columns)
    records: List[InternationalPlayerRecord] = []
    row_count = 0
    rejected = 0
    for row in rows:
        row_count += 1
        core = _core_fields(row, fields)
        if core is None:
            rejected += 1
            continue
        player_id, birth_year, war = core
        country_value = pick_non_empty(row, fields["birth_country"])
        raw_country = pick_non_empty(row, fields["birth_country_raw"]) or country_value
        country = resolver.resolve(country_value)
        if country is None:
            logger.debug("Player %s has no resolvable birth country (%r)", player_id, country_value)
            rejected += 1
            continue
        records.append(
            InternationalPlayerRecord(
                player_id=player_id,
                full_name=_display_name(row, fields, player_id),
                birth_year=birth_year,
                birth_country=country.key,
                birth_country_raw=raw_country,
                birth_city=pick_non_empty(row, fields["birth_city"]),
                war_career=war,
            )
        )

    summary = InternationalValidation(row_count=row_count, accepted=len(records), rejected=rejected)
    logger.info(
        "Parsed international players: %d rows, %d accepted, %d rejected",
        summary.row_count,
        summary.accepted,
        summary.rejected,
    )
    return records, summary


def parse_players_csv(
    text: str | None, *, columns: Mapping[str, Sequence[str]] | None = None
) -> Tuple[List[PlayerRecord], PlayerValidation]:
    return rows_to_players(read_csv_rows(text), columns=columns)


def parse_international_players_csv(
    text: str | None,
    *,
    resolver: CountryResolver | None = None,
    columns: Mapping[str, Sequence[str]] | None = None,
) -> Tuple[List[InternationalPlayerRecord], InternationalValidation]:
    return rows_to_international_players(read_csv_rows(text), resolver=resolver, columns=columns)


def load_players_csv(
    path: Path, *, columns: Mapping[str, Sequence[str]] | None = None
) -> Tuple[List[PlayerRecord], PlayerValidation]:
    return parse_players_csv(path.read_text(encoding="utf-8"), columns=columns)


def load_international_players_csv(
    path: Path,
    *,
    resolver: CountryResolver | None = None,
    columns: Mapping[str, Sequence[str]] | None = None,
) -> Tuple[List[InternationalPlayerRecord], InternationalValidation]:
    return parse_international_players_csv(
        path.read_text(encoding="utf-8"), resolver=resolver, columns=columns
    )


def _json_rows(payload: Any) -> List[Mapping[str, Any]]:
    # A bundled dataset is a JSON array of objects; anything else is treated as empty.
    if not isinstance(payload, list):
        return []
    return [item if isinstance(item, Mapping) else {} for item in payload]


def parse_players_json(payload: Any) -> Tuple[List[PlayerRecord], PlayerValidation]:
    return rows_to_players(_json_rows(payload))


def parse_international_players_json(
    payload: Any, *, resolver: CountryResolver | None = None
) -> Tuple[List[InternationalPlayerRecord], InternationalValidation]:
    return rows_to_international_players(_json_rows(payload), resolver=resolver)


def players_to_csv(records: Iterable[PlayerRecord]) -> str:
    buffer = StringIO()
    writer = csv.writer(buffer)
    writer.writerow(PLAYER_CSV_HEADER)
    for record in records:
        writer.writerow(
            [
                record.player_id,
                record.full_name,
                record.birth_state_raw,
                record.birth_year,
                repr(record.war_career),
            ]
        )
    return buffer.getvalue()


def international_players_to_csv(records: Iterable[InternationalPlayerRecord]) -> str:
    buffer = StringIO()
    writer = csv.writer(buffer)
    writer.writerow(INTERNATIONAL_CSV_HEADER)
    for record in records:
        writer.writerow(
            [
                record.player_id,
                record.full_name,
                record.birth_year,
                record.birth_country,
                record.birth_country_raw or "",
                record.birth_city or "",
                repr(record.war_career),
            ]
        )
    return buffer.getvalue()
