"""Header synonyms and scalar parsing shared by the CSV and JSON readers."""

from __future__ import annotations

import csv
import math
from io import StringIO
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

FieldTable = Mapping[str, Tuple[str, ...]]

# Accepted source columns per logical field, in priority order.
PLAYER_FIELDS: FieldTable = {
    "player_id": ("player_id", "playerID", "playerId", "player_ID"),
    "full_name": ("full_name", "fullName", "name"),
    "first_name": ("name_first", "nameFirst", "first_name"),
    "last_name": ("name_last", "nameLast", "last_name"),
    "given_name": ("name_given", "nameGiven"),
    "birth_state": ("birth_state", "birthState", "birthStateRaw", "birth_state_raw"),
    "birth_year": ("birth_year", "birthYear", "birthyear"),
    "war": ("war_career", "warCareer", "war", "WAR"),
}

INTERNATIONAL_FIELDS: FieldTable = {
    **PLAYER_FIELDS,
    "birth_country": ("birth_country", "birthCountry", "country"),
    "birth_country_raw": ("birth_country_raw", "birthCountryRaw"),
    "birth_city": ("birth_city", "birthCity"),
}

POPULATION_FIELDS: FieldTable = {
    "state": ("state", "state/region", "state_postal", "state_name"),
    "year": ("year", "Year"),
    "population": ("population", "Population", "pop"),
    "age_group": ("ages", "age"),
}

_NULL_TOKENS = {"null", "nan"}


def merge_fields(base: FieldTable, extra: Mapping[str, Sequence[str]] | None) -> FieldTable:
    """Prepend user-supplied candidates to the built-in table."""

    if not extra:
        return base
    merged = {}
    for key, candidates in base.items():
        ordered: List[str] = []
        for name in (*extra.get(key, ()), *candidates):
            if name not in ordered:
                ordered.append(name)
        merged[key] = tuple(ordered)
    return merged


def clean_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value).strip()


def pick(row: Mapping[str, Any], candidates: Iterable[str]) -> Optional[str]:
    """Trimmed value of the first candidate column present in ``row``."""

    for name in candidates:
        value = row.get(name)
        if value is not None:
            return clean_text(value)
    return None


def pick_non_empty(row: Mapping[str, Any], candidates: Iterable[str]) -> Optional[str]:
    for name in candidates:
        value = clean_text(row.get(name))
        if value:
            return value
    return None


def parse_number(value: Any) -> Optional[float]:
    """Parse a finite number; blanks, ``null``/``NaN`` tokens and junk give ``None``."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
        return number if math.isfinite(number) else None
    text = str(value).strip()
    if not text or text.lower() in _NULL_TOKENS or "_" in text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def parse_year(value: Any) -> Optional[int]:
    number = parse_number(value)
    if number is None or not number.is_integer():
        return None
    return int(number)


def read_csv_rows(text: str | None) -> List[dict[str, str]]:
    """Split CSV text into row mappings; empty or header-only text gives ``[]``."""

    if not text:
        return []
    stripped = text.lstrip("\ufeff").strip()
    if not stripped:
        return []
    reader = csv.DictReader(StringIO(stripped))
    if reader.fieldnames:
        reader.fieldnames = [name.strip() for name in reader.fieldnames]
    return list(reader)
