"""Helpers to load state population series."""

from __future__ import annotations

import csv
import math
import logging
from io import StringIO
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Sequence, Tuple

from warmap.models import PopulationRecord, PopulationValidation
from warmap.reference import find_state

from .fields import POPULATION_FIELDS, merge_fields, parse_number, parse_year, pick, read_csv_rows


logger = logging.getLogger(__name__)

POPULATION_CSV_HEADER = ("state", "year", "population")
TOTAL_AGE_GROUP = "total"


def sort_population(records: Iterable[PopulationRecord]) -> List[PopulationRecord]:
    """Order by state code, then year ascending (stable for duplicate years)."""

    return sorted(records, key=lambda record: (record.state, record.year))


def rows_to_population(
    rows: Iterable[Mapping[str, Any]],
    *,
    columns: Mapping[str, Sequence[str]] | None = None,
) -> Tuple[List[PopulationRecord], PopulationValidation]:
    fields = merge_fields(POPULATION_FIELDS, columns)
    records: List[PopulationRecord] = []
    row_count = 0
    rejected = 0
    skipped = 0
    for row in rows:
        age_group = pick(row, fields["age_group"])
        if age_group is not None and age_group.lower() != TOTAL_AGE_GROUP:
            # Age cohorts other than the total are outside the dataset, not invalid.
            skipped += 1
            continue
        row_count += 1
        state_raw = pick(row, fields["state"])
        year = parse_year(pick(row, fields["year"]))
        population = parse_number(pick(row, fields["population"]))
        if not state_raw or year is None or population is None or population < 0:
            rejected += 1
            continue
        state = find_state(state_raw)
        if state is None:
            logger.debug("Population row for unknown state %r", state_raw)
            rejected += 1
            continue
        records.append(
            PopulationRecord(state=state.code or state_raw, year=year, population=math.floor(population + 0.5))
        )

    summary = PopulationValidation(row_count=row_count, accepted=len(records), rejected=rejected)
    logger.info(
        "Parsed population: %d rows, %d accepted, %d rejected (%d non-total age rows skipped)",
        summary.row_count,
        summary.accepted,
        summary.rejected,
        skipped,
    )
    return sort_population(records), summary


def parse_population_csv(
    text: str | None, *, columns: Mapping[str, Sequence[str]] | None = None
) -> Tuple[List[PopulationRecord], PopulationValidation]:
    return rows_to_population(read_csv_rows(text), columns=columns)


def load_population_csv(
    path: Path, *, columns: Mapping[str, Sequence[str]] | None = None
) -> Tuple[List[PopulationRecord], PopulationValidation]:
    return parse_population_csv(path.read_text(encoding="utf-8"), columns=columns)


def parse_population_json(payload: Any) -> Tuple[List[PopulationRecord], PopulationValidation]:
    rows = payload if isinstance(payload, list) else []
    return rows_to_population(item if isinstance(item, Mapping) else {} for item in rows)


def population_to_csv(records: Iterable[PopulationRecord]) -> str:
    buffer = StringIO()
    writer = csv.writer(buffer)
    writer.writerow(POPULATION_CSV_HEADER)
    for record in records:
        writer.writerow([record.state, record.year, record.population])
    return buffer.getvalue()
