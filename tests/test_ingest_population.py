from warmap.ingest import parse_population_csv, parse_population_json, population_to_csv


def test_population_rows_are_resolved_and_sorted():
    text = (
        "state,year,population\n"
        "Texas,1970,11196730\n"
        "CA,1970,19953134\n"
        "ca,1950,10586223\n"
    )

    records, summary = parse_population_csv(text)

    assert [(record.state, record.year) for record in records] == [
        ("CA", 1950),
        ("CA", 1970),
        ("TX", 1970),
    ]
    assert summary.accepted == 3
    assert summary.rejected == 0


def test_non_total_age_rows_are_skipped_without_counting():
    text = (
        "state/region,ages,year,population\n"
        "AL,under18,1990,1050000\n"
        "AL,total,1990,4050000\n"
        "AL,TOTAL,2000,4447100\n"
    )

    records, summary = parse_population_csv(text)

    assert [record.year for record in records] == [1990, 2000]
    assert summary.row_count == 2
    assert summary.rejected == 0


def test_invalid_and_unknown_rows_are_rejected():
    text = (
        "state,year,population\n"
        "PR,2010,3725789\n"
        "CA,,100\n"
        "CA,1990,NaN\n"
        "CA,1990,-5\n"
        ",1990,5\n"
        "CA,1990,29760021.6\n"
    )

    records, summary = parse_population_csv(text)

    assert summary.rejected == 5
    assert summary.accepted == 1
    assert records[0].population == 29760022


def test_population_json_and_round_trip():
    payload = [
        {"state": "NY", "year": 2000, "population": 18976457},
        {"state": "NY", "year": 1950, "population": 14830192},
    ]

    records, summary = parse_population_json(payload)

    assert [record.year for record in records] == [1950, 2000]
    assert summary.accepted == 2

    reparsed, _ = parse_population_csv(population_to_csv(records))
    assert reparsed == records


def test_empty_population_input():
    records, summary = parse_population_csv("")

    assert records == []
    assert summary.row_count == 0
