from highwayexec.data.mapping import (
    FINANCIAL_FEED,
    PHYSICAL_FEED,
    default_mapping,
    resolve_header,
    suggest_mapping,
    validate_feeds,
    validate_mapping,
    validate_rows,
)
from highwayexec.data.parser import parse_csv_string


def _phys_row(pid="P1", date="2025-07-01", pct="40"):
    return {"ProjectID": pid, "Date": date, "ActualPhysicalPct": pct}


def _fin_row(pid="P1", date="2025-07-01", amount="1,000"):
    return {"ProjectID": pid, "Date": date, "ActualAmount": amount}


def test_required_field_sets():
    assert PHYSICAL_FEED.required == ("ProjectID", "Date", "ActualPhysicalPct")
    assert FINANCIAL_FEED.required == ("ProjectID", "Date", "ActualAmount")


def test_default_mapping_is_identity():
    assert default_mapping(PHYSICAL_FEED) == {
        "ProjectID": "ProjectID",
        "Date": "Date",
        "ActualPhysicalPct": "ActualPhysicalPct",
    }
    assert validate_mapping(PHYSICAL_FEED, default_mapping(PHYSICAL_FEED)) == []


def test_one_error_per_unmapped_required_field():
    errors = validate_mapping(FINANCIAL_FEED, {"ProjectID": "Code", "Date": ""})

    assert errors == [
        "Financial: missing mapping for Date",
        "Financial: missing mapping for ActualAmount",
    ]


def test_row_checks_use_mapped_headers():
    mapping = {"ProjectID": "Code", "Date": "As Of", "ActualPhysicalPct": "Done"}
    rows = [{"Code": "P1", "As Of": "2025-07-01", "Done": "55"}]

    assert validate_rows(PHYSICAL_FEED, mapping, rows) == []


def test_physical_row_errors():
    rows = [
        _phys_row(pid=" "),
        _phys_row(date=""),
        _phys_row(pct="150"),
        _phys_row(pct="-1"),
        _phys_row(pct="abc"),
        _phys_row(pct="100"),
        _phys_row(pct=" 0 "),
    ]

    errors = validate_rows(PHYSICAL_FEED, default_mapping(PHYSICAL_FEED), rows)

    assert errors == [
        "Physical row 1: ProjectID blank",
        "Physical row 2: Date blank",
        "Physical row 3: ActualPhysicalPct invalid",
        "Physical row 4: ActualPhysicalPct invalid",
        "Physical row 5: ActualPhysicalPct invalid",
    ]


def test_financial_amount_is_unbounded_but_must_be_numeric():
    rows = [_fin_row(amount="-5,000"), _fin_row(amount="12,50,000"), _fin_row(amount="n/a")]

    errors = validate_rows(FINANCIAL_FEED, default_mapping(FINANCIAL_FEED), rows)

    assert errors == ["Financial row 3: ActualAmount invalid"]


def test_row_checks_are_bounded_to_preview_window():
    rows = [_phys_row(pid="")] * 80

    errors = validate_rows(PHYSICAL_FEED, default_mapping(PHYSICAL_FEED), rows)

    assert len(errors) == 50
    assert errors[-1] == "Physical row 50: ProjectID blank"


def test_feed_errors_are_ordered_mapping_then_rows():
    physical_mapping = {"ProjectID": "ProjectID", "Date": "Date"}
    report = validate_feeds(
        [_phys_row()],
        physical_mapping,
        [_fin_row(date="")],
        default_mapping(FINANCIAL_FEED),
    )

    assert report.errors == [
        "Physical: missing mapping for ActualPhysicalPct",
        "Physical row 1: ActualPhysicalPct invalid",
        "Financial row 1: Date blank",
    ]
    assert not report.can_proceed


def test_validation_is_pure():
    rows = [_phys_row(pct="x")]
    mapping = default_mapping(PHYSICAL_FEED)
    first = validate_feeds(rows, mapping, [], default_mapping(FINANCIAL_FEED))
    second = validate_feeds(rows, mapping, [], default_mapping(FINANCIAL_FEED))

    assert first.errors == second.errors
    assert rows == [_phys_row(pct="x")]
    assert mapping == default_mapping(PHYSICAL_FEED)


def test_clean_feeds_can_proceed(physical_csv, financial_csv):
    physical = parse_csv_string(physical_csv)
    financial = parse_csv_string(financial_csv)

    report = validate_feeds(
        physical.rows,
        default_mapping(PHYSICAL_FEED),
        financial.rows,
        default_mapping(FINANCIAL_FEED),
    )

    assert report.errors == []
    assert report.can_proceed


def test_suggest_mapping_matches_canonical_headers():
    headers = ["projectid", "Date", "ActualPhysicalPct", "LengthKm", "Remarks"]

    mapping = suggest_mapping(PHYSICAL_FEED, headers)

    assert mapping == {
        "ProjectID": "projectid",
        "Date": "Date",
        "ActualPhysicalPct": "ActualPhysicalPct",
        "LengthKm": "LengthKm",
    }


def test_optional_fields_fall_back_to_canonical_header():
    assert resolve_header(PHYSICAL_FEED, {}, "PlannedPhysicalPct") == "PlannedPhysicalPct"
    assert resolve_header(PHYSICAL_FEED, {"PlannedPhysicalPct": "Plan %"}, "PlannedPhysicalPct") == "Plan %"
    assert resolve_header(PHYSICAL_FEED, {}, "ActualPhysicalPct") is None
