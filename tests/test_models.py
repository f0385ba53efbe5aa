from datetime import date

import pytest

from search_console_reports.models import (
    REPORT_DIMENSIONS,
    ReportKind,
    ReportQuery,
    ResultRecord,
)


def test_report_query_body_uses_single_day_window() -> None:
    query = ReportQuery.build(("query", "page"), date(2024, 5, 1), 10, 250)
    assert query.to_body() == {
        "dimensions": ["query", "page"],
        "startRow": 10,
        "rowLimit": 250,
        "startDate": "2024-05-01",
        "endDate": "2024-05-01",
    }


def test_report_query_build_clamps_row_limit() -> None:
    assert ReportQuery.build(("query",), date(2024, 5, 1), 0, 5000).row_limit == 1000
    assert ReportQuery.build(("query",), date(2024, 5, 1), 0, -3).row_limit == 1
    assert ReportQuery.build(("query",), date(2024, 5, 1), 0, 0).row_limit == 0


def test_country_filter_does_not_add_country_dimension() -> None:
    query = ReportQuery.build(["query"], date(2024, 5, 1), 0, 100, country_filter="FR")
    body = query.to_body()

    assert body["dimensions"] == ["query"]
    assert body["dimensionFilterGroups"] == [
        {"filters": [{"dimension": "country", "expression": "FR"}]}
    ]


def test_report_query_is_immutable() -> None:
    query = ReportQuery.build(("device",), date(2024, 5, 1), 0, 10)
    with pytest.raises(AttributeError):
        query.row_limit = 20  # type: ignore[misc]


def test_report_kinds_follow_canonical_order() -> None:
    assert REPORT_DIMENSIONS[ReportKind.COMBINED] == ("query", "page", "country", "device")
    assert REPORT_DIMENSIONS[ReportKind.SEARCH_TERMS] == ("query",)
    assert REPORT_DIMENSIONS[ReportKind.PAGES] == ("page",)
    assert REPORT_DIMENSIONS[ReportKind.COUNTRIES] == ("country",)
    assert REPORT_DIMENSIONS[ReportKind.DEVICES] == ("device",)


def test_result_record_to_dict_serializes_date() -> None:
    record = ResultRecord(
        text="shoes",
        url="https://example.com/shoes",
        country="fra",
        device="MOBILE",
        clicks=3,
        impressions=40,
        ctr=0.075,
        position=4.2,
        date=date(2024, 5, 1),
    )
    payload = record.to_dict()
    assert payload["date"] == "2024-05-01"
    assert payload["clicks"] == 3
    assert payload["device"] == "MOBILE"
