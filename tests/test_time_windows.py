from datetime import date, timedelta

from search_console_reports.time_windows import clamp_row_limit, default_query_date


def test_default_query_date_is_four_days_back() -> None:
    assert default_query_date(date(1997, 3, 28)) == date(1997, 3, 24)
    assert default_query_date(date(2024, 3, 2)) == date(2024, 2, 27)


def test_default_query_date_uses_today_when_not_given() -> None:
    assert default_query_date() == date.today() - timedelta(days=4)


def test_clamp_row_limit_lifts_negative_values_to_one() -> None:
    assert clamp_row_limit(-1) == 1
    assert clamp_row_limit(-5000) == 1


def test_clamp_row_limit_passes_zero_through() -> None:
    assert clamp_row_limit(0) == 0


def test_clamp_row_limit_caps_at_one_thousand() -> None:
    assert clamp_row_limit(1000) == 1000
    assert clamp_row_limit(1001) == 1000
    assert clamp_row_limit(5000) == 1000


def test_clamp_row_limit_keeps_values_in_range() -> None:
    for value in (1, 25, 999):
        assert clamp_row_limit(value) == value
