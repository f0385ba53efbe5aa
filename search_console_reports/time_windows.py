from __future__ import annotations

from datetime import date, timedelta

ROW_LIMIT_MAX = 1000
DATA_DELAY_DAYS = 4


def default_query_date(run_date: date | None = None) -> date:
    """Most recent day Search Console usually has data for.

    Search Analytics data lags a few days behind; this is a fixed offset from
    ``run_date`` (default: today), not a lookup of actual data availability.
    """
    run_date = run_date or date.today()
    return run_date - timedelta(days=DATA_DELAY_DAYS)


def clamp_row_limit(row_limit: int) -> int:
    # Only negative values are lifted to 1; zero is passed through as-is.
    if row_limit < 0:
        return 1
    if row_limit > ROW_LIMIT_MAX:
        return ROW_LIMIT_MAX
    return row_limit
