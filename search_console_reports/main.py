from __future__ import annotations

import argparse
import json
import logging
from datetime import date

from dotenv import find_dotenv, load_dotenv

from search_console_reports.clients.search_console_client import SearchConsoleClient
from search_console_reports.config import ReportConfig
from search_console_reports.errors import ConfigError, SearchConsoleError
from search_console_reports.models import REPORT_DIMENSIONS, ReportKind, ResultRecord
from search_console_reports.time_windows import default_query_date


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Search Console performance report")
    parser.add_argument(
        "--report",
        choices=sorted(REPORT_DIMENSIONS.keys()),
        default=ReportKind.COMBINED,
        help="Report kind (default: combined query/page/country/device).",
    )
    parser.add_argument(
        "--date",
        dest="query_date",
        help="Day to query in YYYY-MM-DD format (default: today minus 4 days)",
    )
    parser.add_argument(
        "--row-start",
        type=int,
        default=0,
        help="Zero-based index of the first row (default: 0).",
    )
    parser.add_argument(
        "--row-limit",
        type=int,
        default=None,
        help="Number of rows, clamped to 1..1000 (default: SEARCH_CONSOLE_ROW_LIMIT).",
    )
    parser.add_argument(
        "--country",
        default=None,
        help="Restrict rows to one country, e.g. fra (default: SEARCH_CONSOLE_COUNTRY_FILTER).",
    )
    parser.add_argument(
        "--json",
        dest="as_json",
        action="store_true",
        help="Print records as a JSON array.",
    )
    return parser.parse_args(argv)


def _parse_query_date(raw: str | None) -> date:
    if not raw:
        return default_query_date()
    try:
        return date.fromisoformat(raw)
    except ValueError as exc:
        raise ConfigError(f"Invalid --date value (expected YYYY-MM-DD): {raw}") from exc


def format_record(record: ResultRecord) -> str:
    return "\n".join(
        [
            f"Text: {record.text}",
            f"URL: {record.url}",
            f"Country: {record.country}",
            f"Device: {record.device}",
            f"Clicks: {record.clicks}",
            f"Impressions: {record.impressions}",
            f"CTR: {record.ctr}",
            f"Position: {record.position}",
            f"Date: {record.date.isoformat()}",
        ]
    )


def main(argv: list[str] | None = None) -> None:
    try:
        load_dotenv(find_dotenv(usecwd=True), override=False)
    except OSError:
        pass

    args = _parse_args(argv)
    try:
        config = ReportConfig.from_env()
        logging.basicConfig(level=config.log_level)
        query_date = _parse_query_date(args.query_date)

        if not config.site_url:
            raise ConfigError("Search Console site is not configured. Set SEARCH_CONSOLE_SITE_URL.")
        if not config.credentials_configured:
            raise ConfigError(
                "Search Console credentials are not configured. Provide "
                "SEARCH_CONSOLE_CLIENT_SECRET_PATH or "
                "SEARCH_CONSOLE_CLIENT_ID + SEARCH_CONSOLE_CLIENT_SECRET."
            )

        client = SearchConsoleClient.from_config(config)
        row_limit = args.row_limit if args.row_limit is not None else config.row_limit
        country = args.country or config.country_filter or None
        records = client.run_report(
            args.report,
            query_date=query_date,
            row_start=args.row_start,
            row_limit=row_limit,
            country=country,
        )
    except SearchConsoleError as exc:
        cause = exc.__cause__
        detail = f" ({cause})" if cause is not None else ""
        raise SystemExit(f"{exc}{detail}") from exc

    if args.as_json:
        print(json.dumps([record.to_dict() for record in records], indent=2))
        return

    print(
        f"Report {args.report} for {config.site_url} on {query_date.isoformat()}: "
        f"{len(records)} rows"
    )
    for record in records:
        print(format_record(record))
        print()


if __name__ == "__main__":
    main()
