from __future__ import annotations

import logging
from datetime import date
from typing import Any, Sequence

from search_console_reports.clients.credentials import ClientSecrets, load_credentials
from search_console_reports.clients.transport import (
    GoogleSearchConsoleTransport,
    SearchAnalyticsTransport,
)
from search_console_reports.config import ReportConfig
from search_console_reports.errors import PreconditionError, QueryExecutionError
from search_console_reports.models import (
    REPORT_DIMENSIONS,
    ReportKind,
    ReportQuery,
    ResultRecord,
)
from search_console_reports.time_windows import ROW_LIMIT_MAX, default_query_date

logger = logging.getLogger(__name__)


def _key_at(keys: Sequence[Any], index: int) -> str:
    if index < len(keys):
        return str(keys[index])
    return ""


def _record_from_row(row: dict[str, Any], query_date: date) -> ResultRecord:
    if not isinstance(row, dict):
        raise QueryExecutionError("Search Analytics returned a malformed row.")
    keys = row.get("keys") or []
    if not isinstance(keys, list):
        raise QueryExecutionError("Search Analytics returned a malformed row.")
    if not keys:
        raise QueryExecutionError("Search Analytics returned a row without dimension keys.")
    try:
        clicks = int(row.get("clicks", 0))
        impressions = int(row.get("impressions", 0))
        ctr = float(row.get("ctr", 0.0))
        position = float(row.get("position", 0.0))
    except (TypeError, ValueError, OverflowError) as exc:
        raise QueryExecutionError(
            "Search Analytics returned a row with non-numeric metrics."
        ) from exc
    return ResultRecord(
        text=str(keys[0]),
        url=_key_at(keys, 1),
        country=_key_at(keys, 2),
        device=_key_at(keys, 3),
        clicks=clicks,
        impressions=impressions,
        ctr=ctr,
        position=position,
        date=query_date,
    )


class SearchConsoleClient:
    """Search Analytics report engine for a single Search Console property.

    Every report method queries exactly one day. When ``query_date`` is not
    given the day defaults to today minus four days, since Search Console data
    lags behind. Row fields are filled positionally from the returned keys in
    the canonical order query, page, country, device.
    """

    def __init__(
        self,
        transport: SearchAnalyticsTransport | None,
        site_url: str | None,
    ) -> None:
        self.transport = transport
        self.site_url = site_url
        self._query_date: date | None = None
        self._row_limit = ROW_LIMIT_MAX

    @classmethod
    def from_config(cls, config: ReportConfig) -> "SearchConsoleClient":
        if config.client_secret_path:
            secrets = ClientSecrets.from_file(config.client_secret_path)
        else:
            secrets = ClientSecrets.from_values(config.client_id, config.client_secret)
        credentials = load_credentials(
            secrets,
            config.token_path,
            interactive=config.interactive_auth,
        )
        transport = GoogleSearchConsoleTransport(
            credentials,
            http_timeout_sec=config.http_timeout_sec,
            application_name=config.app_name,
        )
        return cls(transport=transport, site_url=config.site_url or None)

    @property
    def query_date(self) -> date | None:
        return self._query_date

    @property
    def row_limit(self) -> int:
        return self._row_limit

    def query_combined(
        self,
        query_date: date | None = None,
        row_start: int = 0,
        row_limit: int = ROW_LIMIT_MAX,
        country: str | None = None,
    ) -> list[ResultRecord]:
        return self.run_report(ReportKind.COMBINED, query_date, row_start, row_limit, country)

    def query_by_search_term(
        self,
        query_date: date | None = None,
        row_start: int = 0,
        row_limit: int = ROW_LIMIT_MAX,
        country: str | None = None,
    ) -> list[ResultRecord]:
        return self.run_report(
            ReportKind.SEARCH_TERMS, query_date, row_start, row_limit, country
        )

    def query_by_page(
        self,
        query_date: date | None = None,
        row_start: int = 0,
        row_limit: int = ROW_LIMIT_MAX,
        country: str | None = None,
    ) -> list[ResultRecord]:
        return self.run_report(ReportKind.PAGES, query_date, row_start, row_limit, country)

    def query_by_country(
        self,
        query_date: date | None = None,
        row_start: int = 0,
        row_limit: int = ROW_LIMIT_MAX,
        country: str | None = None,
    ) -> list[ResultRecord]:
        return self.run_report(ReportKind.COUNTRIES, query_date, row_start, row_limit, country)

    def query_by_device(
        self,
        query_date: date | None = None,
        row_start: int = 0,
        row_limit: int = ROW_LIMIT_MAX,
        country: str | None = None,
    ) -> list[ResultRecord]:
        return self.run_report(ReportKind.DEVICES, query_date, row_start, row_limit, country)

    def run_report(
        self,
        kind: str,
        query_date: date | None = None,
        row_start: int = 0,
        row_limit: int = ROW_LIMIT_MAX,
        country: str | None = None,
    ) -> list[ResultRecord]:
        try:
            dimensions = REPORT_DIMENSIONS[kind]
        except KeyError as exc:
            raise ValueError(f"Unknown report kind: {kind}") from exc
        if query_date is None:
            query_date = default_query_date()
        return self._build_and_execute(dimensions, query_date, row_start, row_limit, country)

    def _build_and_execute(
        self,
        dimensions: Sequence[str],
        query_date: date,
        row_start: int,
        row_limit: int,
        country: str | None = None,
    ) -> list[ResultRecord]:
        query = ReportQuery.build(
            dimensions,
            query_date=query_date,
            row_start=row_start,
            row_limit=row_limit,
            country_filter=country,
        )
        self._query_date = query.query_date
        self._row_limit = query.row_limit

        response = self._execute(query)
        if response is not None and not isinstance(response, dict):
            raise QueryExecutionError("Search Analytics returned a malformed response.")
        rows = (response or {}).get("rows") or []
        records = [_record_from_row(row, query.query_date) for row in rows]
        logger.info(
            "Search Analytics returned %d rows for %s on %s",
            len(records),
            ",".join(query.dimensions),
            query.query_date.isoformat(),
        )
        return records

    def _execute(self, query: ReportQuery | None) -> dict[str, Any] | None:
        if self.transport is None:
            raise PreconditionError("Search Analytics transport is not initialized.")
        if query is None:
            raise PreconditionError("Search Analytics query is required.")
        if self.site_url is None:
            raise PreconditionError("Search Console site URL is required.")

        body = query.to_body()
        logger.debug(
            "Querying %s: dimensions=%s date=%s startRow=%s rowLimit=%s",
            self.site_url,
            body["dimensions"],
            body["startDate"],
            body["startRow"],
            body["rowLimit"],
        )
        try:
            return self.transport.execute(body, self.site_url)
        except Exception as exc:
            logger.warning("Search Analytics query failed for %s: %s", self.site_url, exc)
            raise QueryExecutionError("Search Analytics query failed.") from exc
