from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any

from search_console_reports.time_windows import clamp_row_limit

QUERY = "query"
PAGE = "page"
COUNTRY = "country"
DEVICE = "device"

# Row keys come back in the order dimensions were requested; record fields
# are filled positionally from this canonical order.
CANONICAL_DIMENSIONS: tuple[str, ...] = (QUERY, PAGE, COUNTRY, DEVICE)


class ReportKind:
    COMBINED = "combined"
    SEARCH_TERMS = "search_terms"
    PAGES = "pages"
    COUNTRIES = "countries"
    DEVICES = "devices"


REPORT_DIMENSIONS: dict[str, tuple[str, ...]] = {
    ReportKind.COMBINED: CANONICAL_DIMENSIONS,
    ReportKind.SEARCH_TERMS: (QUERY,),
    ReportKind.PAGES: (PAGE,),
    ReportKind.COUNTRIES: (COUNTRY,),
    ReportKind.DEVICES: (DEVICE,),
}


@dataclass(frozen=True)
class ReportQuery:
    dimensions: tuple[str, ...]
    query_date: date
    row_start: int
    row_limit: int
    country_filter: str | None = None

    @classmethod
    def build(
        cls,
        dimensions: tuple[str, ...] | list[str],
        query_date: date,
        row_start: int,
        row_limit: int,
        country_filter: str | None = None,
    ) -> "ReportQuery":
        return cls(
            dimensions=tuple(dimensions),
            query_date=query_date,
            row_start=row_start,
            row_limit=clamp_row_limit(row_limit),
            country_filter=country_filter,
        )

    def filter_groups(self) -> list[dict] | None:
        if self.country_filter is None:
            return None
        return [
            {
                "filters": [
                    {
                        "dimension": COUNTRY,
                        "expression": self.country_filter,
                    }
                ],
            }
        ]

    def to_body(self) -> dict[str, Any]:
        """Serialize to the Search Analytics request body.

        The query always covers exactly one day, so ``startDate`` and
        ``endDate`` carry the same ISO date.
        """
        day = self.query_date.isoformat()
        body: dict[str, Any] = {
            "dimensions": list(self.dimensions),
            "startRow": self.row_start,
            "rowLimit": self.row_limit,
            "startDate": day,
            "endDate": day,
        }
        filter_groups = self.filter_groups()
        if filter_groups:
            body["dimensionFilterGroups"] = filter_groups
        return body


@dataclass(frozen=True)
class ResultRecord:
    text: str
    url: str
    country: str
    device: str
    clicks: int
    impressions: int
    ctr: float
    position: float
    date: date

    def to_dict(self) -> dict[str, Any]:
        return {
            "text": self.text,
            "url": self.url,
            "country": self.country,
            "device": self.device,
            "clicks": self.clicks,
            "impressions": self.impressions,
            "ctr": self.ctr,
            "position": self.position,
            "date": self.date.isoformat(),
        }
