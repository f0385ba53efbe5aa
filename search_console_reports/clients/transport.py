from __future__ import annotations

from typing import Any, Protocol

import httplib2
from google.auth.credentials import Credentials
from google_auth_httplib2 import AuthorizedHttp
from googleapiclient.discovery import build
from googleapiclient.http import set_user_agent


class SearchAnalyticsTransport(Protocol):
    def execute(self, body: dict[str, Any], site_url: str) -> dict[str, Any]:
        ...


class GoogleSearchConsoleTransport:
    """Executes Search Analytics queries through googleapiclient.

    The service is built lazily and reused for every call. Requests are sent
    once; failures propagate unchanged to the caller.
    """

    HTTP_TIMEOUT_SEC = 30

    def __init__(
        self,
        credentials: Credentials,
        http_timeout_sec: int = HTTP_TIMEOUT_SEC,
        application_name: str = "",
    ) -> None:
        self.credentials = credentials
        self.http_timeout_sec = http_timeout_sec
        self.application_name = application_name
        self._service = None

    def _build_service(self):
        if self._service is not None:
            return self._service

        http = AuthorizedHttp(
            self.credentials,
            http=httplib2.Http(timeout=self.http_timeout_sec),
        )
        if self.application_name:
            http = set_user_agent(http, self.application_name)
        self._service = build(
            "searchconsole",
            "v1",
            http=http,
            cache_discovery=False,
        )
        return self._service

    def execute(self, body: dict[str, Any], site_url: str) -> dict[str, Any]:
        service = self._build_service()
        return (
            service.searchanalytics()
            .query(siteUrl=site_url, body=body)
            .execute(num_retries=0)
        )
