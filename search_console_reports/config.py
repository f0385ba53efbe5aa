from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlparse

from search_console_reports.errors import ConfigError
from search_console_reports.time_windows import ROW_LIMIT_MAX


def _env(name: str, default: str = "") -> str:
    raw = os.environ.get(name)
    if raw is None:
        return default.strip()
    value = raw.strip()
    placeholder = f"{name}="
    unquoted = value.strip("'\"").strip()
    if unquoted.lower() == placeholder.lower():
        return default.strip()
    return value if value else default.strip()


def _env_int(name: str, default: int) -> int:
    raw = _env(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}.") from exc


def _env_bool(name: str, default: bool) -> bool:
    raw = _env(name)
    if not raw:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


def _normalize_site_url(raw: str) -> str:
    value = raw.strip().strip("'\"")
    if not value:
        return ""
    # Domain properties are registered as "sc-domain:example.com".
    if value.lower().startswith("sc-domain:"):
        return value
    if not value.startswith(("http://", "https://")):
        value = f"https://{value}"

    parsed = urlparse(value)
    host = (parsed.netloc or parsed.path).strip().lower()
    scheme = parsed.scheme or "https"
    path = parsed.path if parsed.netloc else ""
    path = path.rstrip("/")
    return f"{scheme}://{host}{path}/"


def _normalize_country_filter(raw: str) -> str:
    value = raw.strip().strip("'\"")
    if not value:
        return ""
    lowered = value.lower()
    if lowered in {"all", "none"}:
        return ""
    return lowered


@dataclass(frozen=True)
class ReportConfig:
    site_url: str
    client_secret_path: str
    client_id: str
    client_secret: str
    user_name: str
    data_store_dir: str
    app_name: str
    row_limit: int
    country_filter: str
    http_timeout_sec: int
    interactive_auth: bool
    log_level: str

    @property
    def credentials_configured(self) -> bool:
        if self.client_secret_path:
            return True
        return bool(self.client_id and self.client_secret)

    @property
    def token_path(self) -> Path:
        return Path(self.data_store_dir) / f"{self.user_name}.json"

    @classmethod
    def from_env(cls) -> "ReportConfig":
        return cls(
            site_url=_normalize_site_url(_env("SEARCH_CONSOLE_SITE_URL")),
            client_secret_path=_env("SEARCH_CONSOLE_CLIENT_SECRET_PATH"),
            client_id=_env("SEARCH_CONSOLE_CLIENT_ID"),
            client_secret=_env("SEARCH_CONSOLE_CLIENT_SECRET"),
            user_name=_env("SEARCH_CONSOLE_USER_NAME", "user"),
            data_store_dir=_env("SEARCH_CONSOLE_DATA_STORE", ".search_console_auth"),
            app_name=_env("SEARCH_CONSOLE_APP_NAME", "search-console-reports"),
            row_limit=_env_int("SEARCH_CONSOLE_ROW_LIMIT", ROW_LIMIT_MAX),
            country_filter=_normalize_country_filter(
                _env("SEARCH_CONSOLE_COUNTRY_FILTER")
            ),
            http_timeout_sec=_env_int("SEARCH_CONSOLE_HTTP_TIMEOUT_SEC", 30),
            interactive_auth=_env_bool("SEARCH_CONSOLE_INTERACTIVE_AUTH", True),
            log_level=_env("SEARCH_CONSOLE_LOG_LEVEL", "WARNING").upper(),
        )
