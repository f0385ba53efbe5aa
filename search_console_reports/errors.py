from __future__ import annotations


class SearchConsoleError(RuntimeError):
    """Base error for everything raised by search_console_reports."""


class PreconditionError(SearchConsoleError, ValueError):
    """Raised before any network call when the engine is not ready to query."""


class QueryExecutionError(SearchConsoleError):
    """A Search Analytics query failed; the original error is chained as __cause__."""


class CredentialsError(SearchConsoleError):
    pass


class ConfigError(SearchConsoleError):
    pass
