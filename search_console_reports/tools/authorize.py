from __future__ import annotations

import argparse
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from search_console_reports.clients.credentials import (
    ClientSecrets,
    run_authorization_flow,
    save_token,
)
from search_console_reports.config import ReportConfig
from search_console_reports.errors import CredentialsError


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Authorize read-only Search Console access and store the OAuth token"
    )
    parser.add_argument(
        "--client-secret",
        default="",
        help="Path to OAuth client secret JSON (default: SEARCH_CONSOLE_CLIENT_SECRET_PATH from .env)",
    )
    parser.add_argument(
        "--token-path",
        default="",
        help="Where to write the token (default: <SEARCH_CONSOLE_DATA_STORE>/<SEARCH_CONSOLE_USER_NAME>.json)",
    )
    parser.add_argument(
        "--no-browser",
        action="store_true",
        help="Do not open browser automatically",
    )
    return parser.parse_args(argv)


def _resolve_secrets(config: ReportConfig, client_secret_path: str) -> ClientSecrets:
    path = client_secret_path.strip() or config.client_secret_path
    if path:
        return ClientSecrets.from_file(path)
    return ClientSecrets.from_values(config.client_id, config.client_secret)


def main(argv: list[str] | None = None) -> None:
    try:
        load_dotenv(find_dotenv(usecwd=True), override=False)
    except OSError:
        pass

    args = _parse_args(argv)
    config = ReportConfig.from_env()
    try:
        secrets = _resolve_secrets(config, args.client_secret)
    except CredentialsError as exc:
        raise SystemExit(str(exc)) from exc

    creds = run_authorization_flow(secrets, open_browser=not args.no_browser)
    if not (creds.refresh_token or "").strip():
        raise SystemExit(
            "No refresh token received. Revoke app access for this OAuth client and rerun with consent."
        )

    token_path = Path(args.token_path) if args.token_path.strip() else config.token_path
    save_token(token_path, creds.to_json())
    print(f"Search Console token written to: {token_path}")


if __name__ == "__main__":
    main()
