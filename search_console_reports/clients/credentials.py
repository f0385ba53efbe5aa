from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from google.auth.exceptions import RefreshError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

from search_console_reports.errors import CredentialsError

SCOPES = ["https://www.googleapis.com/auth/webmasters.readonly"]
DEFAULT_AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
DEFAULT_TOKEN_URI = "https://oauth2.googleapis.com/token"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClientSecrets:
    """OAuth client identity for an installed application."""

    client_id: str
    client_secret: str
    project_id: str = ""
    auth_uri: str = DEFAULT_AUTH_URI
    token_uri: str = DEFAULT_TOKEN_URI
    redirect_uris: tuple[str, ...] = field(default_factory=tuple)
    source_path: str = ""

    @classmethod
    def from_values(cls, client_id: str, client_secret: str) -> "ClientSecrets":
        client_id = (client_id or "").strip()
        client_secret = (client_secret or "").strip()
        if not (client_id and client_secret):
            raise CredentialsError("OAuth client id and client secret are both required.")
        return cls(client_id=client_id, client_secret=client_secret)

    @classmethod
    def from_file(cls, path_value: str) -> "ClientSecrets":
        if not path_value:
            raise CredentialsError("Client secrets loading failed: no path given.")
        path = Path(path_value)
        if not path.exists():
            raise CredentialsError(f"Client secrets file not found: {path_value}")
        try:
            raw = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise CredentialsError(
                f"Client secrets loading failed: cannot read {path_value}"
            ) from exc
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise CredentialsError(
                f"Client secrets loading failed: invalid JSON in {path_value}"
            ) from exc
        if not isinstance(payload, dict):
            raise CredentialsError(
                f"Client secrets loading failed: expected a JSON object in {path_value}"
            )

        # OAuth JSON can be either {"installed": {...}} or {"web": {...}}.
        section = payload.get("installed") or payload.get("web") or payload
        if not isinstance(section, dict):
            raise CredentialsError(
                f"Client secrets loading failed: malformed client section in {path_value}"
            )
        client_id = str(section.get("client_id", "") or "").strip()
        client_secret = str(section.get("client_secret", "") or "").strip()
        if not (client_id and client_secret):
            raise CredentialsError(
                f"Client secrets file is missing client_id/client_secret: {path_value}"
            )
        return cls(
            client_id=client_id,
            client_secret=client_secret,
            project_id=str(section.get("project_id", "") or ""),
            auth_uri=section.get("auth_uri") or DEFAULT_AUTH_URI,
            token_uri=section.get("token_uri") or DEFAULT_TOKEN_URI,
            redirect_uris=tuple(section.get("redirect_uris") or ()),
            source_path=str(path),
        )

    def to_client_config(self) -> dict:
        return {
            "installed": {
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "project_id": self.project_id,
                "auth_uri": self.auth_uri,
                "token_uri": self.token_uri,
                "redirect_uris": list(self.redirect_uris) or ["http://localhost"],
            }
        }


def _read_token(token_file: Path) -> Credentials | None:
    if not token_file.exists():
        return None
    try:
        return Credentials.from_authorized_user_file(str(token_file), SCOPES)
    except (json.JSONDecodeError, ValueError) as exc:
        raise CredentialsError(f"Token file is invalid or truncated: {token_file}") from exc


def save_token(token_file: Path, payload: str) -> None:
    token_file.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = token_file.with_suffix(token_file.suffix + ".tmp")
    tmp_path.write_text(payload, encoding="utf-8")
    tmp_path.replace(token_file)


def run_authorization_flow(
    secrets: ClientSecrets,
    open_browser: bool = True,
) -> Credentials:
    flow = InstalledAppFlow.from_client_config(secrets.to_client_config(), SCOPES)
    return flow.run_local_server(
        port=0,
        access_type="offline",
        prompt="consent",
        open_browser=open_browser,
    )


def load_credentials(
    secrets: ClientSecrets,
    token_path: str | Path,
    *,
    interactive: bool = True,
) -> Credentials:
    """Return user credentials for the read-only Search Console scope.

    A persisted token is reused (and refreshed when expired). Without a
    usable token the installed-app flow runs, unless ``interactive`` is off.
    The token file is rewritten whenever credentials change.
    """
    token_file = Path(token_path)
    creds = _read_token(token_file)

    if creds and creds.expired and creds.refresh_token:
        try:
            creds.refresh(Request())
        except RefreshError as exc:
            logger.warning("Stored token could not be refreshed: %s", exc)
            creds = None
        else:
            save_token(token_file, creds.to_json())
            return creds

    if creds and creds.valid:
        return creds

    if not interactive:
        raise CredentialsError(
            "No usable Search Console token found at "
            f"{token_file}. Run search-console-authorize first."
        )

    logger.info("Starting OAuth authorization flow for client %s", secrets.client_id)
    creds = run_authorization_flow(secrets)
    save_token(token_file, creds.to_json())
    return creds
