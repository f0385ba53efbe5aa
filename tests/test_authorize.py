from __future__ import annotations

import pytest

from search_console_reports.tools import authorize as authorize_module


class _FakeCreds:
    def __init__(self, refresh_token: str):
        self.refresh_token = refresh_token

    def to_json(self):
        return '{"refresh_token": "%s"}' % self.refresh_token


@pytest.fixture(autouse=True)
def _env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("SEARCH_CONSOLE_CLIENT_SECRET_PATH", raising=False)
    monkeypatch.setenv("SEARCH_CONSOLE_CLIENT_ID", "id")
    monkeypatch.setenv("SEARCH_CONSOLE_CLIENT_SECRET", "secret")
    monkeypatch.setenv("SEARCH_CONSOLE_DATA_STORE", str(tmp_path / "store"))
    monkeypatch.setenv("SEARCH_CONSOLE_USER_NAME", "analyst")


def test_authorize_writes_token_for_user(monkeypatch, tmp_path, capsys):
    seen = {}

    def _flow(secrets, open_browser=True):
        seen["client_id"] = secrets.client_id
        seen["open_browser"] = open_browser
        return _FakeCreds("r-123")

    monkeypatch.setattr(authorize_module, "run_authorization_flow", _flow)

    authorize_module.main(["--no-browser"])

    token_path = tmp_path / "store" / "analyst.json"
    assert token_path.read_text(encoding="utf-8") == '{"refresh_token": "r-123"}'
    assert seen == {"client_id": "id", "open_browser": False}
    assert str(token_path) in capsys.readouterr().out


def test_authorize_requires_refresh_token(monkeypatch):
    monkeypatch.setattr(
        authorize_module, "run_authorization_flow", lambda secrets, open_browser=True: _FakeCreds("")
    )
    with pytest.raises(SystemExit):
        authorize_module.main([])


def test_authorize_reports_missing_client_secrets(monkeypatch):
    monkeypatch.setenv("SEARCH_CONSOLE_CLIENT_SECRET", "")
    with pytest.raises(SystemExit) as excinfo:
        authorize_module.main([])
    assert "client secret" in str(excinfo.value)


def test_authorize_saves_token_through_atomic_writer(monkeypatch, tmp_path):
    saved = []
    monkeypatch.setattr(
        authorize_module, "run_authorization_flow", lambda secrets, open_browser=True: _FakeCreds("r-9")
    )
    monkeypatch.setattr(
        authorize_module, "save_token", lambda path, payload: saved.append((path, payload))
    )

    authorize_module.main(["--token-path", str(tmp_path / "custom.json")])

    assert saved == [(tmp_path / "custom.json", '{"refresh_token": "r-9"}')]
    assert not list(tmp_path.glob("*.tmp"))
