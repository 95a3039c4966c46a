from __future__ import annotations

import json

import pytest

from lazylinear import cli
from lazylinear.linear import LinearApiError
from lazylinear.models import Issue, Team, Viewer


@pytest.fixture
def config_path(monkeypatch, tmp_path):
    path = tmp_path / ".lazylinear" / "config.json"
    monkeypatch.setenv("LAZYLINEAR_CONFIG_PATH", str(path))
    monkeypatch.delenv("LINEAR_API_KEY", raising=False)
    monkeypatch.delenv("LAZYLINEAR_TIMEOUT", raising=False)
    return path


def _run_main(monkeypatch, *argv: str) -> int:
    monkeypatch.setattr("sys.argv", ["lazylinear", *argv])
    monkeypatch.setattr(cli, "load_dotenv", lambda: None)
    monkeypatch.setattr(cli, "configure_logging", lambda: None)
    with pytest.raises(SystemExit) as raised:
        cli.main()
    return raised.value.code


def test_no_command_dispatches_to_tui(monkeypatch) -> None:
    monkeypatch.setattr(cli, "run_tui", lambda: 0)

    assert _run_main(monkeypatch) == 0


def test_tui_failure_exit_code_is_propagated(monkeypatch) -> None:
    monkeypatch.setattr(cli, "run_tui", lambda: 1)

    assert _run_main(monkeypatch) == 1


def test_set_key_writes_config_file(monkeypatch, config_path, capsys) -> None:
    code = _run_main(monkeypatch, "set-key", "lin_api_123")
    out = capsys.readouterr().out

    assert code == 0
    assert json.loads(config_path.read_text(encoding="utf-8")) == {"api_key": "lin_api_123"}
    assert f"✅ API key saved to {config_path}" in out


def test_set_key_rejects_blank_key(config_path, capsys) -> None:
    assert cli.set_api_key("   ") == 1
    assert "❌ API key must not be empty." in capsys.readouterr().out
    assert not config_path.exists()


def test_set_key_keeps_existing_timeout(config_path) -> None:
    config_path.parent.mkdir(parents=True)
    config_path.write_text(json.dumps({"api_key": "old", "request_timeout_seconds": 9}), encoding="utf-8")

    cli.set_api_key("new")

    assert json.loads(config_path.read_text(encoding="utf-8")) == {
        "api_key": "new",
        "request_timeout_seconds": 9.0,
    }


@pytest.mark.asyncio
async def test_doctor_without_key_fails(config_path, capsys) -> None:
    code = await cli.doctor()
    out = capsys.readouterr().out

    assert code == 1
    assert "API key (missing)" in out
    assert "lazylinear set-key" in out


class FakeClient:
    issues_error: Exception | None = None

    def __init__(self, api_key=None, timeout=30.0):
        self.api_key = api_key

    async def get_viewer(self):
        return Viewer("u1", "Tester")

    async def get_teams(self):
        return [Team("t1", "Eng", "ENG")]

    async def get_issues(self, team_id=None):
        if self.issues_error:
            raise self.issues_error
        return [Issue(id="1", identifier="ENG-1", title="Fix login", status="Todo")]


@pytest.mark.asyncio
async def test_doctor_reports_viewer_and_issue_load(monkeypatch, config_path, capsys) -> None:
    monkeypatch.setenv("LINEAR_API_KEY", "test-key")
    monkeypatch.setattr(cli, "LinearClient", FakeClient)

    code = await cli.doctor()
    out = capsys.readouterr().out

    assert code == 0
    assert "API key (environment)" in out
    assert "authenticated as Tester" in out
    assert "[✓] issues: ok (1 loaded from Eng)" in out


@pytest.mark.asyncio
async def test_doctor_reports_issue_fetch_failure(monkeypatch, config_path, capsys) -> None:
    class RateLimitedClient(FakeClient):
        issues_error = LinearApiError("rate limited", code="RATELIMITED")

    monkeypatch.setenv("LINEAR_API_KEY", "test-key")
    monkeypatch.setattr(cli, "LinearClient", RateLimitedClient)

    code = await cli.doctor()
    out = capsys.readouterr().out

    assert code == 1
    assert "[✕] issues: failed: rate limited | code=RATELIMITED" in out


@pytest.mark.asyncio
async def test_doctor_reports_connection_failure(monkeypatch, config_path, capsys) -> None:
    class FailingClient:
        def __init__(self, api_key=None, timeout=30.0):
            pass

        async def get_viewer(self):
            raise LinearApiError("Authentication required", code="UNAUTHENTICATED")

    cli.set_api_key("lin_api_bad")
    monkeypatch.setattr(cli, "LinearClient", FailingClient)

    code = await cli.doctor()
    out = capsys.readouterr().out

    assert code == 1
    assert "API key (config file)" in out
    assert "connection: Authentication required" in out
