from pathlib import Path
from unittest.mock import Mock

import pytest
from click.testing import CliRunner

from timetree_exporter import cli
from timetree_exporter.config.settings import ExportJob
from timetree_exporter.core.calendar_resolver import ResolvedCalendar
from timetree_exporter.core.event_model import CalendarMetadata
from timetree_exporter.core.exporter import ExportResult
from timetree_exporter.exceptions import AuthenticationError


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def job() -> ExportJob:
    return ExportJob(email="me@example.com", password="pw", calendar_code="club")


@pytest.fixture
def api(monkeypatch) -> Mock:
    api = Mock()
    api.__enter__ = Mock(return_value=api)
    api.__exit__ = Mock(return_value=False)
    monkeypatch.setattr(cli, "TimeTreeClient", Mock(return_value=api))
    return api


def test_export_reports_written_files(runner, monkeypatch, job, api) -> None:
    captured = {}

    def fake_load(**kwargs):
        captured.update(kwargs)
        return job

    def fake_run(export_job, client, prod_version):
        assert export_job is job and client is api
        return ExportResult(
            job_id="default",
            calendar=ResolvedCalendar(6, "Club", "club"),
            event_count=3,
            birthday_count=1,
            memo_count=1,
            written={"main": Path("out.ics")},
        )

    monkeypatch.setattr(cli, "load_export_job", fake_load)
    monkeypatch.setattr(cli, "run_export", fake_run)

    result = runner.invoke(cli.main, ["export", "--email", "me@example.com", "--include-memos"])

    assert result.exit_code == 0, result.output
    assert "Exported 3 event(s) from 'Club'" in result.output
    assert "main: out.ics" in result.output
    assert captured["email"] == "me@example.com"
    assert captured["include_memos"] is True


def test_export_failure_exits_non_zero(runner, monkeypatch, job, api) -> None:
    monkeypatch.setattr(cli, "load_export_job", lambda **kwargs: job)

    def failing_run(export_job, client, prod_version):
        raise AuthenticationError("bad password", status_code=401)

    monkeypatch.setattr(cli, "run_export", failing_run)

    result = runner.invoke(cli.main, ["export"])

    assert result.exit_code == 1
    assert "Export failed: Login failed (401): bad password" in result.output


def test_calendars_marks_selected(runner, monkeypatch, job, api) -> None:
    monkeypatch.setattr(cli, "load_export_job", lambda **kwargs: job)
    api.login.return_value = "tok"
    api.fetch_calendars.return_value = [
        CalendarMetadata(id=5, name="Home", alias_code="home"),
        CalendarMetadata(id=6, name="Club", alias_code="club"),
    ]

    result = runner.invoke(cli.main, ["calendars"])

    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert lines[0].startswith("  home")
    assert lines[1].startswith("* club")


def test_set_password_uses_credential_storage(runner, monkeypatch) -> None:
    saved = {}

    def fake_save(email, password):
        saved[email] = password
        return "OS Keyring"

    monkeypatch.setattr(cli, "save_password", fake_save)

    result = runner.invoke(cli.main, ["set-password", "--email", "me@example.com"], input="pw\npw\n")

    assert result.exit_code == 0, result.output
    assert saved == {"me@example.com": "pw"}
    assert "Password saved to OS Keyring" in result.output


def test_calendars_lists_only_once(runner, monkeypatch, job, api) -> None:
    monkeypatch.setattr(cli, "load_export_job", lambda **kwargs: job)
    api.login.return_value = "tok"
    api.fetch_calendars.return_value = [CalendarMetadata(id=6, name="Club", alias_code="club")]

    result = runner.invoke(cli.main, ["calendars"])

    assert result.exit_code == 0, result.output
    api.fetch_calendars.assert_called_once_with("tok")


def test_api_settings_come_from_env_file(runner, monkeypatch, tmp_path, job, api) -> None:
    monkeypatch.delenv("TIMETREE_API_BASE_URI", raising=False)
    monkeypatch.delenv("TIMETREE_TIMEOUT_SECONDS", raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text(
        "TIMETREE_API_BASE_URI=https://proxy.example/api/v1/\nTIMETREE_TIMEOUT_SECONDS=3\n",
        encoding="utf-8",
    )
    monkeypatch.setattr(cli, "load_export_job", lambda **kwargs: job)
    api.login.return_value = "tok"
    api.fetch_calendars.return_value = [CalendarMetadata(id=6, name="Club", alias_code="club")]

    result = runner.invoke(cli.main, ["calendars", "--env-file", str(env_file)])

    assert result.exit_code == 0, result.output
    config = cli.TimeTreeClient.call_args[0][0]
    assert config.base_uri == "https://proxy.example/api/v1"
    assert config.timeout_seconds == 3.0
