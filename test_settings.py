import pytest
from keyring.errors import KeyringError

from timetree_exporter.config.settings import APIConfig, ExportJob, load_export_job, parse_bool, read_environment
from timetree_exporter.exceptions import ConfigurationError
from timetree_exporter.storage import credentials, keyring_storage
from timetree_exporter.storage.env_storage import load_from_env_file, store_in_env_file

ENV_VARS = (
    "TIMETREE_EMAIL", "TIMETREE_PASSWORD", "TIMETREE_CALENDAR_CODE", "TIMETREE_OUTPUT_PATH",
    "TIMETREE_BIRTHDAYS_OUTPUT", "TIMETREE_MEMOS_OUTPUT", "TIMETREE_INCLUDE_BIRTHDAYS",
    "TIMETREE_INCLUDE_MEMOS", "TIMETREE_JOB_ID", "TIMETREE_API_BASE_URI", "TIMETREE_TIMEOUT_SECONDS",
)


@pytest.fixture(autouse=True)
def isolated_credentials(monkeypatch, tmp_path):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    store = {}
    monkeypatch.setattr(keyring_storage, "_keyring_available", True)
    monkeypatch.setattr(keyring_storage.keyring, "get_password", lambda service, user: store.get((service, user)))
    monkeypatch.setattr(
        keyring_storage.keyring, "set_password",
        lambda service, user, password: store.__setitem__((service, user), password),
    )
    monkeypatch.setattr(credentials, "get_env_file_path", lambda: tmp_path / "config" / ".env")
    return store


@pytest.mark.parametrize("value, expected", [
    ("1", True), ("true", True), ("YES", True), (" on ", True),
    ("0", False), ("no", False), ("", False), (None, False),
])
def test_parse_bool(value, expected) -> None:
    assert parse_bool(value) is expected


def test_api_config_from_env() -> None:
    config = APIConfig.from_env({"TIMETREE_API_BASE_URI": "http://localhost:8080/api/", "TIMETREE_TIMEOUT_SECONDS": "2.5"})

    assert config.base_uri == "http://localhost:8080/api"
    assert config.timeout_seconds == 2.5
    assert config.max_sync_pages == 100


@pytest.mark.parametrize("raw", ["soon", "0", "-3"])
def test_api_config_rejects_bad_timeout(raw) -> None:
    with pytest.raises(ConfigurationError):
        APIConfig.from_env({"TIMETREE_TIMEOUT_SECONDS": raw})


def test_api_config_reads_env_file(tmp_path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("TIMETREE_API_BASE_URI=https://proxy.example/api/v1\n", encoding="utf-8")

    config = APIConfig.from_env(read_environment(env_file))

    assert config.base_uri == "https://proxy.example/api/v1"


def test_load_export_job_from_env_file(tmp_path) -> None:
    env_file = tmp_path / "job.env"
    env_file.write_text(
        "TIMETREE_EMAIL=me@example.com\n"
        "TIMETREE_PASSWORD=pw\n"
        "TIMETREE_CALENDAR_CODE=fam\n"
        "TIMETREE_OUTPUT_PATH=/srv/feeds/main.ics\n"
        "TIMETREE_INCLUDE_BIRTHDAYS=true\n",
        encoding="utf-8",
    )

    job = load_export_job(env_file=env_file)

    assert job == ExportJob(
        email="me@example.com",
        password="pw",
        output_path="/srv/feeds/main.ics",
        calendar_code="fam",
        include_birthdays=True,
    )


def test_process_environment_and_overrides_take_precedence(tmp_path, monkeypatch) -> None:
    env_file = tmp_path / "job.env"
    env_file.write_text("TIMETREE_EMAIL=file@example.com\nTIMETREE_CALENDAR_CODE=file\n", encoding="utf-8")
    monkeypatch.setenv("TIMETREE_EMAIL", "env@example.com")
    monkeypatch.setenv("TIMETREE_PASSWORD", "env-pw")
    monkeypatch.setenv("TIMETREE_INCLUDE_MEMOS", "1")

    job = load_export_job(env_file=env_file, calendar_code="cli", include_memos=None, include_birthdays=False)

    assert job.email == "env@example.com"
    assert job.password == "env-pw"
    assert job.calendar_code == "cli"
    assert job.include_memos is True
    assert job.include_birthdays is False


def test_missing_email_is_a_configuration_error() -> None:
    with pytest.raises(ConfigurationError, match="TIMETREE_EMAIL"):
        load_export_job()


def test_missing_password_is_a_configuration_error() -> None:
    with pytest.raises(ConfigurationError, match="password"):
        load_export_job(email="nobody@example.com")


def test_missing_env_file_is_a_configuration_error(tmp_path) -> None:
    with pytest.raises(ConfigurationError, match="env file not found"):
        load_export_job(env_file=tmp_path / "absent.env")


def test_password_from_keyring(isolated_credentials) -> None:
    isolated_credentials[("timetree-exporter", "me@example.com")] = "kr-pw"

    job = load_export_job(email="me@example.com")

    assert job.password == "kr-pw"
    assert credentials.get_password_source("me@example.com")[1] == "OS Keyring"


def test_save_password_prefers_keyring(isolated_credentials, tmp_path) -> None:
    assert credentials.save_password("me@example.com", " pw \n") == "OS Keyring"
    assert isolated_credentials[("timetree-exporter", "me@example.com")] == "pw"
    assert not (tmp_path / "config" / ".env").exists()


def test_save_password_falls_back_to_env_file(monkeypatch, tmp_path) -> None:
    def broken_keyring(service, user, password):
        raise KeyringError("no backend")

    monkeypatch.setattr(keyring_storage.keyring, "set_password", broken_keyring)

    location = credentials.save_password("me@example.com", "file-pw")

    assert location.startswith("User Config:")
    assert not keyring_storage.is_keyring_available()
    assert credentials.load_password("me@example.com") == "file-pw"


def test_env_file_for_other_account_is_ignored(tmp_path) -> None:
    path = store_in_env_file("someone@example.com", "theirs", path=tmp_path / ".env")

    assert load_from_env_file(path, "someone@example.com") == "theirs"
    assert load_from_env_file(path, "me@example.com") is None
