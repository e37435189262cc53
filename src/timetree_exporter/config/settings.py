"""Runtime settings for TimeTree exporter."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Union

from dotenv import dotenv_values

from timetree_exporter.config.constants import (
    API_BASE_URI,
    API_USER_AGENT,
    DEFAULT_JOB_ID,
    DEFAULT_OUTPUT_PATH,
    DEFAULT_TIMEOUT_SECONDS,
    ENV_API_BASE_URI,
    ENV_BIRTHDAYS_OUTPUT,
    ENV_CALENDAR_CODE,
    ENV_EMAIL,
    ENV_INCLUDE_BIRTHDAYS,
    ENV_INCLUDE_MEMOS,
    ENV_JOB_ID,
    ENV_MEMOS_OUTPUT,
    ENV_OUTPUT_PATH,
    ENV_TIMEOUT_SECONDS,
    MAX_SYNC_PAGES,
    TRUTHY_VALUES,
)
from timetree_exporter.exceptions.errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class APIConfig:
    """Connection settings for the TimeTree web API."""
    base_uri: str = API_BASE_URI
    user_agent: str = API_USER_AGENT
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    max_sync_pages: int = MAX_SYNC_PAGES

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "APIConfig":
        env = os.environ if environ is None else environ
        base_uri = (env.get(ENV_API_BASE_URI) or API_BASE_URI).rstrip("/")

        raw_timeout = env.get(ENV_TIMEOUT_SECONDS)
        timeout = DEFAULT_TIMEOUT_SECONDS
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError as e:
                raise ConfigurationError(ENV_TIMEOUT_SECONDS, f"not a number: {raw_timeout!r}") from e
            if timeout <= 0:
                raise ConfigurationError(ENV_TIMEOUT_SECONDS, "must be positive")

        return cls(base_uri=base_uri, timeout_seconds=timeout)


@dataclass
class ExportJob:
    """One export: which account and calendar to read and where to write the feeds."""
    email: str
    password: str
    output_path: str = DEFAULT_OUTPUT_PATH
    calendar_code: Optional[str] = None
    birthdays_output: Optional[str] = None
    memos_output: Optional[str] = None
    include_birthdays: bool = False
    include_memos: bool = False
    job_id: str = DEFAULT_JOB_ID


def parse_bool(value: Optional[str], default: bool = False) -> bool:
    """Interpret an environment flag such as ``"1"`` or ``"yes"``."""
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in TRUTHY_VALUES


def read_environment(env_file: Optional[Union[str, Path]] = None) -> dict:
    """Merge a .env file with the process environment.

    The file is parsed without mutating os.environ; process variables take
    precedence over file values.

    Args:
        env_file: Optional path to a .env file.

    Returns:
        Dictionary of merged variables.
    """
    merged = {}
    if env_file is not None:
        path = Path(env_file)
        if not path.exists():
            raise ConfigurationError(str(path), "env file not found")
        merged.update({k: v for k, v in dotenv_values(path).items() if v is not None})
    merged.update(os.environ)
    return merged


def load_export_job(
    env_file: Optional[Union[str, Path]] = None,
    password: Optional[str] = None,
    **overrides,
) -> ExportJob:
    """Build an ExportJob from the environment, a .env file and explicit overrides.

    Overrides whose value is None are ignored so CLI options can be passed
    straight through.

    Args:
        env_file: Optional .env file to read.
        password: Password to use instead of looking one up.
        **overrides: ExportJob field values that win over the environment.

    Returns:
        A populated ExportJob.

    Raises:
        ConfigurationError: If the email or password cannot be determined.
    """
    # Imported here to keep config importable without the keyring backend loaded
    from timetree_exporter.storage.credentials import load_password

    env = read_environment(env_file)
    values = {k: v for k, v in overrides.items() if v is not None}

    email = values.get("email") or env.get(ENV_EMAIL)
    if not email:
        raise ConfigurationError(ENV_EMAIL, "pass --email or set it in the environment")

    password = password or load_password(email, environ=env)
    if not password:
        raise ConfigurationError(
            "password", "set TIMETREE_PASSWORD or run 'timetree-exporter set-password'"
        )

    job = ExportJob(
        email=email,
        password=password,
        output_path=values.get("output_path") or env.get(ENV_OUTPUT_PATH) or DEFAULT_OUTPUT_PATH,
        calendar_code=values.get("calendar_code") or env.get(ENV_CALENDAR_CODE) or None,
        birthdays_output=values.get("birthdays_output") or env.get(ENV_BIRTHDAYS_OUTPUT) or None,
        memos_output=values.get("memos_output") or env.get(ENV_MEMOS_OUTPUT) or None,
        include_birthdays=values.get(
            "include_birthdays", parse_bool(env.get(ENV_INCLUDE_BIRTHDAYS))
        ),
        include_memos=values.get("include_memos", parse_bool(env.get(ENV_INCLUDE_MEMOS))),
        job_id=values.get("job_id") or env.get(ENV_JOB_ID) or DEFAULT_JOB_ID,
    )
    logger.debug("Loaded export job '%s' writing to %s", job.job_id, job.output_path)
    return job


API_CONFIG = APIConfig.from_env()
