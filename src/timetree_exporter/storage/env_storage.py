"""Environment file storage for TimeTree credentials."""

import logging
import os
import sys
from pathlib import Path
from typing import Optional

from dotenv import dotenv_values, set_key

from timetree_exporter.config.constants import ENV_EMAIL, ENV_PASSWORD

logger = logging.getLogger(__name__)

APP_DIR_NAME = "timetree-exporter"


def get_user_config_dir() -> Path:
    """Return a per-user config directory that works across platforms.

    Returns:
        Path to the user's config directory for this application.
    """
    if sys.platform.startswith("win"):
        base_str = os.environ.get("APPDATA") or os.environ.get("LOCALAPPDATA")
        base = Path(base_str) if base_str else (Path.home() / "AppData" / "Roaming")
        return base / APP_DIR_NAME

    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_DIR_NAME

    # Linux and other Unix-like systems
    base_str = os.environ.get("XDG_CONFIG_HOME")
    base = Path(base_str) if base_str else (Path.home() / ".config")
    return base / APP_DIR_NAME


def get_env_file_path() -> Path:
    """Get managed .env path under the user config directory."""
    return get_user_config_dir() / ".env"


def harden_file_permissions(path: Path) -> None:
    """Best-effort: restrict permissions to the current user on POSIX.

    Args:
        path: Path to the file to secure.
    """
    if os.name != "posix":
        return
    try:
        path.chmod(0o600)
    except OSError as e:
        logger.warning("Could not tighten permissions on %s: %s", path, e)


def harden_directory_permissions(path: Path) -> None:
    """Best-effort: restrict directory permissions to the current user on POSIX."""
    if os.name != "posix":
        return
    try:
        path.chmod(0o700)
    except OSError as e:
        logger.warning("Could not tighten permissions on %s: %s", path, e)


def load_from_env_file(path: Path, email: str) -> Optional[str]:
    """Load the password for ``email`` from an environment file.

    A file that names a different account is ignored.

    Args:
        path: Path to the .env file.
        email: The account the password must belong to.

    Returns:
        The password if found, None otherwise.
    """
    if not path.exists():
        return None

    # Parse without mutating os.environ (avoids leaking secrets to child processes).
    values = dotenv_values(path)
    stored_email = values.get(ENV_EMAIL)
    if stored_email and stored_email.strip() != email:
        logger.debug("Credentials file %s belongs to another account", path)
        return None

    password = values.get(ENV_PASSWORD)
    if not password:
        return None
    return str(password).strip().strip("'\"")


def store_in_env_file(email: str, password: str, path: Optional[Path] = None) -> Path:
    """Write the credentials to the per-user config .env with secure permissions.

    Args:
        email: The TimeTree account email.
        password: The password to store.
        path: Optional override for the target file.

    Returns:
        The path written.
    """
    env_path = path or get_env_file_path()

    env_path.parent.mkdir(parents=True, exist_ok=True, mode=0o700)
    harden_directory_permissions(env_path.parent)

    # Create file with secure permissions atomically
    if not env_path.exists():
        try:
            fd = os.open(str(env_path), os.O_CREAT | os.O_WRONLY | os.O_EXCL, 0o600)
            os.close(fd)
        except FileExistsError:
            pass

    harden_file_permissions(env_path)
    set_key(str(env_path), ENV_EMAIL, email)
    set_key(str(env_path), ENV_PASSWORD, password)
    harden_file_permissions(env_path)
    return env_path
