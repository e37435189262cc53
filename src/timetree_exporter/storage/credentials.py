"""High-level TimeTree credential management."""

import logging
from typing import Mapping, Optional, Tuple

from timetree_exporter.config.constants import ENV_PASSWORD
from timetree_exporter.storage.keyring_storage import load_from_keyring, save_to_keyring
from timetree_exporter.storage.env_storage import (
    get_env_file_path,
    load_from_env_file,
    store_in_env_file,
)
from timetree_exporter.utils.masking import mask_email

logger = logging.getLogger(__name__)


def get_password_source(
    email: str, environ: Optional[Mapping[str, str]] = None
) -> Tuple[Optional[str], str]:
    """Determine where the password for ``email`` comes from.

    Priority:
        1. TIMETREE_PASSWORD in the given environment
        2. OS keyring
        3. User config .env

    Args:
        email: The TimeTree account email.
        environ: Environment mapping to consult (defaults to nothing).

    Returns:
        Tuple of (password, source_description).
    """
    env_password = (environ or {}).get(ENV_PASSWORD)
    if env_password:
        return env_password, f"Environment Variable ({ENV_PASSWORD})"

    keyring_password = load_from_keyring(email)
    if keyring_password:
        return keyring_password, "OS Keyring"

    env_path = get_env_file_path()
    file_password = load_from_env_file(env_path, email)
    if file_password:
        return file_password, f"User Config: {env_path}"

    return None, "No Password Found"


def load_password(email: str, environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """Load the password for a TimeTree account.

    Returns:
        The password if found, None otherwise.
    """
    password, source = get_password_source(email, environ)
    if password:
        logger.debug("Using password for %s from %s", mask_email(email), source)
    return password


def save_password(email: str, password: str) -> str:
    """Save a password securely.

    Primary: OS keyring.
    Fallback: .env in the per-user config dir with 0600 permissions.

    Args:
        email: The TimeTree account email.
        password: The password to save.

    Returns:
        Description of where the password was stored.
    """
    password = password.strip()

    if save_to_keyring(email, password):
        logger.info("Password for %s saved to keyring", mask_email(email))
        return "OS Keyring"

    logger.warning("Keyring unavailable, using file storage instead")
    path = store_in_env_file(email, password, path=get_env_file_path())
    return f"User Config: {path}"
