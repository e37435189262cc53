"""Keyring-based secure storage for TimeTree passwords."""

import logging
from typing import Optional

import keyring
from keyring.errors import KeyringError

from timetree_exporter.config.constants import KEYRING_SERVICE_NAME

logger = logging.getLogger(__name__)

# Track whether we've seen the OS keyring fail this session
_keyring_available = True


def is_keyring_available() -> bool:
    """Check if keyring is available for use."""
    return _keyring_available


def load_from_keyring(email: str) -> Optional[str]:
    """Load the password stored for an account from the OS keyring.

    Args:
        email: The TimeTree account email, used as the keyring username.

    Returns:
        The password if found, None otherwise.
    """
    global _keyring_available
    if not _keyring_available:
        return None

    try:
        return keyring.get_password(KEYRING_SERVICE_NAME, email)
    except KeyringError as e:
        logger.warning("Keyring lookup failed: %s", e)
        _keyring_available = False
        return None


def save_to_keyring(email: str, password: str) -> bool:
    """Persist a password to the OS keyring if available.

    Args:
        email: The TimeTree account email.
        password: The password to save.

    Returns:
        True if saved successfully, False otherwise.
    """
    global _keyring_available
    if not _keyring_available:
        return False

    try:
        keyring.set_password(KEYRING_SERVICE_NAME, email, password)
        return True
    except KeyringError as e:
        logger.warning("Keyring save failed: %s", e)
        _keyring_available = False
        return False
