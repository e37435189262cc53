"""Utilities for masking sensitive data."""

from typing import Optional


def mask_token(token: Optional[str]) -> str:
    """Mask a session token for safe logging.

    Args:
        token: The session token to mask.

    Returns:
        Masked token showing only first and last 4 characters.
    """
    if not token:
        return "<empty>"
    if len(token) <= 8:
        return "***"
    return f"{token[:4]}...{token[-4:]}"


def mask_email(email: Optional[str]) -> str:
    """Mask the local part of an email address, keeping its first character."""
    if not email:
        return "<empty>"
    local, sep, domain = email.partition("@")
    if not sep:
        return mask_token(email)
    return f"{local[:1]}***@{domain}"
