"""Exception hierarchy for TimeTree exporter."""

from typing import Optional


class TimeTreeError(Exception):
    """Base class for every error raised by the exporter."""


class AuthenticationError(TimeTreeError):
    """Raised when sign-in fails or no session cookie is returned."""

    def __init__(self, detail: str, status_code: Optional[int] = None):
        self.detail = detail
        self.status_code = status_code
        if status_code is None:
            super().__init__(detail)
        else:
            super().__init__(f"Login failed ({status_code}): {detail}")


class NotFoundError(TimeTreeError):
    """Raised when the account has no active calendars."""


class RetrievalError(TimeTreeError):
    """Raised when the service answers a data request with a non-success status."""

    def __init__(
        self,
        detail: str,
        calendar_id: Optional[int] = None,
        status_code: Optional[int] = None,
    ):
        self.detail = detail
        self.calendar_id = calendar_id
        self.status_code = status_code

        if calendar_id is None:
            target = "calendars"
        else:
            target = f"events (calendar {calendar_id})"

        if status_code is None:
            message = f"Failed to fetch {target}: {detail}"
        else:
            message = f"Failed to fetch {target}: {status_code} {detail}"
        super().__init__(message)


class TransportError(TimeTreeError):
    """Raised when a request could not be completed at the network level."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Request to {url} failed: {reason}")


class RequestTimeoutError(TransportError):
    """Raised when a request exceeds its fixed timeout."""

    def __init__(self, url: str, timeout_seconds: float):
        self.timeout_seconds = timeout_seconds
        super().__init__(url, f"timed out after {timeout_seconds:g} seconds")


class ConfigurationError(TimeTreeError):
    """Raised when required settings or credentials are missing."""

    def __init__(self, setting: str, hint: Optional[str] = None):
        self.setting = setting
        self.hint = hint
        message = f"Missing or invalid setting: {setting}"
        if hint:
            message = f"{message} ({hint})"
        super().__init__(message)
