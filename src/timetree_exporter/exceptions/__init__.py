"""Custom exceptions for TimeTree exporter."""

from timetree_exporter.exceptions.errors import (
    TimeTreeError,
    AuthenticationError,
    NotFoundError,
    RetrievalError,
    TransportError,
    RequestTimeoutError,
    ConfigurationError,
)

__all__ = [
    "TimeTreeError",
    "AuthenticationError",
    "NotFoundError",
    "RetrievalError",
    "TransportError",
    "RequestTimeoutError",
    "ConfigurationError",
]
