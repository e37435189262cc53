"""
TimeTree Exporter - TimeTree calendar to iCalendar feed

Signs in to the TimeTree web API, pulls every event of a calendar and
renders them as an RFC 5545 feed that other calendar apps can subscribe to.
"""

__version__ = "1.0.0"

# Public API - import commonly used components
from timetree_exporter.config.settings import API_CONFIG, APIConfig, ExportJob
from timetree_exporter.exceptions.errors import (
    AuthenticationError,
    ConfigurationError,
    NotFoundError,
    RequestTimeoutError,
    RetrievalError,
    TimeTreeError,
    TransportError,
)
from timetree_exporter.core.api_client import TimeTreeClient
from timetree_exporter.core.calendar_resolver import ResolvedCalendar, resolve_calendar
from timetree_exporter.core.event_model import CalendarMetadata, TimeTreeEvent
from timetree_exporter.core.exporter import ExportResult, run_export
from timetree_exporter.core.ics_builder import build_ics

__all__ = [
    # Version
    "__version__",
    # Config
    "API_CONFIG",
    "APIConfig",
    "ExportJob",
    # Exceptions
    "AuthenticationError",
    "ConfigurationError",
    "NotFoundError",
    "RequestTimeoutError",
    "RetrievalError",
    "TimeTreeError",
    "TransportError",
    # Core
    "TimeTreeClient",
    "ResolvedCalendar",
    "resolve_calendar",
    "CalendarMetadata",
    "TimeTreeEvent",
    "ExportResult",
    "run_export",
    "build_ics",
]
