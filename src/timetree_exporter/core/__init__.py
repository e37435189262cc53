"""Core business logic for TimeTree exporter."""

from timetree_exporter.core.api_client import TimeTreeClient
from timetree_exporter.core.calendar_resolver import ResolvedCalendar, resolve_calendar, select_calendar
from timetree_exporter.core.event_model import CalendarMetadata, TimeTreeEvent
from timetree_exporter.core.exporter import ExportResult, run_export, write_feed
from timetree_exporter.core.ics_builder import build_ics
from timetree_exporter.core.ics_text import escape_text, fold_line

__all__ = [
    "TimeTreeClient",
    "ResolvedCalendar",
    "resolve_calendar",
    "select_calendar",
    "CalendarMetadata",
    "TimeTreeEvent",
    "ExportResult",
    "run_export",
    "write_feed",
    "build_ics",
    "escape_text",
    "fold_line",
]
