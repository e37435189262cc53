"""RFC 5545 feed building for TimeTree events."""

import logging
import math
from datetime import datetime
from typing import Iterable, List, Optional, Union

import pytz

from timetree_exporter.config.constants import (
    ALARM_DESCRIPTION,
    DEFAULT_PROD_VERSION,
    ICS_PRODID_TEMPLATE,
    ICS_VERSION,
)
from timetree_exporter.core.event_model import TimeTreeEvent
from timetree_exporter.core.ics_text import escape_text, fold_line
from timetree_exporter.core.timezone_utils import (
    ICS_UTC_DATETIME_FORMAT,
    format_date,
    format_datetime_property,
    format_utc,
    zone_name_or_default,
)

logger = logging.getLogger(__name__)

EventInput = Union[TimeTreeEvent, dict]


def build_ics(
    events: Iterable[EventInput],
    prod_version: str = DEFAULT_PROD_VERSION,
    include_birthdays: bool = False,
    include_memos: bool = False,
    now: Optional[datetime] = None,
) -> str:
    """Build a complete VCALENDAR document from TimeTree events.

    Args:
        events: Events as TimeTreeEvent instances or raw API dictionaries.
        prod_version: Version string embedded in the PRODID line.
        include_birthdays: Keep birthday events (type 1).
        include_memos: Keep memo events (category 2).
        now: Generation instant for DTSTAMP; defaults to the current time.

    Returns:
        The feed text with folded lines, CRLF separators and a trailing CRLF.
    """
    dtstamp = _format_stamp(now)

    lines = [
        "BEGIN:VCALENDAR",
        f"PRODID:{ICS_PRODID_TEMPLATE.format(version=prod_version)}",
        f"VERSION:{ICS_VERSION}",
    ]

    for event in _normalize_events_input(events):
        if not _should_include(event, include_birthdays, include_memos):
            continue
        lines.extend(_build_event_lines(event, dtstamp))

    lines.append("END:VCALENDAR")

    return "\r\n".join(fold_line(line) for line in lines) + "\r\n"


def _normalize_events_input(events: Iterable[EventInput]) -> List[TimeTreeEvent]:
    """Ensure events is a list of TimeTreeEvent.

    Args:
        events: Input that should be events or event dicts.

    Returns:
        Normalized list of events.
    """
    if events is None:
        return []
    if isinstance(events, (dict, TimeTreeEvent)):
        events = [events]

    normalized = []
    for event in events:
        if isinstance(event, TimeTreeEvent):
            normalized.append(event)
        elif isinstance(event, dict):
            normalized.append(TimeTreeEvent.from_dict(event))
        else:
            logger.error("Expected an event, but got %s", type(event))
    return normalized


def _format_stamp(now: Optional[datetime]) -> str:
    if now is None:
        now = datetime.now(pytz.utc)
    elif now.tzinfo is None:
        now = pytz.utc.localize(now)
    return now.astimezone(pytz.utc).strftime(ICS_UTC_DATETIME_FORMAT)


def _should_include(event: TimeTreeEvent, include_birthdays: bool, include_memos: bool) -> bool:
    if event.is_birthday and not include_birthdays:
        logger.debug("Skipping birthday event %s (%s)", event.uuid, event.title)
        return False
    if event.is_memo and not include_memos:
        logger.debug("Skipping memo event %s (%s)", event.uuid, event.title)
        return False
    return True


def _add_if_present(lines: List[str], label: str, value: Optional[str]) -> None:
    if value is None or value == "":
        return
    lines.append(f"{label}:{value}")


def _build_event_lines(event: TimeTreeEvent, dtstamp: str) -> List[str]:
    """Render one event as a VEVENT block.

    Args:
        event: The event to render.
        dtstamp: Pre-formatted DTSTAMP value shared by the whole feed.

    Returns:
        Unfolded content lines from BEGIN:VEVENT to END:VEVENT.
    """
    lines = ["BEGIN:VEVENT"]
    _add_if_present(lines, "UID", event.uuid)
    _add_if_present(lines, "SUMMARY", escape_text(event.title))
    _add_if_present(lines, "DTSTAMP", dtstamp)
    _add_if_present(lines, "CREATED", format_utc(event.created_at))
    _add_if_present(lines, "LAST-MODIFIED", format_utc(event.updated_at))

    lines.extend(_date_lines(event))

    _add_if_present(lines, "LOCATION", escape_text(event.location))
    if _has_value(event.location_lat) and _has_value(event.location_lon):
        _add_if_present(lines, "GEO", f"{event.location_lat};{event.location_lon}")
    _add_if_present(lines, "URL", escape_text(event.url))
    _add_if_present(lines, "DESCRIPTION", escape_text(event.note))
    _add_if_present(lines, "RELATED-TO", escape_text(event.parent_id))

    for recurrence in event.recurrences or []:
        if isinstance(recurrence, str) and recurrence.strip():
            lines.append(recurrence.strip())

    for minutes in event.alerts or []:
        lines.extend(_alarm_lines(minutes))

    lines.append("END:VEVENT")
    return lines


def _date_lines(event: TimeTreeEvent) -> List[str]:
    """Render DTSTART/DTEND for all-day or timed events."""
    start_zone = zone_name_or_default(event.start_timezone)
    end_zone = zone_name_or_default(event.end_timezone, event.start_timezone)
    lines: List[str] = []

    if event.all_day:
        _add_if_present(lines, "DTSTART;VALUE=DATE", format_date(event.start_at, start_zone))
        _add_if_present(lines, "DTEND;VALUE=DATE", format_date(event.end_at, end_zone))
        return lines

    label, value = format_datetime_property("DTSTART", event.start_at, start_zone)
    _add_if_present(lines, label, value)
    label, value = format_datetime_property("DTEND", event.end_at, end_zone)
    _add_if_present(lines, label, value)
    return lines


def _alarm_lines(minutes) -> List[str]:
    # Non-numeric lead times are skipped
    if isinstance(minutes, bool) or not isinstance(minutes, (int, float)):
        return []
    if not math.isfinite(minutes):
        return []

    lead = max(0, minutes)
    if isinstance(lead, float) and lead.is_integer():
        lead = int(lead)

    return [
        "BEGIN:VALARM",
        "ACTION:DISPLAY",
        f"DESCRIPTION:{ALARM_DESCRIPTION}",
        f"TRIGGER:-PT{lead}M",
        "END:VALARM",
    ]


def _has_value(value) -> bool:
    return value is not None and value != ""
