"""Choose which calendar of an account to export."""

import logging
from dataclasses import dataclass
from typing import List, Optional

from timetree_exporter.core.api_client import TimeTreeClient
from timetree_exporter.core.event_model import CalendarMetadata

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedCalendar:
    calendar_id: int
    calendar_name: str
    alias_code: str


def select_calendar(
    calendars: List[CalendarMetadata],
    desired_alias_code: Optional[str] = None,
) -> ResolvedCalendar:
    """Pick from an already fetched, non-empty list of active calendars."""
    if desired_alias_code:
        for calendar in calendars:
            if calendar.alias_code == desired_alias_code:
                return ResolvedCalendar(calendar.id, calendar.name, calendar.alias_code)
        logger.warning(
            'Calendar code "%s" not found; defaulting to first active calendar',
            desired_alias_code,
        )

    first = calendars[0]
    return ResolvedCalendar(first.id, first.name, first.alias_code)


def resolve_calendar(
    client: TimeTreeClient,
    session_id: str,
    desired_alias_code: Optional[str] = None,
) -> ResolvedCalendar:
    """Pick the calendar matching ``desired_alias_code``, else the first active one.

    Errors from listing calendars propagate unchanged.
    """
    return select_calendar(client.fetch_calendars(session_id), desired_alias_code)
