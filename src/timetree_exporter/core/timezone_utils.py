"""Timezone resolution and instant formatting utilities."""

import logging
from datetime import datetime
from typing import Optional

import pytz
from dateutil import tz as du_tz

from timetree_exporter.config.constants import UTC_ZONE_NAMES

logger = logging.getLogger(__name__)

ICS_DATE_FORMAT = "%Y%m%d"
ICS_LOCAL_DATETIME_FORMAT = "%Y%m%dT%H%M%S"
ICS_UTC_DATETIME_FORMAT = "%Y%m%dT%H%M%SZ"


def zone_name_or_default(*names: Optional[str]) -> str:
    """Return the first non-empty zone name, or ``"UTC"`` if none is set.

    Args:
        *names: Candidate zone names in priority order.

    Returns:
        The chosen zone name.
    """
    for name in names:
        if isinstance(name, str) and name.strip():
            return name.strip()
    return "UTC"


def is_utc_zone(name: str) -> bool:
    """Check whether a zone name denotes UTC itself."""
    return name in UTC_ZONE_NAMES


def resolve_timezone(tz_name: str):
    """Resolve an IANA zone name to a tzinfo object.

    Falls back to dateutil for names pytz does not know, then to UTC.

    Args:
        tz_name: The timezone name (e.g., "America/New_York").

    Returns:
        Tuple of (tzinfo, resolved) where resolved is False when UTC was
        substituted for an unknown zone.
    """
    if is_utc_zone(tz_name):
        return pytz.utc, True

    try:
        return pytz.timezone(tz_name), True
    except pytz.UnknownTimeZoneError:
        # Last-ditch attempt with dateutil (may return fixed offset)
        tzobj = du_tz.gettz(tz_name)
        if tzobj is not None:
            return tzobj, True

    logger.warning("Couldn't resolve timezone '%s' - using UTC", tz_name)
    return pytz.utc, False


def from_epoch_ms(value, tzinfo=pytz.utc) -> Optional[datetime]:
    """Convert epoch milliseconds to an aware datetime in ``tzinfo``.

    Returns:
        The datetime, or None when the value is missing or out of range.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        instant = datetime.fromtimestamp(float(value) / 1000.0, tz=pytz.utc)
        return instant.astimezone(tzinfo)
    except (TypeError, ValueError, OverflowError, OSError) as e:
        logger.warning("Ignoring invalid timestamp %r: %s", value, e)
        return None


def format_utc(value) -> Optional[str]:
    """Format epoch milliseconds as ``YYYYMMDDTHHMMSSZ``."""
    instant = from_epoch_ms(value)
    if instant is None:
        return None
    return instant.strftime(ICS_UTC_DATETIME_FORMAT)


def format_date(value, tz_name: str) -> Optional[str]:
    """Format epoch milliseconds as a bare ``YYYYMMDD`` date in ``tz_name``."""
    tzobj, _ = resolve_timezone(tz_name)
    instant = from_epoch_ms(value, tzobj)
    if instant is None:
        return None
    return instant.strftime(ICS_DATE_FORMAT)


def format_datetime_property(label: str, value, tz_name: str):
    """Build the name and value of a DTSTART/DTEND style property.

    Non-UTC zones render local wall-clock time with a TZID parameter; UTC
    renders with a trailing ``Z``. Zones that cannot be resolved render as UTC.

    Args:
        label: Property name, e.g. ``"DTSTART"``.
        value: Epoch milliseconds.
        tz_name: IANA zone name.

    Returns:
        Tuple of (property_name, formatted_value); formatted_value is None when
        the instant is missing.
    """
    tzobj, resolved = resolve_timezone(tz_name)
    if is_utc_zone(tz_name) or not resolved:
        return label, format_utc(value)

    instant = from_epoch_ms(value, tzobj)
    if instant is None:
        return label, None
    return f"{label};TZID={tz_name}", instant.strftime(ICS_LOCAL_DATETIME_FORMAT)
