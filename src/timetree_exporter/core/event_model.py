"""Data models for TimeTree calendars and events."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from timetree_exporter.config.constants import EVENT_CATEGORY_MEMO, EVENT_TYPE_BIRTHDAY


def _as_int(value, default: int = 0) -> int:
    if isinstance(value, bool):
        return int(value)
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class CalendarMetadata:
    """A calendar as listed by the TimeTree API."""

    id: int
    name: str
    alias_code: str
    deactivated_at: Optional[Any] = None
    # False when the listing omitted deactivated_at altogether
    status_known: bool = True

    @property
    def is_active(self) -> bool:
        return self.status_known and self.deactivated_at is None

    @classmethod
    def from_dict(cls, data: Dict) -> "CalendarMetadata":
        return cls(
            id=_as_int(data.get("id")),
            name=data.get("name") or "",
            alias_code=data.get("alias_code") or "",
            deactivated_at=data.get("deactivated_at"),
            status_known="deactivated_at" in data,
        )


@dataclass(frozen=True)
class TimeTreeEvent:
    """Type-safe representation of a TimeTree event.

    Instants are epoch milliseconds exactly as the service returns them.
    """

    uuid: str
    title: str = ""
    created_at: Optional[float] = None
    updated_at: Optional[float] = None
    recurrences: Optional[List[Any]] = None
    alerts: Optional[List[Any]] = None
    url: str = ""
    note: str = ""
    start_at: Optional[float] = None
    end_at: Optional[float] = None
    all_day: bool = False
    start_timezone: Optional[str] = None
    end_timezone: Optional[str] = None
    location_lat: Optional[Any] = None
    location_lon: Optional[Any] = None
    location: str = ""
    parent_id: Optional[str] = None
    type: int = 0
    category: int = 0
    extra: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def is_birthday(self) -> bool:
        return self.type == EVENT_TYPE_BIRTHDAY

    @property
    def is_memo(self) -> bool:
        return self.category == EVENT_CATEGORY_MEMO

    @classmethod
    def from_dict(cls, data: Dict) -> "TimeTreeEvent":
        """Create an event from an API payload dictionary.

        Missing keys fall back to empty values; unknown keys are kept in
        ``extra``.

        Args:
            data: Dictionary containing event data.

        Returns:
            A TimeTreeEvent instance.
        """
        known = {f for f in cls.__dataclass_fields__ if f != "extra"}
        recurrences = data.get("recurrences")
        alerts = data.get("alerts")
        return cls(
            uuid=str(data.get("uuid") or ""),
            title=data.get("title") or "",
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
            recurrences=list(recurrences) if isinstance(recurrences, list) else None,
            alerts=list(alerts) if isinstance(alerts, list) else None,
            url=data.get("url") or "",
            note=data.get("note") or "",
            start_at=data.get("start_at"),
            end_at=data.get("end_at"),
            all_day=bool(data.get("all_day")),
            start_timezone=data.get("start_timezone") or None,
            end_timezone=data.get("end_timezone") or None,
            location_lat=data.get("location_lat"),
            location_lon=data.get("location_lon"),
            location=data.get("location") or "",
            parent_id=data.get("parent_id") or None,
            type=_as_int(data.get("type")),
            category=_as_int(data.get("category")),
            extra={k: v for k, v in data.items() if k not in known},
        )
