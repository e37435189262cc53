import logging
from unittest.mock import Mock

import pytest

from timetree_exporter.core.api_client import TimeTreeClient
from timetree_exporter.core.calendar_resolver import ResolvedCalendar, resolve_calendar, select_calendar
from timetree_exporter.core.event_model import CalendarMetadata
from timetree_exporter.exceptions import NotFoundError, RetrievalError

CALENDARS = [
    CalendarMetadata(id=11, name="Family", alias_code="fam"),
    CalendarMetadata(id=22, name="Work", alias_code="work"),
]


@pytest.fixture
def api() -> Mock:
    api = Mock(spec=TimeTreeClient)
    api.fetch_calendars.return_value = list(CALENDARS)
    return api


def test_matching_alias_is_selected(api) -> None:
    assert resolve_calendar(api, "tok", "work") == ResolvedCalendar(22, "Work", "work")
    api.fetch_calendars.assert_called_once_with("tok")


def test_no_alias_selects_first_calendar(api) -> None:
    assert resolve_calendar(api, "tok") == ResolvedCalendar(11, "Family", "fam")


def test_unknown_alias_falls_back_with_warning(api, caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="timetree_exporter.core.calendar_resolver"):
        resolved = resolve_calendar(api, "tok", "nope")

    assert resolved.calendar_id == 11
    assert 'Calendar code "nope" not found' in caplog.text


def test_first_calendar_follows_service_order(api) -> None:
    api.fetch_calendars.return_value = list(reversed(CALENDARS))

    assert resolve_calendar(api, "tok", "missing").calendar_id == 22


@pytest.mark.parametrize("error", [
    NotFoundError("No active calendars found for this account"),
    RetrievalError("forbidden", status_code=403),
])
def test_listing_errors_propagate_unwrapped(api, error) -> None:
    api.fetch_calendars.side_effect = error

    with pytest.raises(type(error)) as exc_info:
        resolve_calendar(api, "tok", "fam")

    assert exc_info.value is error


def test_select_calendar_works_on_a_fetched_list() -> None:
    assert select_calendar(CALENDARS, "work").calendar_id == 22
    assert select_calendar(CALENDARS, None).calendar_id == 11
