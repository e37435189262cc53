import json
from typing import Any, Dict, Optional
from unittest.mock import Mock

import pytest
import requests

from timetree_exporter.config.settings import APIConfig
from timetree_exporter.core.api_client import TimeTreeClient

# 2024-07-01T16:00:00Z
SUMMER_AFTERNOON_MS = 1719849600000
HOUR_MS = 3_600_000

BASE_EVENT: Dict[str, Any] = {
    "uuid": "evt-1",
    "title": "Normal",
    "created_at": 1704067200000,
    "updated_at": 1704067200000,
    "recurrences": None,
    "alerts": None,
    "url": "",
    "note": "",
    "start_at": SUMMER_AFTERNOON_MS,
    "end_at": SUMMER_AFTERNOON_MS + HOUR_MS,
    "all_day": False,
    "start_timezone": "UTC",
    "end_timezone": "UTC",
    "location_lat": None,
    "location_lon": None,
    "location": "",
    "parent_id": None,
    "type": 0,
    "category": 0,
}


def make_event(**overrides) -> Dict[str, Any]:
    event = dict(BASE_EVENT)
    event.update(overrides)
    return event


def make_response(
    status: int = 200,
    body: Any = None,
    headers: Optional[Dict[str, str]] = None,
) -> requests.Response:
    """Build a real requests.Response without touching the network."""
    response = requests.Response()
    response.status_code = status
    response.url = "https://timetree.test/api/v1"
    response.encoding = "utf-8"
    if body is None:
        response._content = b""
    elif isinstance(body, bytes):
        response._content = body
    else:
        response._content = json.dumps(body).encode("utf-8")
    response.headers.update(headers or {})
    return response


@pytest.fixture
def fake_session() -> Mock:
    return Mock(spec=requests.Session)


@pytest.fixture
def client(fake_session: Mock) -> TimeTreeClient:
    config = APIConfig(base_uri="https://timetree.test/api/v1", timeout_seconds=10.0, max_sync_pages=5)
    return TimeTreeClient(config=config, session=fake_session)
