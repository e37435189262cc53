"""TimeTree web API client: sign-in, calendar listing and paginated event sync."""

import json
import logging
import re
import uuid
from typing import Any, Dict, List, Optional, Tuple

import requests

from timetree_exporter.config.settings import API_CONFIG, APIConfig
from timetree_exporter.config.constants import (
    API_USER_AGENT_HEADER,
    CALENDARS_PATH,
    EVENTS_SYNC_PATH,
    SESSION_COOKIE_NAME,
    SIGNIN_PATH,
)
from timetree_exporter.core.event_model import CalendarMetadata, TimeTreeEvent
from timetree_exporter.exceptions.errors import (
    AuthenticationError,
    NotFoundError,
    RequestTimeoutError,
    RetrievalError,
    TransportError,
)
from timetree_exporter.utils.masking import mask_email, mask_token

logger = logging.getLogger(__name__)

SESSION_COOKIE_PATTERN = re.compile(re.escape(SESSION_COOKIE_NAME) + r"=([^;,\s]+)")


def describe_payload(data: Any) -> str:
    """Best-effort text for an error body that may be JSON, text or absent."""
    if data is None:
        return "unknown error"
    if isinstance(data, str):
        return data
    try:
        return json.dumps(data)
    except (TypeError, ValueError):
        return str(data)


class TimeTreeClient:
    """Client for the TimeTree web API used by the browser app.

    Every call is a single blocking request with a fixed timeout; nothing is
    retried. The session token is passed explicitly to each call.
    """

    def __init__(
        self,
        config: Optional[APIConfig] = None,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the client.

        Args:
            config: API settings; defaults to API_CONFIG.
            session: Optional requests session, mainly for tests.
        """
        self.config = config or API_CONFIG
        self._owns_session = session is None
        self.session = session or requests.Session()

    def __enter__(self) -> "TimeTreeClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        """Release pooled connections if the session was created here."""
        if self._owns_session:
            self.session.close()

    def _build_headers(self, session_id: Optional[str] = None) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            API_USER_AGENT_HEADER: self.config.user_agent,
        }
        if session_id:
            headers["Cookie"] = f"{SESSION_COOKIE_NAME}={session_id}"
        return headers

    def _request(
        self,
        method: str,
        path: str,
        session_id: Optional[str] = None,
        params: Optional[Dict[str, Any]] = None,
        payload: Optional[Dict[str, Any]] = None,
    ) -> Tuple[requests.Response, Any]:
        """Send one request and parse its body.

        Returns:
            Tuple of (response, parsed_json). parsed_json is None when the body
            is empty or not JSON.

        Raises:
            RequestTimeoutError: If the request exceeds the configured timeout.
            TransportError: On any other network failure.
        """
        url = f"{self.config.base_uri}{path}"
        body = json.dumps(payload) if payload is not None else None

        try:
            response = self.session.request(
                method,
                url,
                params=params,
                data=body,
                headers=self._build_headers(session_id),
                timeout=self.config.timeout_seconds,
            )
        except requests.Timeout as e:
            logger.error("%s %s timed out after %.0fs", method, url, self.config.timeout_seconds)
            raise RequestTimeoutError(url, self.config.timeout_seconds) from e
        except requests.RequestException as e:
            logger.error("%s %s failed: %s", method, url, e)
            raise TransportError(url, str(e)) from e

        try:
            data = response.json()
        except ValueError:
            data = None

        logger.debug("%s %s -> %d", method, url, response.status_code)
        return response, data

    def login(self, email: str, password: str) -> str:
        """Sign in with email and password.

        Args:
            email: Account email.
            password: Account password.

        Returns:
            The session token from the ``_session_id`` cookie.

        Raises:
            AuthenticationError: If sign-in is rejected or no session cookie
                is returned.
        """
        payload = {
            "uid": email,
            "password": password,
            "uuid": uuid.uuid4().hex,
        }

        response, data = self._request("PUT", SIGNIN_PATH, payload=payload)

        if not response.ok:
            logger.error("Login for %s failed with status %d", mask_email(email), response.status_code)
            raise AuthenticationError(describe_payload(data), status_code=response.status_code)

        set_cookie = response.headers.get("Set-Cookie") or ""
        match = SESSION_COOKIE_PATTERN.search(set_cookie)
        if not match:
            raise AuthenticationError("Login succeeded but session cookie was not returned")

        session_id = match.group(1)
        logger.info("Signed in as %s (session %s)", mask_email(email), mask_token(session_id))
        return session_id

    def fetch_calendars(self, session_id: str) -> List[CalendarMetadata]:
        """List the account's active calendars.

        Returns:
            Active calendars in the order the service returns them.

        Raises:
            RetrievalError: If the listing request fails.
            NotFoundError: If no calendar is active.
        """
        response, data = self._request(
            "GET", CALENDARS_PATH, session_id=session_id, params={"since": 0}
        )

        if not response.ok:
            raise RetrievalError(describe_payload(data), status_code=response.status_code)

        raw_calendars = data.get("calendars") if isinstance(data, dict) else None
        calendars = [
            CalendarMetadata.from_dict(item)
            for item in (raw_calendars or [])
            if isinstance(item, dict)
        ]
        active = [calendar for calendar in calendars if calendar.is_active]

        if not active:
            raise NotFoundError("No active calendars found for this account")

        logger.debug("Found %d active calendar(s) of %d", len(active), len(calendars))
        return active

    def fetch_events(
        self,
        session_id: str,
        calendar_id: int,
        calendar_name: Optional[str] = None,
    ) -> List[TimeTreeEvent]:
        """Retrieve every event of a calendar, following sync pages.

        A page with ``chunk: true`` and a numeric ``since`` is followed by a
        request for that cursor. Events keep page order.

        Args:
            session_id: Session token from login().
            calendar_id: Numeric calendar id.
            calendar_name: Optional name used in log messages.

        Returns:
            All events of the calendar.

        Raises:
            RetrievalError: If any page fails or the page limit is exceeded.
            TransportError: On network failure.
        """
        try:
            return self._fetch_event_pages(session_id, calendar_id)
        except (RetrievalError, TransportError) as e:
            if calendar_name:
                logger.error("Failed to fetch events for '%s': %s", calendar_name, e)
            else:
                logger.error("Failed to fetch events: %s", e)
            raise

    def _fetch_event_pages(self, session_id: str, calendar_id: int) -> List[TimeTreeEvent]:
        path = EVENTS_SYNC_PATH.format(calendar_id=calendar_id)
        events: List[TimeTreeEvent] = []
        since = None

        for page in range(1, self.config.max_sync_pages + 1):
            params = {"since": since} if since else None
            response, data = self._request("GET", path, session_id=session_id, params=params)

            if not response.ok:
                raise RetrievalError(
                    describe_payload(data),
                    calendar_id=calendar_id,
                    status_code=response.status_code,
                )

            payload = data if isinstance(data, dict) else {}
            page_events = [
                TimeTreeEvent.from_dict(item)
                for item in (payload.get("events") or [])
                if isinstance(item, dict)
            ]
            events.extend(page_events)
            logger.debug(
                "Calendar %s page %d: %d event(s)", calendar_id, page, len(page_events)
            )

            next_since = payload.get("since")
            has_more = (
                payload.get("chunk") is True
                and isinstance(next_since, (int, float))
                and not isinstance(next_since, bool)
            )
            if not has_more:
                logger.info("Fetched %d event(s) from calendar %s", len(events), calendar_id)
                return events
            since = next_since

        raise RetrievalError(
            f"more than {self.config.max_sync_pages} sync pages",
            calendar_id=calendar_id,
        )
