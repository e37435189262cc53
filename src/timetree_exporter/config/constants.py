"""Centralized constants for TimeTree exporter.

Endpoints and header values mirror what the TimeTree web client sends.
"""

# TimeTree web API
API_BASE_URI = "https://timetreeapp.com/api/v1"
API_USER_AGENT = "web/2.1.0/en"
API_USER_AGENT_HEADER = "X-Timetreea"
SESSION_COOKIE_NAME = "_session_id"
DEFAULT_TIMEOUT_SECONDS = 10.0

# Upper bound on event sync pages followed for one calendar
MAX_SYNC_PAGES = 100

SIGNIN_PATH = "/auth/email/signin"
CALENDARS_PATH = "/calendars"
EVENTS_SYNC_PATH = "/calendar/{calendar_id}/events/sync"

# Event classification values used by the service
EVENT_TYPE_BIRTHDAY = 1
EVENT_CATEGORY_MEMO = 2

# ICS calendar constants
RFC5545_MAX_LINE = 75
ICS_VERSION = "2.0"
ICS_PRODID_TEMPLATE = "-//TimeTree Exporter {version}//EN"
DEFAULT_PROD_VERSION = "timetree-live-ics"
ALARM_DESCRIPTION = "Reminder"
UTC_ZONE_NAMES = frozenset({"UTC", "Etc/UTC"})

# Key storage constants
KEYRING_SERVICE_NAME = "timetree-exporter"

# Environment variable names
ENV_EMAIL = "TIMETREE_EMAIL"
ENV_PASSWORD = "TIMETREE_PASSWORD"
ENV_CALENDAR_CODE = "TIMETREE_CALENDAR_CODE"
ENV_OUTPUT_PATH = "TIMETREE_OUTPUT_PATH"
ENV_BIRTHDAYS_OUTPUT = "TIMETREE_BIRTHDAYS_OUTPUT"
ENV_MEMOS_OUTPUT = "TIMETREE_MEMOS_OUTPUT"
ENV_INCLUDE_BIRTHDAYS = "TIMETREE_INCLUDE_BIRTHDAYS"
ENV_INCLUDE_MEMOS = "TIMETREE_INCLUDE_MEMOS"
ENV_JOB_ID = "TIMETREE_JOB_ID"
ENV_API_BASE_URI = "TIMETREE_API_BASE_URI"
ENV_TIMEOUT_SECONDS = "TIMETREE_TIMEOUT_SECONDS"

DEFAULT_OUTPUT_PATH = "timetree.ics"
DEFAULT_JOB_ID = "default"

TRUTHY_VALUES = frozenset({"1", "true", "yes", "on"})
