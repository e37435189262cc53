"""Configuration module for TimeTree exporter."""

from timetree_exporter.config.settings import (
    API_CONFIG,
    APIConfig,
    ExportJob,
    load_export_job,
    parse_bool,
)
from timetree_exporter.config.constants import (
    API_BASE_URI,
    API_USER_AGENT,
    DEFAULT_PROD_VERSION,
    EVENT_CATEGORY_MEMO,
    EVENT_TYPE_BIRTHDAY,
    KEYRING_SERVICE_NAME,
    RFC5545_MAX_LINE,
)

__all__ = [
    "API_CONFIG",
    "APIConfig",
    "ExportJob",
    "load_export_job",
    "parse_bool",
    "API_BASE_URI",
    "API_USER_AGENT",
    "DEFAULT_PROD_VERSION",
    "EVENT_CATEGORY_MEMO",
    "EVENT_TYPE_BIRTHDAY",
    "KEYRING_SERVICE_NAME",
    "RFC5545_MAX_LINE",
]
