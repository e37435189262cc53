"""Credential storage for TimeTree exporter."""

from timetree_exporter.storage.credentials import (
    get_password_source,
    load_password,
    save_password,
)
from timetree_exporter.storage.env_storage import (
    get_env_file_path,
    get_user_config_dir,
)

__all__ = [
    "get_password_source",
    "load_password",
    "save_password",
    "get_env_file_path",
    "get_user_config_dir",
]
