from __future__ import annotations

import logging
import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - JCAL_FILE: path of the schedule store. Default 'schedule.json' in the working directory
    - JCAL_LOG_LEVEL: logging level name (DEBUG, INFO, WARNING, ...). Default 'WARNING'
    - JCAL_COLOR: 'false' to disable colored output (default: true)
    - NO_COLOR: when set to any value, disables colored output
    """

    store_path: str
    log_level: str
    color: bool


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_bool(value: str, default: bool = False) -> bool:
    v = value.strip().lower()
    if v in {"1", "true", "yes", "on"}:
        return True
    if v in {"0", "false", "no", "off"}:
        return False
    return default


def _parse_log_level(value: str, default: str = "WARNING") -> str:
    level = value.strip().upper()
    # logging.getLevelName returns a string like "Level FOO" for unknown names
    if isinstance(logging.getLevelName(level), int):
        return level
    return default


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    store_path = _get_env("JCAL_FILE", os.path.join(os.getcwd(), "schedule.json")).strip()
    log_level = _parse_log_level(_get_env("JCAL_LOG_LEVEL", "WARNING"))

    color = _parse_bool(_get_env("JCAL_COLOR", "true"), True)
    if os.getenv("NO_COLOR"):
        color = False

    return Settings(
        store_path=store_path,
        log_level=log_level,
        color=color,
    )
