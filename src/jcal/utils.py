from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from typing import Optional, Set, Union

DISPLAY_FORMAT = "%Y-%m-%d %H:%M"

# Accepted layouts for user-entered times, tried in order. All are read as UTC wall-clock.
WALL_CLOCK_FORMATS = (
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%dT%H:%M",
    "%Y-%m-%dT%H:%M:%S",
)


# PUBLIC_INTERFACE
def to_utc(value: datetime) -> datetime:
    """
    Normalize a datetime to an aware UTC datetime truncated to milliseconds.

    Naive values are taken as UTC wall-clock (no local timezone shift), aware
    values are converted.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    return value.replace(microsecond=value.microsecond // 1000 * 1000)


# PUBLIC_INTERFACE
def utc_now() -> datetime:
    """Current instant, UTC, millisecond precision."""
    return to_utc(datetime.now(timezone.utc))


# PUBLIC_INTERFACE
def to_iso(value: datetime) -> str:
    """Serialize an instant as `YYYY-MM-DDTHH:MM:SS.mmmZ`."""
    value = to_utc(value)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


# PUBLIC_INTERFACE
def format_minute(value: datetime) -> str:
    """Display form of an instant: `YYYY-MM-DD HH:mm` in UTC."""
    return to_utc(value).strftime(DISPLAY_FORMAT)


# PUBLIC_INTERFACE
def parse_wall_clock(value: Union[str, date, datetime]) -> datetime:
    """
    Parse user input into a UTC instant.

    - `YYYY-MM-DD HH:mm` (and the other WALL_CLOCK_FORMATS) read as UTC.
    - A bare `YYYY-MM-DD` becomes midnight UTC.
    - Full ISO-8601 strings with an offset are converted to UTC.
    Raises ValueError when nothing matches.
    """
    if isinstance(value, datetime):
        return to_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)

    s = value.strip()
    for fmt in WALL_CLOCK_FORMATS:
        try:
            return to_utc(datetime.strptime(s, fmt))
        except ValueError:
            continue
    try:
        d = datetime.strptime(s, "%Y-%m-%d")
        return d.replace(tzinfo=timezone.utc)
    except ValueError:
        pass
    try:
        # fromisoformat only understands a trailing 'Z' from 3.11 on
        iso = s[:-1] + "+00:00" if s.endswith(("Z", "z")) else s
        return to_utc(datetime.fromisoformat(iso))
    except ValueError as e:
        raise ValueError(
            f"Invalid time {value!r}. Use 'YYYY-MM-DD HH:mm' (e.g., '2025-01-31 13:45')."
        ) from e


# PUBLIC_INTERFACE
def parse_calendar_date(value: str) -> date:
    """Parse a `YYYY-MM-DD` string into a date. Raises ValueError otherwise."""
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError as e:
        raise ValueError(f"Invalid date {value!r}. Use 'YYYY-MM-DD'.") from e


# PUBLIC_INTERFACE
def new_schedule_id(taken: Optional[Set[str]] = None) -> str:
    """Return a short opaque id (8 hex chars of a UUID4) not present in `taken`."""
    while True:
        candidate = uuid.uuid4().hex[:8]
        if not taken or candidate not in taken:
            return candidate
