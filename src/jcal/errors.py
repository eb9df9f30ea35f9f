"""Error kinds raised by the schedule core."""

from __future__ import annotations

from typing import Optional


class ScheduleError(Exception):
    """Base class for every error the schedule core reports."""


# PUBLIC_INTERFACE
class ValidationError(ScheduleError):
    """
    Input could not be turned into a valid schedule record.

    Raised for blank titles, detailed records missing time/content and
    unparseable date strings. `field` names the offending input when known.
    """

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


# PUBLIC_INTERFACE
class NotFoundError(ScheduleError):
    """An operation referenced a schedule id that is not in the collection."""

    def __init__(self, schedule_id: str) -> None:
        super().__init__(f"Schedule with ID {schedule_id!r} not found.")
        self.schedule_id = schedule_id


# PUBLIC_INTERFACE
class UnsupportedFieldError(ScheduleError):
    """
    A field was set on a record kind that cannot carry it (time/content on a todo).

    Update operations report this as a warning instead of raising it.
    """

    def __init__(self, field: str, kind: str) -> None:
        super().__init__(f"Cannot set {field} on a {kind} item.")
        self.field = field
        self.kind = kind


class StoreError(ScheduleError):
    """The persisted document exists but cannot be decoded or validated."""
