from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError
from .models import ScheduleKind
from .utils import parse_wall_clock

# Incoming time can be a wall-clock string, a date or a datetime
TimeInput = Union[date, datetime, str]


def _parse_time(value: Optional[TimeInput]) -> Optional[datetime]:
    """
    Normalize time input into an aware UTC datetime.
    - Empty strings are treated as absent.
    - Strings without an offset are UTC wall-clock; dates become midnight UTC.
    """
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return parse_wall_clock(value)


def _clean_title(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    s = v.strip()
    if not s:
        raise ValueError("title must not be blank")
    return s


# PUBLIC_INTERFACE
class ScheduleCreate(BaseModel):
    """
    Payload for adding one schedule.

    Detailed schedules require both `time` and `content`; todos must not
    carry either.
    """

    title: str = Field(..., description="Short title for the schedule")
    kind: ScheduleKind = Field(default=ScheduleKind.TODO, description="todo or detailed")
    time: Optional[datetime] = Field(
        default=None, description="Event time, 'YYYY-MM-DD HH:mm' read as UTC"
    )
    content: Optional[str] = Field(default=None, description="Event content")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return _clean_title(v)  # type: ignore[return-value]

    @field_validator("time", mode="before")
    @classmethod
    def parse_time(cls, v: Optional[TimeInput]) -> Optional[datetime]:
        return _parse_time(v)

    @model_validator(mode="after")
    def check_kind_fields(self) -> "ScheduleCreate":
        if self.kind == ScheduleKind.DETAILED:
            missing = [name for name in ("time", "content") if not getattr(self, name)]
            if missing:
                raise ValueError(
                    "detailed schedules require time and content (missing: "
                    + ", ".join(missing)
                    + ")"
                )
        elif self.time is not None or self.content is not None:
            raise ValueError("todo schedules cannot carry time or content")
        return self


# PUBLIC_INTERFACE
class ScheduleUpdate(BaseModel):
    """
    Payload for updating an existing schedule.
    All fields are optional; only provided fields are applied.
    """

    title: Optional[str] = Field(default=None, description="New title")
    time: Optional[datetime] = Field(default=None, description="New time, 'YYYY-MM-DD HH:mm' read as UTC")
    content: Optional[str] = Field(default=None, description="New content")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> Optional[str]:
        return _clean_title(v)

    @field_validator("time", mode="before")
    @classmethod
    def parse_time(cls, v: Optional[TimeInput]) -> Optional[datetime]:
        return _parse_time(v)

    @field_validator("content")
    @classmethod
    def drop_empty_content(cls, v: Optional[str]) -> Optional[str]:
        return v if v else None

    @property
    def is_empty(self) -> bool:
        return self.title is None and self.time is None and self.content is None


# PUBLIC_INTERFACE
def to_validation_error(exc: PydanticValidationError) -> ValidationError:
    """Flatten a pydantic error into the core ValidationError with a readable message."""
    first = exc.errors()[0] if exc.errors() else {}
    loc = first.get("loc") or ()
    field = str(loc[0]) if loc else None
    message = str(first.get("msg", exc))
    # pydantic prefixes messages raised from validators with "Value error, "
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    return ValidationError(message, field=field)


# PUBLIC_INTERFACE
def build_create(**data) -> ScheduleCreate:
    """Validate a create payload, raising the core ValidationError on failure."""
    try:
        return ScheduleCreate(**data)
    except PydanticValidationError as e:
        raise to_validation_error(e) from e


# PUBLIC_INTERFACE
def build_update(**data) -> ScheduleUpdate:
    """Validate an update payload, raising the core ValidationError on failure."""
    try:
        return ScheduleUpdate(**data)
    except PydanticValidationError as e:
        raise to_validation_error(e) from e
