from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, List, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    field_serializer,
    field_validator,
    model_validator,
)

from .utils import to_iso, to_utc


class ScheduleStatus(str, Enum):
    PENDING = "pending"
    DONE = "done"


class ScheduleKind(str, Enum):
    TODO = "todo"
    DETAILED = "detailed"


class _ScheduleBase(BaseModel):
    """
    Fields shared by every schedule record.

    Records are immutable; the repository replaces a record with an updated
    copy instead of mutating it in place. JSON keys use the camelCase names
    of the persisted document (createdAt, dateTime, type).
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = Field(..., min_length=1, description="Short opaque identifier, unique in the collection")
    title: str = Field(..., min_length=1, description="Short title for the schedule")
    status: ScheduleStatus = Field(default=ScheduleStatus.PENDING, description="pending or done")
    created_at: datetime = Field(..., alias="createdAt", description="Creation instant (UTC)")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        s = v.strip()
        if not s:
            raise ValueError("title must not be blank")
        return s

    @field_validator("kind", check_fields=False)
    @classmethod
    def check_kind(cls, v: ScheduleKind) -> ScheduleKind:
        # each record class accepts only its own kind
        expected = cls.model_fields["kind"].default
        if v != expected:
            raise ValueError(f"type must be {expected.value!r}")
        return v

    @field_validator("created_at")
    @classmethod
    def normalize_created_at(cls, v: datetime) -> datetime:
        return to_utc(v)

    @field_serializer("created_at")
    def serialize_created_at(self, v: datetime) -> str:
        return to_iso(v)

    @property
    def is_done(self) -> bool:
        return self.status == ScheduleStatus.DONE


# PUBLIC_INTERFACE
class TodoRecord(_ScheduleBase):
    """A plain to-do. Never carries dateTime or content."""

    kind: ScheduleKind = Field(default=ScheduleKind.TODO, alias="type")


# PUBLIC_INTERFACE
class DetailedRecord(_ScheduleBase):
    """A time-bound event with an instant (UTC) and free-text content."""

    kind: ScheduleKind = Field(default=ScheduleKind.DETAILED, alias="type")
    date_time: datetime = Field(..., alias="dateTime", description="Event instant (UTC)")
    content: str = Field(..., description="Free-text content")

    @field_validator("date_time")
    @classmethod
    def normalize_date_time(cls, v: datetime) -> datetime:
        return to_utc(v)

    @field_serializer("date_time")
    def serialize_date_time(self, v: datetime) -> str:
        return to_iso(v)


def _record_kind(value: Any) -> Optional[str]:
    # Documents use the "type" key; records built in code may pass "kind" or be instances
    if isinstance(value, dict):
        kind = value.get("type", value.get("kind"))
    else:
        kind = getattr(value, "kind", None)
    return kind.value if isinstance(kind, ScheduleKind) else kind


ScheduleRecord = Annotated[
    Union[
        Annotated[TodoRecord, Tag(ScheduleKind.TODO.value)],
        Annotated[DetailedRecord, Tag(ScheduleKind.DETAILED.value)],
    ],
    Discriminator(_record_kind),
]


# PUBLIC_INTERFACE
class ScheduleDocument(BaseModel):
    """
    The whole persisted collection: `{"schedules": [...]}` in insertion order.
    """

    schedules: List[ScheduleRecord] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_unique_ids(self) -> "ScheduleDocument":
        seen = set()
        for record in self.schedules:
            if record.id in seen:
                raise ValueError(f"duplicate schedule id {record.id!r}")
            seen.add(record.id)
        return self
