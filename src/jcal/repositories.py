from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Iterable, List, Mapping, Optional, Tuple, Union

from .errors import NotFoundError, UnsupportedFieldError, ValidationError
from .models import DetailedRecord, ScheduleDocument, ScheduleKind, ScheduleRecord, ScheduleStatus, TodoRecord
from .schemas import ScheduleUpdate, build_create, build_update
from .utils import new_schedule_id, utc_now

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SkippedTitle:
    title: str
    error: ValidationError


@dataclass
class AddResult:
    """Outcome of a batch add: records added in order, plus titles that were skipped."""

    added: List[ScheduleRecord] = field(default_factory=list)
    skipped: List[SkippedTitle] = field(default_factory=list)


@dataclass
class UpdateResult:
    """
    Outcome of an update. Truthy when the schedule was found.

    `warnings` lists fields that were ignored because the record kind
    cannot carry them.
    """

    found: bool
    record: Optional[ScheduleRecord] = None
    warnings: List[UnsupportedFieldError] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.found


# PUBLIC_INTERFACE
class ScheduleRepository:
    """
    In-memory schedule collection built from a loaded ScheduleDocument.

    Storage order is insertion order. The repository never touches the
    filesystem: callers persist `to_document()` after each successful
    mutation. Records are immutable, so every mutation swaps in a validated
    copy and a failure leaves the collection as it was.
    """

    def __init__(
        self,
        document: Optional[ScheduleDocument] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._items: List[ScheduleRecord] = list(document.schedules) if document else []
        self._clock = clock

    def __len__(self) -> int:
        return len(self._items)

    @property
    def records(self) -> Tuple[ScheduleRecord, ...]:
        return tuple(self._items)

    def to_document(self) -> ScheduleDocument:
        return ScheduleDocument(schedules=list(self._items))

    def _index(self, schedule_id: str) -> Optional[int]:
        for i, record in enumerate(self._items):
            if record.id == schedule_id:
                return i
        return None

    def add(
        self,
        title: str,
        kind: ScheduleKind = ScheduleKind.TODO,
        date_time: Union[str, datetime, None] = None,
        content: Optional[str] = None,
    ) -> str:
        """
        Append a new pending schedule and return its id.

        Raises ValidationError when the title is blank or a detailed schedule
        lacks date_time or content.
        """
        data = build_create(title=title, kind=kind, time=date_time, content=content)
        schedule_id = new_schedule_id({r.id for r in self._items})
        created_at = self._clock()

        record: ScheduleRecord
        if data.kind == ScheduleKind.DETAILED:
            record = DetailedRecord(
                id=schedule_id,
                title=data.title,
                created_at=created_at,
                date_time=data.time,
                content=data.content,
            )
        else:
            record = TodoRecord(id=schedule_id, title=data.title, created_at=created_at)

        self._items.append(record)
        logger.info("Added %s schedule %s (%r)", record.kind.value, record.id, record.title)
        return schedule_id

    def add_many(
        self,
        titles: Iterable[str],
        kind: ScheduleKind = ScheduleKind.TODO,
        time: Union[str, datetime, None] = None,
        content: Optional[str] = None,
    ) -> AddResult:
        """
        Add one schedule per title with shared kind/time/content.

        A title that fails validation is skipped and reported; the rest of the
        batch still goes in.
        """
        result = AddResult()
        for title in titles:
            try:
                schedule_id = self.add(title, kind=kind, date_time=time, content=content)
            except ValidationError as e:
                logger.info("Skipping %r: %s", title, e)
                result.skipped.append(SkippedTitle(title=title, error=e))
                continue
            result.added.append(self.get(schedule_id))
        return result

    def find_by_id(self, schedule_id: str) -> Optional[ScheduleRecord]:
        idx = self._index(schedule_id)
        return None if idx is None else self._items[idx]

    def get(self, schedule_id: str) -> ScheduleRecord:
        """Like find_by_id, but raises NotFoundError for an unknown id."""
        record = self.find_by_id(schedule_id)
        if record is None:
            raise NotFoundError(schedule_id)
        return record

    def set_status(self, schedule_id: str, status: ScheduleStatus = ScheduleStatus.DONE) -> bool:
        """
        Move a schedule to `status`. Returns False if the id is unknown.

        Status only moves forward: marking a done schedule done again is a
        no-op, and a done schedule cannot return to pending.
        """
        idx = self._index(schedule_id)
        if idx is None:
            return False
        record = self._items[idx]
        if record.status == status:
            return True
        if record.status == ScheduleStatus.DONE:
            raise ValidationError("a done schedule cannot return to pending", field="status")
        self._items[idx] = record.model_copy(update={"status": status})
        logger.info("Schedule %s is now %s", schedule_id, status.value)
        return True

    def remove(self, schedule_id: str) -> bool:
        idx = self._index(schedule_id)
        if idx is None:
            return False
        removed = self._items.pop(idx)
        logger.info("Removed schedule %s (%r)", removed.id, removed.title)
        return True

    def update(
        self,
        schedule_id: str,
        changes: Union[ScheduleUpdate, Mapping[str, Any]],
    ) -> UpdateResult:
        """
        Apply the provided fields of `changes` to a schedule.

        time/content on a todo are not applied; each one is reported as an
        UnsupportedFieldError in the result's warnings instead of raising.
        Raises ValidationError for invalid field values, before anything changes.
        """
        idx = self._index(schedule_id)
        if idx is None:
            return UpdateResult(found=False)
        record = self._items[idx]

        if not isinstance(changes, ScheduleUpdate):
            changes = build_update(**dict(changes))

        values: dict = {}
        warnings: List[UnsupportedFieldError] = []
        if changes.title is not None:
            values["title"] = changes.title
        for name, attr, value in (("time", "date_time", changes.time), ("content", "content", changes.content)):
            if value is None:
                continue
            if isinstance(record, DetailedRecord):
                values[attr] = value
            else:
                warning = UnsupportedFieldError(name, record.kind.value)
                logger.info("Schedule %s: %s", schedule_id, warning)
                warnings.append(warning)

        if values:
            record = record.model_copy(update=values)
            self._items[idx] = record
            logger.info("Updated schedule %s (%s)", schedule_id, ", ".join(sorted(values)))
        return UpdateResult(found=True, record=record, warnings=warnings)
