from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Iterable, List, Optional

from .models import DetailedRecord, ScheduleRecord, ScheduleStatus
from .utils import utc_now
from .windows import DateFilter, DateWindow, resolve_window


class StatusFilter(Enum):
    PENDING = "pending"
    DONE = "done"
    ALL = "all"


# PUBLIC_INTERFACE
def status_filter(done: bool = False, all_: bool = False) -> StatusFilter:
    """Map the --done/--all flags to a StatusFilter. --done wins over --all."""
    if done:
        return StatusFilter.DONE
    if not all_:
        return StatusFilter.PENDING
    return StatusFilter.ALL


@dataclass(frozen=True)
class ListQuery:
    """
    Query parameters for listing schedules.
    """
    status: StatusFilter = StatusFilter.PENDING
    date_filter: Optional[DateFilter] = None


def _matches_status(record: ScheduleRecord, status: StatusFilter) -> bool:
    if status is StatusFilter.DONE:
        return record.status == ScheduleStatus.DONE
    if status is StatusFilter.PENDING:
        return record.status == ScheduleStatus.PENDING
    return True


def _matches_window(record: ScheduleRecord, window: DateWindow) -> bool:
    # Only detailed records carry a dateTime; todos never match a date filter
    if not isinstance(record, DetailedRecord):
        return False
    return window.contains(record.date_time)


# PUBLIC_INTERFACE
def filter_schedules(
    records: Iterable[ScheduleRecord],
    query: Optional[ListQuery] = None,
    now: Optional[datetime] = None,
) -> List[ScheduleRecord]:
    """
    Produce the ordered view for listing.

    1. status filter (pending by default)
    2. date window, when query.date_filter is set (resolved against `now`,
       the current UTC time by default)
    3. newest first by created_at; equal timestamps keep storage order

    Raises ValidationError if the date filter carries an invalid date.
    """
    q = query or ListQuery()
    items = [r for r in records if _matches_status(r, q.status)]

    if q.date_filter is not None:
        window = resolve_window(q.date_filter, now or utc_now())
        items = [r for r in items if _matches_window(r, window)]

    # sorted() is stable, and stays stable with reverse=True
    return sorted(items, key=lambda r: r.created_at, reverse=True)
