from datetime import datetime, timezone

import pytest

from jcal.models import DetailedRecord, ScheduleStatus, TodoRecord

# Monday
NOW = datetime(2024, 6, 10, 12, 0, tzinfo=timezone.utc)


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def make_todo(id="t1", title="Todo", created_at=None, status=ScheduleStatus.PENDING):
    return TodoRecord(id=id, title=title, created_at=created_at or NOW, status=status)


def make_detailed(
    id="d1",
    title="Event",
    date_time=None,
    content="Details",
    created_at=None,
    status=ScheduleStatus.PENDING,
):
    return DetailedRecord(
        id=id,
        title=title,
        created_at=created_at or NOW,
        date_time=date_time or NOW,
        content=content,
        status=status,
    )


@pytest.fixture
def now():
    return NOW


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    # Keep settings independent of the developer's shell and working directory
    for name in ("JCAL_FILE", "JCAL_LOG_LEVEL", "JCAL_COLOR", "NO_COLOR"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
