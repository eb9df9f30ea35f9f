"""
jcal: a personal schedule and to-do manager.

The schedule core (models, repository, date windows and filtering) is pure
logic; `jcal.store` and `jcal.cli` are the file and terminal layers around it.
"""

__version__ = "0.1.0"

from .errors import NotFoundError, ScheduleError, StoreError, UnsupportedFieldError, ValidationError  # noqa: E402,F401
from .filters import ListQuery, StatusFilter, filter_schedules, status_filter  # noqa: E402,F401
from .models import (  # noqa: E402,F401
    DetailedRecord,
    ScheduleDocument,
    ScheduleKind,
    ScheduleRecord,
    ScheduleStatus,
    TodoRecord,
)
from .repositories import ScheduleRepository  # noqa: E402,F401
from .windows import DateFilter, DateSelector, resolve_window, select_date_filter  # noqa: E402,F401
