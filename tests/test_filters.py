from datetime import timedelta

import pytest

from jcal.errors import ValidationError
from jcal.filters import ListQuery, StatusFilter, filter_schedules, status_filter
from jcal.models import ScheduleStatus
from jcal.windows import DateFilter, DateSelector

from conftest import NOW, make_detailed, make_todo, utc

DONE = ScheduleStatus.DONE


def ids(records):
    return [r.id for r in records]


class TestStatusFilter:
    def test_defaults_to_pending(self):
        assert status_filter() is StatusFilter.PENDING

    def test_all(self):
        assert status_filter(all_=True) is StatusFilter.ALL

    def test_done_wins_over_all(self):
        assert status_filter(done=True, all_=True) is StatusFilter.DONE


class TestFilterSchedules:
    def seed(self):
        return [
            make_todo(id="p1", created_at=NOW - timedelta(days=3)),
            make_todo(id="d1", created_at=NOW - timedelta(days=2), status=DONE),
            make_detailed(id="p2", created_at=NOW - timedelta(days=1), date_time=utc(2024, 6, 12, 9)),
            make_detailed(id="d2", created_at=NOW, date_time=utc(2024, 7, 2, 9), status=DONE),
        ]

    def test_default_lists_pending_newest_first(self):
        assert ids(filter_schedules(self.seed())) == ["p2", "p1"]

    def test_done_only(self):
        q = ListQuery(status=StatusFilter.DONE)
        assert ids(filter_schedules(self.seed(), q)) == ["d2", "d1"]

    def test_all(self):
        q = ListQuery(status=StatusFilter.ALL)
        assert ids(filter_schedules(self.seed(), q)) == ["d2", "p2", "d1", "p1"]

    def test_date_filter_excludes_todos(self):
        q = ListQuery(status=StatusFilter.ALL, date_filter=DateFilter(DateSelector.THIS_MONTH))
        assert ids(filter_schedules(self.seed(), q, now=NOW)) == ["p2"]

    def test_status_and_date_filters_combine(self):
        q = ListQuery(status=StatusFilter.DONE, date_filter=DateFilter(DateSelector.NEXT_MONTH))
        assert ids(filter_schedules(self.seed(), q, now=NOW)) == ["d2"]
        q = ListQuery(status=StatusFilter.PENDING, date_filter=DateFilter(DateSelector.NEXT_MONTH))
        assert filter_schedules(self.seed(), q, now=NOW) == []

    def test_this_week_mixed_collection(self):
        records = [
            make_detailed(id="sun-before", date_time=utc(2024, 6, 9, 23)),
            make_detailed(id="sun-after", date_time=utc(2024, 6, 16, 23)),
            make_detailed(id="next-mon", date_time=utc(2024, 6, 17, 0)),
        ]
        q = ListQuery(date_filter=DateFilter(DateSelector.THIS_WEEK))
        assert ids(filter_schedules(records, q, now=NOW)) == ["sun-after"]

    def test_this_month_mixed_collection(self):
        records = [
            make_detailed(id="first", date_time=utc(2024, 6, 1, 0, 0, 0)),
            make_detailed(id="last", date_time=utc(2024, 6, 30, 23, 59, 59)),
            make_detailed(id="july", date_time=utc(2024, 7, 1, 0, 0, 0)),
        ]
        q = ListQuery(date_filter=DateFilter(DateSelector.THIS_MONTH))
        assert sorted(ids(filter_schedules(records, q, now=NOW))) == ["first", "last"]

    def test_ties_keep_storage_order(self):
        records = [make_todo(id=f"t{i}", created_at=NOW) for i in range(5)]
        records.append(make_todo(id="newest", created_at=NOW + timedelta(seconds=1)))
        assert ids(filter_schedules(records)) == ["newest", "t0", "t1", "t2", "t3", "t4"]

    def test_empty_result_is_not_an_error(self):
        q = ListQuery(date_filter=DateFilter(DateSelector.TODAY))
        assert filter_schedules([make_todo()], q, now=NOW) == []
        assert filter_schedules([]) == []

    def test_invalid_explicit_date(self):
        q = ListQuery(date_filter=DateFilter(DateSelector.DATE, "June 12"))
        with pytest.raises(ValidationError):
            filter_schedules(self.seed(), q, now=NOW)

    def test_input_is_not_mutated(self):
        records = self.seed()
        before = list(records)
        filter_schedules(records, ListQuery(status=StatusFilter.ALL))
        assert records == before
