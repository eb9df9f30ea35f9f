from datetime import timedelta

import pytest

from jcal.errors import NotFoundError, UnsupportedFieldError, ValidationError
from jcal.models import DetailedRecord, ScheduleDocument, ScheduleKind, ScheduleStatus, TodoRecord
from jcal.repositories import ScheduleRepository
from jcal.schemas import ScheduleUpdate

from conftest import NOW, make_detailed, make_todo, utc


def fixed_clock(start=NOW, step=timedelta(seconds=1)):
    """Clock that advances by `step` on every call."""
    state = {"now": start - step}

    def clock():
        state["now"] = state["now"] + step
        return state["now"]

    return clock


def make_repo(*records):
    return ScheduleRepository(ScheduleDocument(schedules=list(records)), clock=fixed_clock())


class TestAdd:
    def test_add_then_find(self):
        repo = make_repo()
        sid = repo.add("Buy milk")
        record = repo.find_by_id(sid)
        assert isinstance(record, TodoRecord)
        assert record.title == "Buy milk"
        assert record.kind == ScheduleKind.TODO
        assert record.status == ScheduleStatus.PENDING
        assert record.created_at == NOW
        assert len(sid) == 8

    def test_add_detailed(self):
        repo = make_repo()
        sid = repo.add("Dentist", ScheduleKind.DETAILED, "2024-06-12 09:30", "Bring card")
        record = repo.get(sid)
        assert isinstance(record, DetailedRecord)
        # wall-clock input is read as UTC
        assert record.date_time == utc(2024, 6, 12, 9, 30)
        assert record.content == "Bring card"

    def test_ids_are_unique(self):
        repo = make_repo()
        ids = [repo.add(f"Task {i}") for i in range(200)]
        assert len(set(ids)) == 200
        assert len(repo) == 200

    def test_storage_keeps_insertion_order(self):
        repo = make_repo(make_todo(id="old"))
        a = repo.add("A")
        b = repo.add("B")
        assert [r.id for r in repo.records] == ["old", a, b]

    def test_title_is_stripped(self):
        repo = make_repo()
        assert repo.get(repo.add("  Padded  ")).title == "Padded"

    @pytest.mark.parametrize(
        "time,content",
        [(None, "content"), ("2024-06-12 09:30", None), ("2024-06-12 09:30", ""), (None, None)],
    )
    def test_detailed_requires_time_and_content(self, time, content):
        repo = make_repo()
        with pytest.raises(ValidationError):
            repo.add("Event", ScheduleKind.DETAILED, time, content)
        assert len(repo) == 0

    def test_blank_title_rejected(self):
        repo = make_repo()
        with pytest.raises(ValidationError):
            repo.add("   ")
        assert len(repo) == 0

    def test_unparseable_time_rejected(self):
        repo = make_repo()
        with pytest.raises(ValidationError) as exc:
            repo.add("Event", ScheduleKind.DETAILED, "next tuesday-ish", "x")
        assert exc.value.field == "time"
        assert len(repo) == 0


class TestAddMany:
    def test_batch_adds_every_title(self):
        repo = make_repo()
        result = repo.add_many(["A", "B", "C"])
        assert [r.title for r in result.added] == ["A", "B", "C"]
        assert result.skipped == []
        assert len(repo) == 3

    def test_invalid_title_is_skipped_and_the_rest_added(self):
        repo = make_repo()
        result = repo.add_many(["Gym", "  ", "Read"])
        assert [r.title for r in result.added] == ["Gym", "Read"]
        assert [s.title for s in result.skipped] == ["  "]
        assert isinstance(result.skipped[0].error, ValidationError)
        assert len(repo) == 2

    def test_detailed_batch_without_content_skips_each_title(self):
        repo = make_repo(make_todo(id="keep"))
        result = repo.add_many(["Dentist", "Meeting"], ScheduleKind.DETAILED, time="2024-06-12 09:30")
        assert result.added == []
        assert [s.title for s in result.skipped] == ["Dentist", "Meeting"]
        assert "content" in str(result.skipped[0].error)
        assert [r.id for r in repo.records] == ["keep"]

    def test_detailed_batch_shares_time_and_content(self):
        repo = make_repo()
        result = repo.add_many(["A", "B"], ScheduleKind.DETAILED, time="2024-06-12 09:30", content="Room 4")
        assert {r.date_time for r in result.added} == {utc(2024, 6, 12, 9, 30)}
        assert {r.content for r in result.added} == {"Room 4"}


class TestStatus:
    def test_set_status_done_is_idempotent(self):
        repo = make_repo(make_todo(id="t1"))
        assert repo.set_status("t1") is True
        assert repo.set_status("t1") is True
        assert repo.get("t1").status == ScheduleStatus.DONE

    def test_unknown_id(self):
        repo = make_repo(make_todo(id="t1"))
        assert repo.set_status("nope") is False
        assert repo.get("t1").status == ScheduleStatus.PENDING

    def test_done_never_reverts(self):
        repo = make_repo(make_todo(id="t1", status=ScheduleStatus.DONE))
        with pytest.raises(ValidationError):
            repo.set_status("t1", ScheduleStatus.PENDING)
        assert repo.get("t1").status == ScheduleStatus.DONE

    def test_other_fields_untouched(self):
        original = make_detailed(id="d1")
        repo = make_repo(original)
        repo.set_status("d1")
        updated = repo.get("d1")
        assert updated.model_dump(exclude={"status"}) == original.model_dump(exclude={"status"})


class TestRemove:
    def test_remove(self):
        repo = make_repo(make_todo(id="a"), make_todo(id="b"))
        assert repo.remove("a") is True
        assert repo.find_by_id("a") is None
        assert [r.id for r in repo.records] == ["b"]

    def test_remove_unknown_leaves_collection_unchanged(self):
        repo = make_repo(make_todo(id="a"))
        assert repo.remove("zzz") is False
        assert len(repo) == 1

    def test_get_unknown_raises_not_found(self):
        with pytest.raises(NotFoundError) as exc:
            make_repo().get("zzz")
        assert exc.value.schedule_id == "zzz"


class TestUpdate:
    def test_update_title(self):
        repo = make_repo(make_todo(id="t1", title="Old"))
        result = repo.update("t1", ScheduleUpdate(title="New"))
        assert result
        assert result.warnings == []
        assert repo.get("t1").title == "New"

    def test_update_detailed_time_and_content(self):
        repo = make_repo(make_detailed(id="d1"))
        result = repo.update("d1", {"time": "2024-01-01 10:00", "content": "Moved"})
        assert result.record.date_time == utc(2024, 1, 1, 10, 0)
        assert repo.get("d1").content == "Moved"

    def test_todo_time_is_ignored_with_warning(self):
        repo = make_repo(make_todo(id="t1"))
        result = repo.update("t1", {"time": "2024-01-01 10:00"})
        assert result
        assert len(result.warnings) == 1
        warning = result.warnings[0]
        assert isinstance(warning, UnsupportedFieldError)
        assert warning.field == "time"
        record = repo.get("t1")
        assert isinstance(record, TodoRecord)
        assert not hasattr(record, "date_time")

    def test_todo_title_applies_even_when_content_is_ignored(self):
        repo = make_repo(make_todo(id="t1", title="Old"))
        result = repo.update("t1", {"title": "New", "content": "ignored"})
        assert [w.field for w in result.warnings] == ["content"]
        assert repo.get("t1").title == "New"

    def test_unknown_id_is_falsy(self):
        repo = make_repo(make_todo(id="t1"))
        result = repo.update("nope", {"title": "x"})
        assert not result
        assert result.found is False

    def test_unknown_id_wins_over_invalid_values(self):
        repo = make_repo(make_todo(id="t1"))
        assert not repo.update("nope", {"time": "not a time"})

    def test_invalid_values_leave_record_unchanged(self):
        original = make_detailed(id="d1")
        repo = make_repo(original)
        with pytest.raises(ValidationError):
            repo.update("d1", {"title": "New", "time": "not a time"})
        with pytest.raises(ValidationError):
            repo.update("d1", {"title": "   "})
        assert repo.get("d1") == original

    def test_created_at_and_kind_are_immutable(self):
        repo = make_repo(make_detailed(id="d1"))
        before = repo.get("d1")
        repo.update("d1", {"title": "x", "content": "y"})
        after = repo.get("d1")
        assert after.id == before.id
        assert after.kind == before.kind
        assert after.created_at == before.created_at


class TestDocument:
    def test_to_document_round_trips_records(self):
        repo = make_repo(make_todo(id="a"), make_detailed(id="b"))
        repo.add("C")
        doc = repo.to_document()
        assert [r.id for r in doc.schedules][:2] == ["a", "b"]
        assert len(doc.schedules) == 3

    def test_repository_does_not_share_the_document_list(self):
        doc = ScheduleDocument(schedules=[make_todo(id="a")])
        repo = ScheduleRepository(doc)
        repo.add("B")
        assert len(doc.schedules) == 1
