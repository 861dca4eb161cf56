import pytest

from focusapp.errors import NoRowsToday, StoreUpdateError, SubjectRowNotFound
from focusapp.schemas import AccumulateRequest, DayWindow, FocusRow
from focusapp.services.focus import available_subjects, locate_row, normalize_subject, record_focus

from conftest import FakeStore

DAY = DayWindow(today="2024-03-01", tomorrow="2024-03-02")


def req(subject, minutes):
    return AccumulateRequest(subject=subject, minutes=minutes)


def test_adds_whole_minutes_to_existing_row():
    store = FakeStore()
    store.add("p1", "2024-03-01", "Math", 30)
    res = record_focus(store, req("Math", 25), DAY)
    assert res.saved_minutes == 25
    assert res.new_focus == 55
    assert store.updates == [("p1", {"focus": 55})]


@pytest.mark.parametrize("minutes, saved", [(7.9, 7), (0.999, 0)])
def test_fractional_minutes_are_truncated_before_adding(minutes, saved):
    store = FakeStore()
    store.add("p1", "2024-03-01", "Math", 10)
    res = record_focus(store, req("Math", minutes), DAY)
    assert res.saved_minutes == saved
    assert res.new_focus == 10 + saved


def test_accumulation_is_not_idempotent():
    store = FakeStore()
    store.add("p1", "2024-03-01", "Math", 0)
    record_focus(store, req("Math", 15), DAY)
    second = record_focus(store, req("Math", 15), DAY)
    assert second.new_focus == 30
    assert store.get("p1")["focus"] == 30


@pytest.mark.parametrize("corrupt", [None, "lots", float("nan")])
def test_corrupt_counter_counts_as_zero(corrupt):
    store = FakeStore()
    store.add("p1", "2024-03-01", "Math", corrupt)
    assert record_focus(store, req("Math", 20), DAY).new_focus == 20


def test_no_rows_for_the_day():
    store = FakeStore()
    store.add("old", "2024-02-29", "Math", 5)
    with pytest.raises(NoRowsToday):
        record_focus(store, req("Math", 5), DAY)
    assert store.updates == []


def test_missing_subject_lists_what_exists_today():
    store = FakeStore()
    store.add("p1", "2024-03-01", "Math", 0)
    store.add("p2", "2024-03-01", "English", 0)
    store.add("p3", "2024-02-29", "Biology", 0)
    with pytest.raises(SubjectRowNotFound) as ei:
        record_focus(store, req("Biology", 5), DAY)
    assert ei.value.available_subjects == ["Math", "English"]
    assert ei.value.to_payload()["available_subjects"] == ["Math", "English"]
    assert store.updates == []


def test_datetime_encoded_day_inside_window_matches():
    store = FakeStore()
    store.add("p1", "2024-03-01T00:00:00.000+09:00", "Math", 1)
    assert record_focus(store, req("Math", 1), DAY).new_focus == 2


def test_first_match_wins_on_duplicates():
    store = FakeStore()
    store.add("first", "2024-03-01", "Math", 100)
    store.add("second", "2024-03-01", "Math", 0)
    res = record_focus(store, req("Math", 5), DAY)
    assert res.new_focus == 105
    assert store.get("second")["focus"] == 0


def test_subject_match_is_trimmed_but_case_sensitive():
    store = FakeStore()
    store.add("p1", "2024-03-01", " Math ", 0)
    assert record_focus(store, req("Math  ", 3), DAY).new_focus == 3
    with pytest.raises(SubjectRowNotFound):
        record_focus(store, req("math", 3), DAY)


@pytest.mark.parametrize("strategy", ["client", "server"])
def test_strategies_agree(strategy):
    store = FakeStore()
    store.add("p1", "2024-03-01", "Math", 4)
    store.add("p2", "2024-03-01", "English", 0)
    assert record_focus(store, req("Math", 6), DAY, strategy=strategy).new_focus == 10

    with pytest.raises(SubjectRowNotFound) as ei:
        record_focus(store, req("Biology", 1), DAY, strategy=strategy)
    assert ei.value.available_subjects == ["Math", "English"]

    with pytest.raises(NoRowsToday):
        record_focus(store, req("Math", 1), DayWindow(today="2024-03-05", tomorrow="2024-03-06"), strategy=strategy)


def test_server_strategy_pushes_subject_into_query():
    store = FakeStore()
    store.add("p1", "2024-03-01", "Math", 0)
    record_focus(store, req("Math", 1), DAY, strategy="server", limit=10)
    assert store.queries == [(DAY, "Math", 10)]


def test_write_failure_propagates():
    class Broken(FakeStore):
        def update_fields(self, row_id, fields):
            raise StoreUpdateError(detail={"message": "conflict"}, status=409)

    store = Broken()
    store.add("p1", "2024-03-01", "Math", 0)
    with pytest.raises(StoreUpdateError) as ei:
        record_focus(store, req("Math", 1), DAY)
    assert ei.value.status == 409


def test_helpers():
    rows = [FocusRow(id="a", subject="Math"), FocusRow(id="b", subject=" Math"), FocusRow(id="c", subject=None)]
    assert normalize_subject("  Café ") == "Café"
    assert locate_row(rows, "Math").id == "a"
    assert locate_row(rows, "Physics") is None
    assert available_subjects(rows) == ["Math"]


@pytest.mark.parametrize("strategy", ["client", "server"])
def test_row_past_the_query_limit_is_still_found(strategy):
    store = FakeStore()
    store.add("a", "2024-03-01", "Art", 0)
    store.add("b", "2024-03-01", "Biology", 0)
    store.add("m", "2024-03-01", "Math", 8)
    res = record_focus(store, req("Math", 2), DAY, strategy=strategy, limit=2)
    assert res.new_focus == 10
    assert store.get("m")["focus"] == 10


@pytest.mark.parametrize("strategy", ["client", "server"])
def test_missing_subject_past_the_limit_reports_same_listing(strategy):
    store = FakeStore()
    store.add("a", "2024-03-01", "Art", 0)
    store.add("b", "2024-03-01", "Biology", 0)
    store.add("c", "2024-03-01", "Chemistry", 0)
    with pytest.raises(SubjectRowNotFound) as ei:
        record_focus(store, req("Math", 2), DAY, strategy=strategy, limit=2)
    assert ei.value.available_subjects == ["Art", "Biology"]
