from datetime import date, datetime, timedelta, timezone

import pytest

from engine.grouping import check_contract, group_by_employee, group_days
from models.errors import RecordContractError
from models.schema import TimeRecord

DAY = date(2024, 6, 10)


def at(day, hour, minute=0):
    return datetime(day.year, day.month, day.day, hour, minute, tzinfo=timezone.utc)


def record(status, timestamp=None, employee_id="E1", **fields):
    return TimeRecord(employee_id=employee_id, status=status, timestamp=timestamp, approved=True, **fields)


def test_working_week_start_is_the_date_key():
    r = record("check_in", at(DAY + timedelta(days=1), 1), working_week_start=DAY)
    assert r.canonical_date == DAY


def test_utc_date_used_without_working_week_start():
    local = datetime(2024, 6, 10, 23, 30, tzinfo=timezone(timedelta(hours=-3)))
    assert record("check_in", local).canonical_date == date(2024, 6, 11)


def test_naive_timestamp_read_as_utc():
    r = record("check_in", datetime(2024, 6, 10, 23, 30))
    assert r.timestamp.tzinfo == timezone.utc
    assert r.canonical_date == DAY


def test_missing_shift_type_is_unknown():
    assert record("check_in", at(DAY, 9)).shift_type == "unknown"
    assert record("check_in", at(DAY, 9), shift_type="Custom").shift_type == "unknown"
    assert record("check_in", at(DAY, 9), shift_type=" Night ").shift_type == "night"


def test_earliest_check_in_and_latest_check_out_win():
    records = [
        record("check_in", at(DAY, 5, 10), shift_type="morning"),
        record("check_out", at(DAY, 13), shift_type="morning"),
        record("check_in", at(DAY, 5), shift_type="morning"),
        record("check_out", at(DAY, 14, 5), shift_type="morning"),
    ]
    [day] = group_days("E1", records)
    [shift] = day.shifts
    assert shift.check_in.timestamp == at(DAY, 5)
    assert shift.check_out.timestamp == at(DAY, 14, 5)


def test_shift_types_form_separate_groups():
    records = [
        record("check_in", at(DAY, 13), shift_type="evening"),
        record("check_out", at(DAY, 22), shift_type="evening"),
        record("check_in", at(DAY, 5), shift_type="morning"),
        record("check_out", at(DAY, 9), shift_type="morning"),
    ]
    [day] = group_days("E1", records)
    assert [s.shift_type for s in day.shifts] == ["morning", "evening"]


def test_off_day_claims_the_whole_date():
    records = [
        record("check_in", at(DAY, 5), shift_type="morning"),
        record("check_out", at(DAY, 14), shift_type="morning"),
        record("off_day", at(DAY, 0), notes="OFF-DAY"),
    ]
    [day] = group_days("E1", records)
    assert day.off_day is True
    assert day.leave_type is None
    assert day.is_leave is False
    assert day.shifts == []


def test_off_day_with_leave_notes_is_a_leave_day():
    records = [
        record("off_day", at(DAY, 0), notes="OFF-DAY"),
        record("off_day", at(DAY, 0), notes="sick-leave"),
    ]
    [day] = group_days("E1", records)
    assert day.is_leave is True
    assert day.leave_type == "sick-leave"


def test_off_day_without_notes_is_plain():
    [day] = group_days("E1", [record("off_day", at(DAY, 0))])
    assert day.off_day is True
    assert day.is_leave is False


def test_days_sorted_by_date():
    records = [
        record("check_in", at(DAY + timedelta(days=2), 9)),
        record("check_in", at(DAY, 9)),
    ]
    assert [d.date for d in group_days("E1", records)] == [DAY, DAY + timedelta(days=2)]


def test_group_by_employee_keeps_first_seen_order():
    records = [
        record("check_in", at(DAY, 9), employee_id="B"),
        record("check_in", at(DAY, 9), employee_id="A"),
        record("check_out", at(DAY, 17), employee_id="B"),
    ]
    grouped = group_by_employee(records)
    assert list(grouped) == ["B", "A"]
    assert len(grouped["B"]) == 2


def test_record_without_employee_rejects_batch():
    with pytest.raises(RecordContractError):
        check_contract([record("check_in", at(DAY, 9)), record("check_in", at(DAY, 9), employee_id="")])


def test_record_without_any_date_rejects_batch():
    with pytest.raises(RecordContractError):
        check_contract([record("off_day", notes="OFF-DAY")])


def test_timestamped_punches_preferred_over_dateless_ones():
    records = [
        record("check_in", working_week_start=DAY),
        record("check_in", at(DAY, 9)),
        record("check_out", at(DAY, 17)),
        record("check_out", working_week_start=DAY),
    ]
    [day] = group_days("E1", records)
    [shift] = day.shifts
    assert shift.check_in.timestamp == at(DAY, 9)
    assert shift.check_out.timestamp == at(DAY, 17)


def test_dateless_punch_kept_when_it_is_the_only_one():
    [day] = group_days("E1", [record("check_in", working_week_start=DAY, exact_hours=7)])
    assert day.shifts[0].check_in.exact_hours == 7


def test_canonical_date_fixed_at_ingestion():
    r = record("check_in", at(DAY, 9))
    r.timestamp = at(DAY + timedelta(days=3), 9)
    assert r.canonical_date == DAY
    assert TimeRecord.model_validate(r.model_dump()).canonical_date == DAY + timedelta(days=3)
