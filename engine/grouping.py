import logging
from collections import OrderedDict
from datetime import date, datetime, timezone
from typing import Dict, Iterable, List

from config import OFF_DAY_NOTE
from models.errors import RecordContractError
from models.schema import DayGroup, DayShiftGroup, TimeRecord

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def check_contract(records: Iterable[TimeRecord]) -> List[TimeRecord]:
    """Reject the whole batch if any record cannot be attributed to an employee and a date."""
    checked = []
    for record in records:
        if not record.employee_id:
            raise RecordContractError("Time record without employee_id", record.id)
        if record.canonical_date is None:
            raise RecordContractError(
                f"Time record for employee {record.employee_id} has neither timestamp nor working_week_start",
                record.id,
            )
        checked.append(record)
    return checked


def group_by_employee(records: Iterable[TimeRecord]) -> Dict[str, List[TimeRecord]]:
    grouped: Dict[str, List[TimeRecord]] = OrderedDict()
    for record in records:
        grouped.setdefault(record.employee_id, []).append(record)
    return grouped


def leave_type_of(records: Iterable[TimeRecord]):
    """Notes of the first off_day record that is not a routine day off."""
    for record in records:
        if record.status == "off_day" and record.notes and record.notes != OFF_DAY_NOTE:
            return record.notes
    return None


def _punch_time(record: TimeRecord) -> datetime:
    return record.timestamp if record.timestamp is not None else _EPOCH


def _timed_first(records: List[TimeRecord]) -> List[TimeRecord]:
    """Punches that carry a timestamp, or all of them when none does."""
    timed = [r for r in records if r.timestamp is not None]
    return timed or records


def _build_shift_group(employee_id: str, day: date, shift_type: str,
                       records: List[TimeRecord]) -> DayShiftGroup:
    check_ins = [r for r in records if r.status == "check_in"]
    check_outs = [r for r in records if r.status == "check_out"]
    return DayShiftGroup(
        employee_id=employee_id,
        date=day,
        shift_type=shift_type,
        check_in=min(_timed_first(check_ins), key=_punch_time) if check_ins else None,
        check_out=max(_timed_first(check_outs), key=_punch_time) if check_outs else None,
    )


def _first_punch(group: DayShiftGroup) -> datetime:
    punches = [r.timestamp for r in (group.check_in, group.check_out) if r and r.timestamp]
    return min(punches) if punches else _EPOCH


def group_days(employee_id: str, records: Iterable[TimeRecord]) -> List[DayGroup]:
    """Bucket one employee's records by canonical date, then by shift type.

    Any off_day record claims its whole date; punches on that date are ignored.
    """
    by_date: Dict[date, List[TimeRecord]] = {}
    for record in records:
        by_date.setdefault(record.canonical_date, []).append(record)

    days = []
    for day in sorted(by_date):
        day_records = by_date[day]
        if any(r.status == "off_day" for r in day_records):
            if any(r.status != "off_day" for r in day_records):
                logging.debug(f"Punches on off day {day} ignored for employee_id: {employee_id}")
            days.append(DayGroup(
                employee_id=employee_id,
                date=day,
                off_day=True,
                leave_type=leave_type_of(day_records),
            ))
            continue

        by_shift: Dict[str, List[TimeRecord]] = OrderedDict()
        for record in day_records:
            by_shift.setdefault(record.shift_type or "unknown", []).append(record)
        shifts = [
            _build_shift_group(employee_id, day, shift_type, shift_records)
            for shift_type, shift_records in by_shift.items()
        ]
        shifts.sort(key=_first_punch)
        days.append(DayGroup(employee_id=employee_id, date=day, shifts=shifts))
    return days
