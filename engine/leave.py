"""Leave balances from formal requests and manually punched leave days."""
import logging
from collections import OrderedDict
from datetime import date
from typing import Dict, Iterable, List, Optional

from config import LEAVE_ENTITLEMENTS, OFF_DAY_NOTE
from models.schema import (LeaveBalance, LeaveDay, LeaveRecord, LeaveRequest,
                           LeaveStatistic, TimeRecord)
from utils.convert import days_between

LEAVE_ABBREVIATIONS = {
    "sick-leave": "SL",
    "annual-leave": "AL",
    "marriage-leave": "ML",
    "bereavement-leave": "BL",
    "maternity-leave": "MT",
    "paternity-leave": "PT",
}


def match_leave_type(notes: Optional[str]) -> Optional[str]:
    if not notes:
        return None
    for leave_type in LEAVE_ENTITLEMENTS:
        if leave_type in notes:
            return leave_type
    return None


def requests_to_records(requests: Iterable[LeaveRequest]) -> List[LeaveRecord]:
    records = []
    for request in requests:
        if request.status != "approved":
            continue
        if request.end_date < request.start_date:
            logging.warning(
                f"Leave request {request.id} for employee_id: {request.employee_id} "
                f"ends before it starts, skipped"
            )
            continue
        records.append(LeaveRecord(
            id=request.id,
            employee_id=request.employee_id,
            leave_type=request.leave_type,
            start_date=request.start_date,
            end_date=request.end_date,
            status="approved",
            source="leave_requests",
            reason=request.reason,
        ))
    return records


def manual_entries_to_records(time_records: Iterable[TimeRecord]) -> List[LeaveRecord]:
    records = []
    for record in time_records:
        if record.status != "off_day" or not record.approved:
            continue
        if not record.notes or record.notes == OFF_DAY_NOTE:
            continue
        leave_type = match_leave_type(record.notes)
        if leave_type is None:
            continue
        day = record.canonical_date
        if day is None:
            logging.warning(f"Manual leave entry {record.id} has no date, skipped")
            continue
        records.append(LeaveRecord(
            id=record.id,
            employee_id=record.employee_id,
            leave_type=leave_type,
            start_date=day,
            end_date=day,
            status="approved",
            source="time_records",
            reason=record.notes,
        ))
    return records


def drop_covered_entries(records: List[LeaveRecord]) -> List[LeaveRecord]:
    """Drop manual entries for a day an approved request of the same type already covers."""
    covered = set()
    for record in records:
        if record.source == "leave_requests":
            for day in days_between(record.start_date, record.end_date):
                covered.add((record.employee_id, record.leave_type, day))
    kept = []
    for record in records:
        key = (record.employee_id, record.leave_type, record.start_date)
        if record.source == "time_records" and key in covered:
            logging.info(f"Manual {record.leave_type} on {record.start_date} already requested "
                         f"by employee_id: {record.employee_id}")
            continue
        kept.append(record)
    return kept


def merge_leave_sources(requests: Iterable[LeaveRequest], time_records: Iterable[TimeRecord],
                        dedupe: bool = False) -> List[LeaveRecord]:
    merged = requests_to_records(requests) + manual_entries_to_records(time_records)
    if dedupe:
        merged = drop_covered_entries(merged)
    return merged


def in_year(record: LeaveRecord, year: int) -> bool:
    return date(year, 1, 1) <= record.start_date <= date(year, 12, 31)


def leave_balances(records: Iterable[LeaveRecord]) -> List[LeaveBalance]:
    used: Dict[str, int] = OrderedDict((leave_type, 0) for leave_type in LEAVE_ENTITLEMENTS)
    for record in records:
        if record.status != "approved":
            continue
        if record.leave_type not in LEAVE_ENTITLEMENTS:
            logging.debug(f"Leave type {record.leave_type} has no entitlement, skipped")
            continue
        used[record.leave_type] += record.duration_days

    balances = []
    for leave_type, entitled in LEAVE_ENTITLEMENTS.items():
        balances.append(LeaveBalance(
            type=leave_type,
            entitled_days=entitled,
            used_days=used[leave_type],
            remaining_days=entitled - used[leave_type] if entitled is not None else None,
        ))
    return balances


def leave_statistics(records: Iterable[LeaveRecord]) -> List[LeaveStatistic]:
    stats: Dict[str, tuple] = OrderedDict()
    for record in records:
        if record.status != "approved":
            continue
        count, total = stats.get(record.leave_type, (0, 0))
        stats[record.leave_type] = (count + 1, total + record.duration_days)
    return [
        LeaveStatistic(leave_type=leave_type, label=format_leave_type(leave_type),
                       count=count, total_days=total)
        for leave_type, (count, total) in stats.items()
    ]


def _leave_day(day: date, leave_type: str) -> LeaveDay:
    return LeaveDay(date=day, leave_type=leave_type, abbreviation=leave_type_abbreviation(leave_type))


def leave_calendar_days(records: Iterable[LeaveRecord], year: int, month: int) -> List[LeaveDay]:
    """One entry per leave date in the month; requested days take precedence over manual ones."""
    records = [r for r in records if r.status == "approved"]
    days: List[LeaveDay] = []
    for record in records:
        if record.source != "leave_requests":
            continue
        for day in days_between(record.start_date, record.end_date):
            if day.year == year and day.month == month:
                days.append(_leave_day(day, record.leave_type))

    seen = {day.date for day in days}
    for record in records:
        if record.source != "time_records":
            continue
        day = record.start_date
        if day.year == year and day.month == month and day not in seen:
            days.append(_leave_day(day, record.leave_type))
            seen.add(day)
    return days


def format_leave_type(leave_type: Optional[str]) -> str:
    if not leave_type or leave_type == OFF_DAY_NOTE:
        return OFF_DAY_NOTE
    return " ".join(word[:1].upper() + word[1:] for word in leave_type.split("-"))


def leave_type_abbreviation(leave_type: str) -> str:
    return LEAVE_ABBREVIATIONS.get(leave_type, leave_type[:2].upper())
