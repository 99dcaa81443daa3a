import logging
from datetime import date
from typing import AbstractSet, Iterable, List, Optional

from config import DEFAULT_RULES, PayrollRules
from engine.aggregate import period_totals, summarize_employee
from engine.double_time import evaluate
from engine.grouping import check_contract, group_by_employee, group_days
from engine.hours import resolve_shift
from engine.leave import (in_year, leave_balances, leave_calendar_days, leave_statistics,
                          merge_leave_sources)
from models.schema import (DayGroup, EmployeeLeave, HoursBreakdown, LeaveCalendar,
                           LeaveReport, LeaveRequest, ResolvedDay, TimeRecord)


def resolve_day(day: DayGroup, double_time_dates: AbstractSet[date],
                rules: PayrollRules = DEFAULT_RULES) -> ResolvedDay:
    if day.off_day:
        hours = rules.leave_day_hours if day.is_leave else 0.0
        is_double_time, bonus = evaluate(day.date, hours, double_time_dates, rules)
        return ResolvedDay(
            employee_id=day.employee_id,
            date=day.date,
            kind="leave" if day.is_leave else "off_day",
            leave_type=day.leave_type,
            hours=hours,
            is_double_time=is_double_time,
            bonus_hours=bonus,
        )

    shifts = [resolve_shift(group, rules) for group in day.shifts]
    hours = sum(shift.hours for shift in shifts)
    # bonus is capped on the date's total, not per shift
    is_double_time, bonus = evaluate(day.date, hours, double_time_dates, rules)
    return ResolvedDay(
        employee_id=day.employee_id,
        date=day.date,
        kind="work",
        shift_type=shifts[0].shift_type if shifts else None,
        hours=hours,
        is_double_time=is_double_time,
        bonus_hours=bonus,
        has_penalty=any(shift.has_penalty for shift in shifts),
        shifts=shifts,
    )


def compute_hours_breakdown(records: Iterable[TimeRecord], double_time_dates: Iterable[date] = (),
                            rules: PayrollRules = DEFAULT_RULES,
                            approved_only: bool = True) -> HoursBreakdown:
    records = check_contract(records)
    if approved_only:
        skipped = sum(1 for r in records if not r.approved)
        if skipped:
            logging.info(f"Ignoring {skipped} unapproved time records")
        records = [r for r in records if r.approved]

    double_time_dates = frozenset(double_time_dates)
    summaries = []
    days_by_employee = {}
    for employee_id, employee_records in group_by_employee(records).items():
        resolved = [
            resolve_day(day, double_time_dates, rules)
            for day in group_days(employee_id, employee_records)
        ]
        missing = sum(1 for day in resolved if day.missing)
        if missing:
            logging.warning(f"{missing} day(s) with a missing punch for employee_id: {employee_id}")
        days_by_employee[employee_id] = resolved
        summaries.append(summarize_employee(employee_id, resolved))

    logging.info(f"Hours breakdown computed for {len(summaries)} employee(s)")
    return HoursBreakdown(
        summaries=summaries,
        days=days_by_employee,
        totals=period_totals(summaries),
    )


def compute_leave_report(requests: Iterable[LeaveRequest], time_records: Iterable[TimeRecord],
                         year: int, employee_ids: Optional[List[str]] = None,
                         dedupe: bool = False) -> LeaveReport:
    merged = [
        record for record in merge_leave_sources(requests, time_records, dedupe=dedupe)
        if in_year(record, year)
    ]

    if employee_ids is None:
        employee_ids = []
        for record in merged:
            if record.employee_id not in employee_ids:
                employee_ids.append(record.employee_id)

    employees = {}
    for employee_id in employee_ids:
        leaves = [record for record in merged if record.employee_id == employee_id]
        employees[employee_id] = EmployeeLeave(
            employee_id=employee_id,
            balances=leave_balances(leaves),
            leaves=leaves,
            statistics=leave_statistics(leaves),
        )
    return LeaveReport(year=year, employees=employees)


def compute_leave_calendar(requests: Iterable[LeaveRequest], time_records: Iterable[TimeRecord],
                           year: int, month: int, employee_ids: Optional[List[str]] = None,
                           dedupe: bool = False) -> LeaveCalendar:
    """Approved leave days per employee that fall in one calendar month."""
    merged = merge_leave_sources(requests, time_records, dedupe=dedupe)
    employees = {}
    for record in merged:
        if employee_ids is not None and record.employee_id not in employee_ids:
            continue
        employees.setdefault(record.employee_id, []).append(record)

    calendar = {}
    for employee_id, records in employees.items():
        days = leave_calendar_days(records, year, month)
        if days:
            calendar[employee_id] = sorted(days, key=lambda day: day.date)
    for employee_id in employee_ids or []:
        calendar.setdefault(employee_id, [])
    return LeaveCalendar(year=year, month=month, employees=calendar)
