"""Resolve one hours value per day/shift group.

Sources are tried in a fixed order and the first one that yields a number
wins:

    1. exact_hours on the check-in
    2. exact_hours on the check-out
    3. ``hours:<decimal>`` in the check-in notes, then the check-out notes
    4. check-out minus check-in, wrapped past midnight, less penalty minutes

A group that none of them can resolve is worth 0.00 hours.
"""
import logging
from typing import Callable, List, Optional, Tuple

from config import DEFAULT_RULES, PayrollRules
from engine.shifts import (display_times, is_early_leave, is_late_check_in,
                           shift_label)
from models.schema import DayShiftGroup, ShiftHours
from utils.convert import hours_from_notes, round_hours, to_hours

MINUTES_PER_DAY = 24 * 60


def from_check_in_exact_hours(group: DayShiftGroup) -> Optional[float]:
    if group.check_in is None:
        return None
    return to_hours(group.check_in.exact_hours)


def from_check_out_exact_hours(group: DayShiftGroup) -> Optional[float]:
    if group.check_out is None:
        return None
    return to_hours(group.check_out.exact_hours)


def from_notes(group: DayShiftGroup) -> Optional[float]:
    for record in (group.check_in, group.check_out):
        if record is None:
            continue
        hours = hours_from_notes(record.notes)
        if hours is not None:
            return hours
    return None


def deduction_minutes(group: DayShiftGroup) -> float:
    if group.check_in is None:
        return 0
    minutes = to_hours(group.check_in.deduction_minutes)
    return minutes if minutes and minutes > 0 else 0


def from_timestamps(group: DayShiftGroup) -> Optional[float]:
    if group.check_in is None or group.check_out is None:
        return None
    if group.check_in.timestamp is None or group.check_out.timestamp is None:
        return None

    elapsed = group.check_out.timestamp - group.check_in.timestamp
    diff_minutes = int(elapsed.total_seconds() / 60)
    if diff_minutes < 0:
        # checked out after midnight
        diff_minutes += MINUTES_PER_DAY

    hours = diff_minutes / 60
    penalty = deduction_minutes(group)
    if penalty:
        hours = max(0.0, hours - penalty / 60)
    return round_hours(hours)


RESOLVERS: List[Tuple[str, Callable[[DayShiftGroup], Optional[float]]]] = [
    ("exact_hours", from_check_in_exact_hours),
    ("exact_hours", from_check_out_exact_hours),
    ("notes", from_notes),
    ("timestamps", from_timestamps),
]


def resolve_hours(group: DayShiftGroup) -> Tuple[float, str]:
    for source, resolver in RESOLVERS:
        hours = resolver(group)
        if hours is not None:
            if hours < 0:
                logging.warning(
                    f"Negative {source} value {hours} clamped to 0 for employee_id: "
                    f"{group.employee_id} on {group.date}"
                )
                hours = 0.0
            return hours, source
    return 0.0, "none"


def resolve_shift(group: DayShiftGroup, rules: PayrollRules = DEFAULT_RULES) -> ShiftHours:
    hours, source = resolve_hours(group)
    check_in = group.check_in.timestamp if group.check_in else None
    check_out = group.check_out.timestamp if group.check_out else None
    penalty = deduction_minutes(group)

    is_late = False
    if group.check_in is not None:
        is_late = group.check_in.is_late
        if is_late is None:
            is_late = is_late_check_in(group.shift_type, check_in)

    early_leave = False
    if group.check_out is not None:
        early_leave = group.check_out.early_leave
        if early_leave is None:
            early_leave = is_early_leave(group.shift_type, check_out, check_in)

    if source == "none" and (group.check_in or group.check_out):
        logging.debug(f"Unpaired punch on {group.date} for employee_id: {group.employee_id}")

    shift_start, shift_end = display_times(group.shift_type, check_in)
    return ShiftHours(
        shift_type=group.shift_type,
        hours=hours,
        source=source,
        check_in=check_in,
        check_out=check_out,
        missing_check_in=group.check_in is None,
        missing_check_out=group.check_out is None,
        has_penalty=penalty > 0,
        deduction_minutes=penalty,
        is_late=bool(is_late),
        early_leave=bool(early_leave),
        excessive_overtime=hours > rules.excessive_hours,
        shift_start=shift_start,
        shift_end=shift_end,
        label=shift_label(group.shift_type, check_in),
    )
