from datetime import date
from typing import AbstractSet, Iterable, Set

from config import DEFAULT_RULES, PayrollRules
from utils.convert import days_between

FRIDAY = 4


def bonus_hours(hours_worked: float, rules: PayrollRules = DEFAULT_RULES) -> float:
    """Bonus for a double-time date: one for one up to the threshold, then capped so worked + bonus <= cap."""
    if hours_worked <= rules.double_time_threshold:
        return max(0.0, hours_worked)
    return max(0.0, rules.double_time_cap - hours_worked)


def evaluate(day: date, hours_worked: float, double_time_dates: AbstractSet[date],
             rules: PayrollRules = DEFAULT_RULES):
    """Returns (is_double_time, bonus)."""
    if day not in double_time_dates:
        return False, 0.0
    return True, bonus_hours(hours_worked, rules)


def double_time_dates(start: date, end: date, holidays: Iterable[date] = ()) -> Set[date]:
    """Fridays and holidays between start and end, both inclusive."""
    holidays = set(holidays)
    return {
        day for day in days_between(start, end)
        if day.weekday() == FRIDAY or day in holidays
    }
