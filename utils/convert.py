import math
import re
from datetime import date, timedelta
from typing import Optional

HOURS_NOTE_PATTERN = re.compile(r"hours:(\d+\.\d+)")


def to_hours(value) -> Optional[float]:
    """Lenient float conversion: None, blanks, junk and NaN all mean absent."""
    if value is None or isinstance(value, bool):
        return None
    try:
        hours = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(hours) or math.isinf(hours):
        return None
    return hours


def hours_from_notes(notes: Optional[str]) -> Optional[float]:
    if not notes or "hours:" not in notes:
        return None
    match = HOURS_NOTE_PATTERN.search(notes)
    if not match:
        return None
    return to_hours(match.group(1))


def round_hours(hours: float) -> float:
    return round(hours, 2)


def inclusive_days(start: date, end: date) -> int:
    return ((end + timedelta(days=1)) - start).days


def days_between(start: date, end: date):
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)
