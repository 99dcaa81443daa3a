from datetime import datetime, time
from typing import Optional, Tuple

SHIFT_TYPES = ("morning", "evening", "night", "canteen")

SHIFT_TIMES = {
    "morning": {"start": time(5, 0), "end": time(14, 0), "early_leave": time(13, 30)},
    "evening": {"start": time(13, 0), "end": time(22, 0), "early_leave": time(21, 30)},
    "night": {"start": time(21, 0), "end": time(6, 0), "early_leave": time(5, 30)},
    "canteen": {"start": time(7, 0), "end": time(16, 0), "early_leave": time(15, 30)},
}

# Canteen staff start at 07:00 or 08:00; the check-in hour picks the window
CANTEEN_LATE_START = {"start": time(8, 0), "end": time(17, 0), "early_leave": time(16, 30)}

# Minutes past shift start before a check-in counts as late
LATE_THRESHOLDS = {
    "morning": 0,
    "evening": 0,
    "night": 30,
    "canteen": 10,
}

# Check-ins further than this past the start are treated as arrivals for
# the next occurrence of the shift, not as late ones
LATE_WINDOW_MINUTES = 12 * 60

NO_TIME = "—"


def classify_shift(tag) -> str:
    if not tag:
        return "unknown"
    normalized = str(tag).strip().lower()
    if normalized in SHIFT_TYPES:
        return normalized
    return "unknown"


def shift_window(shift_type: str, check_in: Optional[datetime] = None) -> Optional[dict]:
    if shift_type not in SHIFT_TIMES:
        return None
    if shift_type == "canteen" and check_in is not None and check_in.hour != 7:
        return CANTEEN_LATE_START
    return SHIFT_TIMES[shift_type]


def display_times(shift_type: str, check_in: Optional[datetime] = None) -> Tuple[str, str]:
    window = shift_window(shift_type, check_in)
    if window is None:
        return NO_TIME, NO_TIME
    return window["start"].strftime("%H:%M"), window["end"].strftime("%H:%M")


def shift_label(shift_type: str, check_in: Optional[datetime] = None) -> str:
    if shift_type == "canteen":
        start, end = display_times(shift_type, check_in)
        return f"Canteen ({start}-{end})"
    return shift_type.capitalize()


def _minutes(value) -> int:
    return value.hour * 60 + value.minute


def _minutes_after_start(window: dict, timestamp: datetime) -> int:
    return (_minutes(timestamp) - _minutes(window["start"])) % 1440


def is_late_check_in(shift_type: str, timestamp: Optional[datetime]) -> bool:
    window = shift_window(shift_type, timestamp)
    if window is None or timestamp is None:
        return False
    offset = _minutes_after_start(window, timestamp)
    return LATE_THRESHOLDS[shift_type] < offset < LATE_WINDOW_MINUTES


def is_early_leave(shift_type: str, timestamp: Optional[datetime],
                   check_in: Optional[datetime] = None) -> bool:
    window = shift_window(shift_type, check_in)
    if window is None or timestamp is None:
        return False
    offset = _minutes_after_start(window, timestamp)
    cutoff = (_minutes(window["early_leave"]) - _minutes(window["start"])) % 1440
    return offset < cutoff
