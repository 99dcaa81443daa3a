from pydantic import BaseModel, ConfigDict

# Hours credited for an approved leave day
LEAVE_DAY_HOURS = 9.0

# Double-time bonus equals hours worked up to the threshold, then shrinks so
# that worked + bonus never exceeds the cap
DOUBLE_TIME_THRESHOLD = 9.0
DOUBLE_TIME_CAP = 18.0

# Shifts longer than this are flagged as excessive overtime
EXCESSIVE_HOURS = 12.0

# Notes value of a routine day off
OFF_DAY_NOTE = "OFF-DAY"

# Yearly entitlement in days, None = case by case. Order is the scan order
# used to pick a leave type out of free-text notes.
LEAVE_ENTITLEMENTS = {
    "annual-leave": 21,
    "sick-leave": 30,
    "marriage-leave": 5,
    "bereavement-leave": None,
    "maternity-leave": 98,
    "paternity-leave": 2,
    "unpaid-leave": None,
}


class PayrollRules(BaseModel):
    model_config = ConfigDict(frozen=True)

    leave_day_hours: float = LEAVE_DAY_HOURS
    double_time_threshold: float = DOUBLE_TIME_THRESHOLD
    double_time_cap: float = DOUBLE_TIME_CAP
    excessive_hours: float = EXCESSIVE_HOURS


DEFAULT_RULES = PayrollRules()
