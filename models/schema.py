from datetime import datetime, date, timezone
from typing import Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator

from engine.shifts import NO_TIME, classify_shift
from utils.convert import inclusive_days

RecordStatus = Literal["check_in", "check_out", "off_day"]
ShiftType = Literal["morning", "evening", "night", "canteen", "unknown"]
DayKind = Literal["work", "off_day", "leave"]
HoursSource = Literal["exact_hours", "notes", "timestamps", "none"]
LeaveStatus = Literal["pending", "approved", "rejected"]
LeaveSource = Literal["leave_requests", "time_records"]


class TimeRecord(BaseModel):
    id: Optional[str] = None
    employee_id: str
    timestamp: Optional[datetime] = None
    status: RecordStatus
    shift_type: ShiftType = "unknown"
    working_week_start: Optional[date] = None
    exact_hours: Optional[Union[float, str]] = None
    notes: Optional[str] = None
    deduction_minutes: Optional[float] = None
    is_late: Optional[bool] = None
    early_leave: Optional[bool] = None
    approved: bool = False

    _canonical_date: Optional[date] = PrivateAttr(default=None)

    def model_post_init(self, __context):
        if self.working_week_start is not None:
            self._canonical_date = self.working_week_start
        elif self.timestamp is not None:
            self._canonical_date = self.timestamp.astimezone(timezone.utc).date()

    @field_validator("shift_type", mode="before")
    @classmethod
    def _normalize_shift(cls, value):
        return classify_shift(value)

    @field_validator("timestamp")
    @classmethod
    def _assume_utc(cls, value):
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @property
    def canonical_date(self) -> Optional[date]:
        """working_week_start when set, else the UTC calendar date of the punch.

        Fixed when the record is built.
        """
        return self._canonical_date


class DayShiftGroup(BaseModel):
    employee_id: str
    date: date
    shift_type: ShiftType
    check_in: Optional[TimeRecord] = None
    check_out: Optional[TimeRecord] = None


class DayGroup(BaseModel):
    employee_id: str
    date: date
    off_day: bool = False
    leave_type: Optional[str] = None
    shifts: List[DayShiftGroup] = Field(default_factory=list)

    @property
    def is_leave(self) -> bool:
        return self.off_day and self.leave_type is not None


class ShiftHours(BaseModel):
    shift_type: ShiftType
    hours: float = Field(ge=0)
    source: HoursSource
    check_in: Optional[datetime] = None
    check_out: Optional[datetime] = None
    missing_check_in: bool = False
    missing_check_out: bool = False
    has_penalty: bool = False
    deduction_minutes: float = 0
    is_late: bool = False
    early_leave: bool = False
    excessive_overtime: bool = False
    shift_start: str = NO_TIME
    shift_end: str = NO_TIME
    label: str = ""

    @property
    def missing(self) -> bool:
        return self.missing_check_in or self.missing_check_out


class ResolvedDay(BaseModel):
    employee_id: str
    date: date
    kind: DayKind = "work"
    shift_type: Optional[ShiftType] = None
    leave_type: Optional[str] = None
    hours: float = Field(ge=0)
    is_double_time: bool = False
    bonus_hours: float = Field(default=0, ge=0)
    has_penalty: bool = False
    shifts: List[ShiftHours] = Field(default_factory=list)

    @property
    def payable_hours(self) -> float:
        return self.hours + self.bonus_hours

    @property
    def missing(self) -> bool:
        return any(shift.missing for shift in self.shifts)


class EmployeeSummary(BaseModel):
    employee_id: str
    total_days: int
    off_days_count: int
    working_days: int
    total_hours: float
    double_time_hours: float
    total_payable_hours: float
    average_hours_per_day: float


class PeriodTotals(BaseModel):
    total_hours: float = 0
    double_time_hours: float = 0
    total_payable_hours: float = 0


class HoursBreakdown(BaseModel):
    summaries: List[EmployeeSummary]
    days: Dict[str, List[ResolvedDay]]
    totals: PeriodTotals


class LeaveRequest(BaseModel):
    id: Optional[str] = None
    employee_id: str
    leave_type: str
    start_date: date
    end_date: date
    status: LeaveStatus
    reason: Optional[str] = None


class LeaveRecord(BaseModel):
    id: Optional[str] = None
    employee_id: str
    leave_type: str
    start_date: date
    end_date: date
    status: LeaveStatus
    source: LeaveSource
    reason: Optional[str] = None

    @property
    def duration_days(self) -> int:
        return inclusive_days(self.start_date, self.end_date)


class LeaveBalance(BaseModel):
    type: str
    entitled_days: Optional[int] = None
    used_days: int = 0
    remaining_days: Optional[int] = None


class LeaveStatistic(BaseModel):
    leave_type: str
    label: str = ""
    count: int
    total_days: int


class EmployeeLeave(BaseModel):
    employee_id: str
    balances: List[LeaveBalance]
    leaves: List[LeaveRecord]
    statistics: List[LeaveStatistic] = Field(default_factory=list)


class LeaveReport(BaseModel):
    year: int
    employees: Dict[str, EmployeeLeave]


class LeaveDay(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: date
    leave_type: str
    abbreviation: str = ""


class LeaveCalendar(BaseModel):
    year: int
    month: int = Field(ge=1, le=12)
    employees: Dict[str, List[LeaveDay]]
