from typing import Iterable, List

from models.schema import EmployeeSummary, PeriodTotals, ResolvedDay


def summarize_employee(employee_id: str, days: List[ResolvedDay]) -> EmployeeSummary:
    """Roll resolved days up into totals.

    Sums run on unrounded floats; only the average is rounded, once.
    """
    dates = {day.date for day in days}
    off_dates = {day.date for day in days if day.kind != "work"}
    total_hours = sum(day.hours for day in days)
    double_time_hours = sum(day.bonus_hours for day in days)
    working_days = len(dates) - len(off_dates)

    average = round(total_hours / working_days, 2) if working_days > 0 else 0.0

    return EmployeeSummary(
        employee_id=employee_id,
        total_days=len(dates),
        off_days_count=len(off_dates),
        working_days=working_days,
        total_hours=total_hours,
        double_time_hours=double_time_hours,
        total_payable_hours=total_hours + double_time_hours,
        average_hours_per_day=average,
    )


def period_totals(summaries: Iterable[EmployeeSummary]) -> PeriodTotals:
    total_hours = 0.0
    double_time_hours = 0.0
    for summary in summaries:
        total_hours += summary.total_hours
        double_time_hours += summary.double_time_hours
    return PeriodTotals(
        total_hours=total_hours,
        double_time_hours=double_time_hours,
        total_payable_hours=total_hours + double_time_hours,
    )
