import logging
from datetime import date
from typing import List, Optional

from fastapi import BackgroundTasks, FastAPI, HTTPException
from pydantic import BaseModel, Field

from Background.sync import SnapshotWriter
from engine.double_time import double_time_dates
from main import compute_hours_breakdown, compute_leave_calendar, compute_leave_report
from models.errors import RecordContractError
from models.schema import HoursBreakdown, LeaveCalendar, LeaveReport, LeaveRequest, TimeRecord
from utils.helper import clear_snapshots, store_snapshot

app = FastAPI()
writer = SnapshotWriter(store_snapshot)


class BreakdownRequest(BaseModel):
    records: List[TimeRecord]
    double_time_dates: List[date] = []
    period_start: Optional[date] = None
    period_end: Optional[date] = None
    holidays: List[date] = []

    def payroll_dates(self):
        dates = set(self.double_time_dates)
        if self.period_start and self.period_end:
            dates |= double_time_dates(self.period_start, self.period_end, self.holidays)
        return dates


class LeaveBalanceRequest(BaseModel):
    requests: List[LeaveRequest] = []
    time_records: List[TimeRecord] = []
    year: int
    employee_ids: Optional[List[str]] = None
    dedupe: bool = False


class LeaveCalendarRequest(LeaveBalanceRequest):
    month: int = Field(ge=1, le=12)


class ResetRequest(BaseModel):
    clear: bool = True


@app.post("/hours/breakdown", response_model=HoursBreakdown)
def hours_breakdown(body: BreakdownRequest, background_tasks: BackgroundTasks):
    try:
        breakdown = compute_hours_breakdown(body.records, body.payroll_dates())
    except RecordContractError as exc:
        logging.error(f"Rejected time record batch: {exc}")
        raise HTTPException(status_code=422, detail=str(exc))
    token = writer.submit(breakdown)
    background_tasks.add_task(writer.flush, token)
    return breakdown


@app.post("/leave/balances", response_model=LeaveReport)
def leave_balances(body: LeaveBalanceRequest):
    return compute_leave_report(
        body.requests,
        body.time_records,
        body.year,
        employee_ids=body.employee_ids,
        dedupe=body.dedupe,
    )


@app.post("/leave/calendar", response_model=LeaveCalendar)
def leave_calendar(body: LeaveCalendarRequest):
    return compute_leave_calendar(
        body.requests,
        body.time_records,
        body.year,
        body.month,
        employee_ids=body.employee_ids,
        dedupe=body.dedupe,
    )


@app.post("/snapshots/reset")
def reset_snapshots(body: ResetRequest):
    logging.info("Running snapshot reset")
    with writer.reset_window():
        if body.clear:
            clear_snapshots()
    logging.info("Snapshot reset completed.")
    return {"status": "reset", "generation": writer.generation}
