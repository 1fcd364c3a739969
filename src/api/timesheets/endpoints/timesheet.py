from typing import List, Optional
from fastapi import APIRouter, Depends
from sqlmodel import Session
from src.api.common.utils.database import get_db
from src.api.timesheets.schemas.timesheet import BiWeeklyTimesheetRead, WeeklyTimesheetRead
from src.api.timesheets.services.timesheet_service import TimesheetService

router = APIRouter(prefix="/admin", tags=["timesheets"])


def get_timesheet_service(db: Session = Depends(get_db)):
    return TimesheetService(db)


@router.get("/timesheets", response_model=List[WeeklyTimesheetRead])
def get_weekly_timesheets(
    status: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
    timesheet_service: TimesheetService = Depends(get_timesheet_service)
):
    """Get weekly timesheets, optionally filtered by status"""
    invoice_ids = timesheet_service.get_invoice_ids(weekly=True)
    return [
        WeeklyTimesheetRead.model_validate(timesheet).model_copy(
            update={"invoice_id": invoice_ids.get(timesheet.id)})
        for timesheet in timesheet_service.get_weekly_timesheets(status, skip, limit)
    ]


@router.get("/biweekly-timesheets", response_model=List[BiWeeklyTimesheetRead])
def get_bi_weekly_timesheets(
    status: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
    timesheet_service: TimesheetService = Depends(get_timesheet_service)
):
    """Get bi-weekly timesheets, optionally filtered by status"""
    invoice_ids = timesheet_service.get_invoice_ids(weekly=False)
    return [
        BiWeeklyTimesheetRead.model_validate(timesheet).model_copy(
            update={"invoice_id": invoice_ids.get(timesheet.id)})
        for timesheet in timesheet_service.get_bi_weekly_timesheets(status, skip, limit)
    ]
