from typing import Dict, List, Optional
from sqlmodel import Session, select
from src.api.invoices.models.invoice import Invoice
from src.api.timesheets.models.timesheet import BiWeeklyTimesheet, WeeklyTimesheet


class TimesheetService:
    """Read access to timesheets for the invoicing screens"""

    def __init__(self, db: Session):
        self.db = db

    def get_weekly_timesheet(self, timesheet_id: int) -> Optional[WeeklyTimesheet]:
        return self.db.get(WeeklyTimesheet, timesheet_id)

    def get_bi_weekly_timesheet(self, timesheet_id: int) -> Optional[BiWeeklyTimesheet]:
        return self.db.get(BiWeeklyTimesheet, timesheet_id)

    def get_weekly_timesheets(self, status: Optional[str] = None,
                              skip: int = 0, limit: int = 100) -> List[WeeklyTimesheet]:
        statement = select(WeeklyTimesheet)
        if status:
            statement = statement.where(WeeklyTimesheet.status == status)
        statement = statement.order_by(WeeklyTimesheet.week_start_date.desc()).offset(skip).limit(limit)
        return self.db.exec(statement).all()

    def get_bi_weekly_timesheets(self, status: Optional[str] = None,
                                 skip: int = 0, limit: int = 100) -> List[BiWeeklyTimesheet]:
        statement = select(BiWeeklyTimesheet)
        if status:
            statement = statement.where(BiWeeklyTimesheet.status == status)
        statement = statement.order_by(BiWeeklyTimesheet.period_start_date.desc()).offset(skip).limit(limit)
        return self.db.exec(statement).all()

    def get_invoice_ids(self, weekly: bool) -> Dict[int, int]:
        """Map of timesheet id to the id of the invoice generated from it"""
        column = Invoice.timesheet_id if weekly else Invoice.bi_weekly_timesheet_id
        rows = self.db.exec(select(column, Invoice.id).where(column.is_not(None))).all()
        return {timesheet_id: invoice_id for timesheet_id, invoice_id in rows}
