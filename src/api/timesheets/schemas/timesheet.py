from typing import Dict, Optional
from datetime import date
from src.api.common.schemas.base import CamelModel


class TimesheetTotals(CamelModel):
    id: int
    candidate_id: int
    status: str
    total_regular_hours: float
    total_overtime_hours: float
    total_regular_amount: float
    total_overtime_amount: float
    invoice_id: Optional[int] = None


class WeeklyTimesheetRead(TimesheetTotals):
    week_start_date: date
    week_end_date: date
    daily_hours: Dict[str, float] = {}
    daily_overtime: Dict[str, float] = {}
    total_weekly_hours: float
    total_weekly_amount: float


class BiWeeklyTimesheetRead(TimesheetTotals):
    period_start_date: date
    period_end_date: date
    week1_hours: Dict[str, float] = {}
    week1_overtime: Dict[str, float] = {}
    week2_hours: Dict[str, float] = {}
    week2_overtime: Dict[str, float] = {}
    total_bi_weekly_hours: float
    total_bi_weekly_amount: float
