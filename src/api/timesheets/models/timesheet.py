from datetime import date, datetime
from typing import Dict, List, Optional
from sqlmodel import Field, Relationship, SQLModel, Column, JSON, DateTime
from src.api.candidates.models.candidate import Candidate
from src.api.common.constants.invoicing import TimesheetKind, TimesheetStatus
from src.api.common.models.base import BaseModel, TimestampMixin


class TimesheetTotalsMixin(SQLModel):
    """Regular/overtime totals and approval status shared by both timesheet tables"""
    status: str = Field(default=TimesheetStatus.DRAFT.value, index=True)
    total_regular_hours: float = 0.0
    total_overtime_hours: float = 0.0
    total_regular_amount: float = 0.0
    total_overtime_amount: float = 0.0
    approved_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))

    @property
    def is_approved(self) -> bool:
        return self.status == TimesheetStatus.APPROVED.value


class WeeklyTimesheet(BaseModel, TimesheetTotalsMixin, TimestampMixin, table=True):
    """
    One week of hours for a candidate.
    `daily_hours` holds regular hours and `daily_overtime` overtime, keyed by weekday name.
    """
    id: Optional[int] = Field(default=None, primary_key=True)

    candidate_id: int = Field(foreign_key="candidate.id", index=True)
    candidate: Optional[Candidate] = Relationship()

    week_start_date: date
    week_end_date: date
    daily_hours: Dict[str, float] = Field(default_factory=dict, sa_column=Column(JSON))
    daily_overtime: Dict[str, float] = Field(default_factory=dict, sa_column=Column(JSON))

    total_weekly_hours: float = 0.0
    # Amount in the billing currency (INR)
    total_weekly_amount: float = 0.0

    @property
    def kind(self) -> TimesheetKind:
        return TimesheetKind.WEEKLY

    @property
    def period_start(self) -> date:
        return self.week_start_date

    @property
    def period_end(self) -> date:
        return self.week_end_date

    @property
    def total_hours(self) -> float:
        return self.total_weekly_hours

    @property
    def total_amount(self) -> float:
        return self.total_weekly_amount

    @property
    def weeks(self) -> List[Dict[str, float]]:
        return [_merge_hours(self.daily_hours, self.daily_overtime)]


class BiWeeklyTimesheet(BaseModel, TimesheetTotalsMixin, TimestampMixin, table=True):
    """
    Two consecutive weeks of hours for a candidate, stored per week
    """
    id: Optional[int] = Field(default=None, primary_key=True)

    candidate_id: int = Field(foreign_key="candidate.id", index=True)
    candidate: Optional[Candidate] = Relationship()

    period_start_date: date
    period_end_date: date
    week1_hours: Dict[str, float] = Field(default_factory=dict, sa_column=Column(JSON))
    week1_overtime: Dict[str, float] = Field(default_factory=dict, sa_column=Column(JSON))
    week2_hours: Dict[str, float] = Field(default_factory=dict, sa_column=Column(JSON))
    week2_overtime: Dict[str, float] = Field(default_factory=dict, sa_column=Column(JSON))

    total_bi_weekly_hours: float = 0.0
    total_bi_weekly_amount: float = 0.0

    @property
    def kind(self) -> TimesheetKind:
        return TimesheetKind.BIWEEKLY

    @property
    def period_start(self) -> date:
        return self.period_start_date

    @property
    def period_end(self) -> date:
        return self.period_end_date

    @property
    def total_hours(self) -> float:
        return self.total_bi_weekly_hours

    @property
    def total_amount(self) -> float:
        return self.total_bi_weekly_amount

    @property
    def weeks(self) -> List[Dict[str, float]]:
        return [
            _merge_hours(self.week1_hours, self.week1_overtime),
            _merge_hours(self.week2_hours, self.week2_overtime),
        ]


def _merge_hours(regular: Dict[str, float], overtime: Dict[str, float]) -> Dict[str, float]:
    """Worked hours per weekday: regular plus overtime"""
    days = set(regular or {}) | set(overtime or {})
    return {
        day: float((regular or {}).get(day, 0) or 0) + float((overtime or {}).get(day, 0) or 0)
        for day in days
    }
