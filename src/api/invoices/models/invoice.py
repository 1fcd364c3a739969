from typing import Optional
from datetime import date
from sqlalchemy import CheckConstraint
from sqlmodel import Field, Relationship
from src.api.candidates.models.candidate import Candidate
from src.api.common.constants.invoicing import INVOICE_CURRENCY, InvoiceStatus, TimesheetKind
from src.api.common.models.base import BaseModel, TimestampMixin
from src.api.common.utils.encryption import encrypt_data, decrypt_data
from src.api.timesheets.models.timesheet import BiWeeklyTimesheet, WeeklyTimesheet


class Invoice(BaseModel, TimestampMixin, table=True):
    """
    Invoice generated from one approved weekly or bi-weekly timesheet.
    Amounts are in USD; the INR amount and both rates are snapshots taken at generation.
    """
    __table_args__ = (
        CheckConstraint(
            "(timesheet_id IS NULL) <> (bi_weekly_timesheet_id IS NULL)",
            name="ck_invoice_single_timesheet"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)

    # INV-YYYYMM-NNNN
    invoice_number: str = Field(index=True, unique=True)

    # Timesheet relationship, exactly one is set
    timesheet_id: Optional[int] = Field(
        default=None, foreign_key="weekly_timesheet.id", unique=True)
    timesheet: Optional[WeeklyTimesheet] = Relationship()
    bi_weekly_timesheet_id: Optional[int] = Field(
        default=None, foreign_key="bi_weekly_timesheet.id", unique=True)
    bi_weekly_timesheet: Optional[BiWeeklyTimesheet] = Relationship()

    # Candidate snapshot
    candidate_id: int = Field(foreign_key="candidate.id", index=True)
    candidate: Optional[Candidate] = Relationship()
    candidate_name: str
    encrypted_candidate_email: str = Field(default="")

    # Invoiced period
    week_start_date: date
    week_end_date: date

    # Invoice details
    total_hours: float
    hourly_rate: float
    total_amount: float
    currency: str = INVOICE_CURRENCY
    currency_conversion_rate: float
    six_month_average_rate: float
    amount_inr: float
    gst_rate: float
    gst_amount: float
    total_with_gst: float
    status: str = InvoiceStatus.GENERATED.value
    issued_date: date
    due_date: date
    notes: Optional[str] = None

    @property
    def candidate_email(self) -> str:
        """Get decrypted candidate e-mail"""
        return decrypt_data(self.encrypted_candidate_email)

    @candidate_email.setter
    def candidate_email(self, value: str):
        """Set encrypted candidate e-mail"""
        self.encrypted_candidate_email = encrypt_data(value)

    @property
    def timesheet_kind(self) -> TimesheetKind:
        return TimesheetKind.WEEKLY if self.timesheet_id is not None else TimesheetKind.BIWEEKLY

    class Config:
        from_attributes = True
