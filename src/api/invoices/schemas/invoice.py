from typing import Annotated, List, Literal, Optional, Union
from pydantic import Field, model_validator
from datetime import datetime, date
from src.api.common.schemas.base import CamelModel


class WeeklyTimesheetRef(CamelModel):
    """Reference to a weekly timesheet"""
    kind: Literal["weekly"] = "weekly"
    id: int


class BiWeeklyTimesheetRef(CamelModel):
    """Reference to a bi-weekly timesheet"""
    kind: Literal["biweekly"] = "biweekly"
    id: int


TimesheetRef = Annotated[Union[WeeklyTimesheetRef, BiWeeklyTimesheetRef], Field(discriminator="kind")]


class GenerateInvoiceRequest(CamelModel):
    """Body of the generate-invoice call: exactly one timesheet id"""
    timesheet_id: Optional[int] = None
    bi_weekly_timesheet_id: Optional[int] = None

    @model_validator(mode="after")
    def check_single_timesheet(self):
        if (self.timesheet_id is None) == (self.bi_weekly_timesheet_id is None):
            raise ValueError("Either timesheetId or biWeeklyTimesheetId is required, not both")
        return self

    def to_ref(self) -> Union[WeeklyTimesheetRef, BiWeeklyTimesheetRef]:
        if self.timesheet_id is not None:
            return WeeklyTimesheetRef(id=self.timesheet_id)
        return BiWeeklyTimesheetRef(id=self.bi_weekly_timesheet_id)


class InvoiceBase(CamelModel):
    """Base schema for invoice data"""
    invoice_number: str
    candidate_name: str
    week_start_date: date
    week_end_date: date
    total_hours: float
    hourly_rate: float
    total_amount: float
    currency: str = "USD"
    currency_conversion_rate: float
    six_month_average_rate: float
    amount_inr: float = Field(alias="amountINR")
    gst_rate: float
    gst_amount: float
    total_with_gst: float
    status: str
    issued_date: date
    due_date: date
    notes: Optional[str] = None


class InvoiceRead(InvoiceBase):
    """Schema for reading invoice data"""
    id: int
    timesheet_id: Optional[int] = None
    bi_weekly_timesheet_id: Optional[int] = None
    candidate_id: int
    candidate_email: str = ""
    created_at: datetime
    updated_at: datetime


class InvoiceSummary(InvoiceBase):
    """Invoice header fields as laid out on the document"""
    candidate_email: str = ""


class CompanyData(CamelModel):
    name: str
    logo_url: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    country: str = ""
    zip_code: str = ""
    phone_numbers: List[str] = []
    email_addresses: List[str] = []
    website: str = ""
    tax_id: str = ""
    gst_number: str = ""


class ClientData(CamelModel):
    name: str
    logo_url: str = ""
    bill_to_address: str = ""
    bill_to_city: str = ""
    bill_to_state: str = ""
    bill_to_country: str = ""
    bill_to_zip_code: str = ""
    contact_person: str = ""
    phone_numbers: List[str] = []
    email_addresses: List[str] = []


class WeekHours(CamelModel):
    """Worked hours per weekday for one week"""
    monday_hours: float = 0.0
    tuesday_hours: float = 0.0
    wednesday_hours: float = 0.0
    thursday_hours: float = 0.0
    friday_hours: float = 0.0
    saturday_hours: float = 0.0
    sunday_hours: float = 0.0
    total_week_hours: float = 0.0


class TimesheetDetails(CamelModel):
    week1: Optional[WeekHours] = None
    week2: Optional[WeekHours] = None
    regular_hours: float = 0.0
    overtime_hours: float = 0.0
    total_regular_amount: float = 0.0
    total_overtime_amount: float = 0.0


class BillingData(CamelModel):
    hourly_rate: float
    currency: str = "INR"
    working_days_per_week: int = 5
    employment_type: str = "Subcontract"
    supervisor_name: str = ""
    client_company_name: str = ""


class InvoiceTemplateData(CamelModel):
    """Everything the invoice document needs, in one object"""
    invoice: InvoiceSummary
    company_data: CompanyData
    client_data: ClientData
    timesheet_details: TimesheetDetails
    billing_data: BillingData


class InvoiceTemplateResponse(CamelModel):
    """`data` is null when a relation the document needs is missing; `missing` names them"""
    data: Optional[InvoiceTemplateData] = None
    missing: List[str] = []
