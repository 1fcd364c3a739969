from datetime import date
from typing import List, Optional, Union
from fastapi.logger import logger
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select
from src.api.candidates.models.candidate import CandidateBilling
from src.api.common.constants.invoicing import (
    BILLING_CURRENCY,
    DEFAULT_COMPANY_PROFILE,
    INVOICE_CURRENCY,
    WEEKDAYS,
    InvoiceStatus,
    TimesheetKind,
)
from src.api.common.exceptions import (
    DuplicateInvoiceError,
    InvalidStateError,
    NotFoundError,
)
from src.api.common.utils.datetime import add_days, get_current_date
from src.api.companies.models.company import ClientCompany, CompanySettings
from src.api.currency.services.currency_service import CurrencyRateService
from src.api.invoices.config import InvoiceConfig
from src.api.invoices.models.invoice import Invoice
from src.api.invoices.schemas.invoice import (
    BiWeeklyTimesheetRef,
    BillingData,
    ClientData,
    CompanyData,
    InvoiceSummary,
    InvoiceTemplateData,
    InvoiceTemplateResponse,
    TimesheetDetails,
    WeekHours,
    WeeklyTimesheetRef,
)
from src.api.invoices.services.calculations import (
    calculate_gst,
    calculate_total,
    convert_inr_to_usd,
    convert_usd_to_inr,
)
from src.api.timesheets.models.timesheet import BiWeeklyTimesheet, WeeklyTimesheet

Timesheet = Union[WeeklyTimesheet, BiWeeklyTimesheet]


class InvoiceService:
    def __init__(self, db: Session, currency_service: Optional[CurrencyRateService] = None,
                 config: Optional[InvoiceConfig] = None):
        self.db = db
        self.currency_service = currency_service or CurrencyRateService(db)
        self.config = config or InvoiceConfig()

    def get_invoice(self, invoice_id: int) -> Optional[Invoice]:
        """Get an invoice by ID"""
        return self.db.get(Invoice, invoice_id)

    def get_invoices(self, skip: int = 0, limit: int = 100) -> List[Invoice]:
        """Get a list of invoices, newest first"""
        statement = select(Invoice).order_by(Invoice.issued_date.desc(), Invoice.id.desc())
        return self.db.exec(statement.offset(skip).limit(limit)).all()

    def generate_invoice_number(self, today: Optional[date] = None) -> str:
        """
        Next invoice number of the month: PREFIX-YYYYMM-NNNN.
        The sequence restarts at 0001 every month.
        """
        today = today or get_current_date()
        month_prefix = f"{self.config.number_prefix}-{today.year:04d}{today.month:02d}-"
        numbers = self.db.exec(
            select(Invoice.invoice_number).where(Invoice.invoice_number.startswith(month_prefix))
        ).all()

        last_sequence = 0
        for number in numbers:
            suffix = number[len(month_prefix):]
            if suffix.isdigit():
                last_sequence = max(last_sequence, int(suffix))
        return f"{month_prefix}{last_sequence + 1:04d}"

    def _get_timesheet(self, ref: Union[WeeklyTimesheetRef, BiWeeklyTimesheetRef]) -> Timesheet:
        if ref.kind == TimesheetKind.WEEKLY.value:
            timesheet = self.db.get(WeeklyTimesheet, ref.id)
            if not timesheet:
                raise NotFoundError("Timesheet not found")
        else:
            timesheet = self.db.get(BiWeeklyTimesheet, ref.id)
            if not timesheet:
                raise NotFoundError("Bi-weekly timesheet not found")
        return timesheet

    def _get_invoice_for_timesheet(self, timesheet: Timesheet) -> Optional[Invoice]:
        if timesheet.kind == TimesheetKind.WEEKLY:
            statement = select(Invoice).where(Invoice.timesheet_id == timesheet.id)
        else:
            statement = select(Invoice).where(Invoice.bi_weekly_timesheet_id == timesheet.id)
        return self.db.exec(statement).first()

    def _get_billing(self, candidate_id: int) -> Optional[CandidateBilling]:
        return self.db.exec(
            select(CandidateBilling).where(CandidateBilling.candidate_id == candidate_id)
        ).first()

    @staticmethod
    def _duplicate_message(timesheet: Timesheet) -> str:
        if timesheet.kind == TimesheetKind.WEEKLY:
            return "Invoice already exists for this timesheet"
        return "Invoice already exists for this bi-weekly timesheet"

    def generate_invoice(self, ref: Union[WeeklyTimesheetRef, BiWeeklyTimesheetRef],
                         today: Optional[date] = None) -> Invoice:
        """
        Create the invoice of an approved timesheet

        Args:
            ref: The weekly or bi-weekly timesheet to invoice
            today: Issue date, defaults to the current date

        Returns:
            The persisted invoice

        Raises:
            NotFoundError: If the timesheet does not exist
            InvalidStateError: If the timesheet is not approved or the candidate has no billing configuration
            DuplicateInvoiceError: If the timesheet was already invoiced
        """
        timesheet = self._get_timesheet(ref)
        label = "Timesheet" if timesheet.kind == TimesheetKind.WEEKLY else "Bi-weekly timesheet"
        if not timesheet.is_approved:
            raise InvalidStateError(f"{label} must be approved before generating an invoice")

        if self._get_invoice_for_timesheet(timesheet):
            raise DuplicateInvoiceError(self._duplicate_message(timesheet))

        billing = self._get_billing(timesheet.candidate_id)
        if not billing:
            raise InvalidStateError("Billing configuration not found for candidate")

        rates = self.currency_service.get_six_month_average_usd_to_inr()
        current_rate = rates.current_rate

        if billing.currency == BILLING_CURRENCY:
            hourly_rate = convert_inr_to_usd(billing.hourly_rate, current_rate)
        else:
            hourly_rate = billing.hourly_rate
        total_amount = calculate_total(timesheet.total_hours, hourly_rate)
        if billing.currency == BILLING_CURRENCY:
            amount_inr = timesheet.total_amount
        else:
            amount_inr = convert_usd_to_inr(total_amount, current_rate)
        gst = calculate_gst(total_amount, self.config.gst_rate)

        issued_date = today or get_current_date()
        if timesheet.kind == TimesheetKind.WEEKLY:
            period = f"week {timesheet.period_start} to {timesheet.period_end}"
        else:
            period = f"bi-weekly period {timesheet.period_start} to {timesheet.period_end}"

        candidate = timesheet.candidate
        invoice = Invoice(
            invoice_number=self.generate_invoice_number(issued_date),
            timesheet_id=timesheet.id if timesheet.kind == TimesheetKind.WEEKLY else None,
            bi_weekly_timesheet_id=timesheet.id if timesheet.kind == TimesheetKind.BIWEEKLY else None,
            candidate_id=timesheet.candidate_id,
            candidate_name=candidate.full_name if candidate else "",
            week_start_date=timesheet.period_start,
            week_end_date=timesheet.period_end,
            total_hours=timesheet.total_hours,
            hourly_rate=hourly_rate,
            total_amount=total_amount,
            currency=INVOICE_CURRENCY,
            currency_conversion_rate=current_rate,
            six_month_average_rate=rates.six_month_average,
            amount_inr=amount_inr,
            gst_rate=self.config.gst_rate,
            gst_amount=gst["gst_amount"],
            total_with_gst=gst["total_with_gst"],
            status=InvoiceStatus.GENERATED.value,
            issued_date=issued_date,
            due_date=add_days(issued_date, self.config.payment_terms_days),
            notes=f"Invoice generated for {period}. Converted from INR {amount_inr} at rate {current_rate}",
        )
        invoice.candidate_email = candidate.email if candidate else ""

        self.db.add(invoice)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.error(f"Integrity error storing invoice for {label.lower()} {timesheet.id}: {e}")
            raise DuplicateInvoiceError(self._duplicate_message(timesheet)) from e
        self.db.refresh(invoice)
        logger.info(f"Generated invoice {invoice.invoice_number} for {label.lower()} {timesheet.id}")
        return invoice

    def get_template_data(self, invoice_id: int) -> InvoiceTemplateResponse:
        """
        Assemble everything the invoice document shows.

        Raises NotFoundError when the invoice does not exist. When the candidate, the billing
        configuration, the client company or the timesheet is missing, `data` is None and
        `missing` names the absent relations.
        """
        invoice = self.get_invoice(invoice_id)
        if not invoice:
            raise NotFoundError("Invoice not found")

        candidate = invoice.candidate
        billing = self._get_billing(invoice.candidate_id)
        client_company = billing.client_company if billing else None
        timesheet = invoice.timesheet if invoice.timesheet_id is not None else invoice.bi_weekly_timesheet

        missing = []
        if not candidate:
            missing.append("candidate")
        if not billing:
            missing.append("billing")
        if not client_company:
            missing.append("clientCompany")
        if not timesheet:
            missing.append("timesheet")
        if missing:
            logger.warning(f"Template data for invoice {invoice_id} is incomplete: {', '.join(missing)}")
            return InvoiceTemplateResponse(data=None, missing=missing)

        data = InvoiceTemplateData(
            invoice=self._build_invoice_summary(invoice, candidate.email),
            company_data=self._build_company_data(billing.company_settings),
            client_data=self._build_client_data(client_company),
            timesheet_details=self._build_timesheet_details(timesheet),
            billing_data=BillingData(
                hourly_rate=billing.hourly_rate,
                currency=billing.currency,
                working_days_per_week=billing.working_days_per_week,
                employment_type=billing.employment_type,
                supervisor_name=billing.supervisor_name or "",
                client_company_name=client_company.name,
            ),
        )
        return InvoiceTemplateResponse(data=data, missing=[])

    @staticmethod
    def _build_invoice_summary(invoice: Invoice, fallback_email: str) -> InvoiceSummary:
        return InvoiceSummary(
            invoice_number=invoice.invoice_number,
            candidate_name=invoice.candidate_name,
            candidate_email=invoice.candidate_email or fallback_email,
            week_start_date=invoice.week_start_date,
            week_end_date=invoice.week_end_date,
            total_hours=invoice.total_hours,
            hourly_rate=invoice.hourly_rate,
            total_amount=invoice.total_amount,
            currency=invoice.currency,
            currency_conversion_rate=invoice.currency_conversion_rate,
            six_month_average_rate=invoice.six_month_average_rate,
            amount_inr=invoice.amount_inr,
            gst_rate=invoice.gst_rate,
            gst_amount=invoice.gst_amount,
            total_with_gst=invoice.total_with_gst,
            status=invoice.status,
            issued_date=invoice.issued_date,
            due_date=invoice.due_date,
            notes=invoice.notes,
        )

    @staticmethod
    def _build_company_data(settings: Optional[CompanySettings]) -> CompanyData:
        # Every empty field falls back to the agency profile
        profile = {
            key: (getattr(settings, key, None) if settings else None) or default
            for key, default in DEFAULT_COMPANY_PROFILE.items()
        }
        return CompanyData(**profile)

    @staticmethod
    def _build_client_data(client: ClientCompany) -> ClientData:
        return ClientData(
            name=client.name,
            logo_url=client.logo_url or "",
            bill_to_address=client.bill_to_address,
            bill_to_city=client.bill_to_city,
            bill_to_state=client.bill_to_state,
            bill_to_country=client.bill_to_country,
            bill_to_zip_code=client.bill_to_zip_code,
            contact_person=client.contact_person or "",
            phone_numbers=client.phone_numbers or [],
            email_addresses=client.email_addresses or [],
        )

    @staticmethod
    def _build_timesheet_details(timesheet: Timesheet) -> TimesheetDetails:
        weeks = []
        for hours in timesheet.weeks:
            per_day = {f"{day}_hours": float(hours.get(day, 0.0)) for day in WEEKDAYS}
            weeks.append(WeekHours(total_week_hours=sum(per_day.values()), **per_day))
        return TimesheetDetails(
            week1=weeks[0],
            week2=weeks[1] if len(weeks) > 1 else None,
            regular_hours=timesheet.total_regular_hours,
            overtime_hours=timesheet.total_overtime_hours,
            total_regular_amount=timesheet.total_regular_amount,
            total_overtime_amount=timesheet.total_overtime_amount,
        )
