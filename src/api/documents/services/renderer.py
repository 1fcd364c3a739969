from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from jinja2 import Environment, FileSystemLoader, Template, select_autoescape

from src.api.currency.schemas.currency_rate import MonthlyRate
from src.api.documents.utils.formatting import (
    fmt_date,
    fmt_hours,
    fmt_inr,
    fmt_money,
    fmt_month,
    fmt_rate,
    fmt_usd,
    strip_currency_symbol,
)
from src.api.invoices.schemas.invoice import InvoiceSummary, InvoiceTemplateData
from src.api.invoices.services.calculations import round_half_up

TEMPLATES_PATH = Path(__file__).resolve().parent.parent / "templates"

PLACEHOLDER_MESSAGE = "Invoice data not available"

# Shown when no monthly series is stored, as multiples of the six-month average
FALLBACK_HISTORY_MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun"]
FALLBACK_HISTORY_FACTORS = [0.995, 1.002, 0.998, 1.001, 0.994, 1.005]
FALLBACK_CURRENT_LABEL = "Jul"
CURRENT_LABEL = "Current"


@dataclass(frozen=True)
class RateHistoryRow:
    label: str
    rate: float
    # Grand total converted at this rate
    amount: float


@dataclass(frozen=True)
class RenderedInvoice:
    """Markup of the invoice document and the data it was rendered from (None for the placeholder)"""
    html: str
    data: Optional[InvoiceTemplateData]

    @property
    def invoice_number(self) -> Optional[str]:
        return self.data.invoice.invoice_number if self.data else None

    @property
    def candidate_name(self) -> Optional[str]:
        return self.data.invoice.candidate_name if self.data else None


class DocumentTemplates:
    """
    Loads and caches the Jinja2 templates of the invoice documents.
    """

    def __init__(self, templates_path: Path = TEMPLATES_PATH):
        self.templates_path = templates_path
        self._cache: Dict[str, Template] = {}
        self.env = Environment(
            loader=FileSystemLoader(str(templates_path)),
            autoescape=select_autoescape(enabled_extensions=("html", "jinja"), default=True),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters.update({
            "usd": fmt_usd,
            "inr": fmt_inr,
            "money": fmt_money,
            "plain": strip_currency_symbol,
            "rate": fmt_rate,
            "hours": fmt_hours,
            "date": fmt_date,
        })

    def get_template(self, name: str) -> Template:
        if name not in self._cache:
            self._cache[name] = self.env.get_template(name)
        return self._cache[name]


_templates: Optional[DocumentTemplates] = None


def get_templates() -> DocumentTemplates:
    global _templates
    if _templates is None:
        _templates = DocumentTemplates()
    return _templates


def build_rate_history(invoice: InvoiceSummary,
                       monthly_rates: Optional[Sequence[MonthlyRate]] = None) -> List[RateHistoryRow]:
    """
    Rows of the rate-history panel.

    With a stored monthly series: one row per month followed by a "Current" row with the live rate.
    Without one: six rows derived from the six-month average and a seventh with the live rate.
    """
    total = invoice.total_with_gst
    current_rate = invoice.currency_conversion_rate

    if monthly_rates:
        rows = [
            RateHistoryRow(label=fmt_month(rate.month), rate=rate.average,
                           amount=round_half_up(total * rate.average))
            for rate in monthly_rates
        ]
        rows.append(RateHistoryRow(label=CURRENT_LABEL, rate=current_rate,
                                   amount=round_half_up(total * current_rate)))
        return rows

    average = invoice.six_month_average_rate
    rows = []
    for label, factor in zip(FALLBACK_HISTORY_MONTHS, FALLBACK_HISTORY_FACTORS):
        rate = average * factor
        rows.append(RateHistoryRow(label=label, rate=rate, amount=round_half_up(total * rate)))
    rows.append(RateHistoryRow(label=FALLBACK_CURRENT_LABEL, rate=current_rate,
                               amount=round_half_up(total * current_rate)))
    return rows


def render_invoice_document(data: Optional[InvoiceTemplateData],
                            monthly_rates: Optional[Sequence[MonthlyRate]] = None) -> RenderedInvoice:
    """
    Lay the aggregated invoice data out as the A4 invoice document.

    Args:
        data: Aggregated invoice data, None when it could not be assembled
        monthly_rates: Stored monthly USD/INR averages for the rate-history panel

    Returns:
        The rendered document; the placeholder when `data` is None
    """
    templates = get_templates()
    if data is None:
        html = templates.get_template("placeholder.html.jinja").render(message=PLACEHOLDER_MESSAGE)
        return RenderedInvoice(html=html, data=None)

    invoice = data.invoice
    details = data.timesheet_details
    has_overtime = (details.overtime_hours or 0) > 0

    html = templates.get_template("invoice.html.jinja").render(
        invoice=invoice,
        company=data.company_data,
        client=data.client_data,
        details=details,
        billing=data.billing_data,
        has_overtime=has_overtime,
        column_count=6 if has_overtime else 4,
        # Total hours as supplied, not recomputed from the daily breakdown
        overtime_total_hours=details.regular_hours + details.overtime_hours,
        weeks=[week for week in (details.week1, details.week2) if week is not None],
        converted_total=invoice.total_with_gst * invoice.currency_conversion_rate,
        payment_terms_days=(invoice.due_date - invoice.issued_date).days,
        rate_history=build_rate_history(invoice, monthly_rates),
        history_from_series=bool(monthly_rates),
    )
    return RenderedInvoice(html=html, data=data)
