import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Union

from src.api.documents.services.pdf_export import CancellationToken, ExportCancelled, ExportError, PdfExporter
from src.api.documents.services.print_view import build_print_document
from src.api.documents.services.renderer import RenderedInvoice, render_invoice_document
from src.api.currency.schemas.currency_rate import MonthlyRate
from src.api.invoices.schemas.invoice import (
    BiWeeklyTimesheetRef,
    InvoiceRead,
    InvoiceTemplateResponse,
    WeeklyTimesheetRef,
)
from src.client.api_client import (
    BIWEEKLY_TIMESHEETS_PATH,
    INVOICES_PATH,
    TIMESHEETS_PATH,
    AdminApiClient,
    ApiError,
)
from src.client.config import ClientConfig
from src.client.print_launcher import PrintLauncher

INVOICES_TAB = "invoices"


class DialogMode(str, Enum):
    PREVIEW = "preview"
    GENERATE = "generate"


@dataclass(frozen=True)
class Notification:
    title: str
    description: str
    variant: str = "default"

    @property
    def is_error(self) -> bool:
        return self.variant == "destructive"


class InvoiceDialog:
    """
    Controller of the admin invoice dialog.

    In preview mode it loads and renders an existing invoice, which can then be downloaded
    as a PDF or printed. In generate mode it creates the invoice of a timesheet. Only one
    action runs at a time; actions requested while busy are ignored.
    """

    def __init__(self, api: AdminApiClient, exporter: PdfExporter, print_launcher: PrintLauncher,
                 notify: Callable[[Notification], None], mode: DialogMode = DialogMode.PREVIEW,
                 invoice_id: Optional[int] = None,
                 timesheet_ref: Optional[Union[WeeklyTimesheetRef, BiWeeklyTimesheetRef]] = None,
                 on_tab_change: Optional[Callable[[str], None]] = None,
                 download_dir: Optional[Path] = None, config: Optional[ClientConfig] = None):
        if mode == DialogMode.PREVIEW and invoice_id is None:
            raise ValueError("Preview mode needs an invoice id")
        if mode == DialogMode.GENERATE and timesheet_ref is None:
            raise ValueError("Generate mode needs a timesheet reference")
        self.api = api
        self.exporter = exporter
        self.print_launcher = print_launcher
        self.notify = notify
        self.mode = mode
        self.invoice_id = invoice_id
        self.timesheet_ref = timesheet_ref
        self.on_tab_change = on_tab_change
        self.config = config or ClientConfig()
        self.download_dir = Path(download_dir or self.config.download_dir)

        self.is_open = False
        self.busy = False
        self.document: Optional[RenderedInvoice] = None
        self._export_token: Optional[CancellationToken] = None

    def open(self):
        self.is_open = True
        if self.mode == DialogMode.PREVIEW:
            self.load()

    def load(self) -> Optional[RenderedInvoice]:
        """Fetch the invoice data and rates and render the document"""
        if self.busy:
            return self.document
        self.busy = True
        try:
            template = self.api.get_template_data(self.invoice_id)
            self.document = render_invoice_document(template.data, self._load_monthly_rates(template))
        except ApiError as e:
            self.notify(Notification("Error", e.message, "destructive"))
            self.document = render_invoice_document(None)
        finally:
            self.busy = False
        return self.document

    def _load_monthly_rates(self, template: InvoiceTemplateResponse) -> List[MonthlyRate]:
        # Without the stored series the rate history falls back to the six-month average
        if template.data is None:
            return []
        try:
            return self.api.get_currency_rates().monthly_rates
        except ApiError as e:
            logging.warning(f"Currency rates unavailable for invoice {self.invoice_id}: {e.message}")
            return []

    def generate(self) -> Optional[InvoiceRead]:
        if self.busy or self.mode != DialogMode.GENERATE:
            return None
        self.busy = True
        try:
            invoice = self.api.generate_invoice(self.timesheet_ref)
        except ApiError as e:
            self.notify(Notification("Error", e.message, "destructive"))
            return None
        finally:
            self.busy = False

        for path in (INVOICES_PATH, TIMESHEETS_PATH, BIWEEKLY_TIMESHEETS_PATH):
            self.api.cache.invalidate(path)
        self.notify(Notification("Success", f"Invoice {invoice.invoice_number} generated successfully"))
        self.close()
        if self.on_tab_change:
            self.on_tab_change(INVOICES_TAB)
        return invoice

    def download_pdf(self) -> Optional[Path]:
        """
        Export the rendered document to the download directory.
        Nothing happens when no document is rendered; closing the dialog cancels the export.
        """
        if self.busy or self.document is None or self.document.data is None:
            return None
        token = CancellationToken()
        self._export_token = token
        self.busy = True
        try:
            export = self.exporter.export(self.document, token)
            token.raise_if_cancelled()
            self.download_dir.mkdir(parents=True, exist_ok=True)
            path = self.download_dir / export.filename
            path.write_bytes(export.content)
        except ExportCancelled:
            logging.info("PDF export cancelled")
            return None
        except ExportError as e:
            logging.error(f"Error exporting PDF: {e}")
            self.notify(Notification("Error", "Failed to generate PDF", "destructive"))
            return None
        finally:
            self.busy = False
            self._export_token = None

        self.notify(Notification("Success", f"{export.filename} downloaded"))
        return path

    def print(self) -> bool:
        if self.busy or self.document is None or self.document.data is None:
            return False
        if not self.print_launcher.open(build_print_document(self.document)):
            self.notify(Notification(
                "Error", "Could not open the print window. Allow pop-ups and try again.", "destructive"))
            return False
        return True

    def close(self):
        if self._export_token is not None:
            self._export_token.cancel()
        self.is_open = False
