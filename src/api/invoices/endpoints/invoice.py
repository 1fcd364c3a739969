from typing import List
from fastapi import APIRouter, Depends, Response
from fastapi.logger import logger
from fastapi.responses import HTMLResponse
from sqlmodel import Session
from src.api.common.exceptions import InvoicingError, NotFoundError
from src.api.common.utils.database import get_db
from src.api.currency.endpoints.currency_rate import get_currency_service
from src.api.currency.schemas.currency_rate import MonthlyRate
from src.api.currency.services.currency_service import CurrencyRateService
from src.api.documents.services.pdf_export import ExportError, PdfExporter
from src.api.documents.services.print_view import build_print_document
from src.api.documents.services.rasterizer import PlaywrightRasterizer, Rasterizer
from src.api.documents.services.renderer import RenderedInvoice, render_invoice_document
from src.api.invoices.schemas.invoice import GenerateInvoiceRequest, InvoiceRead, InvoiceTemplateResponse
from src.api.invoices.services.invoice_service import InvoiceService

router = APIRouter(prefix="/admin", tags=["invoices"])


def get_invoice_service(db: Session = Depends(get_db),
                        currency_service: CurrencyRateService = Depends(get_currency_service)):
    return InvoiceService(db, currency_service)


def get_rasterizer() -> Rasterizer:
    return PlaywrightRasterizer()


def _render(invoice_id: int, invoice_service: InvoiceService) -> RenderedInvoice:
    template = invoice_service.get_template_data(invoice_id)
    if template.data is None:
        return render_invoice_document(None)
    monthly_rates = [
        MonthlyRate(month=rate.month, average=rate.average)
        for rate in invoice_service.currency_service.get_monthly_rates()
    ]
    return render_invoice_document(template.data, monthly_rates)


@router.get("/invoices", response_model=List[InvoiceRead])
def get_invoices(
    skip: int = 0,
    limit: int = 100,
    invoice_service: InvoiceService = Depends(get_invoice_service)
):
    """Get a list of invoices"""
    return invoice_service.get_invoices(skip, limit)


@router.get("/invoices/{invoice_id}", response_model=InvoiceRead)
def get_invoice(
    invoice_id: int,
    invoice_service: InvoiceService = Depends(get_invoice_service)
):
    """Get an invoice by ID"""
    invoice = invoice_service.get_invoice(invoice_id)
    if not invoice:
        raise NotFoundError("Invoice not found")
    return invoice


@router.get("/invoices/{invoice_id}/template-data", response_model=InvoiceTemplateResponse)
def get_invoice_template_data(
    invoice_id: int,
    invoice_service: InvoiceService = Depends(get_invoice_service)
):
    """Get everything the invoice document shows"""
    return invoice_service.get_template_data(invoice_id)


@router.post("/generate-invoice", response_model=InvoiceRead, status_code=201)
def generate_invoice(
    request: GenerateInvoiceRequest,
    invoice_service: InvoiceService = Depends(get_invoice_service)
):
    """Generate the invoice of an approved weekly or bi-weekly timesheet"""
    try:
        return invoice_service.generate_invoice(request.to_ref())
    except InvoicingError:
        raise
    except Exception as e:
        logger.error(f"Error generating invoice: {e}")
        raise InvoicingError("Failed to generate invoice") from e


@router.get("/invoices/{invoice_id}/pdf")
def download_invoice_pdf(
    invoice_id: int,
    invoice_service: InvoiceService = Depends(get_invoice_service),
    rasterizer: Rasterizer = Depends(get_rasterizer)
):
    """Export the invoice document as a multi-page A4 PDF"""
    rendered = _render(invoice_id, invoice_service)
    if rendered.data is None:
        raise NotFoundError("Invoice data not available")
    try:
        export = PdfExporter(rasterizer).export(rendered)
    except ExportError as e:
        logger.error(f"Error exporting invoice {invoice_id}: {e}")
        raise InvoicingError("Failed to generate PDF") from e
    return Response(
        content=export.content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{export.filename}"'},
    )


@router.get("/invoices/{invoice_id}/print", response_class=HTMLResponse)
def print_invoice(
    invoice_id: int,
    invoice_service: InvoiceService = Depends(get_invoice_service)
):
    """Get the print-ready HTML page of the invoice"""
    return HTMLResponse(build_print_document(_render(invoice_id, invoice_service)))
