import re
import threading
from dataclasses import dataclass
from io import BytesIO
from typing import Optional

from fastapi.logger import logger
from fpdf import FPDF
from PIL import Image

from src.api.documents.config import ExportConfig
from src.api.documents.services.rasterizer import Rasterizer
from src.api.documents.services.renderer import RenderedInvoice
from src.api.documents.utils.pagination import image_height_mm, page_offsets

FILENAME_FALLBACK = "invoice"


class ExportError(Exception):
    """Raised when the PDF cannot be produced; no file is written"""


class ExportCancelled(ExportError):
    """Raised when an export is cancelled before it completes"""


class CancellationToken:
    """Flag checked between export stages; set from another thread to stop the export"""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self):
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self):
        if self.cancelled:
            raise ExportCancelled("PDF export cancelled")


@dataclass(frozen=True)
class PdfExport:
    filename: str
    content: bytes
    page_count: int


def build_pdf_filename(invoice_number: Optional[str], candidate_name: Optional[str]) -> str:
    """Invoice-<number>-<candidate name, whitespace runs as '-'>.pdf"""
    number = (invoice_number or "").strip() or FILENAME_FALLBACK
    name = re.sub(r"\s+", "-", (candidate_name or "").strip()) or FILENAME_FALLBACK
    return f"Invoice-{number}-{name}.pdf"


class PdfExporter:
    """
    Turns a rendered invoice into a multi-page A4 PDF: the document is rasterized once
    and the bitmap is placed on every page, shifted up one page height per page.
    """

    def __init__(self, rasterizer: Rasterizer, config: Optional[ExportConfig] = None):
        self.rasterizer = rasterizer
        self.config = config or ExportConfig()

    def export(self, rendered: RenderedInvoice, token: Optional[CancellationToken] = None) -> PdfExport:
        token = token or CancellationToken()
        if rendered.data is None:
            raise ExportError("Invoice data not available")

        token.raise_if_cancelled()
        try:
            raster = self.rasterizer.rasterize(rendered.html)
        except Exception as e:
            logger.error(f"Error rasterizing invoice {rendered.invoice_number}: {e}")
            raise ExportError("Failed to generate PDF") from e
        token.raise_if_cancelled()

        page_width = self.config.page_width_mm
        image_height = image_height_mm(raster.width, raster.height, page_width)
        offsets = page_offsets(image_height, self.config.page_height_mm)

        try:
            pdf = FPDF(unit="mm", format="A4")
            pdf.set_auto_page_break(False)
            with Image.open(BytesIO(raster.png)) as image:
                for offset in offsets:
                    token.raise_if_cancelled()
                    pdf.add_page()
                    pdf.image(image, x=0, y=offset, w=page_width, h=image_height)
                content = bytes(pdf.output())
        except ExportCancelled:
            raise
        except Exception as e:
            logger.error(f"Error assembling PDF for invoice {rendered.invoice_number}: {e}")
            raise ExportError("Failed to generate PDF") from e

        filename = build_pdf_filename(rendered.invoice_number, rendered.candidate_name)
        logger.info(f"Exported {filename} with {len(offsets)} page(s)")
        return PdfExport(filename=filename, content=content, page_count=len(offsets))
