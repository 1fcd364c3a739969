import re
import pytest

from src.api.documents.services.pdf_export import (
    CancellationToken,
    ExportCancelled,
    ExportError,
    PdfExporter,
    build_pdf_filename,
)
from src.api.documents.services.rasterizer import Raster, RasterizeError
from src.api.documents.services.renderer import render_invoice_document


def pdf_page_objects(content: bytes) -> int:
    """Number of page objects written to the PDF"""
    return len(re.findall(rb"/Type\s*/Page(?!s)\b", content))


class TestPdfFilename:
    """Test the download file name"""

    def test_filename(self):
        """Test number and candidate name with whitespace runs as dashes"""
        assert build_pdf_filename("INV-202501-0042", "Asha  Rani\tVerma") == \
            "Invoice-INV-202501-0042-Asha-Rani-Verma.pdf"

    def test_filename_missing_parts(self):
        """Test that absent parts are replaced by 'invoice'"""
        assert build_pdf_filename(None, "Asha Verma") == "Invoice-invoice-Asha-Verma.pdf"
        assert build_pdf_filename("INV-202501-0042", "  ") == "Invoice-INV-202501-0042-invoice.pdf"
        assert build_pdf_filename("", None) == "Invoice-invoice-invoice.pdf"


class TestPdfExporter:
    """Test rasterizing and paginating the invoice document"""

    def test_export_single_page(self, template_data, rasterizer_factory):
        """Test a bitmap exactly one page high"""
        rasterizer = rasterizer_factory(width=420, height=590)

        export = PdfExporter(rasterizer).export(render_invoice_document(template_data))

        assert export.content.startswith(b"%PDF")
        assert export.page_count == 1
        assert pdf_page_objects(export.content) == 1
        assert export.filename == "Invoice-INV-202501-0042-Asha-Verma.pdf"
        assert len(rasterizer.calls) == 1
        assert 'id="invoice-document"' in rasterizer.calls[0]

    def test_export_multiple_pages(self, template_data, rasterizer_factory):
        """Test ceil(image height / 295) pages"""
        # 1400px scaled to 210mm wide -> 700mm high
        rasterizer = rasterizer_factory(width=420, height=1400)

        export = PdfExporter(rasterizer).export(render_invoice_document(template_data))

        assert export.page_count == 3
        assert pdf_page_objects(export.content) == 3

    def test_export_exact_multiple_has_no_blank_page(self, template_data, rasterizer_factory):
        """Test content ending on a page boundary"""
        rasterizer = rasterizer_factory(width=420, height=1180)

        export = PdfExporter(rasterizer).export(render_invoice_document(template_data))

        assert export.page_count == 2
        assert pdf_page_objects(export.content) == 2

    @pytest.mark.parametrize("height, pages", [(590, 1), (1180, 2), (1181, 3), (1400, 3), (2950, 5)])
    def test_pages_written_match_image_height(self, template_data, rasterizer_factory, height, pages):
        """Test that the file holds ceil(image height / 295) pages"""
        rasterizer = rasterizer_factory(width=420, height=height)

        export = PdfExporter(rasterizer).export(render_invoice_document(template_data))

        assert pdf_page_objects(export.content) == pages
        assert export.page_count == pages

    def test_export_without_data(self, rasterizer_factory):
        """Test that the placeholder cannot be exported"""
        rasterizer = rasterizer_factory()

        with pytest.raises(ExportError):
            PdfExporter(rasterizer).export(render_invoice_document(None))
        assert rasterizer.calls == []

    def test_rasterize_error_aborts(self, template_data, rasterizer_factory):
        """Test that rasterizer failures become export errors"""
        rasterizer = rasterizer_factory(error=RasterizeError("browser crashed"))

        with pytest.raises(ExportError, match="Failed to generate PDF"):
            PdfExporter(rasterizer).export(render_invoice_document(template_data))

    def test_cancelled_before_start(self, template_data, rasterizer_factory):
        """Test that a cancelled token stops the export before rasterizing"""
        rasterizer = rasterizer_factory()
        token = CancellationToken()
        token.cancel()

        with pytest.raises(ExportCancelled):
            PdfExporter(rasterizer).export(render_invoice_document(template_data), token)
        assert rasterizer.calls == []

    def test_cancelled_while_rasterizing(self, template_data, rasterizer_factory):
        """Test cancellation between rasterizing and paginating"""
        token = CancellationToken()
        rasterizer = rasterizer_factory(on_rasterize=token.cancel)

        with pytest.raises(ExportCancelled):
            PdfExporter(rasterizer).export(render_invoice_document(template_data), token)


class TestRaster:
    """Test reading bitmap sizes"""

    def test_from_png(self, rasterizer_factory):
        """Test that the size is read from the PNG"""
        raster = rasterizer_factory(width=300, height=700).rasterize("<div></div>")

        assert Raster.from_png(raster.png) == raster
