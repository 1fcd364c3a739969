from dataclasses import dataclass
from io import BytesIO
from typing import Optional, Protocol

from fastapi.logger import logger
from PIL import Image
from playwright.sync_api import Error as PlaywrightError, sync_playwright

from src.api.documents.config import ExportConfig

DOCUMENT_SELECTOR = "#invoice-document"


class RasterizeError(Exception):
    """Raised when the invoice document cannot be turned into a bitmap"""


@dataclass(frozen=True)
class Raster:
    """PNG bitmap of the document and its size in pixels"""
    png: bytes
    width: int
    height: int

    @classmethod
    def from_png(cls, png: bytes) -> "Raster":
        with Image.open(BytesIO(png)) as image:
            width, height = image.size
        return cls(png=png, width=width, height=height)


class Rasterizer(Protocol):
    def rasterize(self, html: str) -> Raster:
        ...


class PlaywrightRasterizer:
    """
    Screenshots the invoice document in headless Chromium.

    The page is rendered at `scale` device pixels per CSS pixel so the PDF stays sharp when printed.
    """

    def __init__(self, config: Optional[ExportConfig] = None):
        self.config = config or ExportConfig()

    def rasterize(self, html: str) -> Raster:
        try:
            with sync_playwright() as p:
                browser = p.chromium.launch(headless=self.config.browser_headless)
                try:
                    page = browser.new_page(
                        viewport={"width": self.config.viewport_width, "height": self.config.viewport_height},
                        device_scale_factor=self.config.scale,
                    )
                    page.set_content(html, wait_until="networkidle")
                    element = page.query_selector(DOCUMENT_SELECTOR)
                    if element is None:
                        raise RasterizeError(f"Element {DOCUMENT_SELECTOR} not found in rendered document")
                    png = element.screenshot(type="png")
                finally:
                    browser.close()
        except PlaywrightError as e:
            logger.error(f"Error rasterizing invoice document: {e}")
            raise RasterizeError(f"Error rasterizing invoice document: {e}") from e
        return Raster.from_png(png)
