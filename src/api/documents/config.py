import os
from pydantic import BaseModel


class ExportConfig(BaseModel):
    page_width_mm: float = float(os.getenv("EXPORT_PAGE_WIDTH_MM", "210"))
    page_height_mm: float = float(os.getenv("EXPORT_PAGE_HEIGHT_MM", "295"))
    scale: float = float(os.getenv("EXPORT_SCALE", "2"))
    browser_headless: bool = os.getenv("EXPORT_BROWSER_HEADLESS", "true").lower() != "false"
    # Viewport matching an A4 page at 96 dpi
    viewport_width: int = 794
    viewport_height: int = 1123
