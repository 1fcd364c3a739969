"""Slicing of a rendered invoice bitmap into fixed-height PDF pages."""

import math
from typing import List

# Ignore float noise when the image height is an exact multiple of the page height
_TOLERANCE_MM = 1e-6


def image_height_mm(canvas_width: int, canvas_height: int, page_width_mm: float = 210) -> float:
    """Height of the bitmap once scaled to the page width"""
    if canvas_width <= 0:
        raise ValueError("Canvas width must be positive")
    return canvas_height * page_width_mm / canvas_width


def page_count(image_height: float, page_height: float = 295) -> int:
    """ceil(image_height / page_height), at least one page"""
    return max(1, math.ceil(image_height / page_height - _TOLERANCE_MM))


def page_offsets(image_height: float, page_height: float = 295) -> List[float]:
    """
    Vertical offset of the bitmap on each page: 0 on the first page, then
    one page height further up per page while content remains.
    """
    return [-(index * page_height) for index in range(page_count(image_height, page_height))]
