"""Conversion of raster images into single-page documents."""

from __future__ import annotations

from .converter import ImagePlacement, fit_to_page, image_to_document, read_image, remove_alpha
from .exceptions import ImageConversionError
from .pagesize import A3, A4, A5, LEGAL, LETTER, PAGE_SIZES, PageSizeInMm, page_size_from_name

IMAGE_SUFFIXES = (".png", ".jpg", ".jpeg", ".bmp")

__all__ = [
    "image_to_document",
    "read_image",
    "remove_alpha",
    "fit_to_page",
    "ImagePlacement",
    "ImageConversionError",
    "PageSizeInMm",
    "PAGE_SIZES",
    "page_size_from_name",
    "IMAGE_SUFFIXES",
    "A3",
    "A4",
    "A5",
    "LETTER",
    "LEGAL",
]
