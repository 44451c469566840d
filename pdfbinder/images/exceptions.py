"""Custom exceptions for :mod:`pdfbinder.images`."""

from __future__ import annotations

from ..core.exceptions import PdfBinderError


class ImageConversionError(PdfBinderError):
    """Raised when an image cannot be read or embedded in a document."""
