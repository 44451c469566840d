"""PDF object model used by :mod:`pdfbinder`."""

from __future__ import annotations

from .document import DEFAULT_VERSION, Document
from .exceptions import ObjectNotFoundError, ObjectTypeError, PdfBinderError, PdfDecodeError
from .objects import ObjectId, as_dict, is_page, reference, type_name
from .outline import BLUE, Bookmark

__all__ = [
    "Document",
    "DEFAULT_VERSION",
    "Bookmark",
    "BLUE",
    "ObjectId",
    "as_dict",
    "is_page",
    "reference",
    "type_name",
    "PdfBinderError",
    "PdfDecodeError",
    "ObjectNotFoundError",
    "ObjectTypeError",
]
