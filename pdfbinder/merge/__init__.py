"""Merge PDFs and images into a single document with one bookmark per input."""

from __future__ import annotations

from .discovery import DISCOVERY_ORDER, discover_inputs, expand_inputs
from .engine import MergeState, merge_documents, merge_into
from .exceptions import MissingRootError, PdfMergeError, PdfValidationError
from .merger import apply_document_info, load_input, merge_pdfs
from .validators import PDFInfo, get_pdf_info, validate_pdf

__all__ = [
    "merge_pdfs",
    "merge_documents",
    "merge_into",
    "MergeState",
    "load_input",
    "apply_document_info",
    "discover_inputs",
    "expand_inputs",
    "DISCOVERY_ORDER",
    "validate_pdf",
    "get_pdf_info",
    "PDFInfo",
    "PdfMergeError",
    "PdfValidationError",
    "MissingRootError",
]
