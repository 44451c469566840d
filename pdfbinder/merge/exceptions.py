"""Custom exceptions for the :mod:`pdfbinder.merge` package."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..core.exceptions import PdfBinderError

if TYPE_CHECKING:  # pragma: no cover
    from ..core.document import Document


class PdfMergeError(PdfBinderError):
    """Raised when the merge operation fails."""


class PdfValidationError(PdfBinderError):
    """Raised when a PDF file fails validation."""


class MissingRootError(PdfMergeError):
    """Raised when no input provides a ``Catalog`` or ``Pages`` root.

    ``document`` holds the store as accumulated when the merge stopped:
    without a Pages root it contains the non-page objects only; without a
    Catalog the page tree has already been rebuilt.  No trailer root is
    set in either case.
    """

    def __init__(self, role: str, document: "Document") -> None:
        self.role = role
        self.document = document
        super().__init__(f"{role} root not found")
