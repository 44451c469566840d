"""Exceptions raised by the :mod:`pdfbinder.core` object model."""

from __future__ import annotations


class PdfBinderError(Exception):
    """Base exception for all errors raised by :mod:`pdfbinder`."""


class PdfDecodeError(PdfBinderError):
    """Raised when a byte stream cannot be parsed into a document."""


class ObjectNotFoundError(PdfBinderError, KeyError):
    """Raised when an object identifier is not present in a document."""

    def __init__(self, object_id: tuple[int, int]) -> None:
        self.object_id = object_id
        super().__init__(f"Object {object_id[0]} {object_id[1]} R not found")

    def __str__(self) -> str:
        return self.args[0]


class ObjectTypeError(PdfBinderError, TypeError):
    """Raised when an object does not have the expected shape."""
