"""Inspection helpers for merged and input PDF files."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Any, Dict

from pypdf import PdfReader

from .exceptions import PdfValidationError
from .utils import PathLike, ensure_path

LOGGER = logging.getLogger("pdfbinder.merge")


@dataclass(frozen=True)
class PDFInfo:
    """Summary information describing a PDF document."""

    path: Path
    num_pages: int
    is_encrypted: bool
    metadata: Dict[str, Any]
    outline: list[str] = field(default_factory=list)


def _open(pdf_path: Path) -> PdfReader:
    try:
        reader = PdfReader(str(pdf_path))
    except Exception as exc:  # pragma: no cover - dependency exceptions vary
        LOGGER.error("Failed to read PDF %s: %s", pdf_path, exc)
        raise PdfValidationError(f"Unable to read PDF: {pdf_path}") from exc

    if reader.is_encrypted:
        try:
            reader.decrypt("")
        except Exception as exc:  # pragma: no cover
            LOGGER.error("Encrypted PDF %s cannot be decrypted: %s", pdf_path, exc)
            raise PdfValidationError("Encrypted PDF cannot be decrypted") from exc
    return reader


def validate_pdf(path: PathLike) -> bool:
    """Return ``True`` if *path* points to a readable PDF with pages.

    ``PdfValidationError`` is raised otherwise.
    """

    pdf_path = ensure_path(path)
    LOGGER.debug("Validating PDF at %s", pdf_path)
    reader = _open(pdf_path)
    if len(reader.pages) == 0:
        LOGGER.error("PDF %s contains no pages", pdf_path)
        raise PdfValidationError("PDF contains no pages")
    return True


def get_pdf_info(path: PathLike) -> PDFInfo:
    """Return :class:`PDFInfo` describing the PDF located at *path*.

    ``outline`` lists the titles of the top-level outline items.
    """

    pdf_path = ensure_path(path)
    LOGGER.debug("Gathering PDF info for %s", pdf_path)
    reader = _open(pdf_path)

    metadata: Dict[str, Any] = {}
    if reader.metadata:
        metadata = {
            key: value for key, value in reader.metadata.items() if value is not None
        }

    outline = [item.title for item in reader.outline if not isinstance(item, list)]

    info = PDFInfo(
        path=pdf_path,
        num_pages=len(reader.pages),
        is_encrypted=reader.is_encrypted,
        metadata=metadata,
        outline=outline,
    )
    LOGGER.info(
        "PDF info: path=%s, pages=%s, bookmarks=%s",
        info.path,
        info.num_pages,
        len(info.outline),
    )
    return info


__all__ = ["validate_pdf", "get_pdf_info", "PDFInfo"]
