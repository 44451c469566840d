"""Merge PDF documents and images into one bookmarked PDF."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from .core import Bookmark, Document, ObjectNotFoundError, PdfBinderError, PdfDecodeError
from .images import (
    A4,
    PAGE_SIZES,
    ImageConversionError,
    PageSizeInMm,
    image_to_document,
    page_size_from_name,
)
from .merge import (
    MissingRootError,
    PDFInfo,
    PdfMergeError,
    PdfValidationError,
    discover_inputs,
    get_pdf_info,
    merge_documents,
    merge_pdfs,
    validate_pdf,
)
from .tools import load_builtin_plugins
from .tools.common.interfaces import ToolContext
from .tools.common.pipeline import ToolRegistry, register_tool, registry

load_builtin_plugins()

__version__ = "0.1.0"

__all__ = [
    "Document",
    "Bookmark",
    "merge_documents",
    "merge_pdfs",
    "image_to_document",
    "discover_inputs",
    "get_pdf_info",
    "validate_pdf",
    "PDFInfo",
    "PageSizeInMm",
    "PAGE_SIZES",
    "A4",
    "page_size_from_name",
    "PdfBinderError",
    "PdfDecodeError",
    "ObjectNotFoundError",
    "PdfMergeError",
    "PdfValidationError",
    "MissingRootError",
    "ImageConversionError",
    "ToolContext",
    "ToolRegistry",
    "registry",
    "register_tool",
    "merge_files",
    "convert_image",
    "inspect_document",
]


def merge_files(inputs: Iterable[str | Path], output: str | Path, **options) -> Path:
    """Convenience wrapper around the merge plugin."""

    context = ToolContext(output_path=output, options={"inputs": list(inputs), **options})
    tool = registry.create("merge", context)
    return tool.run()


def convert_image(
    input: str | Path,
    output: str | Path | None = None,
    *,
    page_size: PageSizeInMm | None = A4,
) -> Path:
    """Convenience wrapper around the image plugin."""

    context = ToolContext(input_path=input, output_path=output, options={"page_size": page_size})
    tool = registry.create("image", context)
    return tool.run()


def inspect_document(input: str | Path) -> PDFInfo:
    """Convenience wrapper around the info plugin."""

    context = ToolContext(input_path=input)
    tool = registry.create("info", context)
    return tool.run()
