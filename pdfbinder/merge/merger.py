"""File-level merge built on :mod:`pdfbinder.merge.engine`."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Mapping, Sequence

from pypdf.generic import DictionaryObject, IndirectObject, NameObject, TextStringObject

from ..core.document import Document
from ..core.exceptions import PdfDecodeError
from ..images import IMAGE_SUFFIXES, A4, ImageConversionError, PageSizeInMm, image_to_document
from .discovery import expand_inputs
from .engine import merge_documents
from .exceptions import PdfMergeError
from .utils import PathLike, ensure_iterable, ensure_path

LOGGER = logging.getLogger("pdfbinder.merge")

INFO_KEY = NameObject("/Info")

_METADATA_KEYS = {
    "title": "/Title",
    "author": "/Author",
    "subject": "/Subject",
    "keywords": "/Keywords",
}


def load_input(path: Path, *, page_size: PageSizeInMm | None = A4) -> Document:
    """Load a PDF, or convert an image, into a :class:`Document`."""

    if path.suffix.lower() in IMAGE_SUFFIXES:
        return image_to_document(path, page_size=page_size)
    return Document.load(path)


def _document_info(values: Mapping[str, object]) -> DictionaryObject:
    info = DictionaryObject()
    for key, value in values.items():
        if value is None:
            continue
        string_value = str(value).strip()
        if not string_value:
            continue
        pdf_key = _METADATA_KEYS.get(key.lower())
        if pdf_key is None:
            pdf_key = key if str(key).startswith("/") else f"/{key}"
        info[NameObject(pdf_key)] = TextStringObject(string_value)
    return info


def apply_document_info(document: Document, values: Mapping[str, object]) -> None:
    """Replace the ``/Info`` dictionary of *document* with *values*."""

    info = _document_info(values)
    if not info:
        return
    current = document.trailer.get(INFO_KEY)
    if isinstance(current, IndirectObject) and document.resolve(current) is not None:
        document.set_object((current.idnum, current.generation), info)
    else:
        info_id = document.add_object(info)
        document.trailer[INFO_KEY] = IndirectObject(info_id[0], info_id[1], None)
    LOGGER.debug("Set document info on merged PDF: %s", dict(info))


def merge_pdfs(
    inputs: Iterable[PathLike],
    output: PathLike,
    *,
    metadata: bool = True,
    document_info: Mapping[str, object] | None = None,
    titles: Sequence[str | None] | None = None,
    page_size: PageSizeInMm | None = A4,
) -> Path:
    """Merge *inputs* into *output* and return the resulting path.

    Args:
        inputs: PDF files, image files or directories.  Directories are
            expanded to the PDFs and images they contain.
        output: The output file path that will contain the merged PDF.
        metadata: When ``True`` the document info of the first input that
            has one is copied into the merged document.
        document_info: Explicit document info (``title``, ``author``,
            ``subject``, ``keywords`` or raw ``/Key`` names).  Replaces the
            copied metadata.
        titles: Bookmark title for each input file, after directory
            expansion.  Missing entries fall back to ``Page_<n>``.
        page_size: Page size for image inputs; ``None`` sizes the page
            after the image.

    Raises:
        PdfMergeError: If no input is given or none can be read, or if the
            output cannot be written.
        MissingRootError: If the inputs lack a Catalog or Pages root.
    """

    paths = expand_inputs(ensure_iterable(inputs))
    if not paths:
        raise PdfMergeError("No input PDFs provided")

    output_path = ensure_path(output)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    documents: list[Document] = []
    kept_titles: list[str | None] = []
    for index, path in enumerate(paths):
        LOGGER.debug("Processing input %s", path)
        try:
            documents.append(load_input(path, page_size=page_size))
        except (PdfDecodeError, ImageConversionError) as exc:
            LOGGER.error("Skipping %s: %s", path, exc)
            continue
        kept_titles.append(titles[index] if titles and index < len(titles) else None)

    if not documents:
        raise PdfMergeError("None of the inputs could be read")

    document = merge_documents(documents, titles=kept_titles, metadata=metadata)
    if document_info:
        apply_document_info(document, document_info)

    try:
        document.save(output_path)
    except OSError as exc:  # pragma: no cover - IO errors vary
        LOGGER.error("Failed to write merged PDF to %s: %s", output_path, exc)
        raise PdfMergeError(f"Failed to write merged PDF to {output_path}") from exc

    LOGGER.info("Merged %d of %d input(s) into %s", len(documents), len(paths), output_path)
    return output_path


__all__ = ["merge_pdfs", "load_input", "apply_document_info"]
