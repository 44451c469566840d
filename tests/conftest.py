from __future__ import annotations

from pathlib import Path
from typing import Callable
import sys

import pytest
from PIL import Image
from pypdf import PdfWriter
from pypdf.generic import (
    ArrayObject,
    DecodedStreamObject,
    DictionaryObject,
    NameObject,
    NumberObject,
    TextStringObject,
)

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from pdfbinder.core import Document, reference  # noqa: E402

TYPE = NameObject("/Type")


def page_text(index: int) -> bytes:
    return f"BT /F1 12 Tf 10 10 Td (page {index}) Tj ET".encode("ascii")


def build_document(
    page_count: int,
    *,
    title: str | None = None,
    first_page: int = 1,
) -> Document:
    """Return a hand-built document with *page_count* text pages.

    Page ``n`` carries the content stream :func:`page_text` of
    ``first_page + n - 1`` so tests can follow pages through a merge.
    """

    document = Document()
    pages = DictionaryObject({TYPE: NameObject("/Pages")})
    pages_id = document.add_object(pages)

    kids = ArrayObject()
    for offset in range(page_count):
        content = DecodedStreamObject()
        content.set_data(page_text(first_page + offset))
        content_id = document.add_object(content)
        page = DictionaryObject()
        page[TYPE] = NameObject("/Page")
        page[NameObject("/Parent")] = reference(pages_id)
        page[NameObject("/MediaBox")] = ArrayObject(
            [NumberObject(0), NumberObject(0), NumberObject(200), NumberObject(200)]
        )
        page[NameObject("/Contents")] = reference(content_id)
        kids.append(reference(document.add_object(page)))
    pages[NameObject("/Kids")] = kids
    pages[NameObject("/Count")] = NumberObject(page_count)

    catalog = DictionaryObject({TYPE: NameObject("/Catalog")})
    catalog[NameObject("/Pages")] = reference(pages_id)
    document.trailer[NameObject("/Root")] = reference(document.add_object(catalog))

    if title is not None:
        info = DictionaryObject({NameObject("/Title"): TextStringObject(title)})
        document.trailer[NameObject("/Info")] = reference(document.add_object(info))
    return document


@pytest.fixture()
def document_factory() -> Callable[..., Document]:
    return build_document


@pytest.fixture()
def sample_pdf(tmp_path: Path) -> Path:
    pdf_path = tmp_path / "sample.pdf"
    writer = PdfWriter()
    for _ in range(5):
        writer.add_blank_page(width=200, height=200)
    writer.add_metadata({"/Producer": "pdfbinder-tests", "/Title": "Sample"})
    with pdf_path.open("wb") as stream:
        writer.write(stream)
    return pdf_path


@pytest.fixture()
def pdf_factory(tmp_path: Path) -> Callable[..., Path]:
    def _create(filename: str, title: str | None = None, pages: int = 1) -> Path:
        path = tmp_path / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        writer = PdfWriter()
        for _ in range(pages):
            writer.add_blank_page(width=72, height=72)
        if title is not None:
            writer.add_metadata({"/Title": title})
        with path.open("wb") as handle:
            writer.write(handle)
        return path

    return _create


@pytest.fixture()
def sample_pdfs(pdf_factory: Callable[..., Path]) -> list[Path]:
    pdf1 = pdf_factory("one.pdf", title="Document One", pages=2)
    pdf2 = pdf_factory("two.pdf")
    return [pdf1, pdf2]


@pytest.fixture()
def image_factory(tmp_path: Path) -> Callable[..., Path]:
    def _create(
        filename: str,
        size: tuple[int, int] = (60, 40),
        mode: str = "RGB",
        dpi: tuple[int, int] | None = None,
    ) -> Path:
        path = tmp_path / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        colors = {"RGB": (200, 30, 30), "RGBA": (200, 30, 30, 128), "L": 128}
        color = colors.get(mode, 0)
        image = Image.new(mode, size, color)
        params = {"dpi": dpi} if dpi is not None else {}
        image.save(path, **params)
        return path

    return _create
