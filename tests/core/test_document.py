from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest
from pypdf import PdfReader, PdfWriter
from pypdf.generic import (
    ArrayObject,
    DecodedStreamObject,
    DictionaryObject,
    EncodedStreamObject,
    NameObject,
    NullObject,
)

from pdfbinder.core import Bookmark, Document, ObjectNotFoundError, PdfDecodeError, reference
from pdfbinder.core.objects import iter_references, object_id
from pdfbinder.core.outline import BLUE, ZERO_ID


def _contents(document: Document, page_id: tuple[int, int]) -> bytes:
    page = document.get_dictionary(page_id)
    return document.get_object(page.get("/Contents")).get_data()


def test_load_reads_pages_and_trailer(sample_pdf: Path) -> None:
    document = Document.load(sample_pdf)

    assert document.version.startswith("1.")
    assert len(document.get_pages()) == 5
    assert set(document.trailer) <= {"/Root", "/Info", "/ID"}
    assert document.max_id == max(number for number, _ in document.objects)


def test_load_accepts_bytes(sample_pdf: Path) -> None:
    document = Document.load(sample_pdf.read_bytes())
    assert len(document.get_pages()) == 5


def test_load_rejects_garbage(tmp_path: Path) -> None:
    invalid = tmp_path / "not.pdf"
    invalid.write_text("not a pdf")
    with pytest.raises(PdfDecodeError):
        Document.load(invalid)


def test_get_object_reports_missing_ids(document_factory: Callable[..., Document]) -> None:
    document = document_factory(1)
    with pytest.raises(ObjectNotFoundError) as excinfo:
        document.get_object((99, 0))
    assert excinfo.value.object_id == (99, 0)
    assert isinstance(excinfo.value, KeyError)


def test_get_pages_follows_page_tree_order() -> None:
    document = Document()
    root = DictionaryObject({NameObject("/Type"): NameObject("/Pages")})
    root_id = document.add_object(root)
    middle = DictionaryObject({NameObject("/Type"): NameObject("/Pages")})
    middle_id = document.add_object(middle)

    def _leaf(parent: tuple[int, int]) -> tuple[int, int]:
        # untyped leaves count as pages
        return document.add_object(DictionaryObject({NameObject("/Parent"): reference(parent)}))

    first = _leaf(middle_id)
    second = _leaf(middle_id)
    third = _leaf(root_id)
    middle[NameObject("/Kids")] = ArrayObject([reference(first), reference(second)])
    # the middle node is listed twice and must be visited once
    root[NameObject("/Kids")] = ArrayObject(
        [reference(middle_id), reference(third), reference(middle_id)]
    )
    catalog = DictionaryObject({NameObject("/Type"): NameObject("/Catalog")})
    catalog[NameObject("/Pages")] = reference(root_id)
    document.trailer[NameObject("/Root")] = reference(document.add_object(catalog))

    assert document.get_pages() == {1: first, 2: second, 3: third}
    assert document.first_page_below(root_id) == first
    assert document.first_page_below(third) == third


def test_get_pages_without_catalog_is_empty() -> None:
    assert Document().get_pages() == {}


def test_renumber_objects_with_preserves_links(
    document_factory: Callable[..., Document],
) -> None:
    document = document_factory(2, title="Numbers")
    before = [_contents(document, oid) for oid in document.get_pages().values()]
    count = len(document.objects)

    next_id = document.renumber_objects_with(100)

    assert next_id == 100 + count
    assert sorted(document.objects) == [(100 + index, 0) for index in range(count)]
    assert document.max_id == 100 + count - 1
    assert [_contents(document, oid) for oid in document.get_pages().values()] == before
    for obj in [document.trailer, *document.objects.values()]:
        for ref in iter_references(obj):
            assert object_id(ref) in document.objects



def test_renumber_rewrites_shared_containers_once(
    document_factory: Callable[..., Document],
) -> None:
    document = document_factory(2)
    font = DictionaryObject({NameObject("/BaseFont"): NameObject("/Courier")})
    font_id = document.add_object(font)
    resources = DictionaryObject(
        {NameObject("/Font"): DictionaryObject({NameObject("/F1"): reference(font_id)})}
    )
    for page_id in document.get_pages().values():
        document.get_dictionary(page_id)[NameObject("/Resources")] = resources

    document.renumber_objects_with(10)

    for page_id in document.get_pages().values():
        page = document.get_dictionary(page_id)
        font = document.get_dictionary(page.get("/Resources").get("/Font").get("/F1"))
        assert font.get("/BaseFont") == "/Courier"


def test_renumber_objects_nulls_dangling_references(
    document_factory: Callable[..., Document],
) -> None:
    document = document_factory(1)
    page_id = document.get_pages()[1]
    document.get_dictionary(page_id)[NameObject("/Annots")] = reference((500, 0))

    document.renumber_objects()

    page = document.get_dictionary(document.get_pages()[1])
    assert isinstance(page.get("/Annots"), NullObject)


def test_add_bookmark_tracks_nesting() -> None:
    document = Document()
    parent = document.add_bookmark(Bookmark("Chapter", BLUE, 0, ZERO_ID))
    child = document.add_bookmark(Bookmark("Section", BLUE, 0, ZERO_ID), parent)

    assert document.bookmarks == [parent]
    assert document.bookmark_table[parent].children == [child]
    assert document.bookmark_table[child].level == 1
    with pytest.raises(ValueError):
        document.add_bookmark(Bookmark("Orphan", BLUE, 0, ZERO_ID), 42)


def test_adjust_zero_pages_rebinds_to_first_page(
    document_factory: Callable[..., Document],
) -> None:
    document = document_factory(2)
    pages_root = object_id(document.catalog().get("/Pages"))
    first, second = document.get_pages().values()

    tree = document.add_bookmark(Bookmark("Tree", BLUE, 0, pages_root))
    parent = document.add_bookmark(Bookmark("Parent", BLUE, 0, ZERO_ID))
    document.add_bookmark(Bookmark("Child", BLUE, 0, second), parent)

    document.adjust_zero_pages()

    assert document.bookmark_table[tree].target == first
    assert document.bookmark_table[parent].target == second


def test_build_outline_links_items(document_factory: Callable[..., Document]) -> None:
    document = document_factory(2)
    first, second = document.get_pages().values()
    document.add_bookmark(Bookmark("One", BLUE, 0, first))
    document.add_bookmark(Bookmark("Two", BLUE, 0, second, style=2))
    document.add_bookmark(Bookmark("Nowhere", BLUE, 0, ZERO_ID))

    outline_id = document.build_outline()

    assert outline_id is not None
    root = document.get_dictionary(outline_id)
    assert root.get("/Type") == "/Outlines"
    assert root.get("/Count") == 2
    one = document.get_dictionary(root.get("/First"))
    two = document.get_dictionary(root.get("/Last"))
    assert one.get("/Title") == "One"
    assert two.get("/Title") == "Two"
    assert object_id(one.get("/Next")) == object_id(root.get("/Last"))
    assert object_id(two.get("/Prev")) == object_id(root.get("/First"))
    assert object_id(one.get("/Parent")) == outline_id
    assert object_id(one.get("/Dest")[0]) == first
    assert one.get("/Dest")[1] == "/Fit"
    assert "/F" not in one
    assert two.get("/F") == 2


def test_build_outline_without_pages_adds_nothing() -> None:
    document = Document()
    document.add_bookmark(Bookmark("Nowhere", BLUE, 0, ZERO_ID))
    assert document.build_outline() is None
    assert document.objects == {}


def test_compress_prunes_and_encodes(document_factory: Callable[..., Document]) -> None:
    document = document_factory(1)
    document.add_object(DictionaryObject({NameObject("/Orphan"): NameObject("/Yes")}))
    reachable = len(document.objects) - 1

    document.compress()

    assert sorted(document.objects) == [(number, 0) for number in range(1, reachable + 1)]
    streams = [obj for obj in document.objects.values() if isinstance(obj, DecodedStreamObject)]
    assert streams == []
    contents = document.get_object(document.get_dictionary(document.get_pages()[1]).get("/Contents"))
    assert isinstance(contents, EncodedStreamObject)
    assert contents.get("/Filter") == "/FlateDecode"


def test_save_produces_readable_pdf(
    document_factory: Callable[..., Document], tmp_path: Path
) -> None:
    document = document_factory(3, title="Saved")
    document.add_bookmark(Bookmark("Start", BLUE, 0, document.get_pages()[1]))
    outline_id = document.build_outline()
    document.catalog()[NameObject("/Outlines")] = reference(outline_id)
    document.compress()

    output = document.save(tmp_path / "saved.pdf")

    reader = PdfReader(str(output))
    assert len(reader.pages) == 3
    assert reader.metadata.title == "Saved"
    assert [item.title for item in reader.outline] == ["Start"]
    assert b"(page 2)" in reader.pages[1].get_contents().get_data()


def test_save_to_bytes_round_trips_through_load(
    document_factory: Callable[..., Document],
) -> None:
    document = document_factory(2)
    reloaded = Document.load(document.save_to_bytes())
    assert len(reloaded.get_pages()) == 2
    assert reloaded.version == document.version


def _encrypted_pdf(path: Path, user_password: str) -> Path:
    writer = PdfWriter()
    writer.add_blank_page(width=72, height=72)
    writer.add_blank_page(width=72, height=72)
    writer.encrypt(user_password=user_password, owner_password="owner")
    with path.open("wb") as handle:
        writer.write(handle)
    return path


def test_load_decrypts_with_empty_password(tmp_path: Path) -> None:
    document = Document.load(_encrypted_pdf(tmp_path / "open.pdf", ""))
    assert len(document.get_pages()) == 2
    assert "/Encrypt" not in document.trailer


def test_load_rejects_password_protected_pdf(tmp_path: Path) -> None:
    with pytest.raises(PdfDecodeError):
        Document.load(_encrypted_pdf(tmp_path / "locked.pdf", "secret"))
