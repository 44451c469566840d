from __future__ import annotations

import pytest
from pypdf.generic import (
    ArrayObject,
    DecodedStreamObject,
    DictionaryObject,
    EncodedStreamObject,
    IndirectObject,
    NameObject,
    NullObject,
    NumberObject,
)

from pdfbinder.core.exceptions import ObjectTypeError
from pdfbinder.core.objects import (
    as_dict,
    detach,
    is_page,
    iter_references,
    map_references,
    object_id,
    reference,
    rewrite_references,
    type_name,
)


def _dict(**entries: object) -> DictionaryObject:
    result = DictionaryObject()
    for key, value in entries.items():
        result[NameObject(f"/{key}")] = value
    return result


def test_type_name_reads_type_entry() -> None:
    assert type_name(_dict(Type=NameObject("/Catalog"))) == "Catalog"
    assert type_name(_dict(Count=NumberObject(1))) is None
    assert type_name(ArrayObject()) is None
    assert type_name(NumberObject(3)) is None


def test_type_name_of_stream() -> None:
    stream = DecodedStreamObject()
    stream[NameObject("/Type")] = NameObject("/XObject")
    assert type_name(stream) == "XObject"


def test_as_dict_rejects_other_objects() -> None:
    value = _dict()
    assert as_dict(value) is value
    with pytest.raises(ObjectTypeError):
        as_dict(ArrayObject())
    with pytest.raises(TypeError):
        as_dict(NumberObject(1))


def test_is_page_accepts_untyped_leaves() -> None:
    assert is_page(_dict(Type=NameObject("/Page")))
    assert is_page(_dict(MediaBox=ArrayObject()))
    assert not is_page(_dict(Kids=ArrayObject()))
    assert not is_page(_dict(Type=NameObject("/Pages"), Kids=ArrayObject()))
    assert not is_page(NullObject())


def test_detach_unbinds_references_and_reports_them() -> None:
    bound = IndirectObject(4, 0, object())
    source = _dict(Kids=ArrayObject([bound]), Parent=IndirectObject(2, 0, object()))
    seen: list[tuple[int, int]] = []

    copy = detach(source, lambda ref: seen.append(object_id(ref)))

    assert copy is not source
    assert seen == [(4, 0), (2, 0)]
    kid = copy.get("/Kids")[0]
    assert isinstance(kid, IndirectObject)
    assert kid.pdf is None
    assert object_id(kid) == (4, 0)


def test_detach_keeps_stream_kind_and_data() -> None:
    raw = DecodedStreamObject()
    raw.set_data(b"q Q")
    encoded = raw.flate_encode()

    raw_copy = detach(raw)
    encoded_copy = detach(encoded)

    assert isinstance(raw_copy, DecodedStreamObject)
    assert raw_copy.get_data() == b"q Q"
    assert isinstance(encoded_copy, EncodedStreamObject)
    assert encoded_copy.get_data() == b"q Q"


def test_map_references_rewrites_nested_values_in_place() -> None:
    value = _dict(
        Parent=reference((1, 0)),
        Kids=ArrayObject([reference((2, 0)), _dict(Next=reference((3, 0)))]),
    )

    result = map_references(value, lambda ref: reference((ref.idnum + 10, 0)))

    assert result is value
    assert [object_id(ref) for ref in iter_references(value)] == [(11, 0), (12, 0), (13, 0)]


def test_map_references_rewrites_top_level_reference() -> None:
    assert isinstance(map_references(reference((1, 0)), lambda ref: NullObject()), NullObject)



def test_rewrite_references_leaves_shared_containers_untouched() -> None:
    shared = _dict(F1=reference((1, 0)))
    first = _dict(Font=shared)
    second = _dict(Font=shared)

    def _shift(ref: IndirectObject) -> IndirectObject:
        return reference((ref.idnum + 1, 0))

    rewritten = [rewrite_references(obj, _shift) for obj in (first, second)]

    assert object_id(shared.get("/F1")) == (1, 0)
    for obj in rewritten:
        assert obj.get("/Font") is not shared
        assert object_id(obj.get("/Font").get("/F1")) == (2, 0)


def test_iter_references_walks_depth_first() -> None:
    value = ArrayObject(
        [reference((1, 0)), _dict(A=reference((2, 0)), B=ArrayObject([reference((3, 0))]))]
    )
    assert [object_id(ref) for ref in iter_references(value)] == [(1, 0), (2, 0), (3, 0)]
