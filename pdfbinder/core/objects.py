"""Helpers over the :mod:`pypdf.generic` object model.

Documents handled by :mod:`pdfbinder` hold detached copies of pypdf
generic objects.  A reference inside a store is an
:class:`~pypdf.generic.IndirectObject` that is not bound to any reader;
it is resolved explicitly through the owning
:class:`~pdfbinder.core.document.Document`.  The object variants are the
pypdf classes themselves:

* ``DictionaryObject`` for dictionaries,
* ``ArrayObject`` for arrays,
* ``IndirectObject`` for references,
* ``StreamObject`` for a dictionary with raw bytes,
* number, string, name, boolean and null objects for scalars.
"""

from __future__ import annotations

from typing import Any, Callable, Iterator, Optional, Tuple

from pypdf.generic import (
    ArrayObject,
    DecodedStreamObject,
    DictionaryObject,
    EncodedStreamObject,
    IndirectObject,
    NameObject,
    PdfObject,
    StreamObject,
)

from .exceptions import ObjectTypeError

__all__ = [
    "ObjectId",
    "TYPE_KEY",
    "KIDS_KEY",
    "PARENT_KEY",
    "object_id",
    "reference",
    "type_name",
    "as_dict",
    "is_page",
    "detach",
    "rewrite_references",
    "map_references",
    "iter_references",
]

ObjectId = Tuple[int, int]

TYPE_KEY = NameObject("/Type")
KIDS_KEY = NameObject("/Kids")
PARENT_KEY = NameObject("/Parent")
FILTER_KEY = NameObject("/Filter")


def object_id(ref: IndirectObject) -> ObjectId:
    """Return the ``(number, generation)`` pair addressed by *ref*."""

    return (ref.idnum, ref.generation)


def reference(oid: ObjectId) -> IndirectObject:
    """Return an unbound reference to *oid*."""

    return IndirectObject(oid[0], oid[1], None)


def type_name(obj: Any) -> Optional[str]:
    """Return the structural role stored in the ``/Type`` entry of *obj*.

    ``"Catalog"``, ``"Pages"``, ``"Page"`` and so on are returned without
    the leading slash.  Objects that are not dictionaries (streams are
    dictionaries too) or carry no name in ``/Type`` yield ``None``.
    """

    if not isinstance(obj, DictionaryObject):
        return None
    value = obj.get(TYPE_KEY)
    if isinstance(value, NameObject):
        return str(value)[1:]
    return None


def as_dict(obj: Any) -> DictionaryObject:
    """Return *obj* as a dictionary or raise :class:`ObjectTypeError`."""

    if isinstance(obj, DictionaryObject):
        return obj
    raise ObjectTypeError(f"Expected a dictionary, got {type(obj).__name__}")


def is_page(obj: Any) -> bool:
    """Return ``True`` for leaf nodes of a page tree.

    Pages written without a ``/Type`` entry are recognised by the absence
    of ``/Kids``.
    """

    if not isinstance(obj, DictionaryObject):
        return False
    role = type_name(obj)
    if role is None:
        return KIDS_KEY not in obj
    return role == "Page"


def _copy(obj: Any, on_reference: Callable[[IndirectObject], Any]) -> Any:
    if isinstance(obj, IndirectObject):
        return on_reference(obj)
    if isinstance(obj, StreamObject):
        stream: StreamObject
        if FILTER_KEY in obj:
            stream = EncodedStreamObject()
        else:
            stream = DecodedStreamObject()
        stream._data = obj._data  # type: ignore[attr-defined]
        for key, value in obj.items():
            stream[NameObject(key)] = _copy(value, on_reference)
        return stream
    if isinstance(obj, DictionaryObject):
        copy = DictionaryObject()
        for key, value in obj.items():
            copy[NameObject(key)] = _copy(value, on_reference)
        return copy
    if isinstance(obj, ArrayObject):
        return ArrayObject(_copy(item, on_reference) for item in obj)
    return obj


def detach(
    obj: Any,
    visit: Callable[[IndirectObject], None] | None = None,
) -> Any:
    """Return a deep copy of *obj* whose references are unbound.

    *visit* is called with every reference found, in document order, so
    callers can follow the object graph while copying it.  Stream bytes
    are shared, not copied.
    """

    def _unbind(ref: IndirectObject) -> IndirectObject:
        if visit is not None:
            visit(ref)
        return IndirectObject(ref.idnum, ref.generation, None)

    return _copy(obj, _unbind)


def rewrite_references(
    obj: Any,
    rewrite: Callable[[IndirectObject], PdfObject],
) -> Any:
    """Return a copy of *obj* with every reference replaced by ``rewrite(reference)``.

    Unlike :func:`map_references` nothing inside *obj* is modified, so a
    container reachable from several objects is never rewritten twice.
    """

    return _copy(obj, rewrite)


def map_references(
    obj: Any,
    rewrite: Callable[[IndirectObject], PdfObject],
) -> Any:
    """Replace every reference inside *obj* with ``rewrite(reference)``.

    Containers are updated in place; the (possibly replaced) object is
    returned so a top-level reference can be rewritten too.
    """

    if isinstance(obj, IndirectObject):
        return rewrite(obj)
    if isinstance(obj, DictionaryObject):
        for key, value in list(obj.items()):
            if isinstance(value, (IndirectObject, DictionaryObject, ArrayObject)):
                obj[key] = map_references(value, rewrite)
        return obj
    if isinstance(obj, ArrayObject):
        for index, item in enumerate(obj):
            if isinstance(item, (IndirectObject, DictionaryObject, ArrayObject)):
                obj[index] = map_references(item, rewrite)
        return obj
    return obj


def iter_references(obj: Any) -> Iterator[IndirectObject]:
    """Yield every reference contained in *obj*, depth first."""

    stack = [obj]
    while stack:
        current = stack.pop()
        if isinstance(current, IndirectObject):
            yield current
        elif isinstance(current, DictionaryObject):
            stack.extend(reversed(list(current.values())))
        elif isinstance(current, ArrayObject):
            stack.extend(reversed(current))
