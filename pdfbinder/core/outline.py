"""Bookmarks and their serialization into a PDF outline tree."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import TYPE_CHECKING, Sequence

from pypdf.generic import (
    ArrayObject,
    DictionaryObject,
    FloatObject,
    NameObject,
    NumberObject,
    TextStringObject,
)

from .objects import TYPE_KEY, ObjectId, reference

if TYPE_CHECKING:  # pragma: no cover
    from .document import Document

LOGGER = logging.getLogger("pdfbinder.core")

Color = tuple[float, float, float]

BLUE: Color = (0.0, 0.0, 1.0)

ZERO_ID: ObjectId = (0, 0)


@dataclass(slots=True)
class Bookmark:
    """A navigation entry pointing at a page of a document.

    ``target`` may be :data:`ZERO_ID` (or any non-page object) until
    :meth:`Document.adjust_zero_pages` rebinds it.  ``level`` is the
    nesting depth and is maintained by :meth:`Document.add_bookmark`.
    ``style`` is written as the item's raw ``/F`` flags (1 italic, 2 bold).
    """

    title: str
    color: Color
    level: int
    target: ObjectId
    style: int = 0
    children: list[int] = field(default_factory=list)
    id: int = 0


def _item(bookmark: Bookmark, parent_id: ObjectId) -> DictionaryObject:
    item = DictionaryObject()
    item[NameObject("/Title")] = TextStringObject(bookmark.title)
    item[NameObject("/Parent")] = reference(parent_id)
    item[NameObject("/Dest")] = ArrayObject(
        [reference(bookmark.target), NameObject("/Fit")]
    )
    item[NameObject("/C")] = ArrayObject(FloatObject(c) for c in bookmark.color)
    if bookmark.style:
        item[NameObject("/F")] = NumberObject(bookmark.style)
    return item


def _write_level(
    document: "Document",
    bookmark_ids: Sequence[int],
    parent_id: ObjectId,
) -> tuple[ObjectId | None, ObjectId | None, int]:
    """Write one sibling list; return its first and last ids and open count."""

    written: list[ObjectId] = []
    visible = 0
    for bookmark_id in bookmark_ids:
        bookmark = document.bookmark_table[bookmark_id]
        if not document.is_page_id(bookmark.target):
            LOGGER.warning(
                "Skipping bookmark %r: target %s %s R is not a page",
                bookmark.title,
                bookmark.target[0],
                bookmark.target[1],
            )
            continue
        item = _item(bookmark, parent_id)
        item_id = document.add_object(item)
        written.append(item_id)
        visible += 1
        if bookmark.children:
            first, last, count = _write_level(document, bookmark.children, item_id)
            if first is not None and last is not None:
                item[NameObject("/First")] = reference(first)
                item[NameObject("/Last")] = reference(last)
                item[NameObject("/Count")] = NumberObject(count)
                visible += count

    for previous, following in zip(written, written[1:]):
        document.objects[previous][NameObject("/Next")] = reference(following)
        document.objects[following][NameObject("/Prev")] = reference(previous)

    if not written:
        return None, None, 0
    return written[0], written[-1], visible


def write_outline(document: "Document") -> ObjectId | None:
    """Serialize the bookmarks of *document* into new outline objects.

    Returns the id of the ``/Outlines`` dictionary, or ``None`` when no
    bookmark points at a page.
    """

    if not document.bookmarks:
        return None

    root = DictionaryObject({TYPE_KEY: NameObject("/Outlines")})
    root_id = document.add_object(root)
    first, last, count = _write_level(document, document.bookmarks, root_id)
    if first is None or last is None:
        del document.objects[root_id]
        return None

    root[NameObject("/First")] = reference(first)
    root[NameObject("/Last")] = reference(last)
    root[NameObject("/Count")] = NumberObject(count)
    LOGGER.debug("Built outline %s with %d visible item(s)", root_id, count)
    return root_id


__all__ = ["Bookmark", "BLUE", "ZERO_ID", "write_outline"]
