"""Object-graph merge of several documents into one.

The merge runs in five stages over a :class:`MergeState` accumulator:

1. :func:`renumber_input` gives each input a block of object numbers
   disjoint from every earlier input.
2. :func:`collect_pages` records the input's pages in page-tree order and
   one bookmark for its first page.
3. :func:`reconcile_roots` classifies all collected objects by ``/Type``
   and keeps one Catalog and one Pages root.
4. :func:`rebuild_page_tree` reparents every page under the Pages root.
5. :func:`build_outline` wires the Catalog, the trailer and the outline.

Inputs are processed strictly in the given order; bookmark numbering,
object numbering and the first-seen precedence of root objects depend on
it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Iterable, Optional, Sequence

from pypdf.generic import (
    ArrayObject,
    DictionaryObject,
    IndirectObject,
    NameObject,
    NumberObject,
    PdfObject,
)

from ..core.document import DEFAULT_VERSION, Document
from ..core.objects import PARENT_KEY, ObjectId, detach, reference, type_name
from ..core.outline import BLUE, Bookmark
from .exceptions import MissingRootError

LOGGER = logging.getLogger("pdfbinder.merge")

BOOKMARK_TITLE = "Page_{number}"

ROOT_KEY = NameObject("/Root")
INFO_KEY = NameObject("/Info")
PAGES_KEY = NameObject("/Pages")
KIDS_KEY = NameObject("/Kids")
COUNT_KEY = NameObject("/Count")
OUTLINES_KEY = NameObject("/Outlines")

_DROPPED_ROLES = frozenset({"Outlines", "Outline"})

# Page attributes a page may inherit from its ancestors in the page tree.
INHERITABLE_KEYS = (
    NameObject("/Resources"),
    NameObject("/MediaBox"),
    NameObject("/CropBox"),
    NameObject("/Rotate"),
)


@dataclass
class MergeState:
    """Accumulator threaded through the merge stages."""

    document: Document
    objects: dict[ObjectId, PdfObject] = field(default_factory=dict)
    pages: dict[ObjectId, PdfObject] = field(default_factory=dict)
    next_id: int = 1
    bookmark_number: int = 1
    catalog: Optional[tuple[ObjectId, DictionaryObject]] = None
    pages_root: Optional[tuple[ObjectId, DictionaryObject]] = None
    info: Optional[IndirectObject] = None


def merge_into(base: DictionaryObject, lower_priority: DictionaryObject) -> DictionaryObject:
    """Return the union of two dictionaries as a new dictionary.

    Tie-break: keys already present in *base* win; *lower_priority* only
    contributes keys that *base* lacks.
    """

    merged = DictionaryObject()
    for key, value in lower_priority.items():
        merged[NameObject(key)] = value
    for key, value in base.items():
        merged[NameObject(key)] = value
    return merged


def _inherit_attributes(document: Document, page: DictionaryObject) -> None:
    # The page's own ancestors are replaced by the merged Pages root, so
    # values it inherits from them are copied onto the page first.
    missing = [key for key in INHERITABLE_KEYS if key not in page]
    visited: set[int] = set()
    node = document.resolve(page.get(PARENT_KEY))
    while missing and isinstance(node, DictionaryObject) and id(node) not in visited:
        visited.add(id(node))
        for key in list(missing):
            if key in node:
                page[key] = detach(node.get(key))
                missing.remove(key)
        node = document.resolve(node.get(PARENT_KEY))


def renumber_input(state: MergeState, document: Document) -> Document:
    """Return a copy of *document* numbered from ``state.next_id``."""

    renumbered = document.clone()
    state.next_id = renumbered.renumber_objects_with(state.next_id)
    return renumbered


def collect_pages(
    state: MergeState,
    document: Document,
    title: str | None = None,
) -> MergeState:
    """Record the pages and objects of a renumbered input.

    The first page of the input gets a bookmark titled ``Page_<n>`` (or
    *title*), ``n`` counting the inputs that contributed a page.
    """

    bookmarked = False
    for page_id in document.get_pages().values():
        if not bookmarked:
            bookmark_title = title or BOOKMARK_TITLE.format(number=state.bookmark_number)
            state.document.add_bookmark(Bookmark(bookmark_title, BLUE, 0, page_id))
            state.bookmark_number += 1
            bookmarked = True
        page = document.objects[page_id]
        if isinstance(page, DictionaryObject):
            _inherit_attributes(document, page)
        state.pages[page_id] = page

    state.objects.update(document.objects)

    info = document.trailer.get(INFO_KEY)
    if state.info is None and isinstance(info, IndirectObject):
        state.info = info
    return state


def reconcile_roots(state: MergeState) -> MergeState:
    """Classify every collected object and keep one Catalog and one Pages.

    The first Catalog wins outright.  Later Pages dictionaries are folded
    into the first one with :func:`merge_into`, so the first-seen fields
    win.  Pages are left to :func:`rebuild_page_tree`, outline objects are
    dropped and everything else is copied into the merged store.
    """

    for oid in sorted(state.objects):
        if oid in state.pages:
            continue
        obj = state.objects[oid]
        role = type_name(obj)
        if role == "Catalog":
            if state.catalog is None:
                state.catalog = (oid, obj)
            else:
                LOGGER.debug("Dropping additional catalog %s %s R", *oid)
        elif role == "Pages":
            if state.pages_root is None:
                state.pages_root = (oid, merge_into(obj, DictionaryObject()))
            else:
                root_id, accumulated = state.pages_root
                state.pages_root = (root_id, merge_into(accumulated, obj))
        elif role == "Page" or role in _DROPPED_ROLES:
            continue
        else:
            state.document.set_object(oid, obj)
    return state


def rebuild_page_tree(state: MergeState) -> MergeState:
    """Attach every collected page to the Pages root, in traversal order.

    Raises :class:`MissingRootError` when no input provided a Pages root.
    """

    if state.pages_root is None:
        LOGGER.error("Pages root not found.")
        raise MissingRootError("Pages", state.document)
    pages_id, pages = state.pages_root

    kids = ArrayObject()
    for page_id, page in state.pages.items():
        if not isinstance(page, DictionaryObject):
            LOGGER.debug("Skipping page %s %s R: not a dictionary", *page_id)
            continue
        page[PARENT_KEY] = reference(pages_id)
        state.document.set_object(page_id, page)
        kids.append(reference(page_id))

    pages[COUNT_KEY] = NumberObject(len(kids))
    pages[KIDS_KEY] = kids
    pages.pop(PARENT_KEY, None)
    # Inherited values were copied onto the pages by collect_pages.
    for key in INHERITABLE_KEYS:
        pages.pop(key, None)
    state.document.set_object(pages_id, pages)
    return state


def build_outline(state: MergeState, *, metadata: bool = True) -> MergeState:
    """Link Catalog, Pages and trailer, then write the bookmark outline.

    Raises :class:`MissingRootError` when either root is missing.
    """

    if state.pages_root is None:
        raise MissingRootError("Pages", state.document)
    if state.catalog is None:
        LOGGER.error("Catalog root not found.")
        raise MissingRootError("Catalog", state.document)
    catalog_id, catalog = state.catalog
    pages_id, _ = state.pages_root
    document = state.document

    catalog[PAGES_KEY] = reference(pages_id)
    catalog.pop(OUTLINES_KEY, None)
    document.set_object(catalog_id, catalog)
    document.trailer[ROOT_KEY] = reference(catalog_id)
    if metadata and state.info is not None:
        document.trailer[INFO_KEY] = state.info

    document.adjust_zero_pages()
    outline_id = document.build_outline()
    if outline_id is not None:
        catalog[OUTLINES_KEY] = reference(outline_id)
    return state


def merge_documents(
    documents: Iterable[Document],
    *,
    titles: Sequence[str | None] | None = None,
    metadata: bool = True,
    version: str = DEFAULT_VERSION,
) -> Document:
    """Merge *documents*, in order, into a new compressed document.

    Args:
        documents: The inputs.  They are not modified.
        titles: Optional bookmark title per input; missing or empty
            entries fall back to ``Page_<n>``.
        metadata: Carry over the ``/Info`` dictionary of the first input
            that has one.
        version: PDF version of the merged document.

    Raises:
        MissingRootError: If no input provides a Pages root or a Catalog.
            The exception carries the partially merged document.
    """

    state = MergeState(document=Document(version=version))
    titles = list(titles or [])

    inputs = 0
    for index, document in enumerate(documents):
        renumbered = renumber_input(state, document)
        title = titles[index] if index < len(titles) else None
        collect_pages(state, renumbered, title)
        inputs += 1
        LOGGER.debug(
            "Collected input %d: %d object(s), next id %d",
            index,
            len(renumbered.objects),
            state.next_id,
        )

    reconcile_roots(state)
    rebuild_page_tree(state)
    build_outline(state, metadata=metadata)
    state.document.compress()

    LOGGER.info(
        "Merged %d document(s): %d page(s), %d bookmark(s)",
        inputs,
        len(state.pages),
        len(state.document.bookmarks),
    )
    return state.document


__all__ = [
    "MergeState",
    "merge_documents",
    "merge_into",
    "renumber_input",
    "collect_pages",
    "reconcile_roots",
    "rebuild_page_tree",
    "build_outline",
]
