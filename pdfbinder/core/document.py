"""In-memory PDF object store used by the merge engine.

:class:`Document` keeps every object of a PDF file in a flat mapping from
``(number, generation)`` to a detached pypdf generic object, together
with the trailer dictionary and a table of bookmarks.  Parsing is
delegated to :class:`pypdf.PdfReader`; serialization lives in
:mod:`pdfbinder.core.serializer`.
"""

from __future__ import annotations

from io import BytesIO
import logging
from pathlib import Path
from typing import IO, Any, Iterator, Union

from pypdf import PdfReader
from pypdf.errors import PdfReadError
from pypdf.generic import (
    ArrayObject,
    DecodedStreamObject,
    DictionaryObject,
    IndirectObject,
    NameObject,
    NullObject,
    PdfObject,
)

from .exceptions import ObjectNotFoundError, PdfDecodeError
from .objects import (
    FILTER_KEY,
    KIDS_KEY,
    ObjectId,
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
from .outline import Bookmark, write_outline
from .serializer import write_document

LOGGER = logging.getLogger("pdfbinder.core")

ROOT_KEY = NameObject("/Root")
INFO_KEY = NameObject("/Info")
ID_KEY = NameObject("/ID")
PAGES_KEY = NameObject("/Pages")

# Trailer entries that survive loading; cross-reference and encryption
# entries describe the source file only.
_TRAILER_KEYS = (ROOT_KEY, INFO_KEY, ID_KEY)

DEFAULT_VERSION = "1.5"

Source = Union[str, Path, bytes, IO[bytes]]


def _header_version(header: str) -> str:
    if header.startswith("%PDF-"):
        version = header[5:].strip()
        if version:
            return version
    return DEFAULT_VERSION


class Document:
    """A PDF document held as a mutable object store."""

    def __init__(self, version: str = DEFAULT_VERSION) -> None:
        self.version = version
        self.objects: dict[ObjectId, PdfObject] = {}
        self.trailer = DictionaryObject()
        self.max_id = 0
        self.bookmark_table: dict[int, Bookmark] = {}
        self.bookmarks: list[int] = []
        self._next_bookmark_id = 1

    def __repr__(self) -> str:
        return (
            f"Document(version={self.version!r}, objects={len(self.objects)}, "
            f"bookmarks={len(self.bookmark_table)})"
        )

    # -- Loading -------------------------------------------------------------

    @classmethod
    def load(cls, source: Source) -> "Document":
        """Parse *source* (path, bytes or binary stream) into a document.

        Raises:
            PdfDecodeError: If the data cannot be parsed.
        """

        label = source if isinstance(source, (str, Path)) else "<stream>"
        if isinstance(source, (bytes, bytearray)):
            source = BytesIO(bytes(source))
        elif isinstance(source, Path):
            source = str(source)

        try:
            reader = PdfReader(source)
            if reader.is_encrypted:
                LOGGER.debug("Attempting to decrypt encrypted PDF %s", label)
                if not reader.decrypt(""):
                    raise PdfDecodeError(f"Encrypted PDF requires a password: {label}")
            document = cls(version=_header_version(reader.pdf_header))
            document._read_objects(reader)
        except PdfDecodeError as exc:
            LOGGER.error("Failed to decode PDF %s: %s", label, exc)
            raise
        except Exception as exc:  # pragma: no cover - dependency exceptions vary
            LOGGER.error("Failed to decode PDF %s: %s", label, exc)
            raise PdfDecodeError(f"Unable to decode PDF: {label}") from exc

        LOGGER.debug(
            "Loaded %s: version %s, %d object(s)",
            label,
            document.version,
            len(document.objects),
        )
        return document

    def _read_objects(self, reader: PdfReader) -> None:
        pending: list[IndirectObject] = []
        for key in _TRAILER_KEYS:
            value = reader.trailer.get(key)
            if value is not None:
                self.trailer[key] = detach(value, pending.append)

        while pending:
            ref = pending.pop()
            oid = object_id(ref)
            if oid in self.objects:
                continue
            try:
                obj = reader.get_object(ref)
            except PdfReadError as exc:
                LOGGER.warning("Unreadable object %s %s R: %s", oid[0], oid[1], exc)
                continue
            if obj is None or isinstance(obj, NullObject):
                continue
            self.objects[oid] = detach(obj, pending.append)

        self.max_id = max((oid[0] for oid in self.objects), default=0)

    def clone(self) -> "Document":
        """Return an independent copy; stream bytes are shared."""

        copy = Document(version=self.version)
        copy.objects = {oid: detach(obj) for oid, obj in self.objects.items()}
        copy.trailer = detach(self.trailer)
        copy.max_id = self.max_id
        for bookmark_id, bookmark in self.bookmark_table.items():
            copy.bookmark_table[bookmark_id] = Bookmark(
                bookmark.title,
                bookmark.color,
                bookmark.level,
                bookmark.target,
                style=bookmark.style,
                children=list(bookmark.children),
                id=bookmark.id,
            )
        copy.bookmarks = list(self.bookmarks)
        copy._next_bookmark_id = self._next_bookmark_id
        return copy

    # -- Object access -------------------------------------------------------

    def get_object(self, oid: ObjectId | IndirectObject) -> PdfObject:
        if isinstance(oid, IndirectObject):
            oid = object_id(oid)
        try:
            return self.objects[oid]
        except KeyError:
            raise ObjectNotFoundError(oid) from None

    def get_dictionary(self, oid: ObjectId | IndirectObject) -> DictionaryObject:
        return as_dict(self.get_object(oid))

    def resolve(self, obj: Any) -> Any:
        """Follow *obj* when it is a reference; ``None`` if it dangles."""

        if isinstance(obj, IndirectObject):
            return self.objects.get(object_id(obj))
        return obj

    def set_object(self, oid: ObjectId, obj: PdfObject) -> None:
        self.objects[oid] = obj
        self.max_id = max(self.max_id, oid[0])

    def add_object(self, obj: PdfObject) -> ObjectId:
        """Store *obj* under the next free identifier and return it."""

        self.max_id += 1
        oid = (self.max_id, 0)
        self.objects[oid] = obj
        return oid

    def is_page_id(self, oid: ObjectId) -> bool:
        return is_page(self.objects.get(oid))

    def catalog(self) -> DictionaryObject:
        root = self.trailer.get(ROOT_KEY)
        if not isinstance(root, IndirectObject):
            raise ObjectNotFoundError((0, 0))
        return self.get_dictionary(root)

    # -- Page tree -----------------------------------------------------------

    def get_pages(self) -> dict[int, ObjectId]:
        """Return ``{page_number: ObjectId}`` in page-tree order.

        Page numbers start at 1.  Nodes reached twice are visited once.
        """

        pages: dict[int, ObjectId] = {}
        try:
            root = self.catalog().get(PAGES_KEY)
        except (ObjectNotFoundError, TypeError):
            return pages
        if not isinstance(root, IndirectObject):
            return pages

        stack = [object_id(root)]
        visited: set[ObjectId] = set()
        while stack:
            oid = stack.pop()
            if oid in visited:
                continue
            visited.add(oid)
            node = self.objects.get(oid)
            if not isinstance(node, DictionaryObject):
                continue
            if is_page(node):
                pages[len(pages) + 1] = oid
                continue
            kids = self.resolve(node.get(KIDS_KEY))
            if isinstance(kids, ArrayObject):
                stack.extend(
                    object_id(kid)
                    for kid in reversed(kids)
                    if isinstance(kid, IndirectObject)
                )
        return pages

    def first_page_below(self, oid: ObjectId) -> ObjectId | None:
        """Follow first ``/Kids`` entries from *oid* down to a page."""

        visited: set[ObjectId] = set()
        current = oid
        while current not in visited:
            visited.add(current)
            node = self.objects.get(current)
            if not isinstance(node, DictionaryObject):
                return None
            if is_page(node):
                return current
            kids = self.resolve(node.get(KIDS_KEY))
            if not isinstance(kids, ArrayObject) or not kids:
                return None
            first = kids[0]
            if not isinstance(first, IndirectObject):
                return None
            current = object_id(first)
        return None

    # -- Renumbering ---------------------------------------------------------

    def renumber_objects_with(self, start: int) -> int:
        """Renumber every object to ``start, start + 1, ...``.

        Objects keep their relative order.  References, the trailer and
        bookmark targets follow their objects; references to objects that
        are not in the store become ``null``.  Returns the next free
        object number.
        """

        mapping = {
            old: (start + index, 0) for index, old in enumerate(sorted(self.objects))
        }

        def _rebind(ref: IndirectObject) -> PdfObject:
            new = mapping.get(object_id(ref))
            if new is None:
                LOGGER.debug("Dropping dangling reference %s %s R", ref.idnum, ref.generation)
                return NullObject()
            return reference(new)

        self.objects = {
            mapping[old]: rewrite_references(self.objects[old], _rebind)
            for old in sorted(self.objects)
        }
        self.trailer = rewrite_references(self.trailer, _rebind)
        for bookmark in self.bookmark_table.values():
            bookmark.target = mapping.get(bookmark.target, bookmark.target)

        if mapping:
            self.max_id = start + len(mapping) - 1
        return start + len(mapping)

    def renumber_objects(self) -> int:
        return self.renumber_objects_with(1)

    # -- Bookmarks -----------------------------------------------------------

    def add_bookmark(self, bookmark: Bookmark, parent: int | None = None) -> int:
        """Register *bookmark*, nested under *parent* when given."""

        bookmark_id = self._next_bookmark_id
        self._next_bookmark_id += 1
        bookmark.id = bookmark_id
        if parent is None:
            bookmark.level = 0
            self.bookmarks.append(bookmark_id)
        else:
            try:
                parent_bookmark = self.bookmark_table[parent]
            except KeyError:
                raise ValueError(f"Unknown parent bookmark {parent}") from None
            bookmark.level = parent_bookmark.level + 1
            parent_bookmark.children.append(bookmark_id)
        self.bookmark_table[bookmark_id] = bookmark
        return bookmark_id

    def _walk_bookmarks(self) -> Iterator[int]:
        stack = list(reversed(self.bookmarks))
        while stack:
            bookmark_id = stack.pop()
            yield bookmark_id
            stack.extend(reversed(self.bookmark_table[bookmark_id].children))

    def adjust_zero_pages(self) -> None:
        """Rebind bookmarks whose target is not a page in the store.

        The target's first structural child is tried first; a bookmark
        with children otherwise takes the target of its first child.
        Children are adjusted before their parents.
        """

        for bookmark_id in reversed(list(self._walk_bookmarks())):
            bookmark = self.bookmark_table[bookmark_id]
            if self.is_page_id(bookmark.target):
                continue
            page = self.first_page_below(bookmark.target)
            if page is None and bookmark.children:
                candidate = self.bookmark_table[bookmark.children[0]].target
                if self.is_page_id(candidate):
                    page = candidate
            if page is None:
                LOGGER.debug("Bookmark %r has no page to bind to", bookmark.title)
                continue
            LOGGER.debug("Rebinding bookmark %r to %s %s R", bookmark.title, *page)
            bookmark.target = page

    def build_outline(self) -> ObjectId | None:
        return write_outline(self)

    # -- Compaction ----------------------------------------------------------

    def prune_objects(self) -> list[ObjectId]:
        """Delete objects unreachable from the trailer and return their ids.

        Remaining references to missing objects are replaced by ``null``.
        """

        reachable: set[ObjectId] = set()
        stack = [object_id(ref) for ref in iter_references(self.trailer)]
        while stack:
            oid = stack.pop()
            if oid in reachable or oid not in self.objects:
                continue
            reachable.add(oid)
            stack.extend(object_id(ref) for ref in iter_references(self.objects[oid]))

        removed = [oid for oid in self.objects if oid not in reachable]
        for oid in removed:
            del self.objects[oid]

        def _keep_present(ref: IndirectObject) -> PdfObject:
            if object_id(ref) in self.objects:
                return ref
            return NullObject()

        for obj in self.objects.values():
            map_references(obj, _keep_present)
        map_references(self.trailer, _keep_present)
        return removed

    def compress(self) -> None:
        """Prune, renumber densely from 1 and Flate-encode raw streams."""

        removed = self.prune_objects()
        self.renumber_objects()
        encoded = 0
        for oid, obj in list(self.objects.items()):
            if isinstance(obj, DecodedStreamObject) and FILTER_KEY not in obj:
                self.objects[oid] = obj.flate_encode()
                encoded += 1
        LOGGER.debug(
            "Compressed document: %d object(s) pruned, %d stream(s) encoded, %d remaining",
            len(removed),
            encoded,
            len(self.objects),
        )

    # -- Output --------------------------------------------------------------

    def save_to_bytes(self) -> bytes:
        buffer = BytesIO()
        write_document(self, buffer)
        return buffer.getvalue()

    def save(self, path: str | Path) -> Path:
        target = Path(path)
        with target.open("wb") as handle:
            write_document(self, handle)
        LOGGER.info("Saved document with %d object(s) to %s", len(self.objects), target)
        return target


__all__ = ["Document", "DEFAULT_VERSION"]
