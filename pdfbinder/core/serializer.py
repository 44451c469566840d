"""Write a :class:`~pdfbinder.core.document.Document` as a PDF file.

Objects are written in ascending identifier order followed by a classic
cross-reference table and the trailer.  Each object serializes itself
through pypdf's ``write_to_stream``.
"""

from __future__ import annotations

from typing import IO, TYPE_CHECKING

from pypdf.generic import DictionaryObject, NameObject, NumberObject

if TYPE_CHECKING:  # pragma: no cover
    from .document import Document

# Binary comment marking the file as containing 8-bit data.
_BINARY_MARKER = b"%\xe2\xe3\xcf\xd3\n"


def _xref_entry(offset: int, generation: int, in_use: bool) -> bytes:
    keyword = "n" if in_use else "f"
    return f"{offset:010d} {generation:05d} {keyword}\r\n".encode("ascii")


def write_document(document: "Document", stream: IO[bytes]) -> None:
    start = stream.tell()
    stream.write(f"%PDF-{document.version}\n".encode("ascii"))
    stream.write(_BINARY_MARKER)

    offsets: dict[int, tuple[int, int]] = {}
    for number, generation in sorted(document.objects):
        if number in offsets:
            continue
        offsets[number] = (stream.tell() - start, generation)
        stream.write(f"{number} {generation} obj\n".encode("ascii"))
        document.objects[(number, generation)].write_to_stream(stream)
        stream.write(b"\nendobj\n")

    xref_offset = stream.tell() - start
    size = max(offsets, default=0) + 1
    stream.write(f"xref\n0 {size}\n".encode("ascii"))
    stream.write(_xref_entry(0, 65535, False))
    for number in range(1, size):
        entry = offsets.get(number)
        if entry is None:
            stream.write(_xref_entry(0, 0, False))
        else:
            stream.write(_xref_entry(entry[0], entry[1], True))

    trailer = DictionaryObject()
    for key, value in document.trailer.items():
        trailer[NameObject(key)] = value
    trailer[NameObject("/Size")] = NumberObject(size)
    stream.write(b"trailer\n")
    trailer.write_to_stream(stream)
    stream.write(f"\nstartxref\n{xref_offset}\n%%EOF\n".encode("ascii"))


__all__ = ["write_document"]
