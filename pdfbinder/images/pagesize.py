"""Page sizes used when turning images into documents."""

from __future__ import annotations

from typing import NamedTuple

MM_PER_INCH = 25.4
POINTS_PER_INCH = 72.0


def mm_to_points(value: float) -> float:
    return value / MM_PER_INCH * POINTS_PER_INCH


class PageSizeInMm(NamedTuple):
    """Width and height of a page in millimetres."""

    width: float
    height: float

    def to_points(self) -> tuple[float, float]:
        return mm_to_points(self.width), mm_to_points(self.height)


A3 = PageSizeInMm(297.0, 420.0)
A4 = PageSizeInMm(210.0, 297.0)
A5 = PageSizeInMm(148.0, 210.0)
LETTER = PageSizeInMm(215.9, 279.4)
LEGAL = PageSizeInMm(215.9, 355.6)

PAGE_SIZES: dict[str, PageSizeInMm] = {
    "a3": A3,
    "a4": A4,
    "a5": A5,
    "letter": LETTER,
    "legal": LEGAL,
}


def page_size_from_name(name: str | None) -> PageSizeInMm | None:
    """Return the named page size; ``None`` or ``"fit"`` select image-sized pages."""

    if name is None or name.lower() == "fit":
        return None
    try:
        return PAGE_SIZES[name.lower()]
    except KeyError:
        raise ValueError(f"Unknown page size: {name}") from None


__all__ = [
    "PageSizeInMm",
    "A3",
    "A4",
    "A5",
    "LETTER",
    "LEGAL",
    "PAGE_SIZES",
    "mm_to_points",
    "page_size_from_name",
]
