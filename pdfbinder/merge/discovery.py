"""Discovery of mergeable files inside a directory."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from ..images import IMAGE_SUFFIXES
from .utils import PathLike, ensure_path

LOGGER = logging.getLogger("pdfbinder.merge")

PDF_SUFFIX = ".pdf"

# PDFs come first, then images grouped by extension.
DISCOVERY_ORDER = (PDF_SUFFIX, *IMAGE_SUFFIXES)


def discover_inputs(directory: PathLike) -> list[Path]:
    """Return the PDF and image files directly inside *directory*.

    Files are grouped by extension in :data:`DISCOVERY_ORDER` and sorted by
    name within each group.

    Raises:
        NotADirectoryError: If *directory* is not an existing directory.
    """

    root = ensure_path(directory)
    if not root.is_dir():
        raise NotADirectoryError(f"Input directory not found: {root}")

    found: list[Path] = []
    for suffix in DISCOVERY_ORDER:
        matches = sorted(path for path in root.glob(f"*{suffix}") if path.is_file())
        found.extend(matches)
    LOGGER.debug("Discovered %d input(s) in %s", len(found), root)
    return found


def expand_inputs(paths: Iterable[Path]) -> list[Path]:
    """Replace every directory in *paths* by the files it contains."""

    expanded: list[Path] = []
    for path in paths:
        if path.is_dir():
            expanded.extend(discover_inputs(path))
        else:
            expanded.append(path)
    return expanded


__all__ = ["discover_inputs", "expand_inputs", "DISCOVERY_ORDER"]
