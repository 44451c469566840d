"""Utility helpers for :mod:`pdfbinder.merge`."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from ..core.utils import PathLike


def ensure_path(path: PathLike) -> Path:
    """Return an absolute, user-expanded :class:`~pathlib.Path` for *path*."""

    return Path(path).expanduser().resolve(strict=False)


def ensure_iterable(paths: Iterable[PathLike]) -> list[Path]:
    """Convert an iterable of paths to a list of :class:`Path` objects."""

    if isinstance(paths, (str, Path)):
        return [ensure_path(paths)]
    return [ensure_path(path) for path in paths]


__all__ = ["PathLike", "ensure_path", "ensure_iterable"]
