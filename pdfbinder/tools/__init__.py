"""Namespace for pluggable pdfbinder tools."""

from __future__ import annotations

from .common.pipeline import registry


def load_builtin_plugins() -> None:
    from .merger import merge  # noqa: F401
    from .images import convert  # noqa: F401
    from .inspector import info  # noqa: F401


__all__ = ["registry", "load_builtin_plugins"]
