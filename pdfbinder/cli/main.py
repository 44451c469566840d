"""Command line interface for the pdfbinder toolkit."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from ..core.exceptions import PdfBinderError
from ..merge.validators import PDFInfo
from ..tools import load_builtin_plugins
from ..tools.common.interfaces import ToolContext
from ..tools.common.pipeline import registry
from .commands import image, info, merge

COMMAND_MODULES = [merge, image, info]

LOGGER = logging.getLogger("pdfbinder")


def _create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pdfbinder",
        description="Merge PDFs and images into one bookmarked PDF",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log output (-v for info, -vv for debug)",
    )
    subparsers = parser.add_subparsers(dest="command")
    subparsers.required = True
    for module in COMMAND_MODULES:
        module.configure_parser(subparsers)
    return parser


def _configure_logging(verbosity: int) -> None:
    if verbosity <= 0:
        return
    level = logging.INFO if verbosity == 1 else logging.DEBUG
    if not LOGGER.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        LOGGER.addHandler(handler)
        LOGGER.propagate = False
    LOGGER.setLevel(level)


def _format_info(info: PDFInfo) -> str:
    lines = [
        f"File: {info.path}",
        f"Pages: {info.num_pages}",
        f"Encrypted: {'yes' if info.is_encrypted else 'no'}",
    ]
    for key, value in sorted(info.metadata.items()):
        lines.append(f"{key.lstrip('/')}: {value}")
    if info.outline:
        lines.append("Bookmarks:")
        lines.extend(f"  {title}" for title in info.outline)
    return "\n".join(lines)


def main(argv: Sequence[str] | None = None) -> object:
    load_builtin_plugins()
    parser = _create_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    context: ToolContext = args.build_context(args)
    tool = registry.create(args.tool_name, context)
    result = tool.run()
    return result


def console_main(argv: Sequence[str] | None = None) -> int:
    """Entry point of the ``pdfbinder`` script; returns the exit status."""

    try:
        result = main(argv)
    except PdfBinderError as exc:
        print(f"pdfbinder: error: {exc}", file=sys.stderr)
        return 1
    if isinstance(result, PDFInfo):
        print(_format_info(result))
    elif result is not None:
        print(result)
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(console_main())
