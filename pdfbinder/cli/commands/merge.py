"""CLI helpers for merging PDFs and images."""

from __future__ import annotations

from argparse import ArgumentParser, _SubParsersAction

from ...images import PAGE_SIZES, page_size_from_name
from ...tools.common.interfaces import ToolContext

PAGE_SIZE_CHOICES = [name.lower() for name in PAGE_SIZES] + ["fit"]


def add_page_size_argument(parser: ArgumentParser) -> None:
    parser.add_argument(
        "--page-size",
        choices=PAGE_SIZE_CHOICES,
        default="a4",
        help="Page size used for image inputs ('fit' sizes the page after the image)",
    )


def configure_parser(subparsers: _SubParsersAction[ArgumentParser]) -> None:
    parser = subparsers.add_parser(
        "merge",
        help="Merge PDFs and images into one PDF with a bookmark per input",
    )
    parser.add_argument(
        "inputs",
        nargs="+",
        help="Input PDF or image files, or directories containing them",
    )
    parser.add_argument("output", help="Output PDF path")
    parser.add_argument(
        "--title",
        dest="titles",
        action="append",
        help="Bookmark title for the next input, in order",
    )
    parser.add_argument(
        "--no-metadata",
        action="store_true",
        help="Do not copy metadata from the first document",
    )
    add_page_size_argument(parser)
    parser.set_defaults(tool_name="merge", build_context=_build_context)


def _build_context(args) -> ToolContext:
    return ToolContext(
        output_path=args.output,
        options={
            "inputs": args.inputs,
            "titles": args.titles,
            "metadata": not args.no_metadata,
            "page_size": page_size_from_name(args.page_size),
        },
    )
