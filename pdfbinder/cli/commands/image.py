"""CLI helpers for converting a single image."""

from __future__ import annotations

from argparse import ArgumentParser, _SubParsersAction

from ...images import page_size_from_name
from ...tools.common.interfaces import ToolContext
from .merge import add_page_size_argument


def configure_parser(subparsers: _SubParsersAction[ArgumentParser]) -> None:
    parser = subparsers.add_parser("image", help="Convert an image into a one-page PDF")
    parser.add_argument("input", help="Input PNG, JPEG or BMP file")
    parser.add_argument(
        "output",
        nargs="?",
        default=None,
        help="Output PDF path (defaults to the input name with a .pdf suffix)",
    )
    add_page_size_argument(parser)
    parser.set_defaults(tool_name="image", build_context=_build_context)


def _build_context(args) -> ToolContext:
    return ToolContext(
        input_path=args.input,
        output_path=args.output,
        options={"page_size": page_size_from_name(args.page_size)},
    )
