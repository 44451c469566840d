"""CLI helpers for inspecting a PDF."""

from __future__ import annotations

from argparse import ArgumentParser, _SubParsersAction

from ...tools.common.interfaces import ToolContext


def configure_parser(subparsers: _SubParsersAction[ArgumentParser]) -> None:
    parser = subparsers.add_parser("info", help="Show pages, metadata and bookmarks of a PDF")
    parser.add_argument("input", help="Input PDF file")
    parser.set_defaults(tool_name="info", build_context=_build_context)


def _build_context(args) -> ToolContext:
    return ToolContext(input_path=args.input)
