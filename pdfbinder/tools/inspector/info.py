"""Plugin reporting page count, metadata and bookmarks of a PDF."""

from __future__ import annotations

from ...core.utils import get_logger
from ...merge.validators import PDFInfo, get_pdf_info
from ..common.interfaces import BaseTool
from ..common.pipeline import register_tool

LOGGER = get_logger("pdfbinder.tools.info")


@register_tool("info")
class InfoTool(BaseTool):
    name = "info"

    def run(self) -> PDFInfo:
        source = self.context.require_input()
        LOGGER.debug("Inspecting %s", source)
        info = get_pdf_info(source)
        self.context.result = info
        return info
