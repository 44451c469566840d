"""Plugin converting a single image into a one-page PDF."""

from __future__ import annotations

from pathlib import Path

from ...core.utils import get_logger
from ...images import A4, ImageConversionError, image_to_document
from ..common.interfaces import BaseTool
from ..common.pipeline import register_tool

LOGGER = get_logger("pdfbinder.tools.image")


@register_tool("image")
class ImageTool(BaseTool):
    name = "image"

    def run(self) -> Path:
        context = self.context
        source = context.require_input()
        output = context.output_path
        if output is None:
            output = source.with_suffix(".pdf")

        document = image_to_document(source, page_size=context.option("page_size", A4))
        document.compress()
        output.parent.mkdir(parents=True, exist_ok=True)
        try:
            document.save(output)
        except OSError as exc:  # pragma: no cover - IO errors vary
            raise ImageConversionError(f"Failed to write {output}") from exc

        LOGGER.info("Converted %s into %s", source, output)
        context.result = output
        return output
