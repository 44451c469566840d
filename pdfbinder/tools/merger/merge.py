"""Plugin exposing the merge through the registry."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Mapping, Sequence

from ...core.utils import get_logger
from ...images import A4
from ...merge.exceptions import PdfMergeError
from ...merge.merger import merge_pdfs
from ..common.interfaces import BaseTool
from ..common.pipeline import register_tool

LOGGER = get_logger("pdfbinder.tools.merge")


@register_tool("merge")
class MergeTool(BaseTool):
    name = "merge"

    def run(self) -> Path:
        context = self.context
        inputs: Iterable[str | Path] | None = context.option("inputs")
        if inputs is None:
            if context.input_path is None:
                raise PdfMergeError("No input PDFs provided")
            inputs = [context.input_path]

        output = context.output_path
        if output is None:
            raise PdfMergeError("Merge tool requires an output path")

        metadata = context.option("metadata", True)
        document_info: Mapping[str, object] | None = context.option("document_info")
        titles: Sequence[str | None] | None = context.option("titles")
        page_size = context.option("page_size", A4)

        inputs_list = list(inputs)
        LOGGER.debug("Merging %d input(s) into %s", len(inputs_list), output)
        result = merge_pdfs(
            inputs_list,
            output,
            metadata=metadata,
            document_info=document_info,
            titles=titles,
            page_size=page_size,
        )
        context.result = result
        return result
