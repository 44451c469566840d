"""Arguments and result of one tool run.

Every tool reads its arguments from a :class:`ToolContext`: the input
file of ``image`` and ``info``, the output file of ``merge`` and
``image``, and named options such as ``inputs`` or ``page_size``.
The value returned by :meth:`BaseTool.run` is also left on the context.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ...core.utils import resolve_path


@dataclass
class ToolContext:
    input_path: Path | None = None
    output_path: Path | None = None
    options: dict[str, Any] = field(default_factory=dict)
    result: Any = None

    def __post_init__(self) -> None:
        if self.input_path is not None:
            self.input_path = resolve_path(self.input_path)
        if self.output_path is not None:
            self.output_path = resolve_path(self.output_path)

    def option(self, name: str, default: Any = None) -> Any:
        """Return option *name*, or *default* when it was not given."""

        return self.options.get(name, default)

    def require_input(self) -> Path:
        if self.input_path is None:
            raise ValueError("No input file given")
        return self.input_path


class BaseTool:
    """A named operation over PDFs and images, run against one context."""

    name: str

    def __init__(self, context: ToolContext) -> None:
        self.context = context

    def run(self) -> Any:  # pragma: no cover - overridden by every tool
        raise NotImplementedError
