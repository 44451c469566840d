"""Name-to-class table behind ``pdfbinder merge|image|info``.

The CLI and the convenience wrappers of :mod:`pdfbinder` look tools up
here by name; :func:`register_tool` fills the shared :data:`registry`
when a tool module is imported.
"""

from __future__ import annotations

from typing import Dict

from .interfaces import BaseTool, ToolContext


class ToolRegistry:
    def __init__(self) -> None:
        self._tools: Dict[str, type[BaseTool]] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def register(self, name: str, tool_class: type[BaseTool]) -> None:
        if name in self._tools:
            raise ValueError(f"A tool named {name!r} already exists")
        self._tools[name] = tool_class

    def create(self, name: str, context: ToolContext) -> BaseTool:
        """Instantiate tool *name* for *context*; unknown names raise ``KeyError``."""

        tool_class = self._tools.get(name)
        if tool_class is None:
            known = ", ".join(self.names()) or "none"
            raise KeyError(f"Unknown tool {name!r} (available: {known})")
        return tool_class(context)

    def names(self) -> list[str]:
        return sorted(self._tools)

    def get(self, name: str) -> type[BaseTool] | None:
        return self._tools.get(name)


registry = ToolRegistry()


def register_tool(name: str):
    """Class decorator adding a tool to :data:`registry` under *name*."""

    def decorator(cls: type[BaseTool]) -> type[BaseTool]:
        registry.register(name, cls)
        return cls

    return decorator


__all__ = ["ToolRegistry", "registry", "register_tool", "ToolContext", "BaseTool"]
