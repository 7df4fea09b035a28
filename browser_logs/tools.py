"""Marking coroutine methods as agent tools and exporting them."""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence, Tuple

from langchain_core.tools import StructuredTool

_TOOL_ATTR = "__browser_logs_tool__"


@dataclass(frozen=True)
class ToolSpec:
    name: str
    examples: Tuple[str, ...] = ()


def exported_tool(name: Optional[str] = None, examples: Sequence[str] = ()) -> Callable[[Any], Any]:
    """Mark a coroutine method for export by ``export_tools``.

    ``name`` defaults to the method name. ``examples`` are appended to the
    method docstring in the tool description.
    """

    def _mark(func: Any) -> Any:
        if not inspect.iscoroutinefunction(func):
            raise TypeError(f"Tool {func.__qualname__} must be a coroutine function")
        setattr(func, _TOOL_ATTR, ToolSpec(name=name or func.__name__, examples=tuple(examples)))
        return func

    return _mark


def tool_spec(method: Any) -> Optional[ToolSpec]:
    return getattr(method, _TOOL_ATTR, None)


def describe(method: Any, spec: ToolSpec) -> str:
    description = inspect.getdoc(method) or f"Tool: {spec.name}"
    if spec.examples:
        description += "\n\nExamples:\n" + "\n".join(f"- {example}" for example in spec.examples)
    return description


def export_tools(owner: Any) -> List[StructuredTool]:
    """Build one ``StructuredTool`` per marked method of ``owner``, sorted by tool name."""
    found = []
    for _, method in inspect.getmembers(type(owner), inspect.iscoroutinefunction):
        spec = tool_spec(method)
        if spec is not None:
            found.append((spec, getattr(owner, method.__name__)))
    found.sort(key=lambda item: item[0].name)
    return [
        StructuredTool.from_function(
            name=spec.name,
            description=describe(bound, spec),
            coroutine=bound,
        )
        for spec, bound in found
    ]
