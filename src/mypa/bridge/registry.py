"""Tool registry: an immutable name -> tool mapping built once at startup."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterable, Mapping

    Handler = Callable[[dict[str, Any]], Awaitable[Any] | Any]


@dataclass(frozen=True, slots=True)
class ToolDefinition:
    """Discovery view of a tool."""

    name: str
    description: str
    parameters: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "parameters": self.parameters,
        }


@dataclass(frozen=True, slots=True)
class ToolSpec:
    """A named operation with its advisory parameter schema and handler.

    The schema documents the arguments for discovery consumers; it is not
    enforced before the handler runs.
    """

    name: str
    description: str
    handler: Handler
    parameters: dict[str, Any] = field(
        default_factory=lambda: {
            "type": "object",
            "properties": {},
            "additionalProperties": False,
        }
    )

    def definition(self) -> ToolDefinition:
        return ToolDefinition(self.name, self.description, self.parameters)


class ToolRegistry:
    """Read-only registry of tools, keyed by unique name."""

    def __init__(self, tools: Iterable[ToolSpec] = ()) -> None:
        table: dict[str, ToolSpec] = {}
        for tool in tools:
            if tool.name in table:
                msg = f"Tool already registered: {tool.name}"
                raise ValueError(msg)
            table[tool.name] = tool
        self._tools: Mapping[str, ToolSpec] = MappingProxyType(table)

    def get(self, name: str) -> ToolSpec:
        """Get a tool by name.

        Raises:
            KeyError: If the tool is not found.
        """
        if name not in self._tools:
            msg = f"Tool not found: {name}"
            raise KeyError(msg)
        return self._tools[name]

    def list_definitions(self) -> list[ToolDefinition]:
        """Return definitions for all tools, in registration order."""
        return [t.definition() for t in self._tools.values()]

    def list_names(self) -> list[str]:
        return list(self._tools.keys())

    def with_tools(self, extra: Iterable[ToolSpec]) -> ToolRegistry:
        """Return a new registry holding these tools plus *extra*."""
        return ToolRegistry([*self._tools.values(), *extra])

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools
