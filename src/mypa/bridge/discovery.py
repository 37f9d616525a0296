"""Discovery: the registry's tools plus the current state, read-only."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

    from mypa.bridge.registry import ToolRegistry

    StateProvider = Callable[[], dict[str, Any]]


def list_tools(registry: ToolRegistry) -> list[dict[str, Any]]:
    """Return ``[{name, description, parameters}]`` for every tool."""
    return [d.to_dict() for d in registry.list_definitions()]


def list_actions(registry: ToolRegistry, state: StateProvider) -> dict[str, Any]:
    """Return ``{tools, state}`` with *state* computed now."""
    return {"tools": list_tools(registry), "state": state()}
