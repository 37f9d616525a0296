"""Dispatcher: run a named tool and normalize the outcome.

Every result is a plain, JSON-serializable dict carrying a fresh state
snapshot so callers can resynchronize after any call::

    {"ok": True, "result": ..., "state": {...}}
    {"ok": False, "error": "unknown_tool", "available": [...], "state": {...}}
    {"ok": False, "error": "tool_failed", "message": "...", "state": {...}}

Arguments are passed to handlers as-is.  Range and membership checks are
each handler's own job.
"""

from __future__ import annotations

import inspect
import logging
import time
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from mypa.bridge import discovery

if TYPE_CHECKING:
    from collections.abc import Callable

    from mypa.bridge.registry import ToolRegistry

logger = logging.getLogger(__name__)

UNKNOWN_TOOL = "unknown_tool"
TOOL_FAILED = "tool_failed"


def _empty_state() -> dict[str, Any]:
    return {}


class Dispatcher:
    """Resolve calls against an injected :class:`ToolRegistry`."""

    def __init__(
        self,
        registry: ToolRegistry,
        state: Callable[[], dict[str, Any]] = _empty_state,
        *,
        log_tag: str = "[MYPA_FC]",
    ) -> None:
        self._registry = registry
        self._state = state
        self._log_tag = log_tag

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    def state(self) -> dict[str, Any]:
        """Current state snapshot."""
        return self._state()

    def list_tools(self) -> list[dict[str, Any]]:
        return discovery.list_tools(self._registry)

    def list_actions(self) -> dict[str, Any]:
        return discovery.list_actions(self._registry, self._state)

    async def call_tool(
        self, name: Any, args: Mapping[str, Any] | None = None
    ) -> dict[str, Any]:
        """Run tool *name* with *args*; never raises for tool failures."""
        if not isinstance(name, str) or name not in self._registry:
            return {
                "ok": False,
                "error": UNKNOWN_TOOL,
                "available": self._registry.list_names(),
                "state": self.state(),
            }

        tool = self._registry.get(name)
        logger.info("%s %s", self._log_tag, {"name": name, "ts": int(time.time() * 1000)})
        try:
            result = tool.handler(dict(args or {}))
            if inspect.isawaitable(result):
                result = await result
        except Exception as exc:
            logger.debug("Tool %s failed", name, exc_info=True)
            return {
                "ok": False,
                "error": TOOL_FAILED,
                "message": str(exc),
                "state": self.state(),
            }
        return {"ok": True, "result": result, "state": self.state()}

    async def call(self, call: Mapping[str, Any] | None) -> dict[str, Any]:
        """Dispatch a ``{name, arguments}`` mapping (the wire ``call`` member)."""
        if not isinstance(call, Mapping):
            call = {}
        arguments = call.get("arguments")
        if not isinstance(arguments, Mapping):
            arguments = {}
        return await self.call_tool(call.get("name"), arguments)
