"""Child side of the child protocol.

A :class:`ChildAgent` lives in an embedded child context and answers
``KIZUNA_CALL`` envelopes from its parent with the same dispatcher the
page uses, plus a ``meta.listActions`` discovery tool.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from mypa.bridge.dispatcher import Dispatcher
from mypa.bridge.inbound import InboundBridge
from mypa.bridge.registry import ToolRegistry, ToolSpec
from mypa.config.schema import ProtocolConfig
from mypa.tools.page_tools import LIST_ACTIONS_TOOL

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from mypa.channel.context import BrowsingContext


class ChildAgent:
    """Serve *tools* to the parent of *context*."""

    def __init__(
        self,
        context: BrowsingContext,
        tools: Iterable[ToolSpec],
        *,
        state: Callable[[], dict[str, Any]] | None = None,
        protocol: ProtocolConfig | None = None,
    ) -> None:
        protocol = protocol or ProtocolConfig()
        self.context = context

        def _list_actions(args: dict[str, Any]) -> dict[str, Any]:
            return self.dispatcher.list_actions()

        registry = ToolRegistry(tools).with_tools(
            [
                ToolSpec(
                    name=LIST_ACTIONS_TOOL,
                    description="List the tools this child exposes.",
                    handler=_list_actions,
                )
            ]
        )
        self.dispatcher = Dispatcher(
            registry, state or dict, log_tag="[KIZUNA_FC]"
        )
        self._bridge = InboundBridge(
            context,
            self.dispatcher,
            protocol.child_call_type,
            protocol.child_response_type,
        )

    def start(self) -> None:
        self._bridge.start()

    def stop(self) -> None:
        self._bridge.stop()
