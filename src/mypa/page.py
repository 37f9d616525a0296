"""The page: grid, tools and both sides of the bridge, wired together.

``Page`` is what a controller drives.  A process-wide instance is kept
here so the discovery and dispatch entrypoints (:func:`list_actions`,
:func:`call`) are reachable from anywhere in the embedding process.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from mypa.bridge.dispatcher import Dispatcher
from mypa.bridge.ids import CorrelationIdGenerator
from mypa.bridge.inbound import InboundBridge
from mypa.bridge.outbound import ChildCaller
from mypa.channel.context import BrowsingContext, origin_of
from mypa.config.schema import MypaConfig
from mypa.layout.grid import ScreenGrid
from mypa.sites import load_authorized_sites
from mypa.tools.page_tools import build_page_tools

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

logger = logging.getLogger(__name__)


class Page:
    """A multi-screen page exposing its tools over the controller protocol."""

    def __init__(
        self,
        config: MypaConfig | None = None,
        *,
        sites: Sequence[str] | None = None,
    ) -> None:
        self.config = config or MypaConfig()
        protocol = self.config.protocol
        base_url = self.config.page.base_url

        self.sites: tuple[str, ...] = tuple(
            load_authorized_sites(self.config.sites) if sites is None else sites
        )
        self.context = BrowsingContext("page", origin_of(base_url) or "")
        self.grid = ScreenGrid(
            self.config.layout.allowed_counts,
            grid_max=self.config.layout.grid_max,
            base_url=base_url,
        )
        self.caller = ChildCaller(
            self.context,
            self.grid,
            call_type=protocol.child_call_type,
            response_type=protocol.child_response_type,
            timeout_ms=protocol.child_timeout_ms,
            base_url=base_url,
            ids=CorrelationIdGenerator(protocol.request_id_prefix),
        )
        self.dispatcher = Dispatcher(
            build_page_tools(self.grid, self.caller, self.sites, protocol),
            self.grid.snapshot,
        )
        self.bridge = InboundBridge(
            self.context,
            self.dispatcher,
            protocol.controller_call_type,
            protocol.controller_response_type,
        )
        self._started = False

    def start(self) -> None:
        """Build the initial layout and start listening on the page context."""
        if self._started:
            return
        self.grid.set_layout(self.config.page.initial_screens)
        self.bridge.start()
        self.caller.start()
        self._started = True
        logger.info(
            "Page ready: %d screen(s), %d tools, %d authorized sites",
            len(self.grid),
            len(self.dispatcher.registry),
            len(self.sites),
        )

    def stop(self) -> None:
        self.bridge.stop()
        self.caller.stop()
        self._started = False

    # ── Entrypoints ───────────────────────────────────────────

    def list_tools(self) -> list[dict[str, Any]]:
        return self.dispatcher.list_tools()

    def list_actions(self) -> dict[str, Any]:
        return self.dispatcher.list_actions()

    async def call_tool(
        self, name: str, args: Mapping[str, Any] | None = None
    ) -> dict[str, Any]:
        return await self.dispatcher.call_tool(name, args)

    async def call(self, call: Mapping[str, Any] | None) -> dict[str, Any]:
        return await self.dispatcher.call(call)


_page: Page | None = None


def set_page(page: Page | None) -> None:
    """Install *page* as the process-wide page."""
    global _page
    _page = page


def get_page() -> Page:
    """Return the process-wide page, creating and starting a default one."""
    global _page
    if _page is None:
        _page = Page()
        _page.start()
    return _page


def list_actions() -> dict[str, Any]:
    """Discovery entrypoint on the process-wide page."""
    return get_page().list_actions()


async def call(spec: Mapping[str, Any] | None) -> dict[str, Any]:
    """Dispatch entrypoint on the process-wide page."""
    return await get_page().call(spec)
