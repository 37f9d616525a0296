"""Browsing context backed by a WebSocket peer.

Messages posted to a :class:`WebSocketContext` are sent to the remote
peer as JSON frames.  Sends are fire-and-forget: a failed send is logged
and dropped, matching the at-most-once delivery of the channel.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from mypa.channel.context import BrowsingContext, MessageEvent
from mypa.core.errors import ChannelError

if TYPE_CHECKING:
    from fastapi import WebSocket

logger = logging.getLogger(__name__)


class WebSocketContext(BrowsingContext):
    """A remote controller or child reachable over a WebSocket."""

    def __init__(self, websocket: WebSocket, name: str, origin: str = "") -> None:
        super().__init__(name, origin)
        self._websocket = websocket
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Mark the peer as gone; later posts raise :class:`ChannelError`."""
        self._closed = True

    def post_message(
        self,
        message: Any,
        target_origin: str = "*",
        *,
        source: BrowsingContext | None = None,
    ) -> None:
        if self._closed:
            msg = f"WebSocket peer {self.name} is closed"
            raise ChannelError(msg)
        super().post_message(message, target_origin, source=source)

    def _deliver_later(self, event: MessageEvent) -> None:
        task = asyncio.ensure_future(self._send(event.data))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _send(self, data: Any) -> None:
        try:
            await self._websocket.send_json(data)
        except Exception:
            logger.exception("Send to WebSocket peer %s failed", self.name)
