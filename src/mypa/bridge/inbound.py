"""Inbound bridge: serve call envelopes arriving on a browsing context."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from mypa.bridge.protocol import ResponseEnvelope, is_envelope
from mypa.channel.context import WILDCARD_ORIGIN

if TYPE_CHECKING:
    from mypa.bridge.dispatcher import Dispatcher
    from mypa.channel.context import BrowsingContext, MessageEvent

logger = logging.getLogger(__name__)


class InboundBridge:
    """Answer ``call_type`` envelopes on *context* with ``response_type`` replies.

    Each call is dispatched to completion before its reply is posted back
    to the event's source.  Replies are sent at most once; a reply that
    cannot be posted is logged and dropped.  Senders are not
    authenticated: anything able to post into *context* can call any tool.
    """

    def __init__(
        self,
        context: BrowsingContext,
        dispatcher: Dispatcher,
        call_type: str,
        response_type: str,
    ) -> None:
        self._context = context
        self._dispatcher = dispatcher
        self._call_type = call_type
        self._response_type = response_type

    def start(self) -> None:
        self._context.add_listener(self.on_message)

    def stop(self) -> None:
        self._context.remove_listener(self.on_message)

    async def on_message(self, event: MessageEvent) -> None:
        data = event.data
        if not is_envelope(data, self._call_type):
            return

        request_id = data.get("requestId")
        response = await self._dispatcher.call(data.get("call"))

        if event.source is None:
            logger.debug("No source to reply to for request %s", request_id)
            return
        reply = ResponseEnvelope(
            type=self._response_type, request_id=request_id, response=response
        )
        try:
            event.source.post_message(
                reply.to_wire(), event.origin or WILDCARD_ORIGIN, source=self._context
            )
        except Exception:
            logger.exception("Reply for request %s could not be sent", request_id)
