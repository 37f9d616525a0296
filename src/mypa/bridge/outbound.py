"""Outbound child caller: call a tool in an embedded child and wait.

Each call owns one :class:`PendingCall` keyed by its request id.  A
response listener on the page context and a per-call timer race to
resolve it; whichever comes first removes the entry and cancels the
other, so a call resolves exactly once.  Late or duplicate responses
find no entry and are ignored.

Outcomes are returned, never raised::

    {"ok": True, "response": ...}
    {"ok": False, "error": "no-response"}
    {"ok": False, "error": "send_failed", "message": "..."}

A caller that is not listening (before :meth:`ChildCaller.start` or after
:meth:`ChildCaller.stop`) returns ``send_failed`` without sending.

Only an unknown child index raises (:class:`UnknownChildError`), before
anything is registered or sent.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

from mypa.bridge.ids import CorrelationIdGenerator
from mypa.bridge.protocol import CallEnvelope, parse_response
from mypa.channel.context import WILDCARD_ORIGIN, origin_of

if TYPE_CHECKING:
    from collections.abc import Mapping

    from mypa.channel.context import BrowsingContext, MessageEvent

logger = logging.getLogger(__name__)

NO_RESPONSE = "no-response"
SEND_FAILED = "send_failed"

DEFAULT_TIMEOUT_MS = 1500


class ChildHandle(Protocol):
    """What the caller needs to know about an addressed child."""

    @property
    def url(self) -> str: ...

    @property
    def context(self) -> BrowsingContext: ...


class ChildDirectory(Protocol):
    """Resolves child indices; raises ``UnknownChildError`` when out of range."""

    def require_child(self, index: int) -> ChildHandle: ...


@dataclass(slots=True)
class PendingCall:
    """One outstanding outbound call."""

    request_id: str
    future: asyncio.Future[dict[str, Any]]
    timer: asyncio.TimerHandle


class ChildCaller:
    """Send call envelopes to children and correlate their responses."""

    def __init__(
        self,
        context: BrowsingContext,
        children: ChildDirectory,
        *,
        call_type: str,
        response_type: str,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        base_url: str | None = None,
        ids: CorrelationIdGenerator | None = None,
    ) -> None:
        self._context = context
        self._children = children
        self._call_type = call_type
        self._response_type = response_type
        self._timeout_ms = timeout_ms
        self._base_url = base_url
        self._ids = ids or CorrelationIdGenerator()
        self._pending: dict[str, PendingCall] = {}
        self._listening = False

    @property
    def pending_count(self) -> int:
        """Number of calls still waiting for a response or timeout."""
        return len(self._pending)

    @property
    def listening(self) -> bool:
        return self._listening

    def start(self) -> None:
        self._context.add_listener(self._on_message)
        self._listening = True

    def stop(self) -> None:
        """Stop listening and resolve every outstanding call as unanswered."""
        self._context.remove_listener(self._on_message)
        self._listening = False
        for request_id in list(self._pending):
            self._expire(request_id)

    def target_origin_for(self, child: ChildHandle, override: str | None = None) -> str:
        """Explicit override, else the child URL's origin, else ``*``."""
        if override:
            return override
        return origin_of(child.url, self._base_url) or WILDCARD_ORIGIN

    def send_to_child(
        self, index: int, message: Any, *, target_origin: str | None = None
    ) -> str:
        """Post *message* to child *index* without waiting; returns the origin used."""
        child = self._children.require_child(index)
        origin = self.target_origin_for(child, target_origin)
        child.context.post_message(message, origin, source=self._context)
        return origin

    async def call_child(
        self,
        index: int,
        call: Mapping[str, Any],
        *,
        timeout_ms: Any = None,
        target_origin: str | None = None,
    ) -> dict[str, Any]:
        """Call tool ``call["name"]`` in child *index* and wait for its reply.

        Raises:
            UnknownChildError: If *index* does not address a child.
        """
        child = self._children.require_child(index)
        origin = self.target_origin_for(child, target_origin)
        if not isinstance(timeout_ms, int) or isinstance(timeout_ms, bool):
            timeout_ms = self._timeout_ms

        if not self._listening:
            logger.warning("Call to child %s dropped: caller is stopped", index)
            return {"ok": False, "error": SEND_FAILED, "message": "Child caller is stopped"}

        request_id = self._ids.new_id(index, self._pending)
        envelope = CallEnvelope(
            type=self._call_type, request_id=request_id, call=call
        ).to_wire()

        loop = asyncio.get_running_loop()
        pending = PendingCall(
            request_id=request_id,
            future=loop.create_future(),
            timer=loop.call_later(max(timeout_ms, 0) / 1000, self._expire, request_id),
        )
        self._pending[request_id] = pending

        try:
            child.context.post_message(envelope, origin, source=self._context)
        except Exception as exc:
            self._discard(request_id)
            logger.warning("Call %s to child %s not sent: %s", request_id, index, exc)
            return {"ok": False, "error": SEND_FAILED, "message": str(exc)}

        logger.debug("Sent %s to child %s (origin %s)", request_id, index, origin)
        try:
            return await pending.future
        finally:
            self._discard(request_id)

    def _on_message(self, event: MessageEvent) -> None:
        envelope = parse_response(event.data, self._response_type)
        if envelope is None or not isinstance(envelope.request_id, str):
            return
        pending = self._pending.pop(envelope.request_id, None)
        if pending is None:
            logger.debug("Ignored response for unknown request %s", envelope.request_id)
            return
        pending.timer.cancel()
        if not pending.future.done():
            pending.future.set_result({"ok": True, "response": envelope.response})

    def _expire(self, request_id: str) -> None:
        pending = self._pending.pop(request_id, None)
        if pending is None:
            return
        pending.timer.cancel()
        logger.debug("No response for %s", request_id)
        if not pending.future.done():
            pending.future.set_result({"ok": False, "error": NO_RESPONSE})

    def _discard(self, request_id: str) -> None:
        pending = self._pending.pop(request_id, None)
        if pending is not None:
            pending.timer.cancel()
