"""Browsing contexts and the message events they exchange.

A :class:`BrowsingContext` is an addressable endpoint on the shared message
channel: the page, each embedded child screen, and every external
controller is one.  ``post_message`` behaves like a window's
``postMessage``: the payload is cloned through JSON, checked against the
recipient's origin, and delivered on a later loop iteration to every
listener registered on the recipient at delivery time.
"""

from __future__ import annotations

import asyncio
import inspect
import json
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any
from urllib.parse import urljoin, urlsplit

from mypa.core.errors import ChannelError

if TYPE_CHECKING:
    from collections.abc import Callable

    Listener = Callable[["MessageEvent"], Any]

logger = logging.getLogger(__name__)

WILDCARD_ORIGIN = "*"

_ORIGIN_SCHEMES = frozenset({"http", "https", "ws", "wss"})


def origin_of(url: str, base: str | None = None) -> str | None:
    """Return ``scheme://host[:port]`` for *url*, or None if it has no origin.

    Relative URLs are resolved against *base* first.
    """
    try:
        resolved = urljoin(base, url) if base else url
        parts = urlsplit(resolved)
    except ValueError:
        return None
    if parts.scheme not in _ORIGIN_SCHEMES or not parts.netloc:
        return None
    return f"{parts.scheme}://{parts.netloc.lower()}"


@dataclass(frozen=True, slots=True)
class MessageEvent:
    """A message as seen by a listener on the receiving context."""

    data: Any
    origin: str
    source: BrowsingContext | None


class BrowsingContext:
    """An in-process endpoint on the message channel."""

    def __init__(self, name: str, origin: str = "") -> None:
        self.name = name
        self.origin = origin
        self._listeners: list[Listener] = []
        self._tasks: set[asyncio.Task[Any]] = set()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, origin={self.origin!r})"

    # ── Listeners ─────────────────────────────────────────────

    def add_listener(self, listener: Listener) -> None:
        """Register *listener* for message events (no-op if present)."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        """Deregister *listener*; pending deliveries will skip it."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    # ── Posting ───────────────────────────────────────────────

    def accepts(self, target_origin: str) -> bool:
        """Whether a message addressed to *target_origin* reaches this context."""
        return target_origin == WILDCARD_ORIGIN or target_origin == self.origin

    def post_message(
        self,
        message: Any,
        target_origin: str = WILDCARD_ORIGIN,
        *,
        source: BrowsingContext | None = None,
    ) -> None:
        """Queue *message* for delivery to this context's listeners.

        Messages addressed to a different origin are dropped silently.

        Raises:
            ChannelError: If *message* is not JSON-serializable.
        """
        data = _clone(message)
        if not self.accepts(target_origin):
            logger.debug(
                "Dropped message for %s: target origin %r does not match %r",
                self.name,
                target_origin,
                self.origin,
            )
            return
        event = MessageEvent(
            data=data,
            origin=source.origin if source is not None else "",
            source=source,
        )
        self._deliver_later(event)

    def _deliver_later(self, event: MessageEvent) -> None:
        asyncio.get_running_loop().call_soon(self.dispatch_event, event)

    def dispatch_event(self, event: MessageEvent) -> None:
        """Run every currently registered listener against *event*.

        Coroutine listeners are scheduled as tasks, so a slow listener never
        holds up delivery of the next message.
        """
        for listener in list(self._listeners):
            if listener not in self._listeners:
                continue
            try:
                outcome = listener(event)
            except Exception:
                logger.exception("Listener on %s failed", self.name)
                continue
            if inspect.isawaitable(outcome):
                task = asyncio.ensure_future(outcome)
                self._tasks.add(task)
                task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error(
                "Listener task on %s failed", self.name, exc_info=task.exception()
            )


def _clone(message: Any) -> Any:
    """Structured-clone stand-in: a JSON round trip."""
    try:
        return json.loads(json.dumps(message))
    except (TypeError, ValueError) as e:
        msg = f"Message is not JSON-serializable: {e}"
        raise ChannelError(msg) from e
