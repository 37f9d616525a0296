"""Shared test fixtures for mypa."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

import pytest

from mypa.channel.context import BrowsingContext
from mypa.config.schema import MypaConfig
from mypa.page import Page, set_page

if TYPE_CHECKING:
    from collections.abc import Iterator

    from mypa.channel.context import MessageEvent

SITES = [
    "https://beta.example.com/",
    "https://alpha.example.com/",
    "https://someone.github.io/board/",
]


class Inbox:
    """Collects every message event delivered to a context."""

    def __init__(self, context: BrowsingContext) -> None:
        self.context = context
        self.events: list[MessageEvent] = []
        context.add_listener(self._on_message)

    def _on_message(self, event: MessageEvent) -> None:
        self.events.append(event)

    @property
    def messages(self) -> list[Any]:
        return [e.data for e in self.events]

    def of_type(self, message_type: str) -> list[Any]:
        return [m for m in self.messages if isinstance(m, dict) and m.get("type") == message_type]

    async def wait_for(self, message_type: str, timeout: float = 1.0) -> Any:
        """Wait until a message of *message_type* arrives and return it."""
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while loop.time() < deadline:
            found = self.of_type(message_type)
            if found:
                return found[0]
            await asyncio.sleep(0.001)
        msg = f"no {message_type} message within {timeout}s"
        raise AssertionError(msg)


async def _settle(rounds: int = 10) -> None:
    """Let queued deliveries and listener tasks run."""
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def settle() -> Any:
    """Coroutine function that lets pending deliveries run."""
    return _settle


@pytest.fixture
def sites() -> list[str]:
    return list(SITES)


@pytest.fixture
def make_inbox() -> Any:
    """Factory fixture attaching an :class:`Inbox` to a context."""

    def _make(context: BrowsingContext) -> Inbox:
        return Inbox(context)

    return _make


@pytest.fixture
def controller() -> BrowsingContext:
    """An external controller context."""
    return BrowsingContext("controller", "https://controller.example")


@pytest.fixture
def config() -> MypaConfig:
    return MypaConfig()


@pytest.fixture
def page(config: MypaConfig) -> Iterator[Page]:
    """A started page with a fixed site list, installed as the global page."""
    p = Page(config, sites=SITES)
    p.start()
    set_page(p)
    yield p
    p.stop()
    set_page(None)
