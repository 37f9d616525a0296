"""Message channel: browsing contexts and message events."""

from mypa.channel.context import (
    WILDCARD_ORIGIN,
    BrowsingContext,
    MessageEvent,
    origin_of,
)
from mypa.channel.websocket import WebSocketContext

__all__ = [
    "WILDCARD_ORIGIN",
    "BrowsingContext",
    "MessageEvent",
    "WebSocketContext",
    "origin_of",
]
