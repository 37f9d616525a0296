"""WebSocket peers on the page's message channel.

``/ws/controller``
    Every JSON frame is posted into the page context with the socket as
    its source, so ``MYPA_CALL`` frames are answered on the same socket::

        -> {"type": "MYPA_CALL", "requestId": "r1",
            "call": {"name": "layout.set", "arguments": {"count": 3}}}
        <- {"type": "MYPA_RESPONSE", "requestId": "r1",
            "response": {"ok": true, "result": {"count": 3}, "state": {...}}}

``/ws/child/{index}``
    A remote child attaches to screen *index*.  ``KIZUNA_CALL`` frames for
    that screen are sent down the socket; frames the child sends (its
    ``KIZUNA_RESPONSE`` replies) are posted into the page context.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from mypa.channel.websocket import WebSocketContext
from mypa.core.errors import ChannelError, UnknownChildError

if TYPE_CHECKING:
    from mypa.page import Page

logger = logging.getLogger(__name__)

router = APIRouter(tags=["websocket"])

UNKNOWN_CHILD_CLOSE_CODE = 4404


async def _pump(websocket: WebSocket, peer: WebSocketContext, page: Page) -> None:
    """Post each incoming frame into the page context until disconnect."""
    try:
        while True:
            data = await websocket.receive_json()
            try:
                page.context.post_message(data, "*", source=peer)
            except ChannelError:
                logger.warning("Dropped frame from %s", peer.name)
    except WebSocketDisconnect:
        pass
    except ValueError:
        logger.warning("Non-JSON frame from %s; closing", peer.name)
        await websocket.close(code=1003)
    finally:
        peer.close()


@router.websocket("/ws/controller")
async def ws_controller(websocket: WebSocket) -> None:
    """Let an external controller drive the page."""
    page: Page = websocket.app.state.page
    await websocket.accept()
    peer = WebSocketContext(
        websocket, name="controller", origin=websocket.headers.get("origin", "")
    )
    logger.info("Controller connected")
    await _pump(websocket, peer, page)
    logger.info("Controller disconnected")


@router.websocket("/ws/child/{index}")
async def ws_child(websocket: WebSocket, index: int) -> None:
    """Attach a remote child context to screen *index*."""
    page: Page = websocket.app.state.page
    await websocket.accept()
    try:
        screen = page.grid.require_child(index)
    except UnknownChildError as e:
        await websocket.close(code=UNKNOWN_CHILD_CLOSE_CODE, reason=str(e))
        return

    origin = websocket.headers.get("origin") or page.grid.child_origin(screen.url)
    peer = WebSocketContext(websocket, name=f"iframe-{index}", origin=origin)
    page.grid.attach(index, peer)
    logger.info("Remote child attached to screen %d (%s)", index, origin or "no origin")
    try:
        await _pump(websocket, peer, page)
    finally:
        page.grid.detach(index, peer)
        logger.info("Remote child on screen %d detached", index)
