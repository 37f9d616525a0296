"""Tools the page exposes to its controller.

Each handler takes the raw ``arguments`` mapping and does its own
checking; anything it raises becomes a ``tool_failed`` result.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from mypa.bridge.registry import ToolRegistry, ToolSpec
from mypa.sites import site_label

if TYPE_CHECKING:
    from collections.abc import Sequence

    from mypa.bridge.outbound import ChildCaller
    from mypa.config.schema import ProtocolConfig
    from mypa.layout.grid import ScreenGrid

LIST_ACTIONS_TOOL = "meta.listActions"

_NO_ARGS: dict[str, Any] = {
    "type": "object",
    "properties": {},
    "additionalProperties": False,
}


def _object(
    properties: dict[str, Any], required: Sequence[str] = ()
) -> dict[str, Any]:
    schema: dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = list(required)
    schema["additionalProperties"] = False
    return schema


_INDEX = {"type": "integer", "minimum": 0}


def build_page_tools(
    grid: ScreenGrid,
    caller: ChildCaller,
    sites: Sequence[str],
    protocol: ProtocolConfig,
) -> ToolRegistry:
    """Build the page's registry over its grid, child caller and site list."""

    async def layout_set(args: dict[str, Any]) -> dict[str, Any]:
        grid.set_layout(args.get("count"))
        return {"count": args["count"]}

    async def iframes_list(args: dict[str, Any]) -> dict[str, Any]:
        return grid.snapshot()

    async def iframe_set_url(args: dict[str, Any]) -> dict[str, Any]:
        url = args.get("url")
        if not isinstance(url, str):
            msg = f"url must be a string, got {type(url).__name__}"
            raise ValueError(msg)
        screen = grid.set_child_url(args.get("index"), url)
        return {"index": screen.index, "url": screen.url}

    async def iframes_set_urls(args: dict[str, Any]) -> dict[str, Any]:
        urls = list(args["urls"])
        applied = [
            await iframe_set_url({"index": i, "url": url})
            for i, url in enumerate(urls[: len(grid)])
            if url
        ]
        return {"appliedCount": len(applied), "applied": applied}

    async def nav_next(args: dict[str, Any]) -> dict[str, Any]:
        grid.scroll_next()
        return {"ok": True}

    async def nav_prev(args: dict[str, Any]) -> dict[str, Any]:
        grid.scroll_prev()
        return {"ok": True}

    async def nav_goto(args: dict[str, Any]) -> dict[str, Any]:
        index = grid.scroll_to(args.get("index"))
        return {"ok": True, "index": index}

    async def iframe_post_message(args: dict[str, Any]) -> dict[str, Any]:
        message = {"type": protocol.generic_message_type, "payload": args.get("payload")}
        origin = caller.send_to_child(
            args.get("index"), message, target_origin=args.get("targetOrigin")
        )
        return {"ok": True, "index": args["index"], "targetOrigin": origin}

    async def child_call(args: dict[str, Any]) -> dict[str, Any]:
        call = {"name": args["name"], "arguments": args.get("arguments") or {}}
        return await caller.call_child(
            args.get("index"),
            call,
            timeout_ms=args.get("timeoutMs"),
            target_origin=args.get("targetOrigin"),
        )

    async def child_list_actions(args: dict[str, Any]) -> dict[str, Any]:
        return await child_call({**args, "name": LIST_ACTIONS_TOOL, "arguments": {}})

    async def sites_list(args: dict[str, Any]) -> dict[str, Any]:
        return {"sites": [{"url": url, "label": site_label(url)} for url in sites]}

    counts = list(grid.allowed_counts)
    allowed_text = ",".join(str(c) for c in counts)
    return ToolRegistry(
        [
            ToolSpec(
                name="layout.set",
                description=f"Set the number of screens (allowed: {allowed_text}).",
                parameters=_object(
                    {"count": {"type": "integer", "enum": counts}}, ["count"]
                ),
                handler=layout_set,
            ),
            ToolSpec(
                name="iframes.list",
                description="List current screens/iframes and their URLs.",
                parameters=_NO_ARGS,
                handler=iframes_list,
            ),
            ToolSpec(
                name="iframe.setUrl",
                description=(
                    "Set iframe URL by index (0-based). "
                    "URL can be reused across multiple iframes."
                ),
                parameters=_object(
                    {"index": _INDEX, "url": {"type": "string"}}, ["index", "url"]
                ),
                handler=iframe_set_url,
            ),
            ToolSpec(
                name="iframes.setUrls",
                description="Set multiple iframe URLs in one call (array mapped by index).",
                parameters=_object(
                    {"urls": {"type": "array", "items": {"type": "string"}}}, ["urls"]
                ),
                handler=iframes_set_urls,
            ),
            ToolSpec(
                name="nav.next",
                description="Scroll to the next screen.",
                parameters=_NO_ARGS,
                handler=nav_next,
            ),
            ToolSpec(
                name="nav.prev",
                description="Scroll to the previous screen.",
                parameters=_NO_ARGS,
                handler=nav_prev,
            ),
            ToolSpec(
                name="nav.goto",
                description="Scroll to a specific screen index.",
                parameters=_object({"index": _INDEX}, ["index"]),
                handler=nav_goto,
            ),
            ToolSpec(
                name="iframe.postMessage",
                description="Send an arbitrary message payload to a child iframe (generic).",
                parameters=_object(
                    {"index": _INDEX, "payload": {}, "targetOrigin": {"type": "string"}},
                    ["index", "payload"],
                ),
                handler=iframe_post_message,
            ),
            ToolSpec(
                name="iframe.kizuna.call",
                description=(
                    "Call ANY tool in the child iframe (requires the child to "
                    f"support {protocol.child_call_type}/{protocol.child_response_type})."
                ),
                parameters=_object(
                    {
                        "index": _INDEX,
                        "name": {"type": "string"},
                        "arguments": {"type": "object"},
                        "timeoutMs": {"type": "integer"},
                        "targetOrigin": {"type": "string"},
                    },
                    ["index", "name"],
                ),
                handler=child_call,
            ),
            ToolSpec(
                name="iframe.kizuna.listActions",
                description=f"Request discovery ({LIST_ACTIONS_TOOL}) from a child iframe.",
                parameters=_object(
                    {
                        "index": _INDEX,
                        "timeoutMs": {"type": "integer"},
                        "targetOrigin": {"type": "string"},
                    },
                    ["index"],
                ),
                handler=child_list_actions,
            ),
            ToolSpec(
                name="sites.list",
                description="List the authorized site URLs offered in each screen's picker.",
                parameters=_NO_ARGS,
                handler=sites_list,
            ),
        ]
    )
