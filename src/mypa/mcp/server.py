"""MCP server exposing the page's tools to AI agents."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from mypa.page import get_page

if TYPE_CHECKING:
    from mypa.page import Page

server = Server("mypa")


def _get_tools(page: Page) -> list[Tool]:
    """Describe every page tool as an MCP tool."""
    return [
        Tool(
            name=t["name"],
            description=t["description"],
            inputSchema=t["parameters"],
        )
        for t in page.list_tools()
    ]


@server.list_tools()  # type: ignore[no-untyped-call, untyped-decorator]
async def list_tools() -> list[Tool]:
    """List available MCP tools."""
    return _get_tools(get_page())


@server.call_tool()  # type: ignore[untyped-decorator]
async def call_tool(name: str, arguments: dict) -> list[TextContent]:  # type: ignore[type-arg]
    """Dispatch through the page; the full result envelope is returned as JSON."""
    result = await get_page().call_tool(name, arguments or {})
    return [TextContent(type="text", text=json.dumps(result))]


async def run_server() -> None:
    """Start the MCP server on stdio."""
    page = get_page()
    page.start()
    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )
