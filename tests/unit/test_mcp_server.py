"""Tests for the MCP server tools."""

from __future__ import annotations

import json


# ── Tool schemas ─────────────────────────────────────────────────


class TestToolSchemas:
    def test_every_page_tool_is_listed(self, page) -> None:
        from mypa.mcp.server import _get_tools

        tools = _get_tools(page)
        assert [t.name for t in tools] == [t["name"] for t in page.list_tools()]

    def test_schema_passthrough(self, page) -> None:
        from mypa.mcp.server import _get_tools

        tool = next(t for t in _get_tools(page) if t.name == "iframe.setUrl")
        assert tool.inputSchema["required"] == ["index", "url"]
        assert tool.description


# ── call_tool routing ────────────────────────────────────────────


class TestCallTool:
    async def test_list_tools_uses_global_page(self, page) -> None:
        from mypa.mcp.server import list_tools

        tools = await list_tools()
        assert len(tools) == len(page.list_tools())

    async def test_call_returns_result_envelope(self, page) -> None:
        from mypa.mcp.server import call_tool

        (content,) = await call_tool("layout.set", {"count": 4})
        data = json.loads(content.text)
        assert data["ok"] is True
        assert data["state"]["screens"] == 4
        assert len(page.grid) == 4

    async def test_unknown_tool(self, page) -> None:
        from mypa.mcp.server import call_tool

        (content,) = await call_tool("nonexistent", {})
        assert json.loads(content.text)["error"] == "unknown_tool"
