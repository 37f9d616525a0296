"""End-to-end tests: a controller driving the page over the controller protocol."""

from __future__ import annotations

import pytest

import mypa.page
from mypa.bridge.registry import ToolSpec
from mypa.child.agent import ChildAgent
from mypa.config.schema import MypaConfig, PageConfig
from mypa.page import Page, get_page, set_page


def _call(request_id: str, name: str, arguments: dict | None = None) -> dict:
    return {
        "type": "MYPA_CALL",
        "requestId": request_id,
        "call": {"name": name, "arguments": arguments or {}},
    }


class TestControllerProtocol:
    async def test_layout_round_trip(self, page, controller, make_inbox):
        inbox = make_inbox(controller)
        page.context.post_message(_call("r1", "layout.set", {"count": 3}), source=controller)
        reply = await inbox.wait_for("MYPA_RESPONSE")
        assert reply["requestId"] == "r1"
        assert reply["response"]["ok"] is True
        assert reply["response"]["state"]["screens"] == 3
        assert inbox.events[0].origin == "http://localhost:3000"

    async def test_unknown_tool_round_trip(self, page, controller, make_inbox):
        inbox = make_inbox(controller)
        page.context.post_message(_call("r2", "no.such.tool"), source=controller)
        reply = await inbox.wait_for("MYPA_RESPONSE")
        assert reply["response"]["error"] == "unknown_tool"
        assert "layout.set" in reply["response"]["available"]

    async def test_wrong_target_origin_is_dropped(self, page, controller, make_inbox, settle):
        inbox = make_inbox(controller)
        page.context.post_message(
            _call("r3", "layout.set", {"count": 2}), "https://elsewhere.example", source=controller
        )
        await settle()
        assert inbox.messages == []
        assert len(page.grid) == 1

    async def test_child_call_through_controller(self, page, controller, make_inbox):
        agent = ChildAgent(
            page.grid.screens[0].context,
            [ToolSpec(name="hello", description="Greets", handler=lambda a: f"hi {a.get('who')}")],
        )
        agent.start()
        inbox = make_inbox(controller)
        page.context.post_message(
            _call("r4", "iframe.kizuna.call", {"index": 0, "name": "hello", "arguments": {"who": "bob"}}),
            source=controller,
        )
        reply = await inbox.wait_for("MYPA_RESPONSE")
        assert reply["response"]["result"]["response"]["result"] == "hi bob"
        agent.stop()

    async def test_stopped_page_does_not_answer(self, page, controller, make_inbox, settle):
        page.stop()
        inbox = make_inbox(controller)
        page.context.post_message(_call("r5", "iframes.list"), source=controller)
        await settle()
        assert inbox.messages == []


class TestLifecycle:
    def test_start_uses_initial_screens(self):
        p = Page(MypaConfig(page=PageConfig(initial_screens=4)), sites=[])
        p.start()
        assert len(p.grid) == 4
        p.stop()

    def test_start_is_idempotent(self, page):
        page.grid.set_layout(2)
        page.start()
        assert len(page.grid) == 2
        assert page.context.listener_count == 2

    def test_page_origin_from_base_url(self):
        p = Page(MypaConfig(page=PageConfig(base_url="https://wall.example:8443/app/")), sites=[])
        assert p.context.origin == "https://wall.example:8443"


class TestGlobalEntrypoints:
    async def test_list_actions_and_call(self, page):
        assert mypa.page.list_actions()["state"]["screens"] == 1
        result = await mypa.page.call({"name": "layout.set", "arguments": {"count": 2}})
        assert result["ok"] is True
        assert mypa.page.list_actions()["state"]["screens"] == 2

    @pytest.mark.parametrize("spec", [None, {}, {"name": 5}, "layout.set"])
    async def test_malformed_call(self, page, spec):
        result = await mypa.page.call(spec)
        assert result["error"] == "unknown_tool"

    async def test_non_mapping_arguments_are_ignored(self, page):
        result = await mypa.page.call({"name": "iframes.list", "arguments": [1, 2]})
        assert result["ok"] is True

    def test_get_page_creates_default(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("AUTHORIZED_SITES", raising=False)
        set_page(None)
        try:
            p = get_page()
            assert get_page() is p
            assert len(p.grid) == 1
            assert p.sites == ("https://hongkoala.com/",)
        finally:
            get_page().stop()
            set_page(None)
