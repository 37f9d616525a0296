"""Rich rendering for CLI output.

Accepts an optional :class:`~rich.console.Console` for dependency
injection in tests.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.console import Console
from rich.table import Table

from mypa.sites import site_label

if TYPE_CHECKING:
    from collections.abc import Sequence


def _required(parameters: dict[str, Any]) -> str:
    props = parameters.get("properties") or {}
    required = set(parameters.get("required") or [])
    return ", ".join(f"{name}*" if name in required else name for name in props)


class PageDisplay:
    """Tables for tools, state and site lists; JSON for results."""

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console()

    def show_actions(self, actions: dict[str, Any]) -> None:
        table = Table(title="Tools", title_justify="left")
        table.add_column("Name", style="cyan", no_wrap=True)
        table.add_column("Arguments (* required)", style="yellow")
        table.add_column("Description")
        for tool in actions["tools"]:
            table.add_row(tool["name"], _required(tool["parameters"]), tool["description"])
        self._console.print(table)
        self.show_state(actions["state"])

    def show_state(self, state: dict[str, Any]) -> None:
        table = Table(title=f"Screens: {state['screens']}", title_justify="left")
        table.add_column("#", justify="right")
        table.add_column("Id", style="cyan")
        table.add_column("URL")
        for frame in state["iframes"]:
            table.add_row(str(frame["index"]), frame["id"], frame["src"] or "-")
        self._console.print(table)

    def show_sites(self, sites: Sequence[str]) -> None:
        if not sites:
            self._console.print("No authorized sites.", style="dim")
            return
        table = Table(title="Authorized sites", title_justify="left")
        table.add_column("Label", style="cyan")
        table.add_column("URL")
        for url in sites:
            table.add_row(site_label(url), url)
        self._console.print(table)

    def show_result(self, result: dict[str, Any]) -> None:
        style = "green" if result.get("ok") else "red"
        self._console.rule("ok" if result.get("ok") else str(result.get("error")), style=style)
        self._console.print_json(json.dumps(result))
