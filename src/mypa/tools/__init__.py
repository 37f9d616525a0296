"""Tools exposed by the page."""

from mypa.tools.page_tools import LIST_ACTIONS_TOOL, build_page_tools

__all__ = ["LIST_ACTIONS_TOOL", "build_page_tools"]
