"""Exception hierarchy for mypa.

Every module imports from here. The hierarchy is:

    MypaError
    ├── ConfigError
    ├── LayoutError
    │   └── UnknownChildError(index, size)
    └── ChannelError

Errors raised inside a tool handler never reach the caller as exceptions:
the dispatcher turns them into ``tool_failed`` results.
"""

from __future__ import annotations


class MypaError(Exception):
    """Base exception for all mypa errors."""


# ─── Configuration Errors ─────────────────────────────────────


class ConfigError(MypaError):
    """Invalid configuration."""


# ─── Layout Errors ────────────────────────────────────────────


class LayoutError(MypaError):
    """Invalid screen count or screen index."""


class UnknownChildError(LayoutError):
    """No embedded child context at the requested index."""

    code = "unknown_child"

    def __init__(self, index: object, size: int) -> None:
        self.index = index
        self.size = size
        super().__init__(
            f"Invalid iframe index: {index}. Range: 0..{max(0, size - 1)}"
        )


# ─── Channel Errors ───────────────────────────────────────────


class ChannelError(MypaError):
    """A message could not be posted into a browsing context."""
