"""Core types and errors."""

from mypa.core.errors import (
    ChannelError,
    ConfigError,
    LayoutError,
    MypaError,
    UnknownChildError,
)

__all__ = [
    "ChannelError",
    "ConfigError",
    "LayoutError",
    "MypaError",
    "UnknownChildError",
]
